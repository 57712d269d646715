from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class StoreBase(BaseModel):
    store_name: str = Field(..., max_length=200)
    address: str
    owner_name: str
    phone_number: str


class StoreOut(StoreBase):
    id: str
    seller_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StoreForm(BaseModel):
    store_name: str = ""
    address: str = ""
    owner_name: str = ""
    phone_number: str = ""
