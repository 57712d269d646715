from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field


class Category(str, Enum):
    phone = "phone"
    laptop = "laptop"
    accessories = "accessories"


class ProductOut(BaseModel):
    id: str
    store_id: str
    category: Category
    name: str = Field(..., max_length=200)
    price: float = Field(..., gt=0)
    stock: int = Field(..., ge=0)
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductForm(BaseModel):
    """
    Raw add-product form. Values arrive as typed by the seller and are checked
    by utils.validation.validate_product_form before anything is written.
    """

    name: str = ""
    category: str = Category.phone.value
    price: Union[str, float, int, None] = ""
    stock: Union[str, int, None] = ""
