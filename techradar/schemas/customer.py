from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from .store import StoreOut
from .product import ProductOut


class CustomerProfileOut(BaseModel):
    id: str
    user_id: str
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileForm(BaseModel):
    name: str = ""


class CategoryLink(BaseModel):
    category: str
    title: str
    href: str


class DashboardView(BaseModel):
    state: str = "ready"
    customer_name: str = ""
    greeting: str = ""
    categories: list[CategoryLink] = []


class SearchView(BaseModel):
    state: str = "ready"
    customer_name: str = ""
    query: str = ""
    category: Optional[str] = None
    heading: str = "Search Results"
    summary: str = ""
    message: Optional[str] = None
    stores: list[StoreOut] = []


class StoreDetailView(BaseModel):
    state: str = "ready"
    customer_name: str = ""
    store: Optional[StoreOut] = None
    products: list[ProductOut] = []
    message: Optional[str] = None
