from typing import Optional
from pydantic import BaseModel

from .store import StoreOut
from .product import ProductOut


class CategoryCounts(BaseModel):
    phone: int = 0
    laptop: int = 0
    accessories: int = 0


class SellerDashboardView(BaseModel):
    state: str = "ready"
    store: Optional[StoreOut] = None
    total_products: int = 0
    counts: CategoryCounts = CategoryCounts()
    recent_products: list[ProductOut] = []


class InventoryView(BaseModel):
    state: str = "ready"
    store: Optional[StoreOut] = None
    products: list[ProductOut] = []
