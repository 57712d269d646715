import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from supabase import Client

from ..dependencies import get_session
from ..loader import (
    SELLER_STORE,
    Degraded,
    Outcome,
    page_url,
    redirect_for,
    seller_inventory_outcome,
    seller_store_outcome,
)
from ..schemas.auth import Session
from ..schemas.product import Category, ProductForm
from ..schemas.seller import CategoryCounts, InventoryView, SellerDashboardView
from ..schemas.store import StoreForm
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action
from ..utils.validation import validate_product_form, validate_store_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seller", tags=["seller"])

RECENT_PRODUCTS_LIMIT = 5


@router.get("/login")
def login_page():
    return {
        "user_type": "seller",
        "title": "Seller Account",
        "signin": "/auth/seller/login",
        "signup": "/auth/seller/signup",
        "reset_password": "/auth/seller/reset-password",
    }


@router.get("/dashboard", response_model=SellerDashboardView)
def dashboard(outcome: Outcome = Depends(seller_inventory_outcome)):
    """Store details, product counts per category and the latest additions."""
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return SellerDashboardView(state="loading")

    products = outcome.children.get("products", [])
    per_category = Counter(p.get("category") for p in products)
    counts = CategoryCounts(**{c.value: per_category.get(c.value, 0) for c in Category})

    return SellerDashboardView(
        store=outcome.entity,
        total_products=len(products),
        counts=counts,
        recent_products=products[:RECENT_PRODUCTS_LIMIT],
    )


@router.get("/store")
def store_form(
    id: str | None = Query(None, description="Seller id the store will belong to"),
    session: Session | None = Depends(get_session),
):
    if session is None:
        return RedirectResponse(url=page_url(SELLER_STORE.login_route), status_code=303)
    return {
        "title": "Register Your Store",
        "seller_id": id,
        "fields": ["store_name", "address", "owner_name", "phone_number"],
    }


@router.post("/store")
def register_store(
    payload: StoreForm,
    id: str | None = Query(None, description="Seller id the store will belong to"),
    session: Session | None = Depends(get_session),
    supabase: Client = Depends(get_supabase_client),
):
    if session is None:
        return RedirectResponse(url=page_url(SELLER_STORE.login_route), status_code=303)

    values = validate_store_form(payload)
    if not id:
        raise HTTPException(status_code=400, detail="Seller ID not found")

    store_data = {"seller_id": id, **values}
    try:
        response = supabase.table("stores").insert(store_data).execute()
    except Exception as exc:
        logger.exception("Failed to register store for seller %s", id)
        raise HTTPException(status_code=500, detail="An error occurred") from exc

    store = response.data[0] if response.data else None
    if store:
        log_action(supabase, session, "register_store", "store", store.get("id"), {"store_name": values["store_name"]})

    return {"store": store, "next": "/seller/dashboard"}


@router.get("/products", response_model=InventoryView)
def list_products(outcome: Outcome = Depends(seller_inventory_outcome)):
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return InventoryView(state="loading")
    return InventoryView(store=outcome.entity, products=outcome.children.get("products", []))


@router.get("/products/add")
def add_product_form(outcome: Outcome = Depends(seller_store_outcome)):
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return {"state": "loading"}
    return {
        "state": "ready",
        "store_name": outcome.entity["store_name"],
        "categories": [c.value for c in Category],
        "fields": ["name", "category", "price", "stock"],
    }


@router.post("/products")
def create_product(
    payload: ProductForm,
    outcome: Outcome = Depends(seller_store_outcome),
    supabase: Client = Depends(get_supabase_client),
):
    """Add a product to the signed-in seller's store."""
    redirect = redirect_for(outcome)
    if redirect:
        return redirect

    values = validate_product_form(payload)

    if isinstance(outcome, Degraded):
        raise HTTPException(status_code=500, detail="Store not found")

    store = outcome.entity
    product_data = {"store_id": store["id"], **values}
    try:
        response = supabase.table("products").insert(product_data).execute()
    except Exception as exc:
        logger.exception("Failed to add product to store %s", store["id"])
        raise HTTPException(status_code=500, detail="An error occurred") from exc

    product = response.data[0] if response.data else None
    if product:
        log_action(supabase, outcome.session, "create_product", "product", product.get("id"), {"name": values["name"]})

    return {"product": product, "next": "/seller/products"}
