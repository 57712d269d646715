import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from supabase import Client

from ..dependencies import get_session
from ..loader import (
    CUSTOMER_PROFILE,
    BackendError,
    Degraded,
    EntityNotFound,
    Outcome,
    customer_profile_outcome,
    fetch_rows,
    fetch_single,
    page_url,
    redirect_for,
)
from ..schemas.auth import Session
from ..schemas.customer import (
    CategoryLink,
    CustomerProfileOut,
    DashboardView,
    ProfileForm,
    SearchView,
    StoreDetailView,
)
from ..schemas.product import Category
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action
from ..utils.validation import validate_profile_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customer", tags=["customer"])

CATEGORY_LINKS = [
    CategoryLink(category="phone", title="Phones", href="/customer/search?category=phone"),
    CategoryLink(category="laptop", title="Laptops", href="/customer/search?category=laptop"),
    CategoryLink(category="accessories", title="Accessories", href="/customer/search?category=accessories"),
]


@router.get("/login")
def login_page():
    return {
        "user_type": "customer",
        "title": "Customer Account",
        "signin": "/auth/customer/login",
        "signup": "/auth/customer/signup",
        "reset_password": "/auth/customer/reset-password",
    }


@router.get("/dashboard", response_model=DashboardView)
def dashboard(outcome: Outcome = Depends(customer_profile_outcome)):
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return DashboardView(state="loading")

    name = outcome.entity["name"]
    return DashboardView(customer_name=name, greeting=f"Welcome, {name}", categories=CATEGORY_LINKS)


@router.get("/profile")
def profile_form(
    id: str | None = Query(None, description="User id the profile will belong to"),
    session: Session | None = Depends(get_session),
):
    """Profile creation form. Only checks that someone is signed in."""
    if session is None:
        return RedirectResponse(url=page_url(CUSTOMER_PROFILE.login_route), status_code=303)
    return {"title": "Customer Profile", "customer_id": id, "fields": ["name"]}


@router.post("/profile")
def create_profile(
    payload: ProfileForm,
    id: str | None = Query(None, description="User id the profile will belong to"),
    session: Session | None = Depends(get_session),
    supabase: Client = Depends(get_supabase_client),
):
    if session is None:
        return RedirectResponse(url=page_url(CUSTOMER_PROFILE.login_route), status_code=303)

    name = validate_profile_form(payload.name)
    if not id:
        raise HTTPException(status_code=400, detail="Customer ID not found")

    try:
        response = supabase.table("customer_profiles").insert({"user_id": id, "name": name}).execute()
    except Exception as exc:
        logger.exception("Failed to create customer profile for %s", id)
        raise HTTPException(status_code=500, detail="An error occurred") from exc

    profile = CustomerProfileOut.model_validate(response.data[0]) if response.data else None
    if profile:
        log_action(supabase, session, "create_profile", "customer_profile", profile.id, {"name": name})

    return {"profile": profile, "next": "/customer/dashboard"}


def _stores_by_address(supabase: Client, query: str) -> list[dict]:
    response = supabase.table("stores").select("*").ilike("address", f"%{query}%").execute()
    return response.data or []


def _stores_by_category(supabase: Client, category: Category) -> list[dict]:
    response = supabase.table("products").select("store_id").eq("category", category.value).execute()
    rows = response.data or []
    if not rows:
        return []

    # Keep first-seen order of store ids
    store_ids = list(dict.fromkeys(row["store_id"] for row in rows))
    stores_response = supabase.table("stores").select("*").in_("id", store_ids).execute()
    return stores_response.data or []


def _parse_category(category: str | None) -> Category | None:
    try:
        return Category(category.strip().lower()) if category else None
    except ValueError:
        return None


def _search_heading(query: str, category: str) -> str:
    if category:
        return f"Stores with {category} products"
    if query:
        return f'Search results for "{query}"'
    return "Search Results"


def _search_summary(count: int) -> str:
    if count == 0:
        return "No stores found for this search"
    return f"Found {count} store{'s' if count > 1 else ''}"


def _empty_search_message(query: str, category: str) -> str:
    if query:
        return f'We couldn\'t find any stores in "{query}". Try searching for a different location.'
    if category:
        return f"We couldn't find any stores with {category} products. Try a different category."
    return "Try searching for a location to find tech stores."


@router.get("/search", response_model=SearchView)
def search(
    q: str = Query("", description="Place to search store addresses for"),
    category: str | None = Query(None, description="Only stores stocking this category"),
    outcome: Outcome = Depends(customer_profile_outcome),
    supabase: Client = Depends(get_supabase_client),
):
    """Find stores by address fragment, or by the category of products they stock."""
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return SearchView(state="loading")

    query = q.strip()
    category = (category or "").strip()
    # Unknown categories simply have no stores
    known_category = _parse_category(category)
    stores: list[dict] = []
    try:
        if query:
            stores = _stores_by_address(supabase, query)
        elif known_category:
            stores = _stores_by_category(supabase, known_category)
    except Exception:
        logger.exception("Error searching stores (q=%r, category=%r)", query, category)
        stores = []

    return SearchView(
        customer_name=outcome.entity["name"],
        query=query,
        category=category or None,
        heading=_search_heading(query, category),
        summary=_search_summary(len(stores)),
        message=None if stores else _empty_search_message(query, category),
        stores=stores,
    )


@router.get("/store/{store_id}", response_model=StoreDetailView)
def store_detail(
    store_id: str,
    outcome: Outcome = Depends(customer_profile_outcome),
    supabase: Client = Depends(get_supabase_client),
):
    """A store's details and the products it lists."""
    redirect = redirect_for(outcome)
    if redirect:
        return redirect
    if isinstance(outcome, Degraded):
        return StoreDetailView(state="loading")

    customer_name = outcome.entity["name"]
    try:
        store = fetch_single(supabase, "stores", "id", store_id)
    except (EntityNotFound, BackendError) as exc:
        logger.error("Error fetching store %s: %s", store_id, exc)
        return StoreDetailView(customer_name=customer_name, message="Store not found")

    try:
        products = fetch_rows(supabase, "products", "store_id", store_id)
    except BackendError as exc:
        # The store still renders; only its product list is unavailable.
        logger.error("Error fetching products for store %s: %s", store_id, exc)
        products = []

    message = None if products else "No products available"
    return StoreDetailView(customer_name=customer_name, store=store, products=products, message=message)
