"""
Session-gated resolution of the single row a signed-in user owns.

Every protected page starts the same way: resolve the session, then look up
the one dependent row owned by that user (a customer's profile or a seller's
store), then load whatever hangs off that row. The outcome is one of:

    Unauthenticated  no session; send the user to the role's login page
    Missing          session but no owned row; send the user to the creation page
    Ready            owned row found, children loaded
    Degraded         any other backend failure; logged, the page shows a placeholder

Routes consume the outcome through the FastAPI dependencies built by
``owned_entity`` and turn terminal outcomes into redirects with ``redirect_for``.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import urlencode

from fastapi import Depends
from fastapi.responses import RedirectResponse
from postgrest.exceptions import APIError
from supabase import Client

from .config import get_settings
from .dependencies import get_session
from .schemas.auth import Session, UserType
from .supabase_client import get_supabase_client

logger = logging.getLogger(__name__)


class EntityNotFound(Exception):
    """The lookup matched no row. Recoverable: leads to the creation flow."""


class BackendError(Exception):
    """Any other failure talking to the data store."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


def fetch_single(
    supabase: Client,
    table: str,
    column: str,
    value: str,
    not_found_code: Optional[str] = None,
) -> dict:
    """
    Returns the one row of ``table`` where ``column = value``.

    The backend reports "no row" through a dedicated error code; only that code
    becomes EntityNotFound. Every other failure is a BackendError.
    """
    if not_found_code is None:
        not_found_code = get_settings().NOT_FOUND_ERROR_CODE

    try:
        response = supabase.table(table).select("*").eq(column, value).single().execute()
    except APIError as exc:
        if exc.code == not_found_code:
            raise EntityNotFound(f"No row in {table} where {column} = {value}") from exc
        raise BackendError(exc.message or str(exc), code=exc.code) from exc
    except Exception as exc:
        raise BackendError(str(exc)) from exc

    if not response.data:
        raise EntityNotFound(f"No row in {table} where {column} = {value}")
    return response.data


def fetch_rows(
    supabase: Client,
    table: str,
    column: str,
    value: str,
    order_by: Optional[str] = None,
) -> list[dict]:
    """All rows of ``table`` where ``column = value``, newest first when ordered."""
    try:
        query = supabase.table(table).select("*").eq(column, value)
        if order_by:
            query = query.order(order_by, desc=True)
        response = query.execute()
    except APIError as exc:
        raise BackendError(exc.message or str(exc), code=exc.code) from exc
    except Exception as exc:
        raise BackendError(str(exc)) from exc
    return response.data or []


@dataclass(frozen=True)
class OwnedLookup:
    """Where a role's owned row lives and where to send users who lack one."""

    role: UserType
    table: str
    owner_column: str
    login_route: str
    creation_route: str

    def creation_url(self, owner_id: str) -> str:
        return f"{self.creation_route}?{urlencode({'id': owner_id})}"


CUSTOMER_PROFILE = OwnedLookup(
    role=UserType.customer,
    table="customer_profiles",
    owner_column="user_id",
    login_route="/customer/login",
    creation_route="/customer/profile",
)

SELLER_STORE = OwnedLookup(
    role=UserType.seller,
    table="stores",
    owner_column="seller_id",
    login_route="/seller/login",
    creation_route="/seller/store",
)


class LoadState(str, Enum):
    init = "init"
    awaiting_session = "awaiting_session"
    unauthenticated = "unauthenticated"
    awaiting_entity = "awaiting_entity"
    entity_missing = "entity_missing"
    entity_ready = "entity_ready"
    awaiting_children = "awaiting_children"
    ready = "ready"
    failed = "failed"


@dataclass(frozen=True)
class Unauthenticated:
    redirect_to: str


@dataclass(frozen=True)
class Missing:
    redirect_to: str
    owner_id: str


@dataclass(frozen=True)
class Ready:
    session: Session
    entity: dict
    children: dict[str, list[dict]] = field(default_factory=dict)


@dataclass(frozen=True)
class Degraded:
    error: BackendError


Outcome = Union[Unauthenticated, Missing, Ready, Degraded]

# Loads one child collection given the resolved owned row.
ChildLoader = Callable[[Client, dict], list[dict]]


class EntityLoader:
    def __init__(self, supabase: Client, lookup: OwnedLookup, not_found_code: Optional[str] = None):
        self.supabase = supabase
        self.lookup = lookup
        self.not_found_code = not_found_code
        self.state = LoadState.init

    def load(
        self,
        session: Optional[Session],
        children: Optional[Mapping[str, ChildLoader]] = None,
    ) -> Outcome:
        lookup = self.lookup
        self.state = LoadState.awaiting_session
        if session is None:
            self.state = LoadState.unauthenticated
            return Unauthenticated(redirect_to=lookup.login_route)

        self.state = LoadState.awaiting_entity
        try:
            entity = fetch_single(
                self.supabase,
                lookup.table,
                lookup.owner_column,
                session.user_id,
                not_found_code=self.not_found_code,
            )
        except EntityNotFound:
            self.state = LoadState.entity_missing
            logger.info("No %s row for user %s", lookup.table, session.user_id)
            return Missing(redirect_to=lookup.creation_url(session.user_id), owner_id=session.user_id)
        except BackendError as exc:
            return self._fail(exc, f"fetching {lookup.table}")

        self.state = LoadState.entity_ready
        loaded: dict[str, list[dict]] = {}
        if children:
            self.state = LoadState.awaiting_children
            for name, load_child in children.items():
                try:
                    loaded[name] = load_child(self.supabase, entity)
                except BackendError as exc:
                    return self._fail(exc, f"fetching {name}")

        self.state = LoadState.ready
        return Ready(session=session, entity=entity, children=loaded)

    def _fail(self, exc: BackendError, doing: str) -> Degraded:
        self.state = LoadState.failed
        logger.error("Error %s for %s: %s", doing, self.lookup.role.value, exc, exc_info=exc)
        return Degraded(error=exc)


def store_products(supabase: Client, store: dict) -> list[dict]:
    return fetch_rows(supabase, "products", "store_id", store["id"], order_by="created_at")


def owned_entity(lookup: OwnedLookup, children: Optional[Mapping[str, ChildLoader]] = None):
    """Builds a route dependency that runs the loader for ``lookup``."""

    def dependency(
        session: Optional[Session] = Depends(get_session),
        supabase: Client = Depends(get_supabase_client),
    ) -> Outcome:
        return EntityLoader(supabase, lookup).load(session, children)

    return dependency


customer_profile_outcome = owned_entity(CUSTOMER_PROFILE)
seller_store_outcome = owned_entity(SELLER_STORE)
seller_inventory_outcome = owned_entity(SELLER_STORE, children={"products": store_products})


def page_url(route: str) -> str:
    return f"{get_settings().API_PREFIX}{route}"


def redirect_for(outcome: Any) -> Optional[RedirectResponse]:
    """A 303 to the login or creation page for terminal outcomes, else None."""
    if isinstance(outcome, (Unauthenticated, Missing)):
        return RedirectResponse(url=page_url(outcome.redirect_to), status_code=303)
    return None
