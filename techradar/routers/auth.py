import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from ..config import get_settings
from ..dependencies import require_session
from ..loader import CUSTOMER_PROFILE, SELLER_STORE
from ..schemas.auth import (
    AuthResponse,
    AuthUser,
    CredentialsPayload,
    ResetPasswordPayload,
    Session,
    SignupPayload,
    SignupResponse,
    UserType,
)
from ..supabase_client import get_supabase_anon_client, get_supabase_client
from ..utils.logging import log_action
from ..utils.validation import validate_credentials, validate_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

CREATION_FLOWS = {
    UserType.customer: CUSTOMER_PROFILE,
    UserType.seller: SELLER_STORE,
}


def _error_message(exc: Exception, default: str) -> str:
    return getattr(exc, "message", None) or str(exc) or default


@router.post("/{user_type}/login", response_model=AuthResponse)
def login(
    user_type: UserType,
    payload: CredentialsPayload,
    anon: Client = Depends(get_supabase_anon_client),
    supabase: Client = Depends(get_supabase_client),
):
    """Password sign-in, restricted to accounts registered with ``user_type``."""
    validate_credentials(payload)

    try:
        res = anon.auth.sign_in_with_password({"email": payload.email, "password": payload.password})
    except Exception as exc:
        raise HTTPException(status_code=401, detail=_error_message(exc, "An error occurred during sign in")) from exc

    if not res.session or not res.user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    try:
        user_row = supabase.table("users").select("user_type").eq("id", res.user.id).single().execute()
    except Exception as exc:
        logger.exception("Failed to load user type for %s", res.user.id)
        raise HTTPException(status_code=401, detail=_error_message(exc, "An error occurred during sign in")) from exc

    if not user_row.data or user_row.data.get("user_type") != user_type.value:
        raise HTTPException(status_code=403, detail=f"This account is not registered as a {user_type.value}")

    return AuthResponse(
        access_token=res.session.access_token,
        user=AuthUser(id=res.user.id, email=res.user.email, user_type=user_type),
        next=f"/{user_type.value}/dashboard",
    )


@router.post("/{user_type}/signup", response_model=SignupResponse)
def signup(
    user_type: UserType,
    payload: SignupPayload,
    anon: Client = Depends(get_supabase_anon_client),
    supabase: Client = Depends(get_supabase_client),
):
    """
    Creates the auth account and its users row, then points the client at the
    profile or store creation page for the new user.
    """
    validate_credentials(payload)

    try:
        res = anon.auth.sign_up({"email": payload.email, "password": payload.password})
    except Exception as exc:
        raise HTTPException(status_code=400, detail=_error_message(exc, "An error occurred during sign up")) from exc

    if not res.user:
        raise HTTPException(status_code=400, detail="Unable to sign up")

    user = AuthUser(id=res.user.id, email=payload.email, user_type=user_type)
    try:
        supabase.table("users").insert(
            {"id": user.id, "email": payload.email, "user_type": user_type.value}
        ).execute()
    except Exception as exc:
        logger.exception("Failed to create users row for %s", user.id)
        raise HTTPException(status_code=400, detail=_error_message(exc, "An error occurred during sign up")) from exc

    access_token = res.session.access_token if res.session else ""
    log_action(supabase, Session(access_token=access_token, user=user), "signup", "user", user.id)

    return SignupResponse(
        user=user,
        access_token=access_token,
        next=CREATION_FLOWS[user_type].creation_url(user.id),
    )


@router.post("/{user_type}/reset-password")
def reset_password(
    user_type: UserType,
    payload: ResetPasswordPayload,
    anon: Client = Depends(get_supabase_anon_client),
):
    validate_reset_email(payload.email)
    settings = get_settings()

    try:
        anon.auth.reset_password_for_email(
            payload.email,
            {"redirect_to": f"{settings.SITE_URL}/{user_type.value}/reset-password"},
        )
    except Exception as exc:
        raise HTTPException(status_code=400, detail=_error_message(exc, "An error occurred")) from exc

    return {"message": "Password reset link sent to your email"}


@router.post("/signout")
def signout(
    session: Session = Depends(require_session),
    supabase: Client = Depends(get_supabase_client),
):
    try:
        supabase.auth.admin.sign_out(session.access_token)
    except Exception:
        # The token is discarded client-side either way.
        logger.warning("Failed to revoke session for %s", session.user_id, exc_info=True)
    return {"status": "signed_out", "next": "/"}


@router.get("/session", response_model=Session)
def current_session(session: Session = Depends(require_session)):
    return session
