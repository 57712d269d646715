import logging

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from .schemas.auth import AuthUser, Session
from .supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_session(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    supabase: Client = Depends(get_supabase_client),
) -> Session | None:
    """
    Resolves the bearer token into a Session, or None when there is no usable one.
    Does NOT raise 401: protected pages turn a missing session into a login redirect.
    """
    if credentials is None:
        return None

    token = credentials.credentials
    try:
        user_response = supabase.auth.get_user(token)
    except Exception:
        logger.info("Rejected access token", exc_info=True)
        return None

    if not user_response or not user_response.user:
        return None

    supa_user = user_response.user
    return Session(
        access_token=token,
        user=AuthUser(id=supa_user.id, email=supa_user.email),
    )


def require_session(session: Session | None = Depends(get_session)) -> Session:
    """Session for plain API calls, where there is no page to redirect from."""
    if session is None:
        raise HTTPException(status_code=401, detail="Session expired. Please sign in again.")
    return session
