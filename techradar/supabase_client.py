from functools import lru_cache
from supabase import Client, ClientOptions, create_client
from .config import get_settings


def _server_options() -> ClientOptions:
    # Server-side clients never hold a browser session of their own.
    settings = get_settings()
    return ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=settings.SUPABASE_TIMEOUT_SECONDS,
    )


@lru_cache
def get_supabase_client() -> Client:
    """
    Shared service-role client used for row reads/writes and token validation.
    Injected into routes with Depends so tests can swap it out.
    """
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, _server_options())


@lru_cache
def get_supabase_anon_client() -> Client:
    """
    Anon-key client for the password flows (sign in, sign up, reset).
    Falls back to the service key when no anon key is configured.
    """
    settings = get_settings()
    key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY
    return create_client(settings.SUPABASE_URL, key, _server_options())
