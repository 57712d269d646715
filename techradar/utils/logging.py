import logging
from typing import Optional, Any
from supabase import Client

from ..schemas.auth import Session

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Console logging for the API process; safe to call more than once."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("techradar").setLevel(level.upper())


def log_action(
    supabase: Client,
    actor: Session,
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[Any] = None
):
    """
    Records an action in the audit_logs table.
    'actor' is the session of the user who performed it.
    """
    try:
        log_entry = {
            "user_id": actor.user.id,
            "user_name": actor.user.email,
            "user_role": actor.user.user_type.value if actor.user.user_type else None,
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "details": details
        }

        # The audit trail never blocks the request that produced it.
        supabase.table("audit_logs").insert(log_entry).execute()

    except Exception:
        logger.exception("Failed to write audit log for %s on %s %s", action, resource_type, resource_id)
