"""
Event logger utility for registration and authentication events.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import Request
import sys
import logging
import os

from ..config import Settings

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register_success",
    "register_failure",
    "login_success",
    "login_failure",
}


def configure_logging(config: Settings) -> None:
    """Configure stdout logging, plus a log file when LOG_DIR is set."""
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if config.LOG_DIR:
        try:
            os.makedirs(config.LOG_DIR, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(config.LOG_DIR, "user_service.log")))
        except (OSError, PermissionError) as e:
            # Log to stderr if file logging setup fails
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s:%(message)s",
        handlers=handlers,
    )


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None

    ip_address = None
    if request.client:
        ip_address = request.client.host

    # Check for X-Forwarded-For header (proxy/load balancer scenarios)
    if not ip_address and request.headers.get("x-forwarded-for"):
        # X-Forwarded-For can contain multiple IPs, take the first one
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


def log_auth_event(
    event_type: str,
    username: Optional[str],
    request: Optional[Request] = None,
    **details,
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: register_success, register_failure,
                    login_success, login_failure
        username: Username the event concerns, as submitted
        request: FastAPI Request object, used for client IP and user agent
        **details: Additional context; never pass credentials here

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    user_agent = request.headers.get("user-agent") if request is not None else None
    extra = "".join(f" {key}={value}" for key, value in sorted(details.items()))

    logger.info(
        "AUTH %s username=%s ip=%s user_agent=%s timestamp=%s%s",
        event_type, username, client_ip(request), user_agent,
        datetime.now(timezone.utc).isoformat(), extra,
    )
