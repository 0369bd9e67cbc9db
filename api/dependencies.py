# api/dependencies.py
import secrets
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Header, Request

from core.errors import AuthError, UpstreamError


@dataclass
class Services:
    """Collaborators handed to the routes; swapped for fakes in tests."""

    store: Any
    linker: Any
    engine: Any
    transport: Any
    dispatcher: Any
    db: Any = None


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise UpstreamError("Service temporarily unavailable", status_code=503)
    return services


def require_api_key(request: Request, x_api_key: Optional[str] = Header(None)) -> None:
    expected = getattr(request.app.state, "api_key", "")
    # An unconfigured key locks the endpoint rather than opening it
    if not expected or not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise AuthError("Unauthorized")
