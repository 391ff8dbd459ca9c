"""
Per-request context handed to route handlers.

Authentication happens upstream: the session provider in front of this API
forwards the signed-in user's id in the X-User-Id header. Handlers receive it
through the `RequestContext` dependency instead of reading global state.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from app.core.exceptions import ValidationError

USER_ID_HEADER = "X-User-Id"

user_id_header = APIKeyHeader(name=USER_ID_HEADER, auto_error=False, scheme_name="SessionUser")


@dataclass(frozen=True)
class RequestContext:
    """Identity and tracing data for a single request."""

    correlation_id: str
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self) -> str:
        """Return the session user's id or raise if the request has none."""
        if not self.user_id:
            raise ValidationError("Missing user identity")
        return self.user_id


def get_request_context(
    request: Request,
    user_id: Optional[str] = Security(user_id_header),
) -> RequestContext:
    """FastAPI dependency building the RequestContext for the current request."""
    correlation_id = getattr(request.state, "correlation_id", "")
    user_id = user_id.strip() if user_id else None
    return RequestContext(correlation_id=correlation_id, user_id=user_id or None)
