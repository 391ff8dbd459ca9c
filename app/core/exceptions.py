"""
Error taxonomy for the vote API.

Every error that crosses a route boundary is one of the classes below. Each
carries a machine-readable `kind`, a message and the HTTP status the route
answers with, so all endpoints share one error body:

    {"error": "<message>", "kind": "<kind>"}
"""
from typing import Optional

from fastapi.responses import JSONResponse


class VoteApiError(Exception):
    """Base class for errors raised by the services and repositories."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self, message: Optional[str] = None) -> dict:
        return {"error": message or self.message, "kind": self.kind}


class ValidationError(VoteApiError):
    """Request payload is missing required fields or carries bad values."""

    kind = "validation"
    status_code = 400


class UpstreamError(VoteApiError):
    """The Odds API answered with a non-success status or was unreachable."""

    kind = "upstream"


class PersistenceError(VoteApiError):
    """The database rejected a query or write."""

    kind = "persistence"


def error_response(exc: VoteApiError, message: Optional[str] = None) -> JSONResponse:
    """
    Build the JSON error response for a domain error.

    Args:
        exc: The error being reported
        message: Public message to send instead of the error's own text.
            Routes pass a generic message so backend details stay in the logs.
    """
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(message))
