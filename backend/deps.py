"""
backend/deps.py
---------------
Request-scoped access to the application context and the mapping from our
error taxonomy to HTTP status codes.
"""

from __future__ import annotations

from typing import Optional, TypeVar

from fastapi import HTTPException, Request

from core.app_context import AppContext, build_context
from core.errors import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
    GetRichError,
)
from supabase_client.repository import WriteResult

R = TypeVar("R")

STATUS_BY_ERROR = {
    AuthenticationError: 401,
    ConfigurationError: 503,
    BackendError: 502,
}


def get_context(request: Request) -> AppContext:
    """Return the app-wide context, building it on first use."""
    ctx = getattr(request.app.state, "context", None)
    if ctx is None:
        ctx = build_context()
        request.app.state.context = ctx
    return ctx


def to_http_error(error: GetRichError) -> HTTPException:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def unwrap_or_raise(result: WriteResult[R]) -> Optional[R]:
    """Return the write's data or raise the matching HTTPException."""
    if result.error is not None:
        raise to_http_error(result.error)
    return result.data
