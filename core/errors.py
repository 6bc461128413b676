"""
core/errors.py
--------------
Error taxonomy shared by the store, the Supabase layer and the API.

Read paths never raise these to their callers (they degrade to empty
results); write paths carry them inside a ``WriteResult`` or raise them
through ``WriteResult.unwrap()``.
"""

from __future__ import annotations


class GetRichError(RuntimeError):
    """Base class for all application errors."""


class ConfigurationError(GetRichError):
    """Supabase credentials are absent or malformed."""


class AuthenticationError(GetRichError):
    """No authenticated actor, or the backend rejected the actor."""


class BackendError(GetRichError):
    """Any other Supabase / PostgREST failure."""


class InsightError(GetRichError):
    """Generative model call or response parsing failed."""
