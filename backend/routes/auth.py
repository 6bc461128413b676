"""
Auth routes
-----------
Sign-in, sign-up, sign-out and session lookup for the single actor served by
this backend instance.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.deps import get_context, to_http_error
from core.app_context import AppContext
from core.errors import AuthenticationError
from core.models import Actor
from core.readiness import resolve_app_state

router = APIRouter(prefix="/auth", tags=["auth"])


class Credentials(BaseModel):
    email: str
    password: str


class SessionInfo(BaseModel):
    state: str
    user: Optional[Actor] = None


@router.post("/sign-in", response_model=Actor)
def sign_in(body: Credentials, ctx: AppContext = Depends(get_context)):
    try:
        return ctx.auth.sign_in(body.email, body.password)
    except AuthenticationError as e:
        raise to_http_error(e)


@router.post("/sign-up", response_model=Actor)
def sign_up(body: Credentials, ctx: AppContext = Depends(get_context)):
    try:
        return ctx.auth.sign_up(body.email, body.password)
    except AuthenticationError as e:
        raise to_http_error(e)


@router.post("/sign-out")
def sign_out(ctx: AppContext = Depends(get_context)):
    try:
        ctx.auth.sign_out()
    except AuthenticationError as e:
        raise to_http_error(e)
    return {"status": "ok"}


@router.get("/session", response_model=SessionInfo)
def session(ctx: AppContext = Depends(get_context)):
    user = ctx.auth.current_user()
    state = resolve_app_state(ctx.config(), session_resolved=True, user=user)
    return SessionInfo(state=state.value, user=user)
