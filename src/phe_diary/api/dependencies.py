"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, Request

from phe_diary.containers import AppContainer
from phe_diary.errors import AuthenticationError

BEARER_PREFIX = "Bearer "


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def require_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> str:
    """Verify the bearer ID token and return the caller's user id."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Missing or invalid authorization header")
    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise AuthenticationError("Missing or invalid authorization header")
    return container.identity_provider.verify_id_token(token)
