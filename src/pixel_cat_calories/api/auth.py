"""Account endpoints and bearer-token authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from pixel_cat_calories.api.schemas import LoginRequest, RegisterRequest
from pixel_cat_calories.config import Settings  # noqa: TC001
from pixel_cat_calories.domain.errors import AccountExistsError, AuthError
from pixel_cat_calories.security import decode_access_token

if TYPE_CHECKING:
    from pixel_cat_calories.containers import AppContainer

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _get_settings(request: Request) -> Settings:
    container: AppContainer = request.app.state.container
    return container.settings


async def require_profile_id(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(_get_settings),
) -> UUID:
    """Resolve the authenticated profile id from a bearer token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer":
        token = ""
    try:
        return decode_access_token(
            token.strip(), secret=settings.jwt_secret, algorithm=settings.jwt_algorithm
        )
    except AuthError as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, request: Request) -> dict[str, object]:
    """Create an account with an empty profile."""
    container: AppContainer = request.app.state.container
    try:
        account = container.account_service.register(payload.email, payload.password)
    except AccountExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists.",
        ) from exc
    return {
        "message": "User registered successfully.",
        "user": {"id": str(account.id), "email": account.email},
    }


@router.post("/login")
async def login(payload: LoginRequest, request: Request) -> dict[str, str]:
    """Exchange credentials for a session token."""
    container: AppContainer = request.app.state.container
    try:
        token = container.account_service.login(payload.email, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return {"access_token": token, "token_type": "bearer"}
