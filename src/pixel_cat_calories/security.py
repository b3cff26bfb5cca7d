"""Password hashing and JWT session tokens."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from passlib.context import CryptContext

from pixel_cat_calories.domain.errors import AuthError

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


def create_access_token(  # noqa: PLR0913
    profile_id: UUID,
    email: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    ttl: timedelta,
    now: datetime | None = None,
) -> str:
    """Issue a signed session token for a profile."""
    issued_at = now or datetime.now(tz=UTC)
    payload = {
        "sub": str(profile_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> UUID:
    """Validate a session token and return the profile id it carries.

    Raises
    ------
    AuthError
        If the token is missing, malformed, expired, or signed with another
        secret, or if the server has no secret configured.
    """
    if not secret:
        raise AuthError("Authentication is not configured on this server.", 503)
    if not token:
        raise AuthError("Authorization token missing.")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Authorization token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Authorization token is invalid.") from exc

    try:
        return UUID(str(payload["sub"]))
    except ValueError as exc:
        raise AuthError("Authorization token is invalid.") from exc
