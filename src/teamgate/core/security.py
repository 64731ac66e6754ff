"""Identity-provider credential handling.

The identity provider signs a JWT whose ``sub`` is the account id and which
carries the account's ``email``. This module only verifies that token and
turns it into an ``Account``; it knows nothing about tenants or roles.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from src.teamgate.core.config import get_settings

DEFAULT_CREDENTIAL_LIFETIME = timedelta(minutes=30)


@dataclass(frozen=True)
class Account:
    """An authenticated identity owned by the identity provider."""

    id: UUID
    email: str


def issue_credential(
    account_id: str | UUID,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a credential the way the identity provider does (dev and test use)."""
    settings = get_settings()
    expire = datetime.now(UTC) + (expires_delta or DEFAULT_CREDENTIAL_LIFETIME)

    claims: dict[str, Any] = {
        "sub": str(account_id),
        "email": email,
        "exp": expire,
    }
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(  # type: ignore[no-any-return]
        claims,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_credential(token: str) -> dict[str, Any] | None:
    """Decode and validate the JWT. Returns None on any error."""
    settings = get_settings()
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError:
        return None


def account_from_credential(token: str | None) -> Account | None:
    """Return the Account a credential names, or None if it is unusable."""
    if not token:
        return None
    payload = decode_credential(token)
    if payload is None:
        return None

    subject = payload.get("sub")
    email = payload.get("email")
    if not subject or not email or not isinstance(email, str):
        return None
    try:
        account_id = UUID(str(subject))
    except ValueError:
        return None
    return Account(id=account_id, email=email.strip().lower())
