# storefront/utils/security.py
from datetime import datetime, timezone, timedelta

import bcrypt
import jwt
from pydantic import BaseModel, ValidationError as SchemaError

from storefront.domain.errors import Unauthenticated
from storefront.utils.settings import (
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_EXPIRES_SECONDS,
    JWT_SECRET,
)

#bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


class TokenClaims(BaseModel):
    """Identity carried by an access token."""

    sub: int
    email: str
    name: str
    created_at: str | None = None
    iat: int
    exp: int


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    created_at = user.created_at.isoformat() if user.created_at else None
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "created_at": created_at,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=JWT_EXPIRES_SECONDS)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verifies signature and expiry, then validates the whole payload shape.
    Any failure is reported the same way.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
        return TokenClaims.model_validate(payload)
    except (jwt.PyJWTError, SchemaError) as e:
        raise Unauthenticated("Invalid token") from e
