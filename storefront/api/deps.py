# storefront/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.domain.errors import Unauthenticated
from storefront.utils.security import TokenClaims, decode_access_token

_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> TokenClaims:
    """Rejects the request unless it carries a valid, unexpired bearer token."""
    try:
        if credentials is None or not credentials.credentials:
            raise Unauthenticated("Missing token")
        return decode_access_token(credentials.credentials)
    except Unauthenticated as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
