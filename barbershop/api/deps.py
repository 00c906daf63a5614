from datetime import datetime

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from barbershop.core.dates import shop_now
from barbershop.core.db import get_session  # noqa: F401 - re-exported for routes
from barbershop.core.security import decode_admin_token

security = HTTPBearer(auto_error=False)


def get_now() -> datetime:
    """Current shop wall-clock time; overridden in tests."""
    return shop_now()


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not decode_admin_token(credentials.credentials):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired admin session",
            headers={"WWW-Authenticate": "Bearer"},
        )
