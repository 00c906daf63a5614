from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from barbershop.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

ADMIN_SUBJECT = "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def admin_session_seconds() -> int:
    return settings.admin_session_hours * 60 * 60


def create_admin_token() -> str:
    expire = datetime.now(UTC) + timedelta(seconds=admin_session_seconds())
    to_encode = {"sub": ADMIN_SUBJECT, "exp": expire, "type": "admin"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_admin_token(token: str) -> bool:
    """True when ``token`` is a valid, unexpired admin session."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return False
    return payload.get("type") == "admin" and payload.get("sub") == ADMIN_SUBJECT
