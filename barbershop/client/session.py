import logging
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from barbershop.api.schemas.auth import GoogleProfile
from barbershop.core.config import settings
from barbershop.core.dates import shop_now

logger = logging.getLogger(__name__)


class AdminSession(BaseModel):
    authenticated: bool = False
    expires_at: datetime | None = None
    token: str | None = None


class SessionState(BaseModel):
    admin: AdminSession = Field(default_factory=AdminSession)
    profile: GoogleProfile | None = None


class LocalSession:
    """Admin session flag and signed-in profile persisted in a JSON file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or settings.session_file)
        self.state = self._read()

    def _read(self) -> SessionState:
        if not self.path.exists():
            return SessionState()
        try:
            return SessionState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except PydanticValidationError as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return SessionState()

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.state.model_dump_json(indent=2), encoding="utf-8")

    # --- admin ---

    def start_admin_session(self, token: str, expires_in: int, now: datetime | None = None) -> AdminSession:
        now = now or shop_now()
        self.state.admin = AdminSession(
            authenticated=True,
            expires_at=now + timedelta(seconds=expires_in),
            token=token,
        )
        self._write()
        return self.state.admin

    def admin_token(self, now: datetime | None = None) -> str | None:
        """The stored admin token, or None once the session has expired."""
        admin = self.state.admin
        if not admin.authenticated or admin.expires_at is None:
            return None
        if (now or shop_now()) >= admin.expires_at:
            self.end_admin_session()
            return None
        return admin.token

    def is_admin(self, now: datetime | None = None) -> bool:
        return self.admin_token(now) is not None

    def end_admin_session(self) -> None:
        self.state.admin = AdminSession()
        self._write()

    # --- signed-in user ---

    def save_profile(self, profile: GoogleProfile) -> None:
        self.state.profile = profile
        self._write()

    def load_profile(self) -> GoogleProfile | None:
        return self.state.profile

    def clear_profile(self) -> None:
        self.state.profile = None
        self._write()
