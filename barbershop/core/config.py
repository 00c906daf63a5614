from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./barbershop.db"
    # Create tables on startup; prefer Alembic in production
    auto_create_tables: bool = True

    # JWT (admin session)
    secret_key: str
    algorithm: str = "HS256"
    admin_password_hash: str = ""
    admin_session_hours: int = 8

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = ""

    # Slot/appointment business rules
    business_open: str = "10:00"
    business_close: str = "20:00"  # exclusive, so last slot starts at 19:30
    slot_interval_minutes: int = 30
    min_modify_lead_hours: float = 6
    shop_timezone: str = "America/Argentina/Buenos_Aires"

    # Client
    api_base_url: str = "http://localhost:8000/api"
    http_timeout_seconds: float = 15.0
    session_file: str = str(Path.home() / ".barbershop" / "session.json")

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def google_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret and self.google_redirect_uri)


settings = Settings()
