from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

FIREBASE_JWKS_URL = "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    database_url: str = "sqlite:///db.sqlite3"

    # Identity provider. Leaving the project id unset selects the trusted-header fallback.
    firebase_project_id: Optional[str] = None
    firebase_jwks_url: str = FIREBASE_JWKS_URL

    owner_emails: str = "thebrotherhoodofalaska@outlook.com,2thumbsupgames@gmail.com"
    cors_origins: str = "http://localhost:5173"

    chat_retention_timezone: str = "America/Anchorage"
    chat_retention_hour: int = 0
    file_purge_interval_seconds: int = 3600
    file_expiry_hours: int = 24 * 7
    max_upload_bytes: int = 25 * 1024 * 1024  # 25MB

    ws_send_timeout_seconds: float = 5.0
    ws_outbox_size: int = 100

    webhook_timeout_seconds: float = 5.0
    discord_feed_threads: bool = False

    log_level: str = "INFO"
    enable_scheduler: bool = True

    @property
    def owner_email_set(self) -> set:
        return {e.strip().lower() for e in self.owner_emails.split(",") if e.strip()}

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def database_path(self) -> str:
        prefix = "sqlite:///"
        if self.database_url.startswith(prefix):
            return self.database_url[len(prefix):]
        return self.database_url

settings = Settings()
