"""Mirror configuration via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class MirrorSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///deskmirror.db"
    echo_sql: bool = False
    log_level: str = "INFO"

    # Freshdesk (required for sync and write-through operations)
    freshdesk_domain: str | None = None
    freshdesk_api_key: str | None = None
    request_timeout_seconds: float = 30.0

    # Sync
    sync_page_size: int = 100
    # Safety cap on pagination loops; 0 = unlimited
    sync_max_pages: int = 0

    # Read path: cached tickets older than this are refetched on view
    ticket_stale_after_seconds: int = 300

    # Local listings
    default_page_size: int = 30

    model_config = {"env_prefix": "DESKMIRROR_", "env_file": ".env", "extra": "ignore"}

    @property
    def freshdesk_configured(self) -> bool:
        return bool(self.freshdesk_domain and self.freshdesk_api_key)

    @property
    def freshdesk_base_url(self) -> str | None:
        if not self.freshdesk_domain:
            return None
        return f"https://{self.freshdesk_domain}.freshdesk.com/api/v2"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = MirrorSettings()
