# app/config.py
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    env: Literal["dev", "stage", "prod"]
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    sql_echo: bool = False
    auto_init_db: bool = True

    # Caller identity is resolved upstream; the gateway forwards the user id
    user_id_header: str = "X-User-Id"

    # Conflict escalation emails (in-app notifications are always written)
    conflict_email_enabled: bool = False
    resend_api_key: Optional[str] = None
    email_from_address: str = "League Results <results@example.com>"
    app_base_url: str = "http://localhost:8080"

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
