"""Application configuration settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env.

    Uses Pydantic Settings 2.x. All fields are validated and typed.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="HELPQUEUE_", extra="ignore")

    service_name: str = "tgo-helpqueue"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8090

    # Slack Bot credentials
    slack_bot_token: str = ""           # Bot User OAuth Token (xoxb-...)
    slack_signing_secret: str = ""      # Used to verify interactivity callbacks

    # Queue name -> display channel ID, e.g. {"algo-help": "C0123456"}
    queue_channels: dict[str, str] = Field(default_factory=dict)

    # HTTP behavior
    request_timeout_seconds: int = 30

    # Logging
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_json: bool = False
    log_file: str = "logs/helpqueue.log"


settings = Settings()
