# libs/settings/config.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.security.signatures import SigningKeys


class JobsSettings(BaseSettings):
    """
    Serverless jobs configuration.

    Environment example:
      APP_ENV=production
      QSTASH_TOKEN=eyJ...
      CALLBACK_BASE_URL=https://hr.example.com
      QSTASH_CURRENT_SIGNING_KEY=sig_current
      QSTASH_NEXT_SIGNING_KEY=sig_next
    """

    APP_ENV: Literal["development", "production", "test"] = "production"

    # Queue provider
    QSTASH_TOKEN: Optional[str] = None
    QSTASH_URL: str = "https://qstash.upstash.io/v1/publish"
    QSTASH_TIMEOUT_SECONDS: int = 15

    # Callback target (provider -> dispatch endpoint)
    CALLBACK_BASE_URL: str = ""
    JOB_RUNNER_PATH: str = "/api/job-runner"

    # Webhook signing keys (current + next for rotation)
    QSTASH_CURRENT_SIGNING_KEY: Optional[str] = None
    QSTASH_NEXT_SIGNING_KEY: Optional[str] = None

    # Receive-side dedup window; 0 disables it
    DEDUP_TTL_SECONDS: int = 600

    # Optional bearer secret the cron platform sends to /api/scheduled-job
    CRON_SECRET: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "QSTASH_TOKEN", "QSTASH_CURRENT_SIGNING_KEY", "QSTASH_NEXT_SIGNING_KEY", "CRON_SECRET", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("QSTASH_TIMEOUT_SECONDS", mode="after")
    @classmethod
    def _clamp_timeout(cls, v: int) -> int:
        return min(60, max(1, v))

    @field_validator("DEDUP_TTL_SECONDS", mode="after")
    @classmethod
    def _non_negative_ttl(cls, v: int) -> int:
        return max(0, v)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    def signing_keys(self) -> SigningKeys:
        return SigningKeys(current=self.QSTASH_CURRENT_SIGNING_KEY, next=self.QSTASH_NEXT_SIGNING_KEY)

    def callback_url(self) -> str:
        base = self.CALLBACK_BASE_URL.rstrip("/")
        path = "/" + self.JOB_RUNNER_PATH.lstrip("/")
        return f"{base}{path}"
