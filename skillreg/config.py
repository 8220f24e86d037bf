"""Runtime configuration, read from environment variables (or a .env file)."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillreg.broker.gateway import DEFAULT_BROKER_URL
from skillreg.ledger.resolver import MIRROR_URLS


class RegistryConfig(BaseSettings):
    """Settings for the registry service and its external collaborators.

    Ledger identity comes from ``HEDERA_ACCOUNT_ID`` / ``HEDERA_NETWORK``;
    everything else is read from ``SKILLREG_*`` variables. An empty
    ``broker_url`` disables the broker gateway; an empty ``mirror_url``
    disables on-chain resolution. When ``mirror_url`` is unset it follows
    the network's public mirror node.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKILLREG_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    account_id: str = Field("0.0.0", validation_alias="HEDERA_ACCOUNT_ID")
    network: str = Field("testnet", validation_alias="HEDERA_NETWORK")

    broker_url: str = DEFAULT_BROKER_URL
    broker_api_key: str = ""
    mirror_url: Optional[str] = None
    http_timeout: float = 10.0
    poll_interval_ms: int = Field(4000, ge=0)
    poll_timeout_ms: int = Field(300_000, ge=0)
    seed_skills: bool = True
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _default_mirror_url(self) -> RegistryConfig:
        if self.mirror_url is None:
            self.mirror_url = MIRROR_URLS.get(self.network, "")
        return self

    @property
    def broker_headers(self) -> dict[str, str]:
        return {"x-api-key": self.broker_api_key} if self.broker_api_key else {}

    @classmethod
    def from_env(cls) -> RegistryConfig:
        """Load settings; raises pydantic.ValidationError on malformed values."""
        return cls()
