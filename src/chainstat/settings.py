from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def proxy_url(self) -> str | None:
        if not self.enabled or not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password.get_secret_value()}@{rest}"
        return self.url


class CollectorSettings(BaseModel):
    timeout_ms: int = Field(default=15000, gt=0)
    refresh_interval_seconds: float = Field(default=3600, gt=0)
    archive_enabled: bool = True
    archive_max_concurrency: int = Field(default=4, ge=1)

    model_config = {"extra": "forbid", "frozen": True}


class ExchangeCredentials(BaseModel):
    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    passphrase: SecretStr = SecretStr("")
    project: SecretStr = SecretStr("")

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.api_key.get_secret_value() or not self.api_secret.get_secret_value()


class ExchangeSettings(BaseModel):
    enabled: bool = True
    base_url: str | None = None
    credentials: ExchangeCredentials = Field(default_factory=ExchangeCredentials)

    model_config = {"extra": "forbid", "frozen": True}


class Settings(BaseModel):
    env: str = "dev"
    data_dir: Path = Path("data")
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    collector: CollectorSettings = Field(default_factory=CollectorSettings)
    exchanges: dict[str, ExchangeSettings] = Field(default_factory=dict)

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / "exchange_data.json"

    @property
    def raw_responses_dir(self) -> Path:
        return self.data_dir / "raw_responses"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    def exchange(self, exchange_id: str) -> ExchangeSettings:
        """Settings for one exchange, defaults when it is not configured."""
        return self.exchanges.get(exchange_id.lower()) or ExchangeSettings()

    def credentials_by_exchange(self) -> dict[str, ExchangeCredentials]:
        return {name: cfg.credentials for name, cfg in self.exchanges.items()}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        for exch in data.get("exchanges", {}).values():
            creds = exch.get("credentials")
            if isinstance(creds, dict):
                for field in ("api_key", "api_secret", "passphrase", "project"):
                    if creds.get(field):
                        creds[field] = "***"
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data
