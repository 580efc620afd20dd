"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    CONFIG_ENV_VAR,
    CONFIG_TABLE,
    DEFAULT_AWAIT_TX_TIMEOUT,
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_CHECK_INTERVAL_MS,
    DEFAULT_KUPO_URL,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_OGMIOS_URL,
    DEFAULT_REQUEST_TIMEOUT,
)

load_dotenv()


def default_config_paths() -> list[Path]:
    return [
        Path("kupmios.toml"),
        Path.home() / ".config" / "kupmios" / "config.toml",
    ]


class TomlConfigSource(PydanticBaseSettingsSource):
    """Read settings from a TOML file, either top-level or under ``[kupmios]``."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
        super().__init__(settings_cls)
        self._path = path

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, "", False

    def _resolve_path(self) -> Path | None:
        if self._path:
            return self._path
        for candidate in default_config_paths():
            if candidate.exists():
                return candidate
        return None

    def __call__(self) -> dict[str, Any]:
        path = self._resolve_path()
        if path is None or not path.exists():
            return {}

        with path.open("rb") as f:
            data = tomllib.load(f)
        body = data.get(CONFIG_TABLE, data)
        if not isinstance(body, dict):
            return {}
        return body


class KupmiosSettings(BaseSettings):
    """Connection and tuning options for the Kupo/Ogmios provider. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with KUPMIOS_)
    - Config file (TOML), lowest precedence
    """

    # --- endpoints ---
    kupo_url: str = DEFAULT_KUPO_URL
    ogmios_url: str = DEFAULT_OGMIOS_URL

    # --- budgets (seconds) ---
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    call_timeout: float = Field(default=DEFAULT_CALL_TIMEOUT, gt=0)
    await_tx_timeout: float = Field(default=DEFAULT_AWAIT_TX_TIMEOUT, gt=0)
    check_interval_ms: int = Field(default=DEFAULT_CHECK_INTERVAL_MS, gt=0)

    # 0 or unset disables the cap
    max_concurrent_requests: int | None = Field(
        default=DEFAULT_MAX_CONCURRENT_REQUESTS, ge=0
    )

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="KUPMIOS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("kupo_url", "ogmios_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get(CONFIG_ENV_VAR)
        cfg_path = Path(env_cfg) if env_cfg else None
        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump()
