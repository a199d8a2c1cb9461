"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from predictsdk.errors import ErrorCode, PredictSDKError
from predictsdk.storage import DuckDBStorage, MemoryStorage, StorageAdapter

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    cwd_config = Path.cwd() / "config"
    if cwd_config.exists():
        return cwd_config
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = config_dir or _find_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class SDKConfig(BaseModel):
    """Per-SDK-instance configuration."""

    app_id: str = Field(..., min_length=1)
    default_fee_rate: float = Field(0.02, ge=0, le=0.5)
    initial_balance: float = Field(1000.0, ge=0)
    debug: bool = False

    @classmethod
    def build(cls, data: SDKConfig | dict[str, Any]) -> SDKConfig:
        """Coerce a dict (or pass through a model); bad values become INVALID_CONFIG."""
        if isinstance(data, SDKConfig):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise PredictSDKError(ErrorCode.INVALID_CONFIG, "Invalid SDK config", details=e.errors()) from e


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        sdk: dict[str, Any] | None = None,
        storage: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.sdk = sdk or {}
        self.storage = storage or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            sdk=raw.get("sdk"),
            storage=raw.get("storage"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def app_id(self) -> str:
        return self.sdk.get("app_id", "predict-cli")

    @property
    def default_fee_rate(self) -> float:
        return float(self.sdk.get("default_fee_rate", 0.02))

    @property
    def initial_balance(self) -> float:
        return float(self.sdk.get("initial_balance", 1000))

    @property
    def debug(self) -> bool:
        return bool(self.sdk.get("debug", False))

    @property
    def storage_backend(self) -> str:
        return self.storage.get("backend", "duckdb").lower()

    @property
    def db_path(self) -> str:
        return self.storage.get("db_path", "data/predict.duckdb")

    @property
    def storage_prefix(self) -> str:
        return self.storage.get("prefix", "predict-sdk")

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)

    def sdk_config(self) -> SDKConfig:
        return SDKConfig.build(
            {
                "app_id": self.app_id,
                "default_fee_rate": self.default_fee_rate,
                "initial_balance": self.initial_balance,
                "debug": self.debug,
            }
        )

    def create_storage(self) -> StorageAdapter:
        """Build the configured storage backend ('memory' or 'duckdb')."""
        if self.storage_backend == "memory":
            return MemoryStorage()
        if self.storage_backend == "duckdb":
            return DuckDBStorage(self.db_path, prefix=self.storage_prefix)
        raise PredictSDKError(
            ErrorCode.INVALID_CONFIG,
            f"Unknown storage backend {self.storage_backend!r} (expected 'memory' or 'duckdb')",
        )


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
