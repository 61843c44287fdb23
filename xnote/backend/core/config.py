"""
Configuration Management.

Loads secrets from config/.env (and the process environment) and settings
from config/settings/*.yaml.

Secrets and environment overrides (.env):
    DB_PASSWORD, REDIS_PASSWORD, DATABASE_URL, TRASH_RETENTION_DAYS

Settings (YAML):
    application.yaml   - App identity, server, cors, timeouts
    database.yaml      - Database and Redis connection settings
    logging.yaml       - Logging configuration
    features.yaml      - Feature flags
    trash.yaml         - Trash retention window and purge schedule
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xnote.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    TrashSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets and environment overrides loaded from config/.env and the environment."""

    db_password: str = ""
    redis_password: str = ""
    database_url: str | None = None
    trash_retention_days: int | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("trash_retention_days", mode="before")
    @classmethod
    def _ignore_unparsable_retention(cls, value: Any) -> Any:
        """Empty or non-integer values count as unset."""
        if value is None or isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")
        self._trash = _load_validated(TrashSchema, "trash.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        """Feature flags."""
        return self._features

    @property
    def trash(self) -> TrashSchema:
        """Trash retention and purge schedule."""
        return self._trash


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Construct the async database URL from YAML config and secrets.

    DATABASE_URL, when set, wins over the YAML connection settings.

    Returns:
        Database connection URL string.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    return f"{db.driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"


def get_redis_url() -> str:
    """
    Construct Redis URL from YAML config and secrets.

    Returns:
        Redis connection URL string.
    """
    redis = get_app_config().database.redis
    password = get_settings().redis_password
    return f"redis://:{password}@{redis.host}:{redis.port}/{redis.db}"


def get_trash_retention_days() -> int:
    """
    Resolve the trash retention window in days.

    TRASH_RETENTION_DAYS overrides trash.yaml when it is a positive integer;
    zero, unset or unparsable falls back to the YAML value.
    """
    override = get_settings().trash_retention_days
    if override and override > 0:
        return override
    return get_app_config().trash.retention_days

