"""IIIFNotifications Configuration Settings."""

from __future__ import annotations

import os
from enum import StrEnum
from functools import cached_property, lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from src.utils.logging import _get_logger

__all__ = [
    "FetchConfig",
    "IIIFNotificationsConfig",
    "LogLevel",
    "WebConfig",
    "get_config",
    "get_data_path",
]

_log = _get_logger(__name__)


def get_data_path() -> Path:
    """Resolve the data directory from the environment.

    Returns:
        Path: Absolute data path, `./data` unless `IN_DATA_PATH` is set.
    """
    return Path(os.getenv("IN_DATA_PATH", "./data")).resolve()


def find_yaml_config_file() -> Path:
    """Find the YAML configuration file in the data path.

    Returns:
        Path: The path to an existing YAML configuration file or the default location.
    """
    data_path = get_data_path()

    for ext in ("yaml", "yml"):
        yaml_file = data_path / f"config.{ext}"
        if yaml_file.exists():
            _log.debug(f"Using YAML config file: {yaml_file.resolve()}")
            return yaml_file.resolve()
    return data_path / "config.yaml"


class BaseStrEnum(StrEnum):
    """Base class for string-based enumerations with case-insensitive lookup."""

    @classmethod
    def _missing_(cls, value: object) -> BaseStrEnum | None:
        """Handle case-insensitive lookup for enum values.

        Args:
            value: The value to look up in the enumeration

        Returns:
            BaseStrEnum | None: The matching enum member if found, None otherwise
        """
        value = value.lower() if isinstance(value, str) else value
        for member in cls:
            if member.lower() == value:
                return member
        return None

    def __repr__(self) -> str:
        """Return the string value of the enum member."""
        return self.value

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return repr(self)


class LogLevel(BaseStrEnum):
    """Enumeration of available logging levels.

    Note: SUCCESS is a custom level used by this application.
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class WebConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = Field(default="0.0.0.0", description="Host for the web server")
    port: int = Field(default=4567, ge=1, le=65535, description="Port to bind")


class FetchConfig(BaseModel):
    """Configuration for outbound requests to notification targets."""

    timeout: float = Field(
        default=10.0, gt=0, description="Total timeout in seconds for one fetch"
    )
    max_concurrency: int = Field(
        default=8, ge=1, description="Maximum number of simultaneous target fetches"
    )
    user_agent: str | None = Field(
        default=None, description="User-Agent header override for target fetches"
    )


class IIIFNotificationsConfig(BaseSettings):
    """Configuration manager for the IIIFNotifications application.

    Configuration is sourced from a YAML file in the data path, optionally
    combined with parameters passed directly to the model.
    """

    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level for the application"
    )
    manifest_base_url: str = Field(
        default="http://library.upenn.edu/iiif",
        description="Base URL used to build canonical manifest @id values",
    )
    manifests_dir: Path | None = Field(
        default=None,
        description="Directory of static manifest files, defaults to data/manifests",
    )
    web: WebConfig = Field(default_factory=WebConfig, description="HTTP server")
    fetch: FetchConfig = Field(
        default_factory=FetchConfig, description="Remote payload fetching"
    )

    @cached_property
    def data_path(self) -> Path:
        """Get the data path for IIIFNotifications.

        Returns:
            Path: The data path resolved from the environment or default location.
        """
        return get_data_path()

    @property
    def manifests_path(self) -> Path:
        """Directory that holds the static `<name>.json` manifest files."""
        if self.manifests_dir is None:
            return self.data_path / "manifests"
        return self.manifests_dir.resolve()

    @model_validator(mode="after")
    def normalize_manifest_base_url(self) -> IIIFNotificationsConfig:
        """Strip trailing slashes so canonical ids never contain `//`.

        Returns:
            IIIFNotificationsConfig: Self with a normalized base URL.

        Raises:
            ValueError: If the base URL is empty.
        """
        base_url = self.manifest_base_url.strip().rstrip("/")
        if not base_url:
            raise ValueError("manifest_base_url must not be empty")
        self.manifest_base_url = base_url
        return self

    def __str__(self) -> str:
        """Creates a human-readable representation of the configuration."""
        return (
            f"IIIFNotifications Config: DATA_PATH: {self.data_path}, "
            f"LOG_LEVEL: {self.log_level}, MANIFEST_BASE_URL: "
            f"{self.manifest_base_url}, WEB: {self.web.host}:{self.web.port}, "
            f"FETCH_TIMEOUT: {self.fetch.timeout}s"
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of configuration sources."""
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=find_yaml_config_file()),
        )

    model_config = SettingsConfigDict(extra="ignore")


@lru_cache(maxsize=1)
def get_config() -> IIIFNotificationsConfig:
    """Get the singleton instance of IIIFNotificationsConfig.

    Returns:
        IIIFNotificationsConfig: The singleton configuration instance.
    """
    return IIIFNotificationsConfig()
