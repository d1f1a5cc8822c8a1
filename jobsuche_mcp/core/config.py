"""Configuration models, environment loader and YAML loader for the Jobsuche tools."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobsuche_mcp.core.errors import ConfigError

DEFAULT_API_URL = "https://rest.arbeitsagentur.de/jobboerse/jobsuche-service"

# The upstream API refuses page sizes above 100.
API_MAX_PAGE_SIZE = 100


class ApiConfig(BaseModel):
    """Connection and paging settings for the Jobsuche API."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    default_page_size: int = Field(default=25, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    timeout_s: float = Field(default=30.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def url_is_http(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "API URL cannot be empty"
            raise ValueError(msg)
        if not v.startswith(("http://", "https://")):
            msg = "API URL must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def blank_key_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def page_size_bounds(self) -> "ApiConfig":
        if self.default_page_size > self.max_page_size:
            msg = (
                f"Default page size ({self.default_page_size}) cannot exceed "
                f"max page size ({self.max_page_size})"
            )
            raise ValueError(msg)
        if self.max_page_size > API_MAX_PAGE_SIZE:
            msg = f"Max page size cannot exceed {API_MAX_PAGE_SIZE} (API limitation)"
            raise ValueError(msg)
        return self


class Settings(BaseSettings):
    """Top-level settings.

    Read from ``JOBSUCHE_*`` environment variables, or from YAML via
    :meth:`from_yaml`. Environment keys are flat (``JOBSUCHE_API_URL``,
    ``JOBSUCHE_MAX_PAGE_SIZE``, ...); the YAML file uses an ``api:`` section.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOBSUCHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    default_page_size: int = 25
    max_page_size: int = 100
    timeout_s: float = 30.0

    @property
    def api(self) -> ApiConfig:
        return ApiConfig(
            api_url=self.api_url,
            api_key=self.api_key,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
            timeout_s=self.timeout_s,
        )

    @model_validator(mode="after")
    def validate_api(self) -> "Settings":
        # Runs the ApiConfig validators so bad settings fail at load time.
        try:
            _ = self.api
        except ValidationError as e:
            raise ValueError(_messages(e)) from e
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file with an ``api:`` section."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        try:
            raw = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in {path}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(raw, dict):
            msg = f"Config file {path} must contain a mapping"
            raise ConfigError(msg)
        api_section = raw.get("api") or {}
        if not isinstance(api_section, dict):
            msg = f"'api' section in {path} must be a mapping"
            raise ConfigError(msg)
        return cls.model_validate(api_section)


def _messages(error: ValidationError) -> str:
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in error.errors())


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Resolve settings from YAML (when a path is given) or the environment.

    Raises:
        ConfigError: If the resolved settings violate any bound.
        FileNotFoundError: If ``config_path`` does not exist.
    """
    try:
        if config_path is not None:
            return Settings.from_yaml(config_path)
        return Settings()
    except ValidationError as e:
        msg = f"Invalid configuration: {_messages(e)}"
        raise ConfigError(msg) from e
