"""Configuration models.

Every YAML section has its own model; ``AppConfig`` is the validated
result of all layers.  Flat environment variables are described
separately by ``EnvOverrides`` and folded into sections in load.py.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

CINEMETA_MANIFEST_URL = "https://v3-cinemeta.strem.io/manifest.json"
TORRENTIO_MANIFEST_URL = "https://torrentio.strem.fun/manifest.json"


def _as_path(value: Any) -> Path:
    # Only expands "~"; the cache directory is created by diskcache on open.
    if isinstance(value, (str, Path)):
        return Path(value).expanduser()
    raise TypeError(f"cache directory must be a path or string, not {type(value).__name__}")


def _positive(value: float, name: str) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


class HttpConfig(BaseModel):
    """Shared ``httpx.AsyncClient`` settings.

    One addon call may send ``1 + max_retries`` requests with backoff sleeps
    in between; ``retry_budget_seconds`` is that worst case, ignoring
    ``Retry-After``.
    """

    timeout_seconds: float = Field(default=4.0, description="Per-request timeout.")
    follow_redirects: bool = True
    user_agent: str = "Surfboard/0.1.0"
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries on 429/502/503/504 and dropped connections.",
    )
    backoff_base: float = Field(default=0.5, gt=0)
    max_backoff: float = Field(default=10.0, gt=0)

    @property
    def retry_budget_seconds(self) -> float:
        sleeps = sum(
            min(self.backoff_base * 2**attempt + self.backoff_base, self.max_backoff)
            for attempt in range(self.max_retries)
        )
        return (1 + self.max_retries) * self.timeout_seconds + sleeps

    @field_validator("timeout_seconds")
    @classmethod
    def _check_timeout(cls, v: float) -> float:
        return _positive(v, "http.timeout_seconds")


class LoggingConfig(BaseModel):
    level: LogLevel = "INFO"
    format: Optional[LogFormat] = Field(
        default=None,
        description="console or json; left empty it follows the environment.",
    )


class CacheConfig(BaseModel):
    """Where library records are persisted."""

    dir: Path = Path("./.cache/surfboard")
    max_concurrent: int = Field(default=10, ge=1, description="Parallel diskcache calls.")

    @field_validator("dir", mode="before")
    @classmethod
    def _expand_dir(cls, v: Any) -> Path:
        return _as_path(v)


class AddonsConfig(BaseModel):
    """Built-in addon manifest URLs and fan-out limits.

    An empty URL disables that addon.  Order of the built-ins is fixed:
    cinemeta, torrentio, mediafusion.
    """

    cinemeta: str = Field(
        default=CINEMETA_MANIFEST_URL,
        description="Cinemeta manifest URL (catalogs + metadata).",
    )
    torrentio: str = Field(
        default=TORRENTIO_MANIFEST_URL,
        description="Torrentio manifest URL (streams).",
    )
    mediafusion: str = Field(
        default="",
        description="MediaFusion manifest URL. Needs a personal config; empty = off.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for one addon call inside a fan-out (seconds).",
    )

    @field_validator("cinemeta", "torrentio", "mediafusion", mode="before")
    @classmethod
    def _strip_url(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("timeout_seconds")
    @classmethod
    def _check_timeout(cls, v: float) -> float:
        return _positive(v, "addons.timeout_seconds")


class PreferencesConfig(BaseModel):
    """User playback preferences (read-only from the core's point of view)."""

    preferred_audio_language: str = Field(
        default="en",
        description="Preferred audio language (ISO 639-1 code or English name).",
    )
    preferred_subtitle_language: str = Field(
        default="en",
        description="Preferred subtitle language (ISO 639-1 code or English name).",
    )


class StreamsConfig(BaseModel):
    """Stream ranking weights.

    Score formula:
    resolution * resolution_multiplier + language_bonus + min(seeders, seeders_cap)

    With default config language_bonus + seeders_cap < resolution_multiplier,
    so resolution always dominates and the other two only order streams
    within the same resolution.
    """

    resolution_multiplier: int = Field(
        default=1000,
        description="Multiplier for the resolution rank (0..4).",
    )
    language_bonus: int = Field(
        default=500,
        description="Bonus when a stream carries the preferred audio language.",
    )
    seeders_cap: int = Field(
        default=400,
        description="Seeder count contributes at most this many points.",
    )


class AppConfig(BaseModel):
    """Final configuration, one attribute per YAML section."""

    app_name: str = "surfboard"
    environment: Environment = "dev"

    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    addons: AddonsConfig = Field(default_factory=AddonsConfig)
    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    streams: StreamsConfig = Field(default_factory=StreamsConfig)

    @model_validator(mode="after")
    def _pick_log_format(self) -> "AppConfig":
        if self.logging.format is None:
            self.logging.format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """Plain-data dump that config.yaml accepts back unchanged."""
        return self.model_dump(mode="json")


class EnvOverrides(BaseSettings):
    """``SURFBOARD_*`` environment variables, flat and all optional.

    Names are ``<section>_<key>`` (``SURFBOARD_HTTP_MAX_RETRIES``,
    ``SURFBOARD_ADDONS_MEDIAFUSION``); the two language preferences keep
    their own names (``SURFBOARD_PREFERRED_AUDIO_LANGUAGE``).
    """

    model_config = SettingsConfigDict(
        env_prefix="SURFBOARD_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None
    http_max_retries: Optional[int] = None
    http_backoff_base: Optional[float] = None
    http_max_backoff: Optional[float] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_dir: Optional[str] = None
    cache_max_concurrent: Optional[int] = None

    addons_cinemeta: Optional[str] = None
    addons_torrentio: Optional[str] = None
    addons_mediafusion: Optional[str] = None
    addons_timeout_seconds: Optional[float] = None

    preferred_audio_language: Optional[str] = None
    preferred_subtitle_language: Optional[str] = None

    def provided(self) -> dict[str, Any]:
        """Variables that are actually set."""
        return self.model_dump(exclude_none=True)
