"""Unified configuration loaded from .sitecontent.toml and env vars.

Loading order: defaults → TOML file → env vars.

The cache staleness mode is resolved from this config once, when the
content library is built, and does not change for the process lifetime.
"""

from __future__ import annotations

import logging
import math
import os
import tomllib
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".sitecontent.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "sitecontent" / "config.toml"

# Run-context variables: a production invocation that is not a long-lived
# runtime is a one-shot build whose files cannot change underneath it.
ENV_RUN_ENVIRONMENT = "SITECONTENT_ENV"
ENV_RUNTIME_MARKER = "SITECONTENT_RUNTIME"


class CacheMode(StrEnum):
    """How long a cached collection snapshot stays fresh."""

    AUTO = "auto"
    BUILD = "build"  # never stale
    RUNTIME = "runtime"  # bounded by runtime_max_age_seconds


class ContentSectionConfig(BaseModel):
    """[content] section."""

    root: str = "content"
    posts_dir: str = "posts"
    guides_dir: str = "guides"
    quizzes_dir: str = "quizzes"


class CacheSectionConfig(BaseModel):
    """[cache] section."""

    mode: CacheMode = CacheMode.AUTO
    runtime_max_age_seconds: float = 300.0

    @field_validator("runtime_max_age_seconds")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("runtime_max_age_seconds must be positive")
        return value


class RelatedSectionConfig(BaseModel):
    """[related] section."""

    limit: int = 3


class LoggingSectionConfig(BaseModel):
    """[logging] section."""

    level: str = "INFO"


class SiteContentConfig(BaseModel):
    """Top-level configuration for the content access layer."""

    content: ContentSectionConfig = Field(default_factory=ContentSectionConfig)
    cache: CacheSectionConfig = Field(default_factory=CacheSectionConfig)
    related: RelatedSectionConfig = Field(default_factory=RelatedSectionConfig)
    logging: LoggingSectionConfig = Field(default_factory=LoggingSectionConfig)

    @property
    def content_root(self) -> Path:
        return Path(self.content.root)

    @property
    def posts_path(self) -> Path:
        return self.content_root / self.content.posts_dir

    @property
    def guides_path(self) -> Path:
        return self.content_root / self.content.guides_dir

    @property
    def quizzes_path(self) -> Path:
        return self.content_root / self.content.quizzes_dir

    def resolve_cache_mode(self, environ: Mapping[str, str] | None = None) -> CacheMode:
        """Resolve ``auto`` to ``build`` or ``runtime`` from the run context.

        Args:
            environ: Environment to inspect; ``os.environ`` if None.
        """
        if self.cache.mode != CacheMode.AUTO:
            return self.cache.mode
        env = os.environ if environ is None else environ
        is_production = env.get(ENV_RUN_ENVIRONMENT, "").lower() == "production"
        if is_production and not env.get(ENV_RUNTIME_MARKER):
            return CacheMode.BUILD
        return CacheMode.RUNTIME

    def cache_max_age(self, environ: Mapping[str, str] | None = None) -> float:
        """Snapshot lifetime in seconds; ``math.inf`` in build mode."""
        if self.resolve_cache_mode(environ) == CacheMode.BUILD:
            return math.inf
        return self.cache.runtime_max_age_seconds


def load_config(path: str | Path | None = None) -> SiteContentConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .sitecontent.toml in CWD
    3. ~/.config/sitecontent/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged SiteContentConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = SiteContentConfig.model_validate(data) if data else SiteContentConfig()

    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: SiteContentConfig) -> SiteContentConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "SITECONTENT_ROOT": ("content", "root"),
        "SITECONTENT_CACHE_MODE": ("cache", "mode"),
        "SITECONTENT_CACHE_MAX_AGE": ("cache", "runtime_max_age_seconds"),
        "SITECONTENT_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return SiteContentConfig.model_validate(data)
