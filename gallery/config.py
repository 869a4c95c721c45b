"""Configuration with JSON file, config.yml, and env variable support."""

import json
import logging
import os
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/heic"]


def _find_repo_root(*, start: Path) -> Path:
    """Best-effort repository root discovery.

    Returns the first directory containing `pyproject.toml`, otherwise the
    current working directory.
    """

    try:
        start = start.resolve()
        for p in [start, *start.parents]:
            if (p / "pyproject.toml").exists():
                return p
    except OSError:
        pass

    return Path.cwd()


class GalleryConfig(BaseSettings):
    """Configuration with JSON file + config.yml + env var support.

    Load order (later overrides earlier):
    1. config.json - base configuration
    2. config.yml - optional overlay next to pyproject.toml
    3. Environment variables - runtime overrides

    Prefix: GALLERY_ (e.g., GALLERY_API_BASE_URL)
    """

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base address of the gallery backend",
    )

    # Upload validation
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_MIME_TYPES)
    )
    max_upload_size_mb: int = Field(default=50, gt=0)

    # View URLs
    view_url_ttl_seconds: int | None = Field(
        default=None,
        description=(
            "Requested lifetime for presigned view URLs. "
            "When unset the backend default applies."
        ),
    )

    # HTTP
    http_timeout_seconds: float | None = Field(
        default=None,
        description="Client-side timeout for backend and storage calls; None disables it",
    )

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_base_url must not be empty")
        return value.rstrip("/")

    @field_validator("allowed_mime_types")
    @classmethod
    def _normalize_mime_types(cls, value: list[str]) -> list[str]:
        return [v.strip().lower() for v in value if v and v.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @classmethod
    def from_json_file(cls, config_path: str = "config.json") -> "GalleryConfig":
        """Load config from JSON + config.yml with env var overrides.

        Args:
            config_path: Path to JSON config file.

        Returns:
            Configured GalleryConfig instance.
        """
        config_data: dict = {}

        json_path = Path(config_path)
        if json_path.exists():
            with open(json_path) as f:
                config_data = json.load(f)

        repo_root = _find_repo_root(start=json_path.parent)
        cfg_yml = repo_root / "config.yml"
        if cfg_yml.is_file():
            with cfg_yml.open("r", encoding="utf-8") as f:
                yml_data = yaml.safe_load(f) or {}
            if isinstance(yml_data, dict):
                config_data.update(yml_data)
            else:
                logger.warning("Ignoring %s: top-level value is not a mapping", cfg_yml)

        # Drop file values that an env var overrides so pydantic-settings
        # gives the env var precedence over init kwargs.
        env_prefix = "GALLERY_"
        for key in [k for k in config_data if f"{env_prefix}{k.upper()}" in os.environ]:
            del config_data[key]

        return cls(**config_data)
