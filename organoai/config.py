"""Configuration loading: .env, optional YAML file, then environment overrides.

Environment variables:
    ORGANOAI_CLASSIFIER_URL: Classification API endpoint (required for scanning)
    ORGANOAI_CLASSIFIER_FIELD: Multipart field carrying the image (default: "file")
    IMGBB_API_KEY: ImgBB API key (required for saving)
    IMGBB_UPLOAD_URL: ImgBB upload endpoint
    ORGANOAI_STORAGE: "sqlite" (default) or "supabase"
    ORGANOAI_DATABASE: SQLite database path (default: data/organoai.db)
    SUPABASE_URL, SUPABASE_KEY: Supabase connection when ORGANOAI_STORAGE=supabase
    ORGANOAI_USER_ID: Identity of the session user
    ORGANOAI_TIMEOUT: HTTP timeout in seconds (default: no timeout)
    ORGANOAI_LATITUDE, ORGANOAI_LONGITUDE: Fixed device position for camera captures
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_UPLOAD_URL = "https://api.imgbb.com/1/upload"
STORAGE_BACKENDS = ("sqlite", "supabase")

# setting name -> environment variable
ENV_OVERRIDES = {
    "classifier_url": "ORGANOAI_CLASSIFIER_URL",
    "classifier_field": "ORGANOAI_CLASSIFIER_FIELD",
    "imgbb_api_key": "IMGBB_API_KEY",
    "imgbb_upload_url": "IMGBB_UPLOAD_URL",
    "storage": "ORGANOAI_STORAGE",
    "database": "ORGANOAI_DATABASE",
    "supabase_url": "SUPABASE_URL",
    "supabase_key": "SUPABASE_KEY",
    "user_id": "ORGANOAI_USER_ID",
    "timeout": "ORGANOAI_TIMEOUT",
    "latitude": "ORGANOAI_LATITUDE",
    "longitude": "ORGANOAI_LONGITUDE",
}


@dataclass
class Settings:
    """Resolved application settings."""

    classifier_url: Optional[str] = None
    classifier_field: str = "file"
    imgbb_api_key: Optional[str] = None
    imgbb_upload_url: str = DEFAULT_UPLOAD_URL
    storage: str = "sqlite"
    database: str = "data/organoai.db"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    user_id: Optional[str] = None
    timeout: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        if self.storage not in STORAGE_BACKENDS:
            raise ConfigError(
                f"Unknown storage backend: {self.storage!r} (expected one of {', '.join(STORAGE_BACKENDS)})"
            )
        self.timeout = _to_float("timeout", self.timeout)
        self.latitude = _to_float("latitude", self.latitude)
        self.longitude = _to_float("longitude", self.longitude)
        if (self.latitude is None) != (self.longitude is None):
            raise ConfigError("latitude and longitude must be set together")

    @property
    def device_position(self) -> Optional[tuple[float, float]]:
        if self.latitude is None:
            return None
        return self.latitude, self.longitude

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def _to_float(name: str, value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be a number, got {value!r}")


def load_config_file(config_path: str | Path) -> dict:
    """Load the YAML configuration file. A missing file yields an empty dict."""
    path = Path(config_path)
    if not path.exists():
        return {}

    with open(path) as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return config


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Build Settings from .env, the YAML file and the environment.

    Environment variables win over the file.
    """
    load_dotenv()

    if config_path is None:
        config_path = os.environ.get("ORGANOAI_CONFIG", DEFAULT_CONFIG_PATH)
    data = load_config_file(config_path)

    for name, env_var in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data[name] = value

    return Settings.from_dict(data)
