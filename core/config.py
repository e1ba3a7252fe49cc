"""Configuration models and loading."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "backend-api-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"
BASE_URL_ENV = "API_BASE_URL"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000
    mount_prefix: str = "/api"
    debug: bool = True


class BackendSettings(BaseModel):
    base_url: str = ""
    # Seconds; None leaves the outbound call without a timeout.
    timeout: float | None = None


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)

    def require_backend(self) -> str:
        """Return the backend base URL or raise if it is not set."""
        if not self.backend.base_url:
            raise ConfigurationError(
                f"Backend base URL not configured (set backend.base_url or {BASE_URL_ENV})"
            )
        return self.backend.base_url


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    config = _read_config_file(config_file)
    base_url = os.environ.get(BASE_URL_ENV)
    if base_url:
        config.backend.base_url = base_url
    return config


def _read_config_file(config_file: Path) -> Config:
    if not config_file.exists():
        return _write_default(config_file)

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        return _write_default(config_file)


def _write_default(config_file: Path) -> Config:
    config_file.parent.mkdir(parents=True, exist_ok=True)
    default = Config()
    config_file.write_text(default.model_dump_json(indent=2))
    return default
