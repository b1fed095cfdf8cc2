"""
Taskboard Configuration — Load and validate taskboard.yaml at startup.

The backend host is resolved once here and injected into the client and
controllers; nothing else reads a hardcoded URL.

Usage:
    from taskboard.engine.config import load_config, get_config
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from taskboard.engine.errors import TaskboardConfigError

CONFIG_FILENAME = "taskboard.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for taskboard.yaml
# ---------------------------------------------------------------------------

class BackendConfig(BaseModel):
    base_url: str = "http://localhost:7071"
    api_prefix: str = "/api"
    timeout_seconds: float = 30.0
    organization_id: str = "demo-org"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip("/")
        return f"/{v}" if v else ""

    def endpoint_url(self, endpoint: str) -> str:
        """Absolute URL for a backend endpoint name, e.g. 'GetTasks'."""
        return f"{self.base_url}{self.api_prefix}/{endpoint}"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".taskboard/logs"
    log_payload: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{v}'")
        return v


class UIConfig(BaseModel):
    page_size: int = 5
    confirm_destructive: bool = True

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("page_size must be >= 1")
        return v


class TaskboardConfig(BaseModel):
    """Root model for taskboard.yaml."""
    name: str = "Taskboard"
    environment: str = "dev"

    backend: BackendConfig = BackendConfig()
    logging: LoggingConfig = LoggingConfig()
    ui: UIConfig = UIConfig()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_config: Optional[TaskboardConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for taskboard.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_config(config_path: Optional[str] = None) -> TaskboardConfig:
    """
    Load and validate taskboard.yaml.

    Args:
        config_path: Explicit path to taskboard.yaml. If None, auto-discovers.

    Returns:
        Validated TaskboardConfig instance (defaults when the file is absent).

    Raises:
        TaskboardConfigError if the file holds invalid values.
    """
    global _config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILENAME)

    path = Path(config_path)
    if not path.exists():
        _config = TaskboardConfig()
        return _config

    with open(path, "r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    # Allow the whole file to sit under a top-level "taskboard:" key
    data = raw.get("taskboard", raw)

    try:
        _config = TaskboardConfig(**data)
    except ValidationError as e:
        raise TaskboardConfigError(
            f"Invalid configuration in {path}",
            path=str(path),
            validation_errors=e.errors(include_url=False),
        ) from e
    return _config


def get_config() -> TaskboardConfig:
    """Get the currently loaded config, loading if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[TaskboardConfig]) -> None:
    """Install (or clear, with None) the process-wide config."""
    global _config
    _config = config
