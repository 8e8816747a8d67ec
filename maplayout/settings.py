"""Compiler settings: layered configuration and logging setup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from maplayout import config as defaults

logger = logging.getLogger(__name__)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "MAPLAYOUT_ENV": {"default": "development", "description": "Environment profile"},
    "MAPLAYOUT_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "MAPLAYOUT_STRICT_CYCLES": {"default": "true", "description": "Fail builds on circular references"},
    "MAPLAYOUT_SNAP_THRESHOLD": {
        "default": str(defaults.SNAP_THRESHOLD),
        "description": "Scanner snapping tolerance",
    },
    "MAPLAYOUT_CODE_PRECISION": {
        "default": str(defaults.CODE_PRECISION),
        "description": "Decimal digits in generated source",
    },
    "MAPLAYOUT_DEFAULT_SCALE": {"default": "1", "description": "Scale used when a definition has none"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "MAPLAYOUT_ENV": "development",
        "MAPLAYOUT_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "MAPLAYOUT_ENV": "production",
        "MAPLAYOUT_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "MAPLAYOUT_ENV": "testing",
        "MAPLAYOUT_LOG_LEVEL": "DEBUG",
        "MAPLAYOUT_STRICT_CYCLES": "true",
    },
}

_TRUE_VALUES = ("1", "true", "yes", "on")


class CompilerSettings(BaseModel):
    """Typed view over the merged configuration."""

    env: str = "development"
    log_level: str = "INFO"
    strict_cycles: bool = True
    snap_threshold: float = defaults.SNAP_THRESHOLD
    code_precision: int = defaults.CODE_PRECISION
    default_scale: str = "1"

    @classmethod
    def from_config(cls, config: dict[str, str]) -> CompilerSettings:
        return cls(
            env=config.get("MAPLAYOUT_ENV", "development"),
            log_level=config.get("MAPLAYOUT_LOG_LEVEL", "INFO").upper(),
            strict_cycles=config.get("MAPLAYOUT_STRICT_CYCLES", "true").strip().lower() in _TRUE_VALUES,
            snap_threshold=float(config.get("MAPLAYOUT_SNAP_THRESHOLD", defaults.SNAP_THRESHOLD)),
            code_precision=int(config.get("MAPLAYOUT_CODE_PRECISION", defaults.CODE_PRECISION)),
            default_scale=config.get("MAPLAYOUT_DEFAULT_SCALE", "1"),
        )


def generate_env_template(project_path: str | Path) -> Path:
    """Create .env.example with all config keys.

    Returns the path to the generated file.
    """
    env_path = Path(project_path) / ".env.example"

    lines = ["# MapLayout Configuration Template", "# Copy to .env and fill in values", ""]
    for key, info in _CONFIG_KEYS.items():
        lines.append(f"# {info['description']}")
        lines.append(f"{key}={info['default']}")
        lines.append("")

    env_path.write_text("\n".join(lines), encoding="utf-8")
    return env_path


def load_config(project_path: str | Path | None = None) -> dict[str, str]:
    """Load merged config: defaults -> profile -> config.json -> env vars."""
    config: dict[str, str] = {}

    # 1. Defaults
    for key, info in _CONFIG_KEYS.items():
        config[key] = str(info["default"])

    # 2. Profile overrides
    env_name = os.environ.get("MAPLAYOUT_ENV", config["MAPLAYOUT_ENV"])
    config.update(_PROFILES.get(env_name, {}))

    # 3. .maplayout/config.json
    if project_path is not None:
        config_json = Path(project_path) / ".maplayout" / "config.json"
        if config_json.is_file():
            try:
                data = json.loads(config_json.read_text(encoding="utf-8"))
                for k, v in data.items():
                    config[k] = str(v)
            except (json.JSONDecodeError, OSError):
                logger.warning("Could not read %s", config_json, exc_info=True)

    # 4. Environment variables override all
    for key in _CONFIG_KEYS:
        env_val = os.environ.get(key)
        if env_val is not None:
            config[key] = env_val

    return config


def load_settings(project_path: str | Path | None = None) -> CompilerSettings:
    return CompilerSettings.from_config(load_config(project_path))


def configure_logging(level: str | int = "INFO") -> None:
    """Install a basic handler on the ``maplayout`` logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger("maplayout")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
