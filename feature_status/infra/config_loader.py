from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from feature_status.errors import STAGE_CONFIGURATION, ConfigurationError
from feature_status.infra.logging_config import get_logger

logger = get_logger(__name__)


# =========================
# CONFIG MODELS
# =========================


class UpstreamConfig(BaseModel):
    """Where the upstream feature set source is fetched from."""

    url_template: str = (
        "https://raw.githubusercontent.com/anza-xyz/agave/refs/tags/"
        "v{version}/sdk/src/feature_set.rs"
    )
    timeout_s: float = Field(30.0, gt=0)
    client_name: str = "agave"


class SolanaConfig(BaseModel):
    binary: str = "solana"
    data_dir: Path = Path("dir")


ARTIFACT_FILENAME = "emit.rs.txt"


class OutputConfig(BaseModel):
    # None: <solana.data_dir>/emit.rs.txt
    path: Optional[Path] = None
    static_name: str = "AGAVE_FEATURES"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"


class AppConfig(BaseModel):
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    solana: SolanaConfig = Field(default_factory=SolanaConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def artifact_path(self) -> Path:
        if self.output.path is not None:
            return self.output.path
        return self.solana.data_dir / ARTIFACT_FILENAME


# =========================
# LOADER
# =========================

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "default.yml"

_APP_CONFIG: Optional[AppConfig] = None

# env var -> (section, key)
_ENV_OVERRIDES = {
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
    "FEATURE_STATUS_DATA_DIR": ("solana", "data_dir"),
    "FEATURE_STATUS_SOLANA_BIN": ("solana", "binary"),
    "FEATURE_STATUS_OUTPUT": ("output", "path"),
    "FEATURE_STATUS_UPSTREAM_URL": ("upstream", "url_template"),
}


def _read_raw_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(
            "Config file not found, using defaults",
            extra={"extra_data": {"config_path": str(path)}},
        )
        return {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"unable to read config: {exc}", subject=str(path), stage=STAGE_CONFIGURATION
        ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            "config root is not a mapping", subject=str(path), stage=STAGE_CONFIGURATION
        )
    return data


def _override_with_env(raw: Dict[str, Any]) -> Dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(var)
        if value:
            section_data = raw.setdefault(section, {})
            if not isinstance(section_data, dict):
                raise ConfigurationError(
                    f"config section {section!r} is not a mapping", stage=STAGE_CONFIGURATION
                )
            section_data[key] = value
    return raw


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load YAML config, apply environment overrides, validate with pydantic.

    - Missing file: defaults.
    - Unreadable or invalid file: ConfigurationError.
    - Cached for the process unless an explicit path is given.
    """
    global _APP_CONFIG

    if _APP_CONFIG is not None and path is None:
        return _APP_CONFIG

    load_dotenv(find_dotenv(usecwd=True))

    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    raw = _override_with_env(_read_raw_yaml(config_path))

    try:
        app_config = AppConfig(**raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"invalid config: {exc}", subject=str(config_path), stage=STAGE_CONFIGURATION
        ) from exc

    if path is None:
        _APP_CONFIG = app_config

    logger.debug(
        "Config loaded",
        extra={"extra_data": {"config_path": str(config_path)}},
    )
    return app_config


def reset_config_cache() -> None:
    global _APP_CONFIG
    _APP_CONFIG = None
