# src/config.py

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from errors import ConfigBuildError
from models import TailerConfig

logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {'1', 'true', 'yes', 'on'}


def _parse_number(value: Any, label: str, default, cast=int):
    if value is None:
        return default
    text = str(value).strip()
    if not text:
        return default
    try:
        return cast(text)
    except ValueError as exc:
        raise ConfigBuildError(f"{label} must be a number: {exc}") from exc


def _resolve_optional_path(path_value: Optional[Any]) -> Optional[Path]:
    if not path_value:
        return None
    return Path(str(path_value)).expanduser().resolve()


def build_config(raw: Dict[str, Any]) -> TailerConfig:
    """Build and validate a TailerConfig from raw YAML or CLI inputs."""

    try:
        logger.debug("Starting TailerConfig build with raw inputs: %s", raw)

        cfg = TailerConfig(
            path=_resolve_optional_path(raw.get('path')),
            poll_interval_ms=_parse_number(
                raw.get('poll_interval_ms'), 'Poll interval', 1000
            ),
            max_duration_hours=_parse_number(
                raw.get('max_duration_hours'), 'Max duration', 0, cast=float
            ),
            from_end=_parse_bool(raw.get('from_end')),
            buffer_size=_parse_number(raw.get('buffer_size'), 'Buffer size', 500),
            log_file=_resolve_optional_path(raw.get('log_file')),
            log_level=(str(raw.get('log_level') or 'INFO')).strip().upper() or 'INFO',
        )
        cfg.validate()
        logger.info("Successfully built TailerConfig: %s", cfg)
        return cfg

    except Exception as e:
        logger.exception("Failed to build TailerConfig")
        if isinstance(e, ConfigBuildError):
            raise
        raise ConfigBuildError(str(e), underlying=e)


def load_config(config_path: Path, overrides: Optional[Dict[str, Any]] = None) -> TailerConfig:
    """
    Read a YAML mapping from disk and build a TailerConfig from it.
    Non-None entries in `overrides` win over values from the file.
    """
    config_path = Path(config_path)
    try:
        data = yaml.safe_load(config_path.read_text(encoding='utf-8')) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Could not read config file %s: %s", config_path, exc)
        raise ConfigBuildError(f"Could not read config file {config_path}", underlying=exc)

    if not isinstance(data, dict):
        raise ConfigBuildError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        )

    raw = dict(data)
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value
    return build_config(raw)
