import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, cast

import yaml
from dotenv import dotenv_values

from .exceptions import PermanentError

logger = logging.getLogger("docpager.core.config")

CONFIG_FILENAME = "docpager.yml"
DEFAULT_MAX_PAGE_SIZE = 20000
DEFAULT_MESSAGE_TYPE = "m.notice"
DEFAULT_ACCESS_TOKEN_ENV = "DOCPAGER_MATRIX_ACCESS_TOKEN"
MESSAGE_TYPES = {"m.notice", "m.text"}

ENV_MAX_PAGE_SIZE = "DOCPAGER_MAX_PAGE_SIZE"
ENV_HOMESERVER = "DOCPAGER_MATRIX_HOMESERVER"

DEFAULT_CONFIG: Dict[str, Any] = {
    "render": {
        "max_page_size": DEFAULT_MAX_PAGE_SIZE,
        "message_type": DEFAULT_MESSAGE_TYPE,
    },
    "matrix": {
        "homeserver_url": None,
        "access_token_env": DEFAULT_ACCESS_TOKEN_ENV,
        "timeout_seconds": 10.0,
    },
}


class ConfigError(PermanentError):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class RenderConfig:
    max_page_size: int
    message_type: str = DEFAULT_MESSAGE_TYPE


@dataclass(frozen=True)
class MatrixConfig:
    homeserver_url: Optional[str]
    access_token_env: str
    access_token: Optional[str]
    timeout_seconds: float


@dataclass(frozen=True)
class DocpagerConfig:
    root: Path
    render: RenderConfig
    matrix: MatrixConfig
    raw: Dict[str, Any]


def _merge_defaults(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = cast(Dict[str, Any], json.loads(json.dumps(base)))
    for key, value in overrides.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def _load_env(root: Path) -> Dict[str, str]:
    """Process environment layered over ``<root>/.env`` (process env wins)."""
    values: Dict[str, str] = {}
    candidate = root / ".env"
    if candidate.exists():
        try:
            for key, value in dotenv_values(candidate).items():
                if value is not None:
                    values[key] = value
        except OSError as exc:
            logger.debug("Failed to load .env file: %s", exc)
    values.update(os.environ)
    return values


def parse_max_page_size(value: Any, *, source: str = "render.max_page_size") -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{source} must be an integer")
    try:
        size = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{source} must be an integer, got {value!r}") from exc
    if size <= 0:
        raise ConfigError(f"{source} must be positive, got {size}")
    return size


def _apply_env_overrides(cfg: Dict[str, Any], env: Mapping[str, str]) -> None:
    for section in ("render", "matrix"):
        if not isinstance(cfg.get(section), dict):
            raise ConfigError(f"{section} section must be a mapping")
    raw_size = env.get(ENV_MAX_PAGE_SIZE)
    if raw_size is not None and raw_size.strip():
        cfg["render"]["max_page_size"] = parse_max_page_size(
            raw_size.strip(), source=ENV_MAX_PAGE_SIZE
        )
    homeserver = env.get(ENV_HOMESERVER)
    if homeserver is not None and homeserver.strip():
        cfg["matrix"]["homeserver_url"] = homeserver.strip()


def _build_render_config(cfg: Dict[str, Any]) -> RenderConfig:
    render_cfg = cfg.get("render")
    if not isinstance(render_cfg, dict):
        raise ConfigError("render section must be a mapping")
    message_type = str(render_cfg.get("message_type") or DEFAULT_MESSAGE_TYPE)
    if message_type not in MESSAGE_TYPES:
        raise ConfigError(
            f"render.message_type must be one of {sorted(MESSAGE_TYPES)}, "
            f"got {message_type!r}"
        )
    return RenderConfig(
        max_page_size=parse_max_page_size(render_cfg.get("max_page_size")),
        message_type=message_type,
    )


def _build_matrix_config(cfg: Dict[str, Any], env: Mapping[str, str]) -> MatrixConfig:
    matrix_cfg = cfg.get("matrix")
    if not isinstance(matrix_cfg, dict):
        raise ConfigError("matrix section must be a mapping")
    homeserver = matrix_cfg.get("homeserver_url")
    if homeserver is not None and not isinstance(homeserver, str):
        raise ConfigError("matrix.homeserver_url must be a string")
    token_env = str(matrix_cfg.get("access_token_env") or DEFAULT_ACCESS_TOKEN_ENV)
    token = env.get(token_env)
    try:
        timeout = float(matrix_cfg.get("timeout_seconds", 10.0))
    except (TypeError, ValueError) as exc:
        raise ConfigError("matrix.timeout_seconds must be a number") from exc
    if timeout <= 0:
        raise ConfigError("matrix.timeout_seconds must be positive")
    return MatrixConfig(
        homeserver_url=homeserver.rstrip("/") if homeserver else None,
        access_token_env=token_env,
        access_token=token.strip() if token and token.strip() else None,
        timeout_seconds=timeout,
    )


def load_config(
    root: Optional[Path] = None, *, path: Optional[Path] = None
) -> DocpagerConfig:
    """Load ``docpager.yml`` from ``root`` (or ``path``) merged over defaults.

    Environment variables, including those from a ``.env`` beside the config,
    override file values.
    """
    if path is not None:
        config_path = path
        root = path.parent
    else:
        root = root or Path.cwd()
        config_path = root / CONFIG_FILENAME
    if path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    overrides = _load_yaml_dict(config_path)
    cfg = _merge_defaults(DEFAULT_CONFIG, overrides)
    env = _load_env(root)
    _apply_env_overrides(cfg, env)
    return DocpagerConfig(
        root=root.resolve(),
        render=_build_render_config(cfg),
        matrix=_build_matrix_config(cfg, env),
        raw=cfg,
    )
