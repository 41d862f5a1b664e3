"""Configuration loading for the conversation client.

This module handles layered configuration:
1. Explicit path argument (highest precedence)
2. Environment variable AGENCY_CONFIG
3. Fallback to "config/default.yaml"

It also supports optional overrides from environment variables with prefix
``AGENCY__`` (e.g., AGENCY__LLM__API_ENDPOINT=http://host:8080/v1/chat/completions).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/default.yaml"
DEFAULT_API_ENDPOINT = "http://localhost:11434/v1/chat/completions"
DEFAULT_MODEL = "llama3"


def _coerce(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides with prefix AGENCY__."""
    prefix = "AGENCY__"
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        # e.g., AGENCY__LLM__API_ENDPOINT -> cfg["llm"]["api_endpoint"]
        parts = key[len(prefix):].lower().split("__")
        sub = cfg
        for p in parts[:-1]:
            if p not in sub or not isinstance(sub[p], dict):
                sub[p] = {}
            sub = sub[p]
        # URLs contain dots but are never numbers
        sub[parts[-1]] = value if "://" in value else _coerce(value)
    return cfg


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Load YAML configuration.

    Parameters
    ----------
    path : str | Path | None
        Optional path to a configuration file. If not provided, the
        environment variable ``AGENCY_CONFIG`` is consulted. As a
        last resort ``config/default.yaml`` is used.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration dictionary with environment overrides applied.
    """
    if path is None:
        path = os.environ.get("AGENCY_CONFIG", DEFAULT_CONFIG_PATH)

    path_obj = Path(path)
    if not path_obj.exists():
        logger.warning("Config file not found at %s. Using defaults.", path_obj)
        cfg: Dict[str, Any] = {"llm": {"api_endpoint": DEFAULT_API_ENDPOINT}}
        return _apply_env_overrides(cfg)

    with path_obj.open("r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file {path_obj}: {e}") from e

    if not isinstance(cfg, dict):
        raise ConfigError(f"Invalid config format in {path_obj}, expected dict.")

    return _apply_env_overrides(cfg)


@dataclass
class ClientConfig:
    api_endpoint: str = DEFAULT_API_ENDPOINT
    model: str = DEFAULT_MODEL
    extraction: str = "scan"
    timeout: Optional[float] = None

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]], section: str = "llm") -> "ClientConfig":
        """Build from the ``section`` mapping of a loaded config dict."""
        sec = (cfg or {}).get(section, {}) if isinstance(cfg, dict) else {}
        if not isinstance(sec, dict):
            sec = {}
        timeout = sec.get("timeout")
        return cls(
            api_endpoint=str(sec.get("api_endpoint") or DEFAULT_API_ENDPOINT),
            model=str(sec.get("model") or DEFAULT_MODEL),
            extraction=str(sec.get("extraction") or "scan"),
            timeout=None if timeout is None else float(timeout),
        )
