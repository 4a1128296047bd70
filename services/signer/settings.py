"""
Service configuration.

Values come from an optional YAML file (SIGNER_CONFIG_PATH, default
/config/signer.yaml) overlaid by environment variables; a missing file just
means defaults.  Environment variables (all have sane defaults for local dev):

  SIGNER_SCHEME             ed25519          ed25519 | ml-dsa-65 | dilithium3
  SIGNER_CORS_ORIGINS       http://localhost:5173   (comma-separated)
  SIGNER_MAX_MESSAGE_BYTES  1048576
  SIGNER_HOST               0.0.0.0
  SIGNER_PORT               8080
  SIGNER_LOG_LEVEL          INFO
  SIGNER_CONFIG_PATH        /config/signer.yaml
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/config/signer.yaml"


@dataclass
class Settings:
    scheme:            str       = "ed25519"
    cors_origins:      list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    max_message_bytes: int       = 1_048_576
    host:              str       = "0.0.0.0"
    port:              int       = 8080
    log_level:         str       = "INFO"


def load_config(path: str) -> dict:
    try:
        with open(path) as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def _split_origins(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        return [o.strip() for o in value.split(",") if o.strip()]
    return [str(o) for o in value]


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    path = env.get("SIGNER_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    cfg = load_config(path)
    if cfg:
        log.info("Loaded signer config from %s", path)

    settings = Settings()
    settings.scheme            = env.get("SIGNER_SCHEME", cfg.get("scheme", settings.scheme))
    settings.cors_origins      = _split_origins(env.get("SIGNER_CORS_ORIGINS", cfg.get("cors_origins", settings.cors_origins)))
    settings.max_message_bytes = int(env.get("SIGNER_MAX_MESSAGE_BYTES", cfg.get("max_message_bytes", settings.max_message_bytes)))
    settings.host              = env.get("SIGNER_HOST", cfg.get("host", settings.host))
    settings.port              = int(env.get("SIGNER_PORT", cfg.get("port", settings.port)))
    settings.log_level         = env.get("SIGNER_LOG_LEVEL", cfg.get("log_level", settings.log_level)).upper()
    return settings
