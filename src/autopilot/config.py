"""Configuration loading utilities for autopilot."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

_DEFAULT_CONFIG_PATH = Path("config/autopilot.json")

DEFAULT_FALLBACK_MESSAGE = (
    "Oh no. Something's gone wrong. I've tried to roll back but you should "
    "check to see if everything is OK."
)


@dataclass
class CFConfig:
    """Settings for talking to the platform through the `cf` CLI."""

    binary: str = "cf"
    home: Optional[str] = None            # CF_HOME; defaults to the user's home directory
    route_domain: Optional[str] = None    # resolved from the app's routes when unset
    command_timeout: Optional[int] = None  # seconds per cf invocation, None waits forever

    def cf_config_path(self) -> Path:
        base = Path(self.home) if self.home else Path.home()
        return base / ".cf" / "config.json"


@dataclass
class MessagesConfig:
    """User-facing messages printed at the end of a workflow."""

    fallback_message: str = DEFAULT_FALLBACK_MESSAGE
    push_success: str = "A new version of your application has successfully been pushed!"
    rollback_success: str = "Your application has been successfully rolled back!"


@dataclass
class AppConfig:
    """Top-level configuration."""

    cf: CFConfig = field(default_factory=CFConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppConfig":
        cf_payload = payload.get("cf", {}) or {}
        messages_payload = payload.get("messages", {}) or {}

        # 过滤掉以下划线开头的注释字段
        cf_payload = {k: v for k, v in cf_payload.items() if not k.startswith("_")}
        messages_payload = {k: v for k, v in messages_payload.items() if not k.startswith("_")}

        return cls(
            cf=CFConfig(**{**CFConfig().__dict__, **cf_payload}),
            messages=MessagesConfig(**{**MessagesConfig().__dict__, **messages_payload}),
        )


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    env_binary = os.getenv("AUTOPILOT_CF_BINARY")
    if env_binary:
        config.cf.binary = env_binary

    # AUTOPILOT_CF_HOME always wins; CF_HOME only fills an unset value
    env_home = os.getenv("AUTOPILOT_CF_HOME")
    if env_home:
        config.cf.home = env_home
    elif not config.cf.home and os.getenv("CF_HOME"):
        config.cf.home = os.getenv("CF_HOME")

    env_domain = os.getenv("AUTOPILOT_ROUTE_DOMAIN")
    if env_domain:
        config.cf.route_domain = env_domain

    env_timeout = os.getenv("AUTOPILOT_COMMAND_TIMEOUT")
    if env_timeout:
        config.cf.command_timeout = int(env_timeout)

    return config


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from `path` or the default location.

    Environment variables (higher priority than config file):
    - AUTOPILOT_CF_BINARY: cf executable to invoke
    - AUTOPILOT_CF_HOME (or CF_HOME): directory holding `.cf/config.json`
    - AUTOPILOT_ROUTE_DOMAIN: domain used for route lookups
    - AUTOPILOT_COMMAND_TIMEOUT: per-command timeout in seconds

    An explicit `path` that does not exist is an error; without one, the
    defaults are used when no config file is present.
    """

    if path:
        candidate = Path(path)
        if not candidate.is_file():
            raise FileNotFoundError(f"Could not find configuration file: {candidate}")
    else:
        candidate = _DEFAULT_CONFIG_PATH

    if candidate.is_file():
        with candidate.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        config = AppConfig.from_dict(data)
    else:
        config = AppConfig()

    return _apply_env_overrides(config)
