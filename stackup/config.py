"""
Runtime settings, read from STACKUP_* environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional


TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    home: Path
    readiness_url: str = "http://localhost:80/"
    readiness_attempts: int = 30
    readiness_interval: float = 5.0
    readiness_timeout: float = 10.0
    compose_cmd: str = "docker compose"
    teardown_on_timeout: bool = False
    allow_any_source: bool = False

    @property
    def compose_argv(self) -> List[str]:
        return self.compose_cmd.split()


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in TRUTHY


def get_stackup_home(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the directory that holds per-request checkouts.

    Returns:
        Path: Stackup home directory
    """
    env = os.environ if env is None else env
    return Path(env.get("STACKUP_HOME", ".stackup")).resolve()


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ValueError: If a numeric variable is malformed
    """
    env = os.environ if env is None else env
    return Settings(
        home=get_stackup_home(env),
        readiness_url=env.get("STACKUP_READINESS_URL") or "http://localhost:80/",
        readiness_attempts=_get_int(env, "STACKUP_READINESS_ATTEMPTS", 30),
        readiness_interval=_get_float(env, "STACKUP_READINESS_INTERVAL", 5.0),
        readiness_timeout=_get_float(env, "STACKUP_READINESS_TIMEOUT", 10.0),
        compose_cmd=env.get("STACKUP_COMPOSE_CMD") or "docker compose",
        teardown_on_timeout=_get_bool(env, "STACKUP_TEARDOWN_ON_TIMEOUT", False),
        allow_any_source=_get_bool(env, "STACKUP_ALLOW_ANY_SOURCE", False),
    )
