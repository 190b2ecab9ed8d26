from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from crowdhandler_sdk.agent_lang import DEFAULT_AGENT, DEFAULT_LANG
from crowdhandler_sdk.session import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from crowdhandler_sdk.waiting_room import DEFAULT_WAITING_ROOM_MODE

API_KEY_ENV_VAR = "CROWDHANDLER_API_KEY"
BASE_URL_ENV_VAR = "CROWDHANDLER_BASE_URL"


@dataclass
class RuntimeEnv:
    api_key: str
    api_key_env_var: str
    base_url: str | None


@dataclass
class SdkConfig:
    base_url: str
    timeout_seconds: float
    agent: str
    lang: str
    waiting_room_mode: str
    serialize_requests: bool
    log_level: str
    log_consumers: list | None


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def _to_bool(value: object, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def parse_sdk_config(config: dict) -> SdkConfig:
    timeout_seconds = float(config.get("TimeoutSeconds", DEFAULT_TIMEOUT_SECONDS))
    if timeout_seconds <= 0:
        raise ValueError(f"TimeoutSeconds must be positive, got {timeout_seconds}")
    return SdkConfig(
        base_url=str(config.get("BaseUrl", DEFAULT_BASE_URL)).strip() or DEFAULT_BASE_URL,
        timeout_seconds=timeout_seconds,
        agent=str(config.get("Agent", "")).strip() or DEFAULT_AGENT,
        lang=str(config.get("Lang", "")).strip() or DEFAULT_LANG,
        waiting_room_mode=str(config.get("WaitingRoomMode", DEFAULT_WAITING_ROOM_MODE)),
        serialize_requests=_to_bool(config.get("SerializeRequests", False), default=False),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env() -> RuntimeEnv:
    return RuntimeEnv(
        api_key=os.environ.get(API_KEY_ENV_VAR, ""),
        api_key_env_var=API_KEY_ENV_VAR,
        base_url=os.environ.get(BASE_URL_ENV_VAR) or None,
    )
