"""
Memory adapter configuration.

The plugin config arrives as a loosely-typed record (camelCase keys, values of
any type). `parse_memory_config` maps it onto the fully-typed `MemorySettings`;
every field has an explicit default and malformed values fall back to it.

Environment variables read by `load_settings`:
- MEMORY_PLUGIN_CONFIG: JSON object with any of the camelCase keys below.
- HINDSIGHT_BASE_URL / HINDSIGHT_BANK_ID / HINDSIGHT_NAMESPACE / HINDSIGHT_BANK_MISSION
- MEMORY_AUTO_RECALL / MEMORY_AUTO_CAPTURE ("0", "false", "off", "no" disable)
- MEMORY_RECALL_LIMIT / MEMORY_CAPTURE_MAX_MESSAGES
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8888"
DEFAULT_BANK_ID = "openclaw"
DEFAULT_NAMESPACE = "default"
DEFAULT_BANK_MISSION = "Personal AI assistant memory bank."
DEFAULT_RECALL_LIMIT = 5
DEFAULT_CAPTURE_MAX_MESSAGES = 10

_FALSE_STRINGS = {"0", "false", "off", "no"}

# env var -> camelCase config key
_ENV_KEYS = {
    "HINDSIGHT_BASE_URL": "baseUrl",
    "HINDSIGHT_BANK_ID": "bankId",
    "HINDSIGHT_NAMESPACE": "namespace",
    "HINDSIGHT_BANK_MISSION": "bankMission",
    "MEMORY_AUTO_RECALL": "autoRecall",
    "MEMORY_AUTO_CAPTURE": "autoCapture",
    "MEMORY_RECALL_LIMIT": "recallLimit",
    "MEMORY_CAPTURE_MAX_MESSAGES": "captureMaxMessages",
}


@dataclass(frozen=True)
class MemorySettings:
    """
    Memory plugin settings, immutable once parsed.

    Fields:
    - base_url: Hindsight API root, without trailing slash.
    - bank_id: Memory bank used for every operation.
    - namespace: Hindsight namespace the bank lives in.
    - auto_recall: Inject relevant memories before each agent turn.
    - auto_capture: Retain conversation text after each successful turn.
    - recall_limit: Max memories injected per turn (and default search size).
    - capture_max_messages: Trailing window of turns considered for capture.
    - bank_mission: Best-effort mission text sent when the bank is ensured.
    """

    base_url: str = DEFAULT_BASE_URL
    bank_id: str = DEFAULT_BANK_ID
    namespace: str = DEFAULT_NAMESPACE
    auto_recall: bool = True
    auto_capture: bool = True
    recall_limit: int = DEFAULT_RECALL_LIMIT
    capture_max_messages: int = DEFAULT_CAPTURE_MAX_MESSAGES
    bank_mission: str = DEFAULT_BANK_MISSION


def _string(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    return default


def parse_memory_config(raw: Optional[Mapping[str, Any]]) -> MemorySettings:
    """Map an untyped plugin config record onto `MemorySettings`.

    Never raises: anything that is not a mapping is treated as empty, and each
    field that is missing or malformed takes its default.
    """

    cfg: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    return MemorySettings(
        base_url=_string(cfg.get("baseUrl"), DEFAULT_BASE_URL).rstrip("/"),
        bank_id=_string(cfg.get("bankId"), DEFAULT_BANK_ID),
        namespace=_string(cfg.get("namespace"), DEFAULT_NAMESPACE),
        auto_recall=cfg.get("autoRecall") is not False,
        auto_capture=cfg.get("autoCapture") is not False,
        recall_limit=_positive_int(cfg.get("recallLimit"), DEFAULT_RECALL_LIMIT),
        capture_max_messages=_positive_int(
            cfg.get("captureMaxMessages"), DEFAULT_CAPTURE_MAX_MESSAGES
        ),
        bank_mission=_string(cfg.get("bankMission"), DEFAULT_BANK_MISSION),
    )


def _coerce_env_value(key: str, value: str) -> Any:
    if key in {"autoRecall", "autoCapture"}:
        return value.strip().lower() not in _FALSE_STRINGS
    if key in {"recallLimit", "captureMaxMessages"}:
        try:
            return int(value)
        except ValueError:
            return value
    return value


def _load_raw_from_env() -> dict[str, Any]:
    raw: dict[str, Any] = {}
    blob = os.getenv("MEMORY_PLUGIN_CONFIG")
    if blob:
        try:
            decoded = json.loads(blob)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring malformed MEMORY_PLUGIN_CONFIG: %s", exc)
        else:
            if isinstance(decoded, dict):
                raw.update(decoded)
            else:
                logger.warning("Ignoring MEMORY_PLUGIN_CONFIG: expected a JSON object")

    for env_name, key in _ENV_KEYS.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            raw[key] = _coerce_env_value(key, value)
    return raw


_settings: Optional[MemorySettings] = None


def load_settings() -> MemorySettings:
    """Load memory settings from environment variables (and .env, if present)."""

    load_dotenv(dotenv_path=".env", override=False)
    return parse_memory_config(_load_raw_from_env())


def get_memory_settings() -> MemorySettings:
    """Lazy singleton accessor."""

    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
