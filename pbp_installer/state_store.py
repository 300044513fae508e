from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .install_config import DEFAULT_CONFIG, SECRET_KEYS

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    fmt = _detect_format(p)
    data: Dict[str, Any]

    if fmt in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def _persistable(state: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(state)
    cfg = out.get("config") or {}
    for key in SECRET_KEYS:
        cfg.pop(key, None)
    out.setdefault("execution", {})["secrets_withheld"] = sorted(SECRET_KEYS)
    return out


def save_state(path: str, state: Dict[str, Any]) -> None:
    """Write state to disk. Passwords never leave memory."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    data = _persistable(state)
    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(data, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with defaults (without overriding user values)."""

    state.setdefault("version", "1.0")
    state.setdefault("config", {})
    state.setdefault("execution", {})

    # Passwords withheld by an earlier save must be supplied by the config again.
    withheld = set((state["execution"] or {}).get("secrets_withheld") or [])

    cfg = state["config"]
    for key, value in DEFAULT_CONFIG.items():
        if key in withheld:
            continue
        cfg.setdefault(key, copy.deepcopy(value))

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("errors", [])
    exe.setdefault("mounts", {})
    exe.setdefault("decisions", {})

    return state


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    exe = state.setdefault("execution", {})
    completed = exe.setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def is_step_completed(state: Dict[str, Any], step_id: str) -> bool:
    exe = state.get("execution") or {}
    completed = exe.get("completed_steps") or []
    return step_id in completed
