from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .manifest import DEFAULT_PROFILE

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

    data: Any
    if _detect_format(p) in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(state, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with sane defaults (without overriding user values)."""

    state.setdefault("version", 1)
    state.setdefault("config", {})
    state.setdefault("execution", {})

    cfg = state["config"]
    cfg.setdefault("profile", DEFAULT_PROFILE)
    cfg.setdefault("manifest", None)
    # None means: the repository checkout this installer ships in.
    cfg.setdefault("source_dir", None)
    # None means: <home>/.config/config.bak of the invoking user.
    cfg.setdefault("backup_dir", None)
    cfg.setdefault("build_root", "/tmp")
    cfg.setdefault("dry_run", False)

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("decisions", {})
    exe.setdefault("plan", {})
    exe.setdefault("warnings", [])
    exe.setdefault("errors", [])

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


def record_plan(state: Dict[str, Any], step_id: str, plan: Dict[str, Any]) -> None:
    state.setdefault("execution", {}).setdefault("plan", {})[step_id] = plan


def add_warning(state: Dict[str, Any], step_id: str, message: str) -> None:
    """Record a recoverable problem. The run carries on."""

    logger.warning("%s", message)
    state.setdefault("execution", {}).setdefault("warnings", []).append({"step": step_id, "message": message})
