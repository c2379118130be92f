from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .lib.identity import Identity
from .manifest import Manifest


@dataclass(frozen=True)
class StepCtx:
    """Everything a step needs, resolved once from the run state."""

    identity: Identity
    manifest: Manifest
    source_dir: Path
    backup_dir: Path
    build_root: Path
    dry_run: bool

    @property
    def config_home(self) -> Path:
        return self.identity.config_home

    @property
    def fonts_home(self) -> Path:
        return self.identity.home_path / ".local" / "share" / "fonts"

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "StepCtx":
        cfg = state.get("config") or {}
        paths = (state.get("execution") or {}).get("paths") or {}
        identity = state.get("identity")
        if not identity:
            raise RuntimeError("identity missing from state")
        if not paths.get("source_dir") or not paths.get("backup_dir"):
            raise RuntimeError("execution.paths not resolved")

        return cls(
            identity=Identity.from_dict(identity),
            manifest=Manifest(raw=state.get("manifest") or {}),
            source_dir=Path(paths["source_dir"]),
            backup_dir=Path(paths["backup_dir"]),
            build_root=Path(cfg.get("build_root") or "/tmp"),
            dry_run=bool(cfg.get("dry_run", False)),
        )
