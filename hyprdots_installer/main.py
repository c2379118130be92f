from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import InstallerError
from .lib.identity import Identity, resolve_identity
from .logging_utils import LOG_FILENAME, configure_logging, success
from .manifest import load_manifest, manifest_path
from .pipeline import run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    BackupConfigsStep,
    CleanupStep,
    InstallAurHelperStep,
    InstallAurPackagesStep,
    InstallFontsStep,
    InstallPackagesStep,
    LinkConfigsStep,
    SetWallpaperStep,
    UpdateSystemStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "/var/lib/hyprdots-installer/state.json"


def repo_root() -> Path:
    # hyprdots_installer/main.py -> hyprdots_installer -> repo root (the dotfiles checkout)
    return Path(__file__).resolve().parents[1]


def build_steps():
    return [
        UpdateSystemStep(),
        InstallPackagesStep(),
        InstallAurHelperStep(),
        InstallAurPackagesStep(),
        BackupConfigsStep(),
        LinkConfigsStep(),
        InstallFontsStep(),
        SetWallpaperStep(),
        CleanupStep(),
    ]


def run(
    *,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    identity: Optional[Identity] = None,
) -> Dict[str, Any]:
    """Run the installer pipeline, persisting state for resume.

    Preconditions (privileges, invoking user, manifest) are checked before
    anything is written. A dry run writes nothing but the log.
    """

    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    dry_run = bool(overrides.get("dry_run", False))

    if identity is None:
        identity = resolve_identity(require_root=not dry_run)

    state = ensure_defaults(load_state(state_path))
    cfg = state["config"]
    cfg.update(overrides)
    dry_run = bool(cfg.get("dry_run", False))

    source_dir = Path(cfg.get("source_dir") or repo_root()).expanduser().resolve()
    backup_dir = Path(cfg.get("backup_dir") or identity.config_home / "config.bak").expanduser()
    manifest_file = Path(cfg.get("manifest") or manifest_path(str(source_dir), str(cfg["profile"])))
    manifest = load_manifest(manifest_file)

    actual_log_path = configure_logging(log_path=log_path or str(source_dir / LOG_FILENAME))
    logger.info("Starting Hyprland dotfiles install (profile=%s dry_run=%s)", cfg["profile"], dry_run)
    logger.info("Log: %s", actual_log_path)

    state["identity"] = identity.to_dict()
    # Warnings, errors and plan describe this run only.
    state["execution"]["warnings"] = []
    state["execution"]["errors"] = []
    state["execution"]["plan"] = {}
    state["manifest"] = manifest.raw
    paths = state["execution"].setdefault("paths", {})
    paths.update(
        {
            "source_dir": str(source_dir),
            "backup_dir": str(backup_dir),
            "manifest": str(manifest_file),
            "log_path": actual_log_path,
        }
    )

    try:
        result = run_pipeline(
            state=state,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            force=force,
            dry_run=dry_run,
        )
        state = result.state
        summary = state["execution"].setdefault("summary", {})
        summary["ran_steps"] = result.ran_steps
        summary["skipped_steps"] = result.skipped_steps
        if result.finished and not dry_run:
            # Resume only matters after a failure; a clean finish starts the next run from scratch.
            state["execution"]["completed_steps"] = []
            state["execution"]["last_success"] = datetime.now(timezone.utc).isoformat()
        return state
    except Exception as e:
        if isinstance(e, InstallerError):
            logger.error("Installer failed in %s", state["execution"].get("current_step"))
        else:
            logger.exception("Installer failed")
        state["execution"]["errors"].append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if not dry_run:
            save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="hyprdots-installer", description="Provision a Hyprland desktop from this dotfiles checkout.")
    p.add_argument("--profile", default=None, help="Manifest under manifests/ (thinkpad|desktop|minimal)")
    p.add_argument("--manifest", default=None, help="Explicit manifest path (overrides --profile)")
    p.add_argument("--source-dir", default=None, help="Dotfiles checkout holding config dirs and fonts")
    p.add_argument("--backup-dir", default=None, help="Where existing configs are copied (default ~/.config/config.bak)")
    p.add_argument("--build-root", default=None, help="Scratch dir for AUR helper builds (default /tmp)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=None, help="Path to run log (default <source-dir>/install_script.log)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_backup_configs)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Plan and log, change nothing")

    args = p.parse_args(argv)

    try:
        state = run(
            state_path=args.state,
            log_path=args.log,
            overrides={
                "profile": args.profile,
                "manifest": args.manifest,
                "source_dir": args.source_dir,
                "backup_dir": args.backup_dir,
                "build_root": args.build_root,
                "dry_run": True if args.dry_run else None,
            },
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=args.force,
        )
    except (InstallerError, ValueError) as e:
        logger.error("%s", e)
        return 1

    warnings = state["execution"].get("warnings") or []
    for w in warnings:
        logger.warning("[%s] %s", w.get("step"), w.get("message"))
    success(logger, "Done! (%d warning(s))", len(warnings))
    logger.info("Reboot if you want life to improve")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
