from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .assets import chown_tree, remove_path
from .command import run_cmd
from .identity import Identity, user_cmd

logger = logging.getLogger(__name__)

AUR_BASE_URL = "https://aur.archlinux.org"


def pacman_upgrade(*, dry_run: bool = False) -> None:
    run_cmd(["pacman", "-Syu", "--noconfirm"], dry_run=dry_run, label="System upgrade failed")


def is_installed(package: str) -> bool:
    """Return True if the local package database already has package.

    Read-only, so it is queried for real even during dry runs.
    """
    r = run_cmd(["pacman", "-Qi", package], check=False)
    return r.returncode == 0


def pacman_install(packages: Sequence[str], *, dry_run: bool = False) -> Dict[str, List[str]]:
    """Install packages one at a time, skipping those already present.

    One call per package keeps a failure attributable to a single name.
    """

    installed: List[str] = []
    satisfied: List[str] = []
    for pkg in packages:
        if is_installed(pkg):
            logger.info("Already installed: %s", pkg)
            satisfied.append(pkg)
            continue
        logger.info("Installing package: %s", pkg)
        run_cmd(
            ["pacman", "-S", "--needed", "--noconfirm", pkg],
            dry_run=dry_run,
            label=f"FAILED PACKAGE: {pkg}",
        )
        installed.append(pkg)
    return {"installed": installed, "satisfied": satisfied}


def detect_aur_helper(candidates: Sequence[str]) -> Optional[str]:
    for helper in candidates:
        if shutil.which(helper):
            return helper
    return None


def build_aur_helper(
    helper: str,
    identity: Identity,
    *,
    build_root: str = "/tmp",
    dry_run: bool = False,
) -> None:
    """Clone an AUR helper and build it with makepkg as the invoking user.

    makepkg refuses to run as root, so the checkout is handed to the user
    before building.
    """

    build_dir = Path(build_root) / f"{helper}_install"
    remove_path(build_dir, dry_run=dry_run)

    run_cmd(
        ["git", "clone", f"{AUR_BASE_URL}/{helper}.git", str(build_dir)],
        dry_run=dry_run,
        label=f"FAILED CLONE: {helper}",
    )
    chown_tree(build_dir, identity, dry_run=dry_run)
    run_cmd(
        user_cmd(identity, ["makepkg", "-si", "--noconfirm"]),
        cwd=str(build_dir),
        dry_run=dry_run,
        label=f"FAILED BUILD: {helper}",
    )
    remove_path(build_dir, dry_run=dry_run)


def aur_install(
    helper: str,
    packages: Sequence[str],
    identity: Identity,
    *,
    dry_run: bool = False,
) -> Dict[str, List[str]]:
    installed: List[str] = []
    satisfied: List[str] = []
    for pkg in packages:
        if is_installed(pkg):
            logger.info("Already installed (AUR): %s", pkg)
            satisfied.append(pkg)
            continue
        logger.info("AUR installing: %s", pkg)
        run_cmd(
            user_cmd(identity, [helper, "-S", "--needed", "--noconfirm", pkg]),
            dry_run=dry_run,
            label=f"FAILED AUR PACKAGE: {pkg}",
        )
        installed.append(pkg)
    return {"installed": installed, "satisfied": satisfied}
