from __future__ import annotations

import filecmp
import logging
import os
from pathlib import Path
from typing import Dict, List, Sequence

from ..errors import BackupError, LinkError
from .assets import chown_tree, copy_path, ensure_user_dir, remove_path
from .identity import Identity

logger = logging.getLogger(__name__)


def points_to(link: Path, target: Path) -> bool:
    """True if link is a symlink resolving to target."""

    if not link.is_symlink():
        return False
    return link.resolve() == target.resolve()


def same_content(a: Path, b: Path) -> bool:
    """True if b is an exact copy of a (files, trees or symlinks)."""

    if not os.path.lexists(b):
        return False
    if a.is_symlink() or b.is_symlink():
        return a.is_symlink() and b.is_symlink() and os.readlink(a) == os.readlink(b)
    if a.is_dir() != b.is_dir():
        return False
    if not a.is_dir():
        return filecmp.cmp(a, b, shallow=False)

    cmp = filecmp.dircmp(a, b)
    if cmp.left_only or cmp.right_only or cmp.funny_files:
        return False
    for name in cmp.common_files:
        if not same_content(a / name, b / name):
            return False
    return all(same_content(a / d, b / d) for d in cmp.common_dirs)


def _prepare_dir(path: Path, identity: Identity, error, *, dry_run: bool) -> None:
    try:
        ensure_user_dir(path, identity, dry_run=dry_run)
    except OSError as e:
        raise error(f"Cannot create {path}: {e}") from e


def backup_one(name: str, target: Path, backup_dir: Path, identity: Identity, *, dry_run: bool = False) -> None:
    try:
        copy_path(target, backup_dir / name, dry_run=dry_run)
        chown_tree(backup_dir / name, identity, dry_run=dry_run)
    except OSError as e:
        raise BackupError(f"FAILED BACKUP: {name}: {e}") from e
    logger.info("Backed up: %s", name)


def backup_configs(
    names: Sequence[str],
    *,
    config_home: Path,
    source_dir: Path,
    backup_dir: Path,
    identity: Identity,
    dry_run: bool = False,
) -> Dict[str, List[str]]:
    """Copy every existing config target into the flat backup dir.

    Targets that already link into source_dir were put there by a previous
    run; backing them up again would overwrite the real backup with a link.
    """

    backed_up: List[str] = []
    linked: List[str] = []
    absent: List[str] = []

    _prepare_dir(backup_dir, identity, BackupError, dry_run=dry_run)
    for name in names:
        target = config_home / name
        if not os.path.lexists(target):
            absent.append(name)
            continue
        if points_to(target, source_dir / name):
            logger.info("Already linked, not backing up: %s", name)
            linked.append(name)
            continue

        backup_one(name, target, backup_dir, identity, dry_run=dry_run)
        backed_up.append(name)

    return {"backed_up": backed_up, "already_linked": linked, "absent": absent}


def link_configs(
    names: Sequence[str],
    *,
    config_home: Path,
    source_dir: Path,
    backup_dir: Path,
    identity: Identity,
    dry_run: bool = False,
) -> Dict[str, List[str]]:
    """Replace each target with a symlink into source_dir.

    A target is only removed once an identical copy sits in backup_dir; when
    the backup is missing or stale (resumed or --start-at runs) it is taken
    here first. The destination is removed entirely; nothing is merged.
    Names missing from source_dir are reported and left alone.
    """

    linked: List[str] = []
    unchanged: List[str] = []
    missing: List[str] = []
    backed_up: List[str] = []

    _prepare_dir(config_home, identity, LinkError, dry_run=dry_run)
    for name in names:
        src = source_dir / name
        dest = config_home / name

        if not src.exists():
            missing.append(name)
            continue
        if points_to(dest, src):
            unchanged.append(name)
            continue

        if os.path.lexists(dest) and not same_content(dest, backup_dir / name):
            _prepare_dir(backup_dir, identity, BackupError, dry_run=dry_run)
            backup_one(name, dest, backup_dir, identity, dry_run=dry_run)
            backed_up.append(name)

        if dry_run:
            logger.info("Would link %s -> %s", dest, src)
            linked.append(name)
            continue

        try:
            remove_path(dest)
            os.symlink(src, dest)
            os.lchown(dest, identity.uid, identity.gid)
        except OSError as e:
            raise LinkError(f"FAILED LINK: {name}: {e}") from e
        logger.info("Linked: %s -> %s", dest, src)
        linked.append(name)

    return {"linked": linked, "unchanged": unchanged, "missing": missing, "backed_up": backed_up}
