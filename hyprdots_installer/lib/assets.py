from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List

from .identity import Identity

logger = logging.getLogger(__name__)


def chown_tree(path: Path, identity: Identity, *, dry_run: bool = False) -> None:
    """chown -R without following symlinks."""

    if dry_run:
        logger.info("Would chown -R %s:%s %s", identity.name, identity.name, path)
        return
    if not os.path.lexists(path):
        return

    os.lchown(path, identity.uid, identity.gid)
    if path.is_dir() and not path.is_symlink():
        for root, dirs, files in os.walk(path):
            for name in dirs + files:
                os.lchown(os.path.join(root, name), identity.uid, identity.gid)


def ensure_user_dir(path: Path, identity: Identity, *, dry_run: bool = False) -> None:
    """mkdir -p, handing every directory we create to the user."""

    if dry_run:
        if not path.is_dir():
            logger.info("Would create directory %s", path)
        return

    missing: List[Path] = []
    p = path
    while not p.exists():
        missing.append(p)
        p = p.parent
    path.mkdir(parents=True, exist_ok=True)
    for created in [path, *missing]:
        os.lchown(created, identity.uid, identity.gid)


def remove_path(path: Path, *, dry_run: bool = False) -> None:
    """rm -rf that never follows a symlink into its target."""

    if not os.path.lexists(path):
        return
    if dry_run:
        logger.info("Would remove %s", path)
        return
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)


def copy_path(src: Path, dst: Path, *, dry_run: bool = False) -> None:
    """cp -r src dst, replacing dst. Symlinks inside a tree are kept as links."""

    if not os.path.lexists(src):
        raise FileNotFoundError(str(src))

    if dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return

    remove_path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    if src.is_dir() and not src.is_symlink():
        shutil.copytree(src, dst, symlinks=True)
    else:
        shutil.copy2(src, dst, follow_symlinks=False)


def copy_matching(src_dir: Path, dst_dir: Path, patterns: Iterable[str], *, dry_run: bool = False) -> List[str]:
    """Copy files in src_dir matching any glob pattern (non-recursive) into dst_dir."""

    names: List[str] = []
    for pattern in patterns:
        for item in sorted(src_dir.glob(pattern)):
            if item.is_file() and item.name not in names:
                names.append(item.name)

    for name in names:
        if dry_run:
            logger.info("Would copy %s -> %s", src_dir / name, dst_dir / name)
            continue
        shutil.copy2(src_dir / name, dst_dir / name)
    return names
