from __future__ import annotations

import logging
import os
import pwd
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
import yaml

from hyprdots_installer.lib import command as command_mod
from hyprdots_installer.lib import pkg as pkg_mod
from hyprdots_installer.lib.identity import Identity
from hyprdots_installer.state_store import ensure_defaults


class FakeRunner:
    """Stands in for subprocess.run and records every argv."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.cwds: List[Optional[str]] = []
        self.rules: List[Tuple[Tuple[str, ...], int]] = [(("pacman", "-Qi"), 1)]

    def set(self, prefix: Sequence[str], returncode: int) -> None:
        # Later rules win.
        self.rules.insert(0, (tuple(prefix), returncode))

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(kwargs.get("cwd"))
        rc = 0
        for prefix, code in self.rules:
            if tuple(argv[: len(prefix)]) == prefix:
                rc = code
                break
        return subprocess.CompletedProcess(argv, rc, stdout="", stderr="boom" if rc else "")

    def commands(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(command_mod.subprocess, "run", runner)
    return runner


@pytest.fixture
def no_aur_helper(monkeypatch):
    monkeypatch.setattr(pkg_mod.shutil, "which", lambda name: None)


@pytest.fixture(autouse=True)
def _reset_root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_hyprdots_configured", "_hyprdots_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def identity(tmp_path: Path) -> Identity:
    home = tmp_path / "home"
    home.mkdir()
    pw = pwd.getpwuid(os.getuid())
    return Identity(name=pw.pw_name, uid=os.getuid(), gid=os.getgid(), home=str(home))


TEST_MANIFEST: Dict[str, Any] = {
    "system_upgrade": True,
    "packages": ["base-devel", "git", "hyprland"],
    "aur": {"helpers": ["paru", "yay"], "packages": ["qdirstat"]},
    "configs": ["hypr", "waybar", "kitty", "rofi"],
    "fonts": {"dir": "fonts", "patterns": ["*.ttf", "*.otf"]},
}


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """A dotfiles checkout: hypr, waybar and kitty exist, rofi does not."""

    src = tmp_path / "dotfiles"
    (src / "hypr").mkdir(parents=True)
    (src / "hypr" / "hyprland.conf").write_text("monitor=,preferred,auto,1\n", encoding="utf-8")
    (src / "waybar").mkdir()
    (src / "waybar" / "config.jsonc").write_text("{}\n", encoding="utf-8")
    (src / "kitty").mkdir()
    (src / "kitty" / "kitty.conf").write_text("font_size 11\n", encoding="utf-8")

    (src / "fonts").mkdir()
    (src / "fonts" / "Iosevka.ttf").write_bytes(b"ttf")
    (src / "fonts" / "Inter.otf").write_bytes(b"otf")
    (src / "fonts" / "LICENSE.txt").write_text("OFL\n", encoding="utf-8")

    (src / "manifests").mkdir()
    (src / "manifests" / "test.yaml").write_text(yaml.safe_dump(TEST_MANIFEST), encoding="utf-8")
    return src


@pytest.fixture
def make_state(identity: Identity, source_dir: Path, tmp_path: Path):
    def _make(manifest: Optional[Dict[str, Any]] = None, **cfg: Any) -> Dict[str, Any]:
        state = ensure_defaults({})
        state["config"].update({"build_root": str(tmp_path / "build")}, **cfg)
        state["identity"] = identity.to_dict()
        state["manifest"] = dict(TEST_MANIFEST if manifest is None else manifest)
        state["execution"]["paths"] = {
            "source_dir": str(source_dir),
            "backup_dir": str(identity.config_home / "config.bak"),
        }
        return state

    return _make


@pytest.fixture
def base_manifest() -> Dict[str, Any]:
    return dict(TEST_MANIFEST)
