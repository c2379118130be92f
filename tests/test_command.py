from __future__ import annotations

import pytest

from hyprdots_installer.errors import CommandError
from hyprdots_installer.lib.command import NOT_FOUND, run_cmd


def test_dry_run_does_not_execute(fake_run):
    r = run_cmd(["pacman", "-Syu"], dry_run=True)
    assert r.ok
    assert fake_run.calls == []


def test_failure_raises_labeled_error(fake_run):
    fake_run.set(["pacman", "-S"], 1)
    with pytest.raises(CommandError) as exc:
        run_cmd(["pacman", "-S", "--needed", "--noconfirm", "hyprland"], label="FAILED PACKAGE: hyprland")
    assert exc.value.returncode == 1
    assert exc.value.label == "FAILED PACKAGE: hyprland"
    assert str(exc.value).startswith("FAILED PACKAGE: hyprland (1)")


def test_unchecked_failure_returns_result(fake_run):
    fake_run.set(["fc-cache"], 2)
    r = run_cmd(["fc-cache", "-fv"], check=False)
    assert r.returncode == 2
    assert not r.ok


def test_missing_binary_behaves_like_shell():
    r = run_cmd(["hyprdots-no-such-binary-xyz"], check=False)
    assert r.returncode == NOT_FOUND

    with pytest.raises(CommandError):
        run_cmd(["hyprdots-no-such-binary-xyz"])
