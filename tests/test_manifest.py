from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from hyprdots_installer.errors import PreconditionError
from hyprdots_installer.manifest import Manifest, load_manifest, manifest_path

REPO_MANIFESTS = Path(__file__).resolve().parents[1] / "manifests"


@pytest.mark.parametrize("profile", ["thinkpad", "desktop", "minimal"])
def test_bundled_profiles_load(profile):
    m = load_manifest(manifest_path(str(REPO_MANIFESTS.parent), profile))
    assert m.packages
    assert "hypr" in m.configs


def test_thinkpad_profile_lists():
    m = load_manifest(REPO_MANIFESTS / "thinkpad.yaml")
    assert m.configs == ["hypr", "waybar", "kitty", "gtk-2.0", "gtk-3.0", "gtk-4.0", "rofi"]
    assert m.aur_packages == ["qdirstat"]
    assert m.aur_helpers == ["paru", "yay"]
    assert m.packages[:3] == ["base", "base-devel", "git"]


def test_defaults():
    m = Manifest(raw={"packages": ["git"]}).validate()
    assert m.aur_helpers == ["paru", "yay"]
    assert m.font_patterns == ["*.ttf", "*.otf"]
    assert m.fonts_dir == "fonts"
    assert m.system_upgrade is True
    assert m.wallpaper is None
    assert m.configs == []


def test_gpu_extras_follow_detected_vendors_without_duplicates():
    m = Manifest(
        raw={
            "packages": ["hyprland", "mesa"],
            "gpu_packages": {"amd": ["mesa", "vulkan-radeon"], "intel": ["vulkan-intel", "mesa"]},
        }
    )
    assert m.packages_for_gpus([]) == ["hyprland", "mesa"]
    assert m.packages_for_gpus(["amd", "intel"]) == ["hyprland", "mesa", "vulkan-radeon", "vulkan-intel"]


@pytest.mark.parametrize(
    "raw, match",
    [
        ({"packages": "git"}, "packages must be a list"),
        ({"packages": ["git", 3]}, "packages must be a list"),
        ({"gpu_packages": ["mesa"]}, "gpu_packages must be a mapping"),
        ({"gpu_packages": {"voodoo": ["glide"]}}, "unknown GPU vendor"),
        ({"configs": ["../etc"]}, "plain directory name"),
        ({"aur": {"packages": "qdirstat"}}, "aur.packages"),
        ({"system_upgrade": "no"}, "system_upgrade must be true or false"),
        ({"system_upgrade": 0}, "system_upgrade must be true or false"),
    ],
)
def test_invalid_manifests_are_preconditions(raw, match):
    with pytest.raises(PreconditionError, match=match):
        Manifest(raw=raw).validate()


def test_load_rejects_missing_and_non_mapping(tmp_path):
    with pytest.raises(PreconditionError, match="not found"):
        load_manifest(tmp_path / "nope.yaml")

    p = tmp_path / "list.yaml"
    p.write_text(yaml.safe_dump(["git"]), encoding="utf-8")
    with pytest.raises(PreconditionError, match="mapping"):
        load_manifest(p)

    bad = tmp_path / "bad.yaml"
    bad.write_text("packages: [git\n", encoding="utf-8")
    with pytest.raises(PreconditionError, match="not valid YAML"):
        load_manifest(bad)
