from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import PreconditionError
from .lib.hwdetect import GPU_VENDORS

DEFAULT_PROFILE = "thinkpad"
DEFAULT_AUR_HELPERS = ["paru", "yay"]
DEFAULT_FONT_PATTERNS = ["*.ttf", "*.otf"]


def _str_list(raw: Dict[str, Any], key: str, where: str = "") -> List[str]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PreconditionError(f"manifest: {where}{key} must be a list of strings")
    return [v.strip() for v in value if v.strip()]


@dataclass(frozen=True)
class Manifest:
    """Declarative description of what a profile installs and links."""

    raw: Dict[str, Any]

    @property
    def packages(self) -> List[str]:
        return _str_list(self.raw, "packages")

    @property
    def gpu_packages(self) -> Dict[str, List[str]]:
        section = self.raw.get("gpu_packages") or {}
        return {vendor: _str_list(section, vendor, "gpu_packages.") for vendor in section}

    @property
    def aur_helpers(self) -> List[str]:
        return _str_list(self.raw.get("aur") or {}, "helpers", "aur.") or list(DEFAULT_AUR_HELPERS)

    @property
    def aur_packages(self) -> List[str]:
        return _str_list(self.raw.get("aur") or {}, "packages", "aur.")

    @property
    def configs(self) -> List[str]:
        return _str_list(self.raw, "configs")

    @property
    def fonts_dir(self) -> str:
        return str((self.raw.get("fonts") or {}).get("dir") or "fonts")

    @property
    def font_patterns(self) -> List[str]:
        return _str_list(self.raw.get("fonts") or {}, "patterns", "fonts.") or list(DEFAULT_FONT_PATTERNS)

    @property
    def wallpaper(self) -> Optional[str]:
        value = self.raw.get("wallpaper")
        return str(value) if value else None

    @property
    def system_upgrade(self) -> bool:
        return self.raw.get("system_upgrade", True)

    def packages_for_gpus(self, vendors: List[str]) -> List[str]:
        """Base packages followed by the extras of every detected GPU vendor, de-duplicated."""

        extras = self.gpu_packages
        out: List[str] = []
        for p in [*self.packages, *[p for v in vendors for p in extras.get(v, [])]]:
            if p not in out:
                out.append(p)
        return out

    def validate(self) -> "Manifest":
        for section in ("gpu_packages", "aur", "fonts"):
            value = self.raw.get(section)
            if value is not None and not isinstance(value, dict):
                raise PreconditionError(f"manifest: {section} must be a mapping")

        if not isinstance(self.raw.get("system_upgrade", True), bool):
            raise PreconditionError("manifest: system_upgrade must be true or false")

        unknown = sorted(set(self.raw.get("gpu_packages") or {}) - set(GPU_VENDORS))
        if unknown:
            raise PreconditionError(f"manifest: unknown GPU vendor(s): {', '.join(unknown)}")

        for name in self.configs:
            if "/" in name or name in {".", ".."}:
                raise PreconditionError(f"manifest: config entry must be a plain directory name: {name}")

        # Touch every list so type errors surface before anything runs.
        _ = (self.packages, self.gpu_packages, self.aur_helpers, self.aur_packages, self.font_patterns)
        return self


def manifest_path(source_dir: str, profile: str) -> Path:
    return Path(source_dir) / "manifests" / f"{profile}.yaml"


def load_manifest(path: str | Path) -> Manifest:
    p = Path(path)
    if not p.exists():
        raise PreconditionError(f"Manifest not found: {p}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise PreconditionError(f"Manifest must be YAML: {p}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise PreconditionError(f"Manifest is not valid YAML: {p}: {e}") from e
    if not isinstance(raw, dict):
        raise PreconditionError(f"Manifest must contain a mapping/object: {p}")

    return Manifest(raw=raw).validate()
