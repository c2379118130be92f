from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.hwdetect import detect_gpu
from ..lib.pkg import pacman_install
from ..logging_utils import success
from ..state_store import record_plan

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "20_install_packages"

    def __init__(self, drm_root: str = "/sys/class/drm") -> None:
        self.drm_root = drm_root

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)

        vendors: list[str] = []
        if ctx.manifest.gpu_packages:
            gpu = detect_gpu(self.drm_root)
            state.setdefault("hardware", {})["gpu"] = gpu
            vendors = list(gpu.get("vendors") or [])

        packages = ctx.manifest.packages_for_gpus(vendors)
        logger.info("Installing %d packages (gpu extras: %s)", len(packages), ",".join(vendors) or "none")

        result = pacman_install(packages, dry_run=ctx.dry_run)
        record_plan(state, self.step_id, {"gpu_vendors": vendors, **result})

        success(logger, "All system packages installed successfully")
        return state
