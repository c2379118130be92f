from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..errors import InstallerError
from ..lib.pkg import aur_install, detect_aur_helper
from ..logging_utils import success
from ..state_store import record_plan

logger = logging.getLogger(__name__)


class InstallAurPackagesStep:
    step_id = "40_install_aur_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)
        packages = ctx.manifest.aur_packages
        if not packages:
            logger.info("No AUR packages requested")
            record_plan(state, self.step_id, {"installed": [], "satisfied": []})
            return state

        decisions = (state.get("execution") or {}).get("decisions") or {}
        helper = decisions.get("aur_helper") or detect_aur_helper(ctx.manifest.aur_helpers)
        if not helper:
            raise InstallerError("No AUR helper available; run 30_install_aur_helper first")

        logger.info("Installing AUR packages with %s...", helper)
        result = aur_install(helper, packages, ctx.identity, dry_run=ctx.dry_run)
        record_plan(state, self.step_id, {"helper": helper, **result})

        success(logger, "AUR packages installed")
        return state
