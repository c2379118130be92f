from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.pkg import build_aur_helper, detect_aur_helper
from ..logging_utils import success
from ..state_store import record_plan

logger = logging.getLogger(__name__)


class InstallAurHelperStep:
    step_id = "30_install_aur_helper"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})

        if not ctx.manifest.aur_packages:
            logger.info("No AUR packages requested, not bootstrapping a helper")
            record_plan(state, self.step_id, {"helper": None, "build": False})
            return state

        logger.info("Checking for AUR helper...")
        candidates = ctx.manifest.aur_helpers
        helper = detect_aur_helper(candidates)
        if helper:
            logger.info("%s already installed", helper)
            record_plan(state, self.step_id, {"helper": helper, "build": False})
            decisions["aur_helper"] = helper
            return state

        helper = candidates[0]
        record_plan(state, self.step_id, {"helper": helper, "build": True})
        logger.info("Installing %s...", helper)
        build_aur_helper(helper, ctx.identity, build_root=str(ctx.build_root), dry_run=ctx.dry_run)

        decisions["aur_helper"] = helper
        success(logger, "%s installed", helper)
        return state
