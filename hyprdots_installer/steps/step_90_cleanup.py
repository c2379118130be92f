from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.assets import remove_path
from ..logging_utils import success
from ..state_store import add_warning, record_plan

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "90_cleanup"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)

        logger.info("Cleaning up...")
        leftovers = sorted(p for p in ctx.build_root.glob("*_install") if p.is_dir()) if ctx.build_root.is_dir() else []
        removed: list[str] = []
        for p in leftovers:
            try:
                remove_path(p, dry_run=ctx.dry_run)
                removed.append(str(p))
            except OSError as e:
                add_warning(state, self.step_id, f"Could not remove {p}: {e}")
        record_plan(state, self.step_id, {"removed": removed})

        success(logger, "Cleanup done")
        return state
