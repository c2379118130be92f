from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.pkg import pacman_upgrade
from ..logging_utils import success
from ..state_store import record_plan

logger = logging.getLogger(__name__)


class UpdateSystemStep:
    step_id = "10_update_system"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)

        if not ctx.manifest.system_upgrade:
            logger.info("System upgrade disabled by manifest")
            record_plan(state, self.step_id, {"upgrade": False})
            return state

        record_plan(state, self.step_id, {"upgrade": True})
        logger.info("Updating system...")
        pacman_upgrade(dry_run=ctx.dry_run)
        success(logger, "System updated")
        return state
