from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.dotfiles import backup_configs
from ..logging_utils import success
from ..state_store import record_plan

logger = logging.getLogger(__name__)


class BackupConfigsStep:
    step_id = "50_backup_configs"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)

        logger.info("Backing up existing configs to %s...", ctx.backup_dir)
        result = backup_configs(
            ctx.manifest.configs,
            config_home=ctx.config_home,
            source_dir=ctx.source_dir,
            backup_dir=ctx.backup_dir,
            identity=ctx.identity,
            dry_run=ctx.dry_run,
        )
        record_plan(state, self.step_id, {"backup_dir": str(ctx.backup_dir), **result})

        if result["backed_up"]:
            success(logger, "Backup complete (%s)", ", ".join(result["backed_up"]))
        else:
            logger.info("No configs to back up")
        return state
