from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.dotfiles import link_configs
from ..logging_utils import success
from ..state_store import add_warning, record_plan

logger = logging.getLogger(__name__)


class LinkConfigsStep:
    step_id = "60_link_configs"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)

        logger.info("Creating symlinks...")
        result = link_configs(
            ctx.manifest.configs,
            config_home=ctx.config_home,
            source_dir=ctx.source_dir,
            backup_dir=ctx.backup_dir,
            identity=ctx.identity,
            dry_run=ctx.dry_run,
        )
        record_plan(state, self.step_id, result)

        if result["backed_up"]:
            logger.info("Backed up before linking: %s", ", ".join(result["backed_up"]))
        for name in result["missing"]:
            add_warning(state, self.step_id, f"{name} missing from {ctx.source_dir}, skipping")

        success(
            logger,
            "Symlinks in place (linked=%d unchanged=%d)",
            len(result["linked"]),
            len(result["unchanged"]),
        )
        return state
