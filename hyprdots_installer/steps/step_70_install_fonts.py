from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.assets import chown_tree, copy_matching, ensure_user_dir
from ..lib.command import run_cmd
from ..lib.identity import user_cmd
from ..logging_utils import success
from ..state_store import add_warning, record_plan

logger = logging.getLogger(__name__)


class InstallFontsStep:
    """Copy bundled fonts into ~/.local/share/fonts. Never fails the run."""

    step_id = "70_install_fonts"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)
        fonts_src = ctx.source_dir / ctx.manifest.fonts_dir
        fonts_dst = ctx.fonts_home

        if not fonts_src.is_dir():
            logger.info("No fonts directory, skipping")
            record_plan(state, self.step_id, {"fonts": []})
            return state

        logger.info("Installing fonts...")
        try:
            ensure_user_dir(fonts_dst, ctx.identity, dry_run=ctx.dry_run)
            copied = copy_matching(fonts_src, fonts_dst, ctx.manifest.font_patterns, dry_run=ctx.dry_run)
            chown_tree(fonts_dst, ctx.identity, dry_run=ctx.dry_run)
        except OSError as e:
            add_warning(state, self.step_id, f"Font copy failed: {e}")
            return state
        record_plan(state, self.step_id, {"fonts": copied, "dest": str(fonts_dst)})

        if not copied:
            add_warning(state, self.step_id, f"No font files matched in {fonts_src}")
            return state

        r = run_cmd(user_cmd(ctx.identity, ["fc-cache", "-fv"]), check=False, dry_run=ctx.dry_run)
        if not r.ok:
            add_warning(state, self.step_id, f"fc-cache failed ({r.returncode})")
            return state

        success(logger, "Fonts installed (%d)", len(copied))
        return state
