from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import StepCtx
from ..lib.command import run_cmd
from ..lib.identity import user_cmd
from ..logging_utils import success
from ..state_store import add_warning, record_plan

logger = logging.getLogger(__name__)


class SetWallpaperStep:
    """Best effort: swww needs a running daemon inside the user's session."""

    step_id = "80_set_wallpaper"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx = StepCtx.from_state(state)
        rel = ctx.manifest.wallpaper
        if not rel:
            record_plan(state, self.step_id, {"wallpaper": None})
            return state

        wallpaper = ctx.source_dir / rel
        if not wallpaper.is_file():
            logger.info("Wallpaper %s not found, skipping", wallpaper)
            record_plan(state, self.step_id, {"wallpaper": None})
            return state

        record_plan(state, self.step_id, {"wallpaper": str(wallpaper)})
        runtime_dir = f"XDG_RUNTIME_DIR=/run/user/{ctx.identity.uid}"
        argv = user_cmd(ctx.identity, ["env", runtime_dir, "swww", "img", str(wallpaper)])
        r = run_cmd(argv, check=False, dry_run=ctx.dry_run)
        if not r.ok:
            add_warning(state, self.step_id, f"Could not set wallpaper (swww exit {r.returncode}); set it after login")
            return state

        success(logger, "Wallpaper set: %s", wallpaper.name)
        return state
