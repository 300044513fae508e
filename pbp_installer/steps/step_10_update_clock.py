from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)


class UpdateClockStep:
    step_id = "10_update_clock"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        run_cmd(["timedatectl", "set-ntp", "true"], dry_run=cfg.dry_run)
        logger.info("NTP time sync enabled")
        return state
