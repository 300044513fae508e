from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib.command import run_cmd
from ..lib.crypt import luks_close
from ..lib.storage import umount

logger = logging.getLogger(__name__)


class CleanUpStep:
    step_id = "90_clean_up"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        exe = state.get("execution") or {}
        mounts = exe.get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run 20_prepare_media first")

        dry_run = cfg.dry_run
        run_cmd(["sync"], dry_run=dry_run)
        umount(f"{target_root}/boot", dry_run=dry_run)
        umount(target_root, dry_run=dry_run)
        luks_close(mounts.get("mapper") or cfg.mapper_name, dry_run=dry_run)

        logger.info("Install finished: %s", exe.get("decisions") or {})
        return state
