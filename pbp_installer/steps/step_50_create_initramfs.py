from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib.initcpio import regenerate_initramfs, render_mkinitcpio_conf, write_mkinitcpio_conf

logger = logging.getLogger(__name__)


class CreateInitramfsStep:
    step_id = "50_create_initramfs"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        exe = state.get("execution") or {}
        mounts = exe.get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run 20_prepare_media first")

        contents = render_mkinitcpio_conf(
            modules=cfg.initcpio_modules,
            binaries=cfg.initcpio_binaries,
            files=cfg.initcpio_files,
            hooks=cfg.initcpio_hooks,
            compression=cfg.initcpio_compression,
        )
        write_mkinitcpio_conf(target_root, contents, dry_run=cfg.dry_run)
        regenerate_initramfs(target_root, dry_run=cfg.dry_run)

        logger.info("Initramfs regenerated (hooks=%s)", " ".join(cfg.initcpio_hooks))
        return state
