from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib.bootloader import render_extlinux_config, write_extlinux_config, write_uboot_images

logger = logging.getLogger(__name__)


class InstallBootloaderStep:
    step_id = "60_install_bootloader"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        exe = state.get("execution") or {}
        mounts = exe.get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run 20_prepare_media first")

        dry_run = cfg.dry_run

        # Wrong offsets here leave the machine unbootable; they come straight
        # from the Rockchip boot flow and are not recomputed.
        write_uboot_images(
            target_root=target_root,
            device=cfg.device,
            spl_image=cfg.spl_image,
            spl_offset=cfg.spl_offset,
            tpl_image=cfg.tpl_image,
            tpl_offset=cfg.tpl_offset,
            dry_run=dry_run,
        )

        cmdline = cfg.linux_cmdline
        contents = render_extlinux_config(
            label=cfg.boot_label,
            kernel=cfg.kernel_image,
            fdt=cfg.fdt,
            cmdline=cmdline,
        )
        write_extlinux_config(target_root, contents, dry_run=dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["linux_cmdline"] = cmdline
        logger.info("Bootloader installed (device=%s)", cfg.device)
        return state
