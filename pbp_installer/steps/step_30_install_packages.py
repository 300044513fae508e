from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib.pkg import package_list, pacstrap

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "30_install_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        exe = state.get("execution") or {}
        mounts = exe.get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run 20_prepare_media first")

        packages = package_list(
            base_packages=cfg.base_packages,
            kernel_package=cfg.kernel_package,
            firmware_packages=cfg.firmware_packages,
            bootloader_package=cfg.bootloader_package,
        )
        pacstrap(target_root, packages, dry_run=cfg.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["packages"] = packages
        logger.info("Installed %d packages into %s", len(packages), target_root)
        return state
