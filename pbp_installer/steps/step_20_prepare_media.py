from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib import crypt
from ..lib.command import run_cmd
from ..lib.env import PATHS
from ..lib.files import target_path, write_file
from ..lib.storage import compute_layout, generate_fstab, make_ext4, mount, partition_device

logger = logging.getLogger(__name__)


class PrepareMediaStep:
    step_id = "20_prepare_media"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.setdefault("config", {}))
        exe = state.setdefault("execution", {})
        dry_run = cfg.dry_run

        layout = compute_layout(
            spl_offset=cfg.spl_offset,
            tpl_offset=cfg.tpl_offset,
            boot_offset=cfg.boot_offset,
            boot_size_mib=cfg.boot_size_mib,
            partition_gap=cfg.partition_gap,
            sector_size=cfg.sector_size,
        )

        device = cfg.device
        boot_part = cfg.boot_partition
        root_part = cfg.root_partition
        target_root = (exe.get("mounts") or {}).get("target_root") or PATHS.target_root

        partition_device(device=device, layout=layout, dry_run=dry_run)

        if cfg.randomize_root:
            crypt.randomize_partition(root_part, dry_run=dry_run)

        crypt.create_key_file(cfg.key_file, dry_run=dry_run)
        crypt.luks_format(root_part, cfg.key_file, dry_run=dry_run)
        crypt.luks_add_passphrase(root_part, cfg.key_file, cfg.cryptroot_password, dry_run=dry_run)
        crypt.luks_open(root_part, cfg.mapper_name, cfg.key_file, dry_run=dry_run)

        # Root filesystem, plus the skeleton that must exist before /boot is mounted.
        make_ext4(cfg.mapper_device, dry_run=dry_run)
        mount(cfg.mapper_device, target_root, dry_run=dry_run)

        key_dir = target_path(target_root, cfg.target_key_file).parent
        run_cmd(
            ["mkdir", f"{target_root}/boot", f"{target_root}/etc", f"{target_root}/root", str(key_dir)],
            dry_run=dry_run,
        )
        run_cmd(["chmod", "0755", f"{target_root}/boot", f"{target_root}/etc"], dry_run=dry_run)
        run_cmd(["chmod", "0700", f"{target_root}/root", str(key_dir)], dry_run=dry_run)
        target_key = str(target_path(target_root, cfg.target_key_file))
        run_cmd(["cp", cfg.key_file, target_key], dry_run=dry_run)
        run_cmd(["chmod", "0000", target_key], dry_run=dry_run)

        make_ext4(boot_part, dry_run=dry_run)
        mount(boot_part, f"{target_root}/boot", dry_run=dry_run)

        write_file(
            target_root,
            "/etc/crypttab",
            crypt.render_crypttab(mapper=cfg.mapper_name, root_part=root_part, key_file=cfg.target_key_file),
            dry_run=dry_run,
        )
        write_file(target_root, "/etc/fstab", generate_fstab(target_root, dry_run=dry_run), dry_run=dry_run)

        mounts = exe.setdefault("mounts", {})
        mounts["target_root"] = target_root
        mounts["boot_part"] = boot_part
        mounts["root_part"] = root_part
        mounts["mapper"] = cfg.mapper_name

        exe.setdefault("decisions", {})["layout"] = {
            "boot_start": layout.boot_start,
            "boot_end": layout.boot_end,
            "root_start": layout.root_start,
            "randomized_root": cfg.randomize_root,
        }

        logger.info("Prepared %s and mounted target_root=%s", device, target_root)
        return state
