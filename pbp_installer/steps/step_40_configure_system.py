from __future__ import annotations

import logging
from typing import Any, Dict

from ..install_config import InstallConfig
from ..lib import sysconfig
from ..lib.files import write_file
from ..lib.net import lookup_timezone

logger = logging.getLogger(__name__)

DRY_RUN_TIMEZONE = "UTC"


def resolve_timezone(cfg: InstallConfig) -> str:
    if cfg.timezone:
        return cfg.timezone
    if cfg.dry_run:
        logger.info("Would look up timezone via %s; using %s", cfg.timezone_lookup_url, DRY_RUN_TIMEZONE)
        return DRY_RUN_TIMEZONE
    return lookup_timezone(cfg.timezone_lookup_url)


class ConfigureSystemStep:
    step_id = "40_configure_system"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        exe = state.get("execution") or {}
        mounts = exe.get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run 20_prepare_media first")

        root_password = cfg.root_password
        dry_run = cfg.dry_run
        timezone = resolve_timezone(cfg)
        hostname = cfg.hostname

        sysconfig.firstboot(
            target_root=target_root,
            timezone=timezone,
            locale=cfg.locale,
            keymap=cfg.keymap,
            hostname=hostname,
            root_password=root_password,
            dry_run=dry_run,
        )

        sysconfig.link_localtime(target_root, timezone, dry_run=dry_run)

        write_file(target_root, "/etc/locale.gen", sysconfig.render_locale_gen(cfg.locale, cfg.charset), dry_run=dry_run)
        write_file(target_root, "/etc/locale.conf", sysconfig.render_locale_conf(cfg.locale), dry_run=dry_run)
        write_file(target_root, "/etc/vconsole.conf", sysconfig.render_vconsole_conf(cfg.keymap), dry_run=dry_run)
        sysconfig.generate_locales(target_root, dry_run=dry_run)

        write_file(target_root, "/etc/hostname", hostname + "\n", dry_run=dry_run)
        write_file(target_root, "/etc/hosts", sysconfig.render_hosts(hostname), dry_run=dry_run)

        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        decisions["timezone"] = timezone
        decisions["hostname"] = hostname

        logger.info("Configured hostname=%s timezone=%s locale=%s", hostname, timezone, cfg.locale)
        return state
