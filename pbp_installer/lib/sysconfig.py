from __future__ import annotations

import logging

from .chroot import chroot_cmd
from .command import run_cmd

logger = logging.getLogger(__name__)


def render_hosts(hostname: str) -> str:
    return (
        "127.0.0.1 localhost\n"
        "::1       localhost\n"
        f"127.0.1.1 {hostname}.localdomain {hostname}\n"
    )


def render_locale_gen(locale: str, charset: str) -> str:
    return f"{locale} {charset}\n"


def render_locale_conf(locale: str) -> str:
    return f"LANG={locale}\n"


def render_vconsole_conf(keymap: str) -> str:
    return f"KEYMAP={keymap}\n"


def firstboot(
    *,
    target_root: str,
    timezone: str,
    locale: str,
    keymap: str,
    hostname: str,
    root_password: str,
    dry_run: bool = False,
) -> None:
    run_cmd(
        [
            "systemd-firstboot",
            "--setup-machine-id",
            f"--timezone={timezone}",
            f"--locale={locale}",
            f"--keymap={keymap}",
            f"--hostname={hostname}",
            f"--root-password={root_password}",
            f"--root={target_root}",
        ],
        secrets=[root_password],
        dry_run=dry_run,
    )


def link_localtime(target_root: str, timezone: str, *, dry_run: bool = False) -> None:
    # Link target is resolved inside the installed system, not the live one.
    run_cmd(
        ["ln", "--symbolic", "--force", f"/usr/share/zoneinfo/{timezone}", f"{target_root}/etc/localtime"],
        dry_run=dry_run,
    )
    chroot_cmd(target_root, ["hwclock", "--systohc"], dry_run=dry_run)


def generate_locales(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["locale-gen"], dry_run=dry_run)
