from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd
from .files import target_path, write_file

logger = logging.getLogger(__name__)

EXTLINUX_CONF = "/boot/extlinux/extlinux.conf"


def write_image(image: str, device: str, seek: int, *, dry_run: bool = False) -> None:
    """Copy a bootloader image to an absolute sector of the raw device."""

    run_cmd(["dd", f"if={image}", f"of={device}", f"seek={seek}", "conv=notrunc"], dry_run=dry_run)


def write_uboot_images(
    *,
    target_root: str,
    device: str,
    spl_image: str,
    spl_offset: int,
    tpl_image: str,
    tpl_offset: int,
    dry_run: bool = False,
) -> None:
    """Write idbloader (SPL) and u-boot.itb (TPL) from the installed uboot package."""

    write_image(str(target_path(target_root, spl_image)), device, spl_offset, dry_run=dry_run)
    write_image(str(target_path(target_root, tpl_image)), device, tpl_offset, dry_run=dry_run)
    logger.info("U-Boot images written to %s (spl@%d tpl@%d)", device, spl_offset, tpl_offset)


def render_extlinux_config(*, label: str, kernel: str, fdt: str, cmdline: Sequence[str]) -> str:
    return (
        f"LABEL {label}\n"
        f"KERNEL {kernel}\n"
        f"FDT {fdt}\n"
        f"APPEND {' '.join(cmdline)}\n"
    )


def write_extlinux_config(target_root: str, contents: str, *, dry_run: bool = False) -> None:
    write_file(target_root, EXTLINUX_CONF, contents, dry_run=dry_run)
