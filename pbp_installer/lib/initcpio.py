from __future__ import annotations

import logging
from typing import Sequence

from .chroot import chroot_cmd
from .files import write_file

logger = logging.getLogger(__name__)

MKINITCPIO_CONF = "/etc/mkinitcpio.conf"


def render_mkinitcpio_conf(
    *,
    modules: Sequence[str],
    binaries: Sequence[str],
    files: Sequence[str],
    hooks: Sequence[str],
    compression: str,
) -> str:
    return (
        f"MODULES=({' '.join(modules)})\n"
        f"BINARIES=({' '.join(binaries)})\n"
        f"FILES=({' '.join(files)})\n"
        f"HOOKS=({' '.join(hooks)})\n"
        f'COMPRESSION="{compression}"\n'
    )


def write_mkinitcpio_conf(target_root: str, contents: str, *, dry_run: bool = False) -> None:
    write_file(target_root, MKINITCPIO_CONF, contents, dry_run=dry_run)


def regenerate_initramfs(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["mkinitcpio", "--allpresets"], dry_run=dry_run)
