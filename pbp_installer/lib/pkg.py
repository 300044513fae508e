from __future__ import annotations

import logging
from typing import List, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def package_list(
    *,
    base_packages: Sequence[str],
    kernel_package: str,
    firmware_packages: Sequence[str],
    bootloader_package: str,
) -> List[str]:
    """Packages for pacstrap, in install order. ``base`` is always first."""

    return [
        "base",
        *base_packages,
        kernel_package,
        f"{kernel_package}-headers",
        *firmware_packages,
        bootloader_package,
    ]


def pacstrap(target_root: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(["pacstrap", target_root, *packages], dry_run=dry_run)
