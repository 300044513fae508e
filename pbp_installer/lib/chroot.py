from __future__ import annotations

import logging
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


def chroot_cmd(target_root: str, argv: Sequence[str], *, dry_run: bool = False) -> CmdResult:
    """Run a command inside target root.

    arch-chroot mounts /dev, /proc, /sys and resolv.conf for the duration of
    the command, so no separate bind-mount bookkeeping is needed.
    """

    return run_cmd(["arch-chroot", target_root, *argv], dry_run=dry_run)
