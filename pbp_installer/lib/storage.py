from __future__ import annotations

import logging
from dataclasses import dataclass

from .command import run_cmd

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass(frozen=True)
class PartitionLayout:
    """Sector layout of the boot device.

    The Rockchip BootRom loads the SPL from ``spl_offset``; the SPL loads the
    TPL (U-Boot) from ``tpl_offset``; U-Boot then reads extlinux.conf from the
    filesystem on the partition starting at ``boot_start``. All values are in
    sectors, ``boot_end`` is exclusive and the root partition runs to the end
    of the device.
    """

    spl_offset: int
    tpl_offset: int
    boot_start: int
    boot_end: int
    root_start: int

    def __post_init__(self) -> None:
        ordered = [self.spl_offset, self.tpl_offset, self.boot_start, self.boot_end, self.root_start]
        if ordered[0] <= 0 or any(a >= b for a, b in zip(ordered, ordered[1:])):
            raise ValueError(
                "Partition layout must satisfy 0 < spl < tpl < boot_start < boot_end < root_start, "
                f"got spl={self.spl_offset} tpl={self.tpl_offset} boot=[{self.boot_start},{self.boot_end}) "
                f"root={self.root_start}"
            )


def compute_layout(
    *,
    spl_offset: int,
    tpl_offset: int,
    boot_offset: int,
    boot_size_mib: int,
    partition_gap: int,
    sector_size: int = 512,
) -> PartitionLayout:
    if sector_size <= 0 or MIB % sector_size:
        raise ValueError(f"Unsupported sector size: {sector_size}")
    if partition_gap < 0:
        raise ValueError(f"partition_gap must not be negative, got {partition_gap}")
    boot_end = boot_offset + boot_size_mib * (MIB // sector_size)
    return PartitionLayout(
        spl_offset=spl_offset,
        tpl_offset=tpl_offset,
        boot_start=boot_offset,
        boot_end=boot_end,
        root_start=boot_end + partition_gap,
    )


def partition_device(*, device: str, layout: PartitionLayout, dry_run: bool = False) -> None:
    """Write a fresh GPT with the boot and root partitions."""

    logger.info(
        "Partitioning %s boot=[%d,%d) root=[%d,end)",
        device,
        layout.boot_start,
        layout.boot_end,
        layout.root_start,
    )
    run_cmd(["parted", "--script", "--", device, "mklabel", "gpt"], dry_run=dry_run)
    run_cmd(
        [
            "parted",
            "--script",
            "--",
            device,
            "unit",
            "s",
            "mkpart",
            "primary",
            str(layout.boot_start),
            str(layout.boot_end),
            "name",
            "1",
            "boot",
        ],
        dry_run=dry_run,
    )
    run_cmd(
        [
            "parted",
            "--script",
            "--",
            device,
            "unit",
            "s",
            "mkpart",
            "primary",
            str(layout.root_start),
            "100%",
            "name",
            "2",
            "root",
        ],
        dry_run=dry_run,
    )


def make_ext4(dev: str, *, dry_run: bool = False) -> None:
    run_cmd(["mkfs", "--type=ext4", "-F", dev], dry_run=dry_run)


def mount(dev: str, mountpoint: str, *, dry_run: bool = False) -> None:
    run_cmd(["mount", dev, mountpoint], dry_run=dry_run)


def umount(mountpoint: str, *, dry_run: bool = False) -> None:
    run_cmd(["umount", mountpoint], dry_run=dry_run)


def generate_fstab(target_root: str, *, dry_run: bool = False) -> str:
    """Return genfstab output (UUID-based) for everything mounted under target_root."""

    r = run_cmd(["genfstab", "-U", target_root], dry_run=dry_run)
    return r.stdout
