from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Values for a stock Pinebook Pro: eMMC at mmcblk2, NHP's pbp kernel/firmware
# packages and the Rockchip "Boot Flow 2" sector layout.
DEFAULT_CONFIG: Dict[str, Any] = {
    "device": "/dev/mmcblk2",
    "sector_size": 512,
    "spl_offset": 64,  # sector 0x40
    "tpl_offset": 16384,  # sector 0x4000
    "boot_offset": 32768,  # sector 0x8000
    "boot_size_mib": 128,
    "partition_gap": 2048,
    "mapper_name": "cryptroot",
    "key_file": "/tmp/cryptroot.key",
    "target_key_file": "/root/cryptkeys/cryptroot.key",
    "cryptroot_password": "hunter2",
    "root_password": "hunter2",
    "randomize_root": False,
    "base_packages": ["cryptsetup"],
    "kernel_package": "linux-pbp",
    "firmware_packages": [
        "linux-firmware",
        "ap6256-firmware",
        "linux-atm",
        "pbp-keyboard-hwdb",
        "pinebookpro-audio",
    ],
    "bootloader_package": "uboot-pbp",
    "hostname": "arch-pbp",
    "locale": "en_US.UTF-8",
    "charset": "UTF-8",
    "keymap": "us",
    "timezone": None,
    "timezone_lookup_url": "http://ip-api.com/json",
    # Order matters for both lists.
    "initcpio_modules": [
        "panfrost",
        "rockchipdrm",
        "hantro_vpu",
        "analogix_dp",
        "rockchip_rga",
        "panel_simple",
        "arc_uart",
        "cw2015_battery",
        "i2c-hid",
        "iscsi_boot_sysfs",
        "jsm",
        "pwm_bl",
        "uhid",
    ],
    "initcpio_binaries": [],
    "initcpio_files": [],
    "initcpio_hooks": [
        "base",
        "udev",
        "keyboard",
        "autodetect",
        "keymap",
        "modconf",
        "block",
        "encrypt",
        "filesystems",
        "fsck",
    ],
    "initcpio_compression": "xz",
    "linux_cmdline": None,
    "boot_label": "Arch Linux ARM",
    "kernel_image": "/Image",
    "fdt": "/dtbs/rockchip/rk3399-pinebook-pro.dtb",
    "spl_image": "boot/idbloader.img",
    "tpl_image": "boot/u-boot.itb",
    "dry_run": False,
}

SECRET_KEYS = frozenset({"cryptroot_password", "root_password"})


def part_suffix(disk: str, n: int) -> str:
    # nvme/mmcblk devices use p suffix
    if disk.endswith(tuple("0123456789")):
        return f"{disk}p{n}"
    return f"{disk}{n}"


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any]

    def _get(self, key: str) -> Any:
        value = self.raw.get(key)
        if value is None:
            return DEFAULT_CONFIG[key]
        return value

    def _secret(self, key: str) -> str:
        value = self.raw.get(key)
        if value is None:
            raise RuntimeError(f"{key} not supplied; pass --config")
        return str(value)

    def _list(self, key: str) -> List[str]:
        return [str(v) for v in (self._get(key) or [])]

    @property
    def device(self) -> str:
        return str(self._get("device"))

    @property
    def boot_partition(self) -> str:
        return part_suffix(self.device, 1)

    @property
    def root_partition(self) -> str:
        return part_suffix(self.device, 2)

    @property
    def sector_size(self) -> int:
        return int(self._get("sector_size"))

    @property
    def spl_offset(self) -> int:
        return int(self._get("spl_offset"))

    @property
    def tpl_offset(self) -> int:
        return int(self._get("tpl_offset"))

    @property
    def boot_offset(self) -> int:
        return int(self._get("boot_offset"))

    @property
    def boot_size_mib(self) -> int:
        return int(self._get("boot_size_mib"))

    @property
    def partition_gap(self) -> int:
        return int(self._get("partition_gap"))

    @property
    def mapper_name(self) -> str:
        return str(self._get("mapper_name"))

    @property
    def mapper_device(self) -> str:
        return f"/dev/mapper/{self.mapper_name}"

    @property
    def key_file(self) -> str:
        return str(self._get("key_file"))

    @property
    def target_key_file(self) -> str:
        return str(self._get("target_key_file"))

    @property
    def cryptroot_password(self) -> str:
        return self._secret("cryptroot_password")

    @property
    def root_password(self) -> str:
        return self._secret("root_password")

    @property
    def randomize_root(self) -> bool:
        return bool(self.raw.get("randomize_root", False))

    @property
    def base_packages(self) -> List[str]:
        return self._list("base_packages")

    @property
    def kernel_package(self) -> str:
        return str(self._get("kernel_package"))

    @property
    def firmware_packages(self) -> List[str]:
        return self._list("firmware_packages")

    @property
    def bootloader_package(self) -> str:
        return str(self._get("bootloader_package"))

    @property
    def hostname(self) -> str:
        return str(self._get("hostname")).strip() or DEFAULT_CONFIG["hostname"]

    @property
    def locale(self) -> str:
        return str(self._get("locale"))

    @property
    def charset(self) -> str:
        return str(self._get("charset"))

    @property
    def keymap(self) -> str:
        return str(self._get("keymap"))

    @property
    def timezone(self) -> Optional[str]:
        tz = self.raw.get("timezone")
        return str(tz) if tz else None

    @property
    def timezone_lookup_url(self) -> str:
        return str(self._get("timezone_lookup_url"))

    @property
    def initcpio_modules(self) -> List[str]:
        return self._list("initcpio_modules")

    @property
    def initcpio_binaries(self) -> List[str]:
        return self._list("initcpio_binaries")

    @property
    def initcpio_files(self) -> List[str]:
        return self._list("initcpio_files")

    @property
    def initcpio_hooks(self) -> List[str]:
        return self._list("initcpio_hooks")

    @property
    def initcpio_compression(self) -> str:
        return str(self._get("initcpio_compression"))

    @property
    def linux_cmdline(self) -> List[str]:
        tokens = self.raw.get("linux_cmdline")
        if tokens:
            return [str(t) for t in tokens]
        return [
            "initrd=/initramfs-linux.img",
            "console=tty1",
            f"cryptdevice={self.root_partition}:{self.mapper_name}",
            f"root={self.mapper_device}",
            "rw",
            "rootwait",
            "video=eDP-1:1920x1080@60",
        ]

    @property
    def boot_label(self) -> str:
        return str(self._get("boot_label"))

    @property
    def kernel_image(self) -> str:
        return str(self._get("kernel_image"))

    @property
    def fdt(self) -> str:
        return str(self._get("fdt"))

    @property
    def spl_image(self) -> str:
        return str(self._get("spl_image"))

    @property
    def tpl_image(self) -> str:
        return str(self._get("tpl_image"))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML install config; keys not present fall back to defaults later."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("install config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    unknown = sorted(set(raw) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    return raw
