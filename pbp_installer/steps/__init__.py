from .step_10_update_clock import UpdateClockStep
from .step_20_prepare_media import PrepareMediaStep
from .step_30_install_packages import InstallPackagesStep
from .step_40_configure_system import ConfigureSystemStep
from .step_50_create_initramfs import CreateInitramfsStep
from .step_60_install_bootloader import InstallBootloaderStep
from .step_90_clean_up import CleanUpStep

__all__ = [
    "UpdateClockStep",
    "PrepareMediaStep",
    "InstallPackagesStep",
    "ConfigureSystemStep",
    "CreateInitramfsStep",
    "InstallBootloaderStep",
    "CleanUpStep",
]
