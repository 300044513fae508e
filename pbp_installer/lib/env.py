from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    target_root: str = "/mnt"
    state_default: str = "/var/lib/pbp-installer/state.json"
    log_default: str = "/var/log/pbp-installer.log"


PATHS = Paths()
