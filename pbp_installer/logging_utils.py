from __future__ import annotations

import logging
from pathlib import Path

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _open_log(log_path: str) -> tuple[logging.FileHandler, str]:
    """Open the install transcript, falling back to the working directory.

    Some live ISOs mount /var/log read-only; the fallback keeps the transcript
    next to wherever the installer was started.
    """

    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = str(Path.cwd() / "pbp-installer.log")
        return logging.FileHandler(fallback), fallback


def configure_logging(log_path: str = DEFAULT_LOG_PATH, level: int = logging.INFO) -> str:
    """Send all installer logging to the transcript file and the console.

    Safe to call more than once; later calls return the path chosen first.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_pbp_log_path", None):
        return root._pbp_log_path

    file_handler, chosen_path = _open_log(log_path)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    for handler in (file_handler, logging.StreamHandler()):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    root._pbp_log_path = chosen_path
    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path
