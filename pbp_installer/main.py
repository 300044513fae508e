from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .install_config import load_config_file
from .lib.env import PATHS
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    CleanUpStep,
    ConfigureSystemStep,
    CreateInitramfsStep,
    InstallBootloaderStep,
    InstallPackagesStep,
    PrepareMediaStep,
    UpdateClockStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = PATHS.state_default


def build_steps():
    return [
        UpdateClockStep(),
        PrepareMediaStep(),
        InstallPackagesStep(),
        ConfigureSystemStep(),
        CreateInitramfsStep(),
        InstallBootloaderStep(),
        CleanUpStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Run the install pipeline, persisting state after each step for resume."""

    actual_log_path = configure_logging(log_path=log_path)

    state = load_state(state_path)
    if config_path:
        # The config file always wins over what an earlier run recorded.
        state.setdefault("config", {}).update(load_config_file(config_path))
    if dry_run:
        state.setdefault("config", {})["dry_run"] = True
    state = ensure_defaults(state)

    # A dry run ignores recorded completion and never writes state.
    dry = bool(state["config"].get("dry_run", False))
    persist = (lambda s: None) if dry else (lambda s: save_state(state_path, s))

    paths = state["execution"].setdefault("paths", {})
    paths["log_path_requested"] = log_path
    paths["log_path_actual"] = actual_log_path

    try:
        result = run_pipeline(
            state=state,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            force=force or dry,
            checkpoint=persist,
        )
        state = result.state
        summary = state["execution"].setdefault("summary", {})
        summary["ran_steps"] = result.ran_steps
        summary["skipped_steps"] = result.skipped_steps
        return state
    except Exception as e:
        logger.exception("Installer failed")
        state["execution"].setdefault("errors", []).append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        persist(state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="pbp-installer", description="Install Arch Linux ARM onto a Pinebook Pro eMMC")
    p.add_argument("--config", default=None, help="Path to install config (yaml)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 30_install_packages)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log commands and files without touching the system")

    args = p.parse_args(argv)

    run(
        config_path=args.config,
        state_path=args.state,
        log_path=args.log,
        start_at=args.start_at,
        stop_after=args.stop_after,
        force=args.force,
        dry_run=bool(args.dry_run),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
