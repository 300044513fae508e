from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

MASK = "********"


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandError(RuntimeError):
    """A command exited non-zero; carries the tool's own diagnostics."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str, *, display: str | None = None):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {display or _fmt_argv(argv)}\n{stderr}")


def _mask(arg: str, secrets: Sequence[str]) -> str:
    for s in secrets:
        if s:
            arg = arg.replace(s, MASK)
    return arg


def _fmt_argv(argv: Sequence[str], secrets: Sequence[str] = ()) -> str:
    # Mask before quoting: quoting rewrites quotes inside a secret.
    return " ".join(shlex.quote(_mask(a, secrets)) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    secrets: Sequence[str] = (),
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command (with any ``secrets`` masked).
    - Captures stdout/stderr for callers that consume tool output.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    display = _fmt_argv(argv_list, secrets)
    logger.info("CMD %s", display)

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr or "", display=display)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout or "", stderr=p.stderr or "")
