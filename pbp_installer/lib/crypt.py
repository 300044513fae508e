from __future__ import annotations

import logging

from .command import CommandError, run_cmd

logger = logging.getLogger(__name__)

WIPE_MAPPER = "randomize_root"
KEY_FILE_BYTES = 2048


def _cryptsetup(*args: str) -> list[str]:
    return ["cryptsetup", "--batch-mode", *args]


def randomize_partition(part: str, *, dry_run: bool = False) -> None:
    """Fill a partition with random-looking data.

    Zeros written through a throwaway plain dm-crypt mapping keyed from
    /dev/random end up as noise on disk, so used and free blocks of the later
    LUKS volume are indistinguishable.
    """

    run_cmd(_cryptsetup("--key-file", "/dev/random", "open", part, WIPE_MAPPER, "--type", "plain"), dry_run=dry_run)
    try:
        r = run_cmd(
            ["dd", "if=/dev/zero", f"of=/dev/mapper/{WIPE_MAPPER}", "bs=16M", "status=progress"],
            check=False,
            dry_run=dry_run,
        )
        # dd stops with ENOSPC once the mapping is full; that is the normal end.
        if r.returncode != 0 and "No space left on device" not in r.stderr:
            raise CommandError(r.argv, r.returncode, r.stderr)
    except Exception:
        # Keep the wipe failure as the reported error.
        try:
            run_cmd(_cryptsetup("close", WIPE_MAPPER), dry_run=dry_run)
        except CommandError:
            logger.exception("Could not close %s after failed wipe", WIPE_MAPPER)
        raise
    run_cmd(_cryptsetup("close", WIPE_MAPPER), dry_run=dry_run)
    logger.info("Randomized %s", part)


def create_key_file(path: str, *, dry_run: bool = False) -> None:
    run_cmd(
        ["dd", "if=/dev/random", f"of={path}", "iflag=fullblock", f"bs={KEY_FILE_BYTES}", "count=1"],
        dry_run=dry_run,
    )
    run_cmd(["chmod", "0000", path], dry_run=dry_run)


def luks_format(part: str, key_file: str, *, dry_run: bool = False) -> None:
    run_cmd(_cryptsetup("--key-file", key_file, "luksFormat", "--type", "luks2", part), dry_run=dry_run)


def luks_add_passphrase(part: str, key_file: str, passphrase: str, *, dry_run: bool = False) -> None:
    """Add an interactive passphrase as a second key slot, unlocking with the key file."""

    run_cmd(
        _cryptsetup("--key-file", key_file, "luksAddKey", part),
        input_text=passphrase + "\n",
        dry_run=dry_run,
    )


def luks_open(part: str, name: str, key_file: str, *, dry_run: bool = False) -> None:
    run_cmd(_cryptsetup("--key-file", key_file, "open", part, name), dry_run=dry_run)


def luks_close(name: str, *, dry_run: bool = False) -> None:
    run_cmd(_cryptsetup("close", name), dry_run=dry_run)


def render_crypttab(*, mapper: str, root_part: str, key_file: str) -> str:
    return f"{mapper} {root_part} {key_file}\n"
