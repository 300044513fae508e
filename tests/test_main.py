import json

import pytest

from pbp_installer import main as installer
from pbp_installer.lib.command import CommandError

ALL_STEPS = [
    "10_update_clock",
    "20_prepare_media",
    "30_install_packages",
    "40_configure_system",
    "50_create_initramfs",
    "60_install_bootloader",
    "90_clean_up",
]


def _seed_state(path, target_root):
    path.write_text(json.dumps({"execution": {"mounts": {"target_root": str(target_root)}}}))


def test_dry_run_executes_nothing_and_keeps_no_state(tmp_path, commands):
    state_path = tmp_path / "state.json"
    state = installer.run(state_path=str(state_path), log_path=str(tmp_path / "install.log"), dry_run=True)

    assert state["execution"]["summary"]["ran_steps"] == ALL_STEPS
    assert state["execution"]["decisions"]["timezone"] == "UTC"
    assert commands.calls == []
    assert not state_path.exists()


def test_full_run_records_every_step(tmp_path, commands):
    target = tmp_path / "target"
    state_path = tmp_path / "state.json"
    config_path = tmp_path / "install.yaml"
    config_path.write_text("timezone: Europe/Paris\nhostname: pbp\nroot_password: pa55\n")
    _seed_state(state_path, target)

    assert installer.main(["--config", str(config_path), "--state", str(state_path), "--log", str(tmp_path / "i.log")]) == 0

    saved = json.loads(state_path.read_text())
    assert saved["execution"]["completed_steps"] == ALL_STEPS
    assert saved["execution"]["current_step"] is None
    assert saved["config"]["hostname"] == "pbp"
    assert "root_password" not in saved["config"]
    assert (target / "etc/hostname").read_text() == "pbp\n"
    assert commands.programs()[0] == "timedatectl"
    assert commands.calls[-1] == ["cryptsetup", "--batch-mode", "close", "cryptroot"]


def test_failure_is_recorded_and_resumable(tmp_path, commands):
    target = tmp_path / "target"
    state_path = tmp_path / "state.json"
    log_path = str(tmp_path / "i.log")
    config_path = tmp_path / "install.yaml"
    config_path.write_text("timezone: UTC\nroot_password: pa55\n")
    _seed_state(state_path, target)

    commands.respond("pacstrap", returncode=1, stderr="error: target not found: linux-pbp")
    with pytest.raises(CommandError, match="target not found"):
        installer.run(config_path=str(config_path), state_path=str(state_path), log_path=log_path)

    saved = json.loads(state_path.read_text())
    assert saved["execution"]["completed_steps"] == ALL_STEPS[:2]
    assert saved["execution"]["errors"][-1]["step"] == "30_install_packages"

    commands.responses.clear()
    commands.calls.clear()
    state = installer.run(config_path=str(config_path), state_path=str(state_path), log_path=log_path)

    assert state["execution"]["summary"]["skipped_steps"] == ALL_STEPS[:2]
    assert state["execution"]["summary"]["ran_steps"] == ALL_STEPS[2:]
    assert "parted" not in commands.programs()


def test_unknown_config_key_is_rejected(tmp_path, commands):
    config_path = tmp_path / "install.yaml"
    config_path.write_text("hostnmae: typo\n")
    with pytest.raises(ValueError, match="hostnmae"):
        installer.run(config_path=str(config_path), state_path=str(tmp_path / "s.json"), log_path=str(tmp_path / "i.log"))
    assert commands.calls == []


def test_resume_without_config_refuses_default_password(tmp_path, commands):
    target = tmp_path / "target"
    state_path = tmp_path / "state.json"
    log_path = str(tmp_path / "i.log")
    config_path = tmp_path / "install.yaml"
    config_path.write_text("timezone: UTC\nroot_password: pa55\ncryptroot_password: pa55\n")
    _seed_state(state_path, target)

    commands.respond("pacstrap", returncode=1, stderr="error: failed retrieving file")
    with pytest.raises(CommandError):
        installer.run(config_path=str(config_path), state_path=str(state_path), log_path=log_path)

    commands.responses.clear()
    commands.calls.clear()
    with pytest.raises(RuntimeError, match="root_password not supplied"):
        installer.run(state_path=str(state_path), log_path=log_path)

    assert commands.find("systemd-firstboot") == []
    saved = json.loads(state_path.read_text())
    assert saved["execution"]["completed_steps"] == ALL_STEPS[:3]
    assert saved["execution"]["errors"][-1]["step"] == "40_configure_system"
    assert "hunter2" not in state_path.read_text()

    commands.calls.clear()
    installer.run(config_path=str(config_path), state_path=str(state_path), log_path=log_path)
    assert commands.find("systemd-firstboot")[0][6] == "--root-password=pa55"
