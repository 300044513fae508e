import json

from pbp_installer.state_store import ensure_defaults, load_state, save_state


def test_defaults_do_not_override_user_values():
    state = ensure_defaults({"config": {"hostname": "pbp", "randomize_root": True}})
    cfg = state["config"]
    assert cfg["hostname"] == "pbp"
    assert cfg["randomize_root"] is True
    assert cfg["device"] == "/dev/mmcblk2"
    assert state["execution"]["completed_steps"] == []


def test_defaults_are_not_shared_between_states():
    a = ensure_defaults({})
    a["config"]["base_packages"].append("vim")
    b = ensure_defaults({})
    assert b["config"]["base_packages"] == ["cryptsetup"]


def test_passwords_are_never_persisted(tmp_path):
    path = tmp_path / "state.json"
    state = ensure_defaults({"config": {"root_password": "pa55", "cryptroot_password": "pa55"}})
    save_state(str(path), state)

    text = path.read_text()
    assert "pa55" not in text
    assert "hunter2" not in text
    assert state["config"]["root_password"] == "pa55"
    assert json.loads(text)["config"]["device"] == "/dev/mmcblk2"


def test_yaml_state_by_extension(tmp_path):
    path = tmp_path / "state.yaml"
    save_state(str(path), {"execution": {"completed_steps": ["10_update_clock"]}})
    assert "completed_steps:" in path.read_text()
    assert load_state(str(path)) == {"execution": {"completed_steps": ["10_update_clock"]}}


def test_missing_state_is_empty(tmp_path):
    assert load_state(str(tmp_path / "nope.json")) == {}


def test_reloaded_state_does_not_restore_default_passwords(tmp_path):
    path = tmp_path / "state.json"
    save_state(str(path), ensure_defaults({"config": {"root_password": "pa55"}}))

    state = ensure_defaults(load_state(str(path)))
    assert "root_password" not in state["config"]
    assert "cryptroot_password" not in state["config"]
    assert state["config"]["hostname"] == "arch-pbp"

    state = ensure_defaults({**load_state(str(path)), "config": {"root_password": "pa55"}})
    assert state["config"]["root_password"] == "pa55"
