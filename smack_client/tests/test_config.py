import json

import pytest

from smack_client.config import (
    DEFAULT_CONFIG,
    DEFAULT_SOCKET_PATH,
    SOCKET_PATH_ENV_VAR,
    SeverityTable,
    load_config_file,
    merge_options,
    resolve_socket_path,
)
from smack_client.errors import ConfigError
from smack_client.severity import resolve_policy


def test_defaults_match_daemon_tiers():
    assert DEFAULT_CONFIG.socket_path == DEFAULT_SOCKET_PATH
    assert DEFAULT_CONFIG.enabled is True
    assert DEFAULT_CONFIG.shake is True
    assert DEFAULT_CONFIG.undo_count == SeverityTable(light=1, medium=3, hard=5)
    assert DEFAULT_CONFIG.shake_intensity == SeverityTable(light=1, medium=3, hard=5)


def test_merge_without_options_returns_defaults():
    assert merge_options(None) is DEFAULT_CONFIG
    assert merge_options({}) is DEFAULT_CONFIG


def test_merge_nested_tables_key_by_key():
    config = merge_options({"undo_count": {"hard": 9}, "shake": False})
    assert config.undo_count == SeverityTable(light=1, medium=3, hard=9)
    assert config.shake_intensity == DEFAULT_CONFIG.shake_intensity
    assert config.shake is False
    assert config.enabled is True


def test_merge_accepts_camel_case_aliases():
    config = merge_options({"socketPath": "/run/smack.sock", "shakeIntensity": {"light": 2}})
    assert config.socket_path == "/run/smack.sock"
    assert config.shake_intensity.light == 2


def test_merge_over_explicit_base():
    base = merge_options({"undo_count": {"light": 2}})
    config = merge_options({"undo_count": {"medium": 4}}, base=base)
    assert config.undo_count == SeverityTable(light=2, medium=4, hard=5)


def test_merge_ignores_unknown_keys():
    config = merge_options({"colour": "red", "undo_count": {"catastrophic": 10}})
    assert config == DEFAULT_CONFIG


@pytest.mark.parametrize("value", [0, -1, 2.5, "3", True, None])
def test_merge_rejects_non_positive_integer_levels(value):
    with pytest.raises(ConfigError):
        merge_options({"undo_count": {"light": value}})


def test_merge_rejects_non_mapping_tables():
    with pytest.raises(ConfigError):
        merge_options({"shake_intensity": [1, 2, 3]})


def test_merge_rejects_empty_socket_path():
    with pytest.raises(ConfigError):
        merge_options({"socket_path": ""})


def test_load_config_file_merges_json(tmp_path):
    path = tmp_path / "smack.json"
    path.write_text(json.dumps({"enabled": False, "undoCount": {"medium": 2}}), encoding="utf-8")
    config = load_config_file(path)
    assert config.enabled is False
    assert config.undo_count == SeverityTable(light=1, medium=2, hard=5)


def test_load_config_file_falls_back_on_missing_or_invalid(tmp_path):
    assert load_config_file(tmp_path / "missing.json") is DEFAULT_CONFIG
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_config_file(broken) is DEFAULT_CONFIG
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    assert load_config_file(listing) is DEFAULT_CONFIG


def test_resolve_socket_path_precedence(monkeypatch):
    monkeypatch.delenv(SOCKET_PATH_ENV_VAR, raising=False)
    assert resolve_socket_path(None, DEFAULT_CONFIG) == DEFAULT_SOCKET_PATH
    monkeypatch.setenv(SOCKET_PATH_ENV_VAR, "/tmp/env.sock")
    assert resolve_socket_path(None, DEFAULT_CONFIG) == "/tmp/env.sock"
    assert resolve_socket_path("/tmp/cli.sock", DEFAULT_CONFIG) == "/tmp/cli.sock"


def test_policy_uses_configured_tables():
    config = merge_options({"undo_count": {"hard": 7}, "shake_intensity": {"hard": 2}})
    policy = resolve_policy(config, "hard")
    assert policy.undo_count == 7
    assert policy.shake_intensity == 2


def test_policy_unknown_severity_falls_back_to_one():
    assert tuple(resolve_policy(DEFAULT_CONFIG, "unknown")) == (1, 1)
    assert tuple(resolve_policy(DEFAULT_CONFIG, "HARD")) == (1, 1)
