import json
import os

import pytest

from flowbuilder import config, paths


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in config.DEFAULTS:
        monkeypatch.delenv(name, raising=False)


def test_load_missing_config(config_file):
    assert config.load_config(config_file) == {}


def test_load_malformed_config(config_file):
    config_file.write_text("{not json")
    assert config.load_config(config_file) == {}


def test_save_and_load(config_file):
    config.save_config({"FLOWBUILDER_PORT": 9000}, config_file)
    assert json.loads(config_file.read_text()) == {"FLOWBUILDER_PORT": 9000}
    assert config.load_config(config_file) == {"FLOWBUILDER_PORT": 9000}


def test_set_setting_keeps_other_keys(config_file):
    config.save_config({"FLOWBUILDER_HOST": "0.0.0.0"}, config_file)
    config.set_setting("FLOWBUILDER_PORT", 9100, config_file)
    assert config.load_config(config_file) == {"FLOWBUILDER_HOST": "0.0.0.0", "FLOWBUILDER_PORT": 9100}


def test_defaults():
    settings = config.get_server_settings({})
    assert settings == {
        "host": "127.0.0.1",
        "port": 8080,
        "log_level": "INFO",
        "seed_demo": True,
    }


def test_environment_overrides_config_file(monkeypatch):
    monkeypatch.setenv("FLOWBUILDER_PORT", "9001")
    monkeypatch.setenv("FLOWBUILDER_SEED_DEMO", "no")
    settings = config.get_server_settings({"FLOWBUILDER_PORT": 7000, "FLOWBUILDER_LOG_LEVEL": "debug"})

    assert settings["port"] == 9001
    assert settings["seed_demo"] is False
    assert settings["log_level"] == "DEBUG"


def test_invalid_port_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("FLOWBUILDER_PORT", "eighty")
    assert config.get_int_setting("FLOWBUILDER_PORT", {}) == 8080


def test_env_file_is_loaded(tmp_path, monkeypatch):
    # keep load_dotenv from leaking into the real environment
    monkeypatch.setattr(os, "environ", dict(os.environ))
    env_file = tmp_path / ".env"
    env_file.write_text("FLOWBUILDER_HOST=0.0.0.0\n")

    assert config.ensure_env_loaded(env_file) is True
    assert config.get_setting("FLOWBUILDER_HOST", {}) == "0.0.0.0"


def test_missing_env_file(tmp_path):
    assert config.ensure_env_loaded(tmp_path / "missing.env") is False


def test_settings_home_override(monkeypatch, tmp_path):
    monkeypatch.setenv(paths.HOME_ENV_VAR, str(tmp_path))
    assert paths.get_config_path() == tmp_path / "config.json"
    assert paths.get_env_path() == tmp_path / ".env"


def test_settings_home_defaults_to_project_root(monkeypatch):
    monkeypatch.delenv(paths.HOME_ENV_VAR, raising=False)
    assert (paths.get_app_dir() / "flowbuilder" / "paths.py").exists()
