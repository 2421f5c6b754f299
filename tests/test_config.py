import os
import sys
import pytest
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig
from settings_schema import SettingsSchema, validate_settings


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for env in YamlConfig.ENV_OVERRIDES:
        monkeypatch.delenv(env, raising=False)


def test_defaults_without_file(tmp_path):
    settings = YamlConfig(str(tmp_path / "missing.yaml")).settings()
    assert settings == SettingsSchema()
    assert settings.port == 5001
    assert settings.db_path == "workout.db"


def test_file_and_env_precedence(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({"port": 6000, "db_path": "file.db", "log_level": "debug"}))
    cfg = YamlConfig(str(path))
    assert cfg.settings().port == 6000
    assert cfg.settings().log_level == "DEBUG"

    monkeypatch.setenv("PORT", "7000")
    monkeypatch.setenv("GYMLOG_DB_PATH", "env.db")
    settings = cfg.settings()
    assert settings.port == 7000
    assert settings.db_path == "env.db"
    assert cfg.settings(db_path="override.db").db_path == "override.db"


def test_save_validates(tmp_path):
    cfg = YamlConfig(str(tmp_path / "settings.yaml"))
    cfg.save({"recommendation_limit": 5})
    assert cfg.load() == {"recommendation_limit": 5}
    with pytest.raises(ValueError):
        cfg.save({"port": 0})


def test_rejects_bad_values():
    with pytest.raises(ValueError):
        validate_settings({"log_level": "loud"})
    with pytest.raises(ValueError):
        validate_settings({"recommendation_limit": 0})


def test_rejects_non_mapping(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        YamlConfig(str(path)).load()
