import os
import yaml

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save settings to a YAML file.

    Values from the environment take precedence over the file:
    ``GYMLOG_DB_PATH``, ``GYMLOG_LOG_LEVEL``, ``PORT`` and ``FRONTEND_URL``.
    """

    ENV_OVERRIDES = {
        "GYMLOG_DB_PATH": "db_path",
        "GYMLOG_LOG_LEVEL": "log_level",
        "PORT": "port",
        "FRONTEND_URL": "frontend_url",
    }

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)

    def settings(self, **overrides) -> SettingsSchema:
        """Return validated settings from file, environment and ``overrides``."""
        data = self.load()
        for env, key in self.ENV_OVERRIDES.items():
            value = os.environ.get(env)
            if value:
                data[key] = value
        data.update({k: v for k, v in overrides.items() if v is not None})
        return validate_settings(data)
