import json
import os
from pathlib import Path
from typing import Optional
from .config_model import AppConfig

CONFIG_FILE_NAME = "config.json"

# Environment overrides, applied on top of whatever the config file says
DATA_DIR_ENV = "QUIZ_DATA_DIR"
DATABASE_URL_ENV = "QUIZ_DATABASE_URL"

class SettingsManager:
    def __init__(self, config_dir: str = "."):
        self.config_dir = Path(config_dir)
        self.config_path = self.config_dir / CONFIG_FILE_NAME
        self._config: Optional[AppConfig] = None

    def load_settings(self) -> AppConfig:
        """Loads settings from the config file, or raises FileNotFoundError if not exists."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, 'r') as f:
            data = json.load(f)

        self._config = self._apply_env(AppConfig(**data))
        return self._config

    def load_or_default(self) -> AppConfig:
        """Like load_settings, but falls back to defaults when no file exists."""
        if self.exists():
            return self.load_settings()
        self._config = self._apply_env(AppConfig())
        return self._config

    def save_settings(self, config: AppConfig):
        """Saves the configuration to the file."""
        self._config = config
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            f.write(config.model_dump_json(indent=4))

    def get_config(self) -> AppConfig:
        if self._config is None:
            return self.load_or_default()
        return self._config

    def exists(self) -> bool:
        return self.config_path.exists()

    @staticmethod
    def _apply_env(config: AppConfig) -> AppConfig:
        data_dir = os.getenv(DATA_DIR_ENV)
        if data_dir:
            config.data_dir = data_dir
        database_url = os.getenv(DATABASE_URL_ENV)
        if database_url:
            config.database.url = database_url
        return config
