"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "PROMPT_TO_CODE_CONFIG_DIR"


def _default_config() -> dict[str, Any]:
    return {
        "provider": "openai",
        "openai": {"apiKey": "", "model": "gpt-4o", "maxTokens": 4096, "temperature": 0.7},
        "vllm": {
            "endpoint": "http://localhost:8000",
            "apiKey": "",
            "model": "meta-llama/Llama-3.1-8B-Instruct",
            "maxTokens": 4096,
        },
        "gemini": {"apiKey": "", "model": "gemini-2.5-flash", "maxTokens": 8192},
        "chatLanguage": "",
        "promptToCode": {
            "generateDescription": True,
            "generateDescriptionInUserPreferredLanguage": True,
        },
        "server": {"host": "127.0.0.1", "port": 8000},
    }


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None

    def __init__(self, config_dir: str | os.PathLike | None = None):
        self._config_file = self._resolve_config_file(config_dir)
        self._config = self._load_config()

    @staticmethod
    def _resolve_config_file(config_dir: str | os.PathLike | None) -> Path:
        """Pick the first writable location: argument, env var, home dir, temp dir"""
        candidates = [config_dir, os.environ.get(CONFIG_DIR_ENV), Path.home() / ".prompt_to_code"]
        for candidate in candidates:
            if not candidate:
                continue
            config_path = Path(candidate)
            try:
                config_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning("Cannot write to %s: %s", config_path, e)
                continue
            return config_path / "config.json"

        tmp_dir = Path(tempfile.gettempdir()) / "prompt_to_code"
        tmp_dir.mkdir(parents=True, exist_ok=True)
        logger.warning("Using temporary config path: %s", tmp_dir)
        return tmp_dir / "config.json"

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls, instance: "ConfigManager | None" = None) -> None:
        """Replace the singleton (None drops it)"""
        cls._instance = instance

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, layered over the defaults"""
        config = _default_config()
        if not self._config_file.exists():
            return config

        try:
            with open(self._config_file) as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading config: %s", e)
            return config

        for key, value in stored.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value
        return config

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return copy.deepcopy(self._config)

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        self._config.update(config)
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)
