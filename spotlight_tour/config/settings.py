#!/usr/bin/env python3
"""
Dynamic settings management for spotlight_tour.

Supports hierarchical settings with dot notation (e.g., "overlay.readiness.max_attempts"),
automatic JSON persistence, default values, and group-based queries.

Usage:
    from spotlight_tour.config.settings import Settings

    # Initialize settings (do this once at app startup)
    settings = Settings()

    # Create settings with defaults
    settings.create("overlay.settle_delay_ms", default=300)
    settings.create("renderer.tooltip.spacing_dp", default=16)

    # Update settings
    settings.update("overlay.settle_delay_ms", 500)

    # Get individual setting
    delay = settings.get("overlay.settle_delay_ms")

    # Get all settings in a group
    tooltip_settings = settings.get_group("renderer.tooltip")

    # Reset to defaults
    settings.reset("overlay.settle_delay_ms")
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from box import Box

logger = logging.getLogger(__name__)


class Settings:
    """
    Hierarchical settings manager with JSON persistence.

    Settings are stored in dot notation (e.g., "group.subgroup.setting")
    and persisted to settings.json. Uses python-box for nested access.

    Thread-safe singleton implementation.
    """

    _instance = None
    _lock = Lock()

    def __new__(cls, settings_file: Optional[Path] = None):
        """Singleton pattern to ensure only one Settings instance exists."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(Settings, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self, settings_file: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            settings_file: Path to settings JSON file. Defaults to data/settings.json
        """
        if self._initialized:
            return

        self._initialized = True
        self._io_lock = Lock()

        if settings_file is None:
            self.settings_file = Path(__file__).parent.parent.parent / "data" / "settings.json"
        else:
            self.settings_file = Path(settings_file)

        self._settings = Box(default_box=True, box_dots=True)
        self._defaults = Box(default_box=True, box_dots=True)

        self._load_from_file()

        logger.info(f"Settings initialized from {self.settings_file}")

    def create(self, setting_name: str, default: Any) -> None:
        """
        Create a setting with a default value.

        A value already present in the JSON file is preserved; otherwise the
        default is stored and written back.

        Args:
            setting_name: Dot-notation path (e.g., "overlay.frame_delay_ms")
            default: Default value for the setting
        """
        self._set_nested(self._defaults, setting_name, default)

        existing_value = self._get_nested(self._settings, setting_name)
        if existing_value is None:
            self._set_nested(self._settings, setting_name, default)
            self._save_to_file()
            logger.debug(f"Created setting '{setting_name}' with default value: {default}")
        else:
            logger.debug(f"Setting '{setting_name}' already exists with value: {existing_value} (default: {default})")

    def update(self, setting_name: str, value: Any) -> None:
        """
        Update an existing setting's value.

        Raises:
            KeyError: If the setting doesn't exist
        """
        old_value = self._get_nested(self._settings, setting_name)
        if old_value is None:
            raise KeyError(f"Setting '{setting_name}' does not exist. Use create() first.")

        self._set_nested(self._settings, setting_name, value)
        self._save_to_file()

        logger.debug(f"Updated setting '{setting_name}': {old_value} -> {value}")

    def get(self, setting_name: str, fallback: Any = None) -> Any:
        """
        Get a setting's value.

        Falls back to the registered default, then to fallback.
        """
        value = self._get_nested(self._settings, setting_name)
        if value is not None:
            return value

        default = self._get_nested(self._defaults, setting_name)
        return default if default is not None else fallback

    def get_group(self, group_path: str) -> Dict[str, Any]:
        """Get all settings within a group as a plain dict."""
        group_data = self._get_nested(self._settings, group_path)

        if group_data is None:
            logger.warning(f"Group '{group_path}' not found")
            return {}

        if isinstance(group_data, Box):
            return group_data.to_dict()

        return group_data if isinstance(group_data, dict) else {}

    def exists(self, setting_name: str) -> bool:
        return self._get_nested(self._settings, setting_name) is not None

    def reset(self, setting_name: str) -> None:
        """
        Reset a setting to its default value.

        Raises:
            KeyError: If the setting has no registered default
        """
        default_value = self._get_nested(self._defaults, setting_name)
        if default_value is None:
            raise KeyError(f"Setting '{setting_name}' has no default value")

        self._set_nested(self._settings, setting_name, default_value)
        self._save_to_file()

        logger.info(f"Reset setting '{setting_name}' to default: {default_value}")

    def _get_nested(self, data: Box, path: str) -> Any:
        """Get a value from nested dictionary using dot notation."""
        current = data
        for key in path.split('.'):
            if not isinstance(current, dict):
                return None
            current = current.get(key)
            if current is None:
                return None

        # Empty Box is what default_box hands back for missing groups
        if isinstance(current, dict) and len(current) == 0:
            return None

        return current

    def _set_nested(self, data: Box, path: str, value: Any) -> None:
        """Set a value in nested dictionary using dot notation."""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            if key not in current or not isinstance(current[key], dict):
                current[key] = Box(default_box=True, box_dots=True)
            current = current[key]

        current[keys[-1]] = value

    def _load_from_file(self) -> None:
        """Load settings from JSON file."""
        if not self.settings_file.exists():
            logger.info(f"Settings file not found, creating new: {self.settings_file}")
            self._save_to_file()
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if isinstance(data, dict) and "settings" in data:
                settings_data = data["settings"]
            else:
                settings_data = data

            self._settings = Box(settings_data, default_box=True, box_dots=True)
            logger.info(f"Loaded settings from {self.settings_file}")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse settings file: {e}")
            logger.warning("Using empty settings")
            self._settings = Box(default_box=True, box_dots=True)

    def _save_to_file(self) -> None:
        """Save current settings to file, creating parent directories."""
        data = {
            "settings": self._settings.to_dict(),
            "metadata": {
                "version": "1.0",
                "last_modified": datetime.now().isoformat()
            }
        }

        try:
            with self._io_lock:
                self.settings_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self.settings_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)

            logger.debug(f"Settings saved to {self.settings_file}")
        except PermissionError as e:
            logger.error(f"Permission denied writing settings file: {e}")
            raise
