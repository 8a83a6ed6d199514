#!/usr/bin/env python3
"""
Tutorial "already shown" flag storage.

The only persisted state is one boolean per tutorial, optionally per user.
Keys are "tutorial_<id>" or "tutorial_<id>_user_<user>".

Usage:
    from spotlight_tour.storage.state_store import JsonStateStore

    store = JsonStateStore(Path("data/tutorial_state.json"))
    if not store.is_shown("home_tour", user_id="42"):
        ...
    store.set_shown("home_tour", True, user_id="42")
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Protocol

from box import Box

logger = logging.getLogger(__name__)


def build_state_key(tutorial_id: str, user_id: Optional[str] = None) -> str:
    """Storage key for a tutorial, scoped to a user when one is given."""
    if user_id is not None:
        return f"tutorial_{tutorial_id}_user_{user_id}"
    return f"tutorial_{tutorial_id}"


class TutorialStateStore(Protocol):
    """Key-value persistence of tutorial "shown" flags."""

    def is_shown(self, tutorial_id: str, user_id: Optional[str] = None) -> bool: ...

    def set_shown(self, tutorial_id: str, shown: bool, user_id: Optional[str] = None) -> None: ...

    def clear(self, tutorial_id: str, user_id: Optional[str] = None) -> None: ...

    def clear_all(self) -> None: ...


class InMemoryStateStore:
    """Process-local store, mostly useful for tests and ephemeral hosts."""

    def __init__(self):
        self._flags: Dict[str, bool] = {}
        self._lock = Lock()

    def is_shown(self, tutorial_id: str, user_id: Optional[str] = None) -> bool:
        with self._lock:
            return self._flags.get(build_state_key(tutorial_id, user_id), False)

    def set_shown(self, tutorial_id: str, shown: bool, user_id: Optional[str] = None) -> None:
        with self._lock:
            self._flags[build_state_key(tutorial_id, user_id)] = bool(shown)

    def clear(self, tutorial_id: str, user_id: Optional[str] = None) -> None:
        with self._lock:
            self._flags.pop(build_state_key(tutorial_id, user_id), None)

    def clear_all(self) -> None:
        with self._lock:
            self._flags.clear()


class JsonStateStore:
    """
    JSON file backed store.

    File layout mirrors the settings file: {"states": {...}, "metadata": {...}}.
    Every write rewrites the whole file.
    """

    def __init__(self, state_file: Path):
        """
        Args:
            state_file: Path of the JSON file; created on first write
        """
        self.state_file = Path(state_file)
        self._lock = Lock()
        self._states = Box()
        self._load_from_file()
        logger.info(f"JsonStateStore initialized with {len(self._states)} flags from {self.state_file}")

    def is_shown(self, tutorial_id: str, user_id: Optional[str] = None) -> bool:
        with self._lock:
            return bool(self._states.get(build_state_key(tutorial_id, user_id), False))

    def set_shown(self, tutorial_id: str, shown: bool, user_id: Optional[str] = None) -> None:
        key = build_state_key(tutorial_id, user_id)
        with self._lock:
            self._states[key] = bool(shown)
            self._save_to_file()
        logger.debug(f"Set {key} = {shown}")

    def clear(self, tutorial_id: str, user_id: Optional[str] = None) -> None:
        key = build_state_key(tutorial_id, user_id)
        with self._lock:
            if key in self._states:
                del self._states[key]
                self._save_to_file()
        logger.debug(f"Cleared {key}")

    def clear_all(self) -> None:
        with self._lock:
            self._states = Box()
            self._save_to_file()
        logger.info(f"Cleared all tutorial flags in {self.state_file}")

    def _load_from_file(self) -> None:
        if not self.state_file.exists():
            logger.debug(f"State file not found, starting empty: {self.state_file}")
            return

        try:
            with open(self.state_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse state file: {e}")
            logger.warning("Using empty tutorial state")
            return

        states = data.get("states", {}) if isinstance(data, dict) else {}
        self._states = Box({k: bool(v) for k, v in states.items()})

    def _save_to_file(self) -> None:
        data = {
            "states": self._states.to_dict(),
            "metadata": {
                "version": "1.0",
                "last_modified": datetime.now().isoformat()
            }
        }
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.state_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except PermissionError as e:
            logger.error(f"Permission denied writing state file: {e}")
            raise
