"""
Animation Mode Storage - remembers the selected mode across restarts

Only a single small integer is persisted. Two implementations:

    MemoryModeStore: process-lifetime storage (tests, headless runs)
    JsonModeStore: JSON file {"mode": 6, "saved_at": "..."} written atomically

Storage failures are logged and never interrupt the animation.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ModeStore(Protocol):
    """Persistence collaborator used by the AnimationEngine."""

    def load_selected_mode(self) -> Optional[int]:
        ...

    def save_selected_mode(self, mode: int) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryModeStore:
    """In-memory store; optionally seeded with a previously saved mode."""

    def __init__(self, mode: Optional[int] = None):
        self._mode = mode
        self.save_count = 0

    def load_selected_mode(self) -> Optional[int]:
        return self._mode

    def save_selected_mode(self, mode: int) -> None:
        self._mode = int(mode)
        self.save_count += 1

    def clear(self) -> None:
        self._mode = None


class JsonModeStore:
    """
    File-backed store.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write never leaves a truncated state file.
    """

    def __init__(self, path: str):
        self.path = path

    def load_selected_mode(self) -> Optional[int]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r') as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read animation state {self.path}: {e}")
            return None

        mode = saved.get('mode') if isinstance(saved, dict) else None
        if isinstance(mode, bool) or not isinstance(mode, int):
            logger.warning(f"Ignoring malformed animation mode in {self.path}: {mode!r}")
            return None
        return mode

    def save_selected_mode(self, mode: int) -> None:
        payload = {
            'mode': int(mode),
            'saved_at': datetime.now().isoformat(),
        }
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.animation-', suffix='.json')
            with os.fdopen(fd, 'w') as f:
                json.dump(payload, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save animation mode to {self.path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def clear(self) -> None:
        try:
            os.remove(self.path)
            logger.info("Animation mode storage cleared")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clear animation state {self.path}: {e}")
