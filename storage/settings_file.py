"""
JSON file persistence for impersonator settings.

The host application normally owns persistence and calls its own debounced
save. SettingsFile is the stand-alone equivalent used by the CLI: one UTF-8
JSON document per installation holding the whole settings object.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict

logger = logging.getLogger(__name__)


class SettingsFile:
    """Reads and writes the settings object to a single JSON file"""

    def __init__(self, path: str):
        """
        Initialize SettingsFile.

        Args:
            path: Location of the settings JSON file
        """
        self.path = path

    def load(self) -> Dict[str, Any]:
        """
        Load persisted settings.

        Returns:
            The settings dict, or an empty dict when the file is missing or unreadable
        """
        if not os.path.exists(self.path):
            logger.info("No settings file at %s, starting from defaults", self.path)
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read settings file %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Settings file %s does not contain an object, ignoring it", self.path)
            return {}

        logger.debug("Loaded settings from %s", self.path)
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """Write settings atomically (temp file + rename)"""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".settings-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug("Saved settings to %s", self.path)

    def __repr__(self) -> str:
        return f"<SettingsFile(path='{self.path}')>"


def write_json_file(directory: str, filename: str, data: Dict[str, Any]) -> str:
    """
    Write an export payload as pretty-printed UTF-8 JSON.

    Returns:
        Full path of the written file
    """
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Wrote %s", path)
    return path


def read_json_file(path: str) -> Any:
    """Read a JSON document; errors propagate to the caller"""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
