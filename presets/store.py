"""
PresetStore holding named preset bundles and the active selection.

This module provides the PresetStore class: built-in and user presets in
insertion order, the active preset name, and single-preset export/import
using the versioned ``{version, preset, timestamp}`` payload.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from errors import (
    InvalidImportFormatError,
    NameConflictError,
    PresetNotFoundError,
    PresetProtectedError,
)
from .builtin import BUILTIN_PRESET_NAMES, DEFAULT_PRESET_NAME, get_builtin_presets
from .models import PresetBundle

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
IMPORT_SUFFIX = " (imported)"

# Called with (conflicting_name, suggested_name); returns the name to use or None to cancel
RenameResolver = Callable[[str, str], Optional[str]]


def utc_timestamp(now: datetime = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def export_filename(name: str, now: datetime = None) -> str:
    """
    Build the export file name for a preset.

    Examples:
        >>> export_filename("First Person Short", datetime(2024, 1, 15, tzinfo=timezone.utc))
        'impersonator-first-person-short-1705276800000.json'
    """
    now = now or datetime.now(timezone.utc)
    slug = re.sub(r"\s+", "-", name.lower())
    return f"impersonator-{slug}-{int(now.timestamp() * 1000)}.json"


def suggest_import_name(name: str) -> str:
    return f"{name}{IMPORT_SUFFIX}"


class PresetStore:
    """
    Named preset bundles plus the active preset name.

    Invariants:
    - every key in ``bundles`` equals the bundle's ``name``
    - ``active_name`` always refers to an existing bundle
    - built-in presets can be overwritten but never removed
    """

    def __init__(self, bundles: Mapping[str, PresetBundle] = None, active_name: str = DEFAULT_PRESET_NAME):
        self.bundles: Dict[str, PresetBundle] = {}
        self.builtin_names = BUILTIN_PRESET_NAMES

        for name, bundle in (bundles or get_builtin_presets()).items():
            self.bundles[name] = bundle.with_name(name)
        self._restore_builtins()

        self.active_name = active_name
        self._ensure_active_valid()

    @classmethod
    def load(cls, persisted_presets: Mapping[str, Any] = None, active_name: str = None) -> "PresetStore":
        """
        Create a store from persisted state merged with the built-ins.

        Persisted bundles win over built-ins of the same name; built-ins only
        fill gaps. Malformed entries are skipped. Never raises.

        Args:
            persisted_presets: Mapping of name -> bundle dict, as saved
            active_name: Persisted active preset name

        Returns:
            A usable PresetStore
        """
        bundles: Dict[str, PresetBundle] = {}

        if isinstance(persisted_presets, Mapping):
            for name, data in persisted_presets.items():
                if not isinstance(name, str) or not name.strip() or not isinstance(data, Mapping):
                    logger.warning("Skipping malformed persisted preset %r", name)
                    continue
                try:
                    bundles[name] = PresetBundle.from_dict(data, name=name)
                except ValueError as e:
                    logger.warning("Skipping persisted preset %r: %s", name, e)
        elif persisted_presets is not None:
            logger.warning("Persisted presets are not a mapping, using built-ins only")

        if not bundles:
            bundles = get_builtin_presets()

        store = cls(bundles, active_name or DEFAULT_PRESET_NAME)
        logger.info("PresetStore loaded with %d presets, active: %s", len(store.bundles), store.active_name)
        return store

    def _restore_builtins(self) -> None:
        for name, bundle in get_builtin_presets().items():
            if name not in self.bundles:
                self.bundles[name] = bundle

    def _ensure_active_valid(self) -> None:
        if not self.active_name or self.active_name not in self.bundles:
            if self.active_name:
                logger.warning("Active preset %r not found, falling back to %s", self.active_name, DEFAULT_PRESET_NAME)
            self.active_name = DEFAULT_PRESET_NAME

    def __contains__(self, name: str) -> bool:
        return name in self.bundles

    def __len__(self) -> int:
        return len(self.bundles)

    def names(self) -> List[str]:
        """Preset names for display, in insertion order"""
        return list(self.bundles)

    def is_builtin(self, name: str) -> bool:
        return name in self.builtin_names

    def get(self, name: str) -> PresetBundle:
        """Return a copy of the named bundle"""
        if name not in self.bundles:
            raise PresetNotFoundError(name)
        return self.bundles[name].copy()

    def active(self) -> PresetBundle:
        return self.get(self.active_name)

    def switch(self, name: str) -> PresetBundle:
        """
        Make a preset active.

        Returns:
            A copy of the bundle to use as the new working configuration

        Raises:
            PresetNotFoundError: If no preset has this name
        """
        bundle = self.get(name)
        self.active_name = name
        logger.info("Switched to preset: %s", name)
        return bundle

    def save(self, name: str, bundle: PresetBundle) -> None:
        """Insert or overwrite a preset. Overwriting a built-in is allowed."""
        if not name or not name.strip():
            raise ValueError("Preset name cannot be empty")
        self.bundles[name] = bundle.with_name(name)
        logger.info("Saved preset: %s", name)

    def create(self, name: str, base: PresetBundle) -> PresetBundle:
        """
        Add a new preset built from ``base`` and make it active.

        Raises:
            ValueError: If name is blank
            NameConflictError: If a preset with this name already exists
        """
        if not name or not name.strip():
            raise ValueError("Preset name cannot be empty")
        if name in self.bundles:
            raise NameConflictError(name)

        bundle = base.with_name(name)
        self.bundles[name] = bundle
        self.active_name = name
        logger.info("Created preset: %s", name)
        return bundle.copy()

    def remove(self, name: str) -> None:
        """
        Delete a user preset.

        Raises:
            PresetProtectedError: If name is a built-in preset
            PresetNotFoundError: If no preset has this name
        """
        if self.is_builtin(name):
            raise PresetProtectedError(name)
        if name not in self.bundles:
            raise PresetNotFoundError(name)

        del self.bundles[name]
        if self.active_name == name:
            self.active_name = DEFAULT_PRESET_NAME
        logger.info("Deleted preset: %s", name)

    def export_one(self, name: str, now: datetime = None) -> Dict[str, Any]:
        """Serialize one preset as a versioned export payload"""
        bundle = self.get(name)
        return {
            "version": EXPORT_VERSION,
            "preset": bundle.to_dict(),
            "timestamp": utc_timestamp(now),
        }

    def import_one(self, payload: Any, rename: RenameResolver = None) -> str:
        """
        Add a preset from an export payload and make it active.

        A name collision is resolved through ``rename``; existing presets are
        never overwritten.

        Args:
            payload: Parsed export payload
            rename: Resolver asked for a replacement name on collision

        Returns:
            The name the preset was stored under

        Raises:
            InvalidImportFormatError: If the payload has no preset with a name
            NameConflictError: If the collision could not be resolved
        """
        if not isinstance(payload, Mapping):
            raise InvalidImportFormatError()

        data = payload.get("preset", payload.get("bundle"))
        if not isinstance(data, Mapping) or not isinstance(data.get("name"), str) or not data["name"].strip():
            raise InvalidImportFormatError()

        version = payload.get("version")
        if version is not None and str(version) != EXPORT_VERSION:
            logger.warning("Importing preset with unknown version %s", version)

        name = data["name"]
        if name in self.bundles:
            if rename is None:
                raise NameConflictError(name)
            new_name = rename(name, suggest_import_name(name))
            if not new_name or not new_name.strip():
                logger.info("Import of preset %s cancelled", name)
                raise NameConflictError(name)
            if new_name in self.bundles:
                raise NameConflictError(new_name)
            name = new_name

        self.bundles[name] = PresetBundle.from_dict(data, name=name)
        self.active_name = name
        logger.info("Imported preset: %s", name)
        return name

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: bundle.to_dict() for name, bundle in self.bundles.items()}

    def __repr__(self) -> str:
        return f"<PresetStore(presets={len(self.bundles)}, active='{self.active_name}')>"


# Export public API
__all__ = [
    'PresetStore',
    'RenameResolver',
    'EXPORT_VERSION',
    'export_filename',
    'suggest_import_name',
    'utc_timestamp',
]
