"""
Impersonator settings: the preset store plus the working configuration.

ImpersonatorSettings mirrors the persisted settings object
``{enabled, activePreset, presets, currentSettings}``. Edits go to the
ActiveConfiguration working copy and reach the store only on commit;
uncommitted edits are dropped on the next load.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping

from errors import InvalidImportFormatError
from .models import (
    PresetBundle,
    clamp_non_negative,
    coerce_bool,
    POINTS_OF_VIEW,
    RESPONSE_STYLES,
    DEFAULT_CONTEXT_SIZE,
    DEFAULT_MAX_TOKENS,
)
from .store import PresetStore, EXPORT_VERSION, utc_timestamp

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "system_prompt",
    "context_size",
    "max_tokens",
    "instruction",
    "include_char_card",
    "include_persona",
    "pov",
    "response_style",
)


@dataclass
class ActiveConfiguration:
    """Working copy of the active preset plus the global on/off switch"""
    bundle: PresetBundle
    enabled: bool = False

    def update(self, field_name: str, value: Any) -> None:
        """
        Apply one form edit to the working copy.

        Numeric fields are clamped to >= 0 and choice fields must be valid.

        Raises:
            ValueError: For an unknown field or an invalid choice
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown preset field: {field_name}")

        if field_name == "context_size":
            value = clamp_non_negative(value, DEFAULT_CONTEXT_SIZE)
        elif field_name == "max_tokens":
            value = clamp_non_negative(value, DEFAULT_MAX_TOKENS)
        elif field_name in ("include_char_card", "include_persona"):
            value = bool(value)
        elif field_name == "pov":
            if value not in POINTS_OF_VIEW:
                raise ValueError(f"Invalid point of view: {value}")
        elif field_name == "response_style":
            if value not in RESPONSE_STYLES:
                raise ValueError(f"Invalid response style: {value}")
        else:
            value = "" if value is None else str(value)

        setattr(self.bundle, field_name, value)
        logger.debug("Updated %s", field_name)


class ImpersonatorSettings:
    """The preset store and the active working configuration"""

    def __init__(self, store: PresetStore, enabled: bool = False):
        self.store = store
        self.current = ActiveConfiguration(bundle=store.active(), enabled=enabled)

    @classmethod
    def load(
        cls,
        persisted: Mapping[str, Any] = None,
        default_enabled: bool = False,
        default_preset: str = None
    ) -> "ImpersonatorSettings":
        """
        Build settings from the persisted object merged with defaults.

        Args:
            persisted: Saved settings dict (may be empty or partial)
            default_enabled: Value of ``enabled`` when none was saved
            default_preset: Active preset when none was saved

        Returns:
            Settings whose working copy is the active preset
        """
        persisted = persisted if isinstance(persisted, Mapping) else {}
        store = PresetStore.load(
            persisted.get("presets"),
            persisted.get("activePreset") or persisted.get("activeName") or default_preset,
        )
        enabled = persisted.get("enabled")
        settings = cls(store, enabled=coerce_bool(enabled, default_enabled))
        logger.info("Settings loaded (enabled=%s, active=%s)", settings.enabled, store.active_name)
        return settings

    @property
    def enabled(self) -> bool:
        return self.current.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.current.enabled = bool(value)

    @property
    def active_name(self) -> str:
        return self.store.active_name

    def _reset_current(self) -> None:
        self.current.bundle = self.store.active()

    def select(self, name: str) -> PresetBundle:
        """Switch presets, replacing the working copy. Raises PresetNotFoundError."""
        self.current.bundle = self.store.switch(name)
        return self.current.bundle

    def commit(self) -> str:
        """Save the working copy into the active preset and return its name"""
        name = self.store.active_name
        self.store.save(name, self.current.bundle)
        self.current.bundle = self.current.bundle.with_name(name)
        return name

    def create(self, name: str) -> PresetBundle:
        """New preset from the working copy, made active. Raises NameConflictError."""
        self.current.bundle = self.store.create(name, self.current.bundle)
        return self.current.bundle

    def delete_active(self) -> str:
        """Delete the active preset and fall back to the default one"""
        name = self.store.active_name
        self.store.remove(name)
        self._reset_current()
        return name

    def import_preset(self, payload: Any, rename=None) -> str:
        name = self.store.import_one(payload, rename=rename)
        self._reset_current()
        return name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "activePreset": self.store.active_name,
            "presets": self.store.to_dict(),
            "currentSettings": self.current.bundle.to_dict(),
        }

    def export_settings(self, now: datetime = None) -> Dict[str, Any]:
        """Whole-settings export payload"""
        return {
            "version": EXPORT_VERSION,
            "settings": self.to_dict(),
            "timestamp": utc_timestamp(now),
        }

    def import_settings(self, payload: Any) -> None:
        """
        Replace all settings from a whole-settings export payload.

        Built-ins missing from the payload are restored, as on load.

        Raises:
            InvalidImportFormatError: If the payload has no settings with presets
        """
        if not isinstance(payload, Mapping):
            raise InvalidImportFormatError("Invalid settings file")
        data = payload.get("settings")
        if not isinstance(data, Mapping) or not isinstance(data.get("presets"), Mapping):
            raise InvalidImportFormatError("Invalid settings file")

        loaded = ImpersonatorSettings.load(data, default_enabled=self.enabled)
        self.store = loaded.store
        self.current = loaded.current
        logger.info("Imported settings with %d presets", len(self.store))

    def __repr__(self) -> str:
        return f"<ImpersonatorSettings(enabled={self.enabled}, store={self.store!r})>"


__all__ = ['ActiveConfiguration', 'ImpersonatorSettings', 'EDITABLE_FIELDS']
