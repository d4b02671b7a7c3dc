"""
Preset management package for the impersonator.

This package provides the preset bundle model, the built-in presets, the
preset store with export/import, and the settings object that carries the
active working configuration.
"""

from .models import PresetBundle, POINTS_OF_VIEW, RESPONSE_STYLES
from .builtin import DEFAULT_PRESET_NAME, BUILTIN_PRESET_NAMES, get_builtin_presets
from .store import PresetStore, export_filename, EXPORT_VERSION
from .settings import ActiveConfiguration, ImpersonatorSettings

__all__ = [
    'PresetBundle',
    'POINTS_OF_VIEW',
    'RESPONSE_STYLES',
    'DEFAULT_PRESET_NAME',
    'BUILTIN_PRESET_NAMES',
    'get_builtin_presets',
    'PresetStore',
    'export_filename',
    'EXPORT_VERSION',
    'ActiveConfiguration',
    'ImpersonatorSettings',
]
