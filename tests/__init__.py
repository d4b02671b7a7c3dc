"""
Test package for the impersonator.

This package contains tests for:
- Preset store, settings and export/import
- Placeholder resolution, windowing and prompt assembly
- The generation gate and the Impersonator service
- Provider backend, settings file and CLI wiring
"""
