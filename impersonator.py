"""
Impersonation service and single-flight generation gate.

GenerationGate lets at most one generation run at a time. It holds an
asyncio.Lock for the duration of the backend call and rejects a request that
finds the lock taken, instead of waiting for it. The lock is released by
``async with`` on every exit path.

Impersonator is the boundary for every triggering action (button, slash
command, host event, preset management). It recovers all ImpersonatorError
kinds into a notification plus an empty result so nothing reaches the host.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from core.abstractions import Notifier, TextGenerator
from core.notifications import LoggingNotifier
from errors import (
    AlreadyInProgressError,
    DisabledError,
    EmptyResponseError,
    GenerationFailedError,
    ImpersonatorError,
    InvalidImportFormatError,
)
from presets.settings import ImpersonatorSettings
from presets.store import RenameResolver, export_filename
from prompt.assembler import GenerationRequest, PromptAssembler
from storage.interfaces import ContextProvider
from storage.settings_file import read_json_file, write_json_file

logger = logging.getLogger(__name__)

TRUE_STRINGS = ("true", "1", "yes", "on")


def is_true_boolean(value: Any) -> bool:
    """Interpret a slash-command style boolean argument"""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


@dataclass
class ImpersonationReport:
    """Result of a test impersonation"""
    text: str
    characters: int
    words: int

    @classmethod
    def from_text(cls, text: str) -> "ImpersonationReport":
        return cls(text=text, characters=len(text), words=len(text.split()))


class GenerationGate:
    """Idle/Busy guard around the generation backend"""

    def __init__(self, generator: TextGenerator, timeout: float = None):
        """
        Args:
            generator: Backend performing the actual generation
            timeout: Seconds to wait for the backend, None or 0 to wait forever
        """
        self.generator = generator
        self.timeout = timeout or None
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(self, build_request: Callable[[], GenerationRequest], enabled: bool) -> str:
        """
        Build a request and generate text for it.

        Args:
            build_request: Called once the gate accepts the request; may raise NoContextError
            enabled: Global feature switch

        Returns:
            Generated text with surrounding whitespace removed

        Raises:
            AlreadyInProgressError: Another generation is running
            DisabledError: The feature is switched off
            NoContextError: Raised by build_request, before the gate turns busy
            GenerationFailedError: The backend raised or timed out
            EmptyResponseError: The backend returned nothing
        """
        # Reject instead of queueing behind the running request
        if self._lock.locked():
            raise AlreadyInProgressError()
        if not enabled:
            raise DisabledError()

        request = build_request()

        # An unlocked lock is acquired without suspending
        async with self._lock:
            try:
                logger.info("Starting impersonation...")
                response = await self._generate(request)
            except ImpersonatorError:
                raise
            except Exception as e:
                raise GenerationFailedError(str(e) or type(e).__name__) from e

        if not response or not str(response).strip():
            raise EmptyResponseError()

        return str(response).strip()

    async def _generate(self, request: GenerationRequest) -> str:
        call = self.generator.generate(request.user_prompt, request.system_prompt, request.response_length)
        if not self.timeout:
            return await call

        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationFailedError(f"Timed out after {self.timeout:g} seconds") from e


class Impersonator:
    """Generates the user's next message and manages presets on behalf of the host"""

    def __init__(
        self,
        settings: ImpersonatorSettings,
        generator: TextGenerator,
        context_provider: ContextProvider,
        notifier: Notifier = None,
        save_settings: Callable[[Dict[str, Any]], None] = None,
        assembler: PromptAssembler = None,
        timeout: float = None,
        export_dir: str = "."
    ):
        """
        Initialize Impersonator.

        Args:
            settings: Loaded impersonator settings
            generator: Text generation backend
            context_provider: Returns the current chat snapshot, or None
            notifier: User-visible notification channel (defaults to the log)
            save_settings: Persists the settings dict after every change
            assembler: Prompt assembler (a default one is created if omitted)
            timeout: Generation timeout in seconds, None to disable
            export_dir: Default directory for export files
        """
        self.settings = settings
        self.context_provider = context_provider
        self.notifier = notifier or LoggingNotifier()
        self.save_settings = save_settings
        self.assembler = assembler or PromptAssembler()
        self.gate = GenerationGate(generator, timeout=timeout)
        self.export_dir = export_dir

    @property
    def busy(self) -> bool:
        return self.gate.busy

    def _notify(self, level: str, message: str, quiet: bool = False) -> None:
        if quiet:
            return
        getattr(self.notifier, level)(message)

    def _save(self) -> None:
        if self.save_settings is None:
            return
        try:
            self.save_settings(self.settings.to_dict())
        except OSError as e:
            logger.error("Failed to save settings: %s", e)
            self.notifier.error(f"Failed to save settings: {e}")

    # Generation

    def build_request(self, idea: str = None) -> GenerationRequest:
        """Assemble prompts from the working configuration and the current chat"""
        return self.assembler.build_prompt(self.settings.current.bundle.copy(), self.context_provider(), idea)

    async def do_impersonate(self, idea: str = None, quiet: bool = False) -> Optional[str]:
        """
        Generate the user's next message.

        Args:
            idea: Optional idea the message should develop
            quiet: Suppress notifications (errors are still logged)

        Returns:
            The generated text, or None on any failure or when disabled
        """
        try:
            result = await self.gate.run(lambda: self.build_request(idea), self.settings.enabled)
        except DisabledError:
            logger.info("Custom impersonation is disabled")
            return None
        except AlreadyInProgressError as e:
            logger.warning("Rejected impersonation: %s", e.message)
            self._notify("warning", e.message, quiet)
            return None
        except (EmptyResponseError, GenerationFailedError) as e:
            logger.error("Impersonation failed: %s", e.message)
            self._notify("error", f"Failed to generate response: {e.message}", quiet)
            return None
        except ImpersonatorError as e:
            logger.error("Impersonation failed: %s", e.message)
            self._notify("error", e.message, quiet)
            return None

        logger.info("Impersonation successful, length: %d", len(result))
        return result

    async def impersonate_command(self, quiet: bool = False, idea: str = None) -> str:
        """
        Slash-command entry point.

        Returns:
            The generated text, or an empty string on failure
        """
        if not quiet:
            self.notifier.info("Generating impersonated response...")
        result = await self.do_impersonate(idea=idea, quiet=quiet)
        return result or ""

    async def handle_command(self, args: Mapping[str, Any] = None, value: str = None) -> str:
        """Slash-command handler taking raw named arguments (``quiet=true``) and an optional idea"""
        quiet = is_true_boolean((args or {}).get("quiet", "false"))
        return await self.impersonate_command(quiet=quiet, idea=value or None)

    async def on_impersonate_ready(self, *args) -> Optional[str]:
        """Host impersonate event hook; does nothing while disabled"""
        if not self.settings.enabled:
            return None
        logger.info("Impersonate event triggered")
        return await self.do_impersonate()

    async def trigger_from_button(self) -> Optional[str]:
        """Manual action: warns when disabled instead of staying silent"""
        if not self.settings.enabled:
            self.notifier.warning("Impersonator is disabled")
            return None
        return await self.do_impersonate()

    async def test_impersonation(self) -> Optional[ImpersonationReport]:
        """Run one generation and report its size"""
        result = await self.do_impersonate()
        if not result:
            return None

        report = ImpersonationReport.from_text(result)
        self.notifier.success("Test successful!")
        logger.info("Test result: %d characters, %d words", report.characters, report.words)
        return report

    # Settings

    def set_enabled(self, enabled: bool) -> None:
        self.settings.enabled = enabled
        self._save()
        logger.info("Enabled: %s", self.settings.enabled)

    def update_field(self, field_name: str, value: Any) -> bool:
        """Apply a form edit to the working configuration (not saved to the preset)"""
        try:
            self.settings.current.update(field_name, value)
        except ValueError as e:
            self.notifier.error(str(e))
            return False
        return True

    def select_preset(self, name: str) -> bool:
        try:
            self.settings.select(name)
        except ImpersonatorError as e:
            self.notifier.error(e.message)
            return False
        self._save()
        logger.info("Loaded preset: %s", name)
        return True

    def save_current_to_preset(self) -> str:
        name = self.settings.commit()
        self._save()
        self.notifier.success(f'Saved to preset "{name}"')
        return name

    def create_preset(self, name: str) -> bool:
        """Create a preset from the working configuration; a blank name cancels"""
        if not name or not name.strip():
            return False
        try:
            self.settings.create(name)
        except ImpersonatorError as e:
            self.notifier.error(e.message)
            return False
        self._save()
        self.notifier.success(f'Created preset "{name}"')
        return True

    def delete_active_preset(self, confirm: Callable[[str], bool] = None) -> bool:
        """
        Delete the active preset after optional confirmation.

        Args:
            confirm: Asked with the preset name; returning False cancels
        """
        name = self.settings.active_name
        if self.settings.store.is_builtin(name):
            self.notifier.error("Cannot delete built-in preset")
            return False
        if confirm is not None and not confirm(name):
            return False

        try:
            self.settings.delete_active()
        except ImpersonatorError as e:
            self.notifier.error(e.message)
            return False
        self._save()
        self.notifier.success(f'Deleted preset "{name}"')
        return True

    # Export / import

    def export_active_preset(self, directory: str = None) -> Optional[str]:
        """Write the active preset to a JSON file and return its path"""
        name = self.settings.active_name
        try:
            payload = self.settings.store.export_one(name)
            path = write_json_file(directory or self.export_dir, export_filename(name), payload)
        except ImpersonatorError as e:
            self.notifier.error(e.message)
            return None
        except OSError as e:
            logger.error("Export failed: %s", e)
            self.notifier.error(f"Failed to export preset: {e}")
            return None

        self.notifier.success("Preset exported")
        logger.info("Exported preset: %s", name)
        return path

    def import_preset(self, path: str, rename: RenameResolver = None) -> Optional[str]:
        """
        Import a preset file.

        Args:
            path: Export file to read
            rename: Asked for a new name when the preset name is taken

        Returns:
            The name the preset was stored under, or None on failure
        """
        try:
            payload = self._read_payload(path)
            name = self.settings.import_preset(payload, rename=rename)
        except ImpersonatorError as e:
            logger.error("Import failed: %s", e.message)
            self.notifier.error(f"Failed to import preset: {e.message}")
            return None

        self._save()
        self.notifier.success(f'Imported preset "{name}"')
        return name

    def export_settings(self, directory: str = None) -> Optional[str]:
        """Write the whole settings object to a JSON file and return its path"""
        try:
            path = write_json_file(
                directory or self.export_dir,
                export_filename("settings"),
                self.settings.export_settings()
            )
        except OSError as e:
            logger.error("Settings export failed: %s", e)
            self.notifier.error(f"Failed to export settings: {e}")
            return None

        self.notifier.success("Settings exported")
        return path

    def import_settings(self, path: str) -> bool:
        try:
            payload = self._read_payload(path)
            self.settings.import_settings(payload)
        except ImpersonatorError as e:
            logger.error("Settings import failed: %s", e.message)
            self.notifier.error(f"Failed to import settings: {e.message}")
            return False

        self._save()
        self.notifier.success("Settings imported")
        return True

    @staticmethod
    def _read_payload(path: str) -> Any:
        try:
            return read_json_file(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidImportFormatError(f"Could not read {path}: {e}") from e


__all__ = ['Impersonator', 'GenerationGate', 'ImpersonationReport', 'is_true_boolean']
