"""
Error kinds raised by the impersonation core.

Every error carries a short user-facing message. They are recovered at the
boundary of the triggering action (see impersonator.Impersonator) and turned
into a notification plus an empty result, so none of them reaches the host.
"""


class ImpersonatorError(Exception):
    """Base class for all impersonator errors"""

    default_message = "Impersonation failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class DisabledError(ImpersonatorError):
    """Feature toggle is off. Not a user-facing error."""

    default_message = "Impersonator is disabled"


class AlreadyInProgressError(ImpersonatorError):
    default_message = "Impersonation already in progress"


class NoContextError(ImpersonatorError):
    default_message = "No conversation context available"


class EmptyResponseError(ImpersonatorError):
    default_message = "Empty response received"


class GenerationFailedError(ImpersonatorError):
    default_message = "Generation failed"


class PresetNotFoundError(ImpersonatorError):
    default_message = "Preset not found"

    def __init__(self, name: str):
        super().__init__(f'Preset "{name}" not found')
        self.name = name


class PresetProtectedError(ImpersonatorError):
    default_message = "Cannot delete built-in preset"

    def __init__(self, name: str):
        super().__init__(f'Cannot delete built-in preset "{name}"')
        self.name = name


class InvalidImportFormatError(ImpersonatorError):
    default_message = "Invalid preset file"


class NameConflictError(ImpersonatorError):
    default_message = "Preset already exists"

    def __init__(self, name: str):
        super().__init__(f'Preset "{name}" already exists')
        self.name = name


__all__ = [
    'ImpersonatorError',
    'DisabledError',
    'AlreadyInProgressError',
    'NoContextError',
    'EmptyResponseError',
    'GenerationFailedError',
    'PresetNotFoundError',
    'PresetProtectedError',
    'InvalidImportFormatError',
    'NameConflictError',
]
