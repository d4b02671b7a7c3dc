import os
import warnings
from dotenv import load_dotenv

# Constants
DEFAULT_PROVIDER = 'lmstudio'
DEFAULT_LMSTUDIO_MODEL = 'deepseek/DeepSeek-V3-0324'
DEFAULT_TEMPERATURE = 0.8
DEFAULT_SETTINGS_FILE = 'impersonator_settings.json'
DEFAULT_EXPORT_DIR = 'exports'
DEFAULT_REQUEST_TIMEOUT = 0.0  # seconds, 0 disables the timeout

SUPPORTED_PROVIDERS = ['azure', 'lmstudio', 'gemini']
TRUE_VALUES = ('true', '1', 'yes', 'on')


# Load environment variables
load_dotenv()

# Impersonator Configuration
IMPERSONATOR_ENABLED = os.getenv('IMPERSONATOR_ENABLED', 'false').lower() in TRUE_VALUES
IMPERSONATOR_SETTINGS_FILE = os.getenv('IMPERSONATOR_SETTINGS_FILE', DEFAULT_SETTINGS_FILE)
IMPERSONATOR_EXPORT_DIR = os.getenv('IMPERSONATOR_EXPORT_DIR', DEFAULT_EXPORT_DIR)
IMPERSONATOR_DEFAULT_PRESET = os.getenv('IMPERSONATOR_DEFAULT_PRESET', 'Default')
IMPERSONATOR_REQUEST_TIMEOUT = float(os.getenv('IMPERSONATOR_REQUEST_TIMEOUT', str(DEFAULT_REQUEST_TIMEOUT)))

# LLM Provider Configuration
PROVIDER = os.getenv('PROVIDER', DEFAULT_PROVIDER)
AZURE_ENDPOINT = os.getenv('AZURE_ENDPOINT')
AZURE_API_KEY = os.getenv('AZURE_API_KEY')
AZURE_MODEL = os.getenv('AZURE_MODEL')
AZURE_API_VERSION = os.getenv('AZURE_API_VERSION', '2024-06-01')
LMSTUDIO_MODEL = os.getenv('LMSTUDIO_MODEL', DEFAULT_LMSTUDIO_MODEL)
LMSTUDIO_BASE_URL = os.getenv('LMSTUDIO_BASE_URL', 'http://localhost:1234/v1')

# Gemini Configuration
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL')

# Sampling
TEMPERATURE = float(os.getenv('TEMPERATURE', str(DEFAULT_TEMPERATURE)))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


# Validation
def _validate_config():
    """Validate configuration and warn about issues"""
    if PROVIDER not in SUPPORTED_PROVIDERS:
        warnings.warn(f"PROVIDER '{PROVIDER}' is not supported. Supported values: 'azure', 'lmstudio', 'gemini'")

    if PROVIDER == 'azure':
        if not AZURE_ENDPOINT:
            warnings.warn("AZURE_ENDPOINT is not set for Azure provider")
        if not AZURE_API_KEY:
            warnings.warn("AZURE_API_KEY is not set for Azure provider")
        if not AZURE_MODEL:
            warnings.warn("AZURE_MODEL is not set for Azure provider")

    if PROVIDER == 'lmstudio':
        if not LMSTUDIO_MODEL:
            warnings.warn("LMSTUDIO_MODEL is not set for LM Studio provider")
        if not LMSTUDIO_BASE_URL:
            warnings.warn("LMSTUDIO_BASE_URL is not set for LM Studio provider")

    if PROVIDER == 'gemini':
        if not GEMINI_API_KEY:
            warnings.warn("GEMINI_API_KEY is not set for Gemini provider")
        if not GEMINI_MODEL:
            warnings.warn("GEMINI_MODEL is not set for Gemini provider")

    # Impersonator validation
    if IMPERSONATOR_REQUEST_TIMEOUT < 0:
        warnings.warn("IMPERSONATOR_REQUEST_TIMEOUT should be non-negative (0 disables it)")
    if not IMPERSONATOR_SETTINGS_FILE:
        warnings.warn("IMPERSONATOR_SETTINGS_FILE should not be empty")
    if not IMPERSONATOR_DEFAULT_PRESET:
        warnings.warn("IMPERSONATOR_DEFAULT_PRESET should not be empty")

    if TEMPERATURE < 0 or TEMPERATURE > 2:
        warnings.warn("TEMPERATURE should be between 0 and 2")

    if LOG_LEVEL not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        warnings.warn(f"LOG_LEVEL '{LOG_LEVEL}' is not a standard logging level")


# Perform validation
_validate_config()
