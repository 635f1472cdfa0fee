"""Configuration errors."""

from filewarden.errors import FileWardenError


class ConfigError(FileWardenError):
    """Raised when configuration data cannot be read, parsed, or validated."""
