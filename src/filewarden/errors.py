"""Base exception shared by every filewarden error."""


class FileWardenError(Exception):
    """Base exception for filewarden operations."""
