"""
Custom exceptions for the Backlog to Markdown converter.

The text conversion itself never raises; these cover the file and
configuration surfaces around it.
"""


class Backlog2MdError(Exception):
    """Base exception for backlog2md operations."""
    pass


class ConfigurationError(Backlog2MdError):
    """Raised when configuration is invalid."""
    pass


class ConversionError(Backlog2MdError):
    """Raised when a source file cannot be read or its output written."""
    pass
