"""Errors raised while converting a compose document into a template.

Every error here is terminal for the current conversion. Nothing is retried;
callers may re-run the whole conversion (e.g. after a fetch failure).
"""
from typing import Optional


class ConversionError(Exception):
    """Base class for conversion failures."""
    pass


class InvalidSlugError(ConversionError):
    """Raised when the destination slug is not lowercase letters, digits and hyphens."""
    pass


class TemplateExistsError(ConversionError):
    """Raised when a template already exists at the destination slug."""
    pass


class ComposeReadError(ConversionError):
    """Raised when a local compose file cannot be read."""
    pass


class ComposeNotFoundError(ComposeReadError):
    """Raised when a local compose file does not exist."""
    pass


class ComposeFetchError(ConversionError):
    """Raised on timeout, transport failure or non-2xx status while fetching a URL."""
    pass


class ComposeParseError(ConversionError):
    """Raised when the compose text is not valid YAML or has the wrong shape."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class EmptyComposeError(ConversionError):
    """Raised when the document has no services to translate."""
    pass
