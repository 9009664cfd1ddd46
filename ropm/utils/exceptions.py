"""
Custom exception classes for ROPM report generation.

This module defines the exception hierarchy for the error conditions that
can occur while turning an incident submission into a PDF document.
Missing data and missing assets are never errors; these exceptions cover
values that cannot be rendered, layout trees the renderer rejects and
unreadable configuration.
"""


class ROPMError(Exception):
    """
    Base exception class for all ROPM generator errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the base exception.

        Args:
            message: Error message describing what went wrong
            details: Optional dictionary with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return a string representation of the exception."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class RecordError(ROPMError):
    """
    Raised when a submitted record contains a value that cannot be rendered.

    Absent values are always accepted. This is raised only when a field holds
    something that has no text form on the document, e.g. a nested object
    where a name is expected, or when the body itself is not an object.

    Attributes:
        field: Wire key of the offending field (None for the whole body)
        reason: Specific reason the value was rejected
        value_type: Python type name of the rejected value
    """

    def __init__(self, field: str = None, reason: str = None, value=None):
        """
        Initialize the record error.

        Args:
            field: Wire key of the offending field
            reason: Specific reason for the rejection
            value: The rejected value (only its type is kept)
        """
        self.field = field
        self.reason = reason or "Unrenderable value type"
        self.value_type = type(value).__name__ if value is not None else None

        if field:
            message = f"Invalid value for '{field}': {self.reason}"
        else:
            message = f"Invalid record: {self.reason}"

        details = {}
        if self.value_type:
            details["type"] = self.value_type

        super().__init__(message, details)


class RenderError(ROPMError):
    """
    Raised when the document tree cannot be turned into a PDF.

    Covers malformed trees (row cell counts that disagree with the width
    template, unknown node kinds, non-text values) as well as failures
    raised by reportlab while building the document.

    Attributes:
        node: Short description of the node being rendered
        cause: Optional underlying exception
    """

    def __init__(self, message: str, node: str = None, cause: Exception = None):
        """
        Initialize the render error.

        Args:
            message: Description of the rendering failure
            node: Description of the node being rendered
            cause: Optional underlying exception
        """
        self.node = node
        self.cause = cause

        details = {}
        if node:
            details["node"] = node
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details)


class ConfigError(ROPMError):
    """
    Raised when a configuration file cannot be loaded.

    Attributes:
        path: Path of the configuration file
        reason: Specific reason for the failure
    """

    def __init__(self, path: str, reason: str = None):
        """
        Initialize the configuration error.

        Args:
            path: Path of the configuration file
            reason: Specific reason for the failure
        """
        self.path = path
        self.reason = reason or "Configuration could not be loaded"

        message = f"Failed to load configuration: {path}. {self.reason}"
        super().__init__(message, {"path": path})
