"""
Custom exception classes for bodyfile timeline generation.

This module defines the exception hierarchy for all error conditions
that can occur while parsing bodyfiles and building MACB timelines.

Per-record problems (MalformedRecordError, UnparsableTimestampError) are
soft errors: they are recorded and the run continues. Configuration and
I/O problems abort the run.
"""


class MactimeForensicError(Exception):
    """
    Base exception class for all mactime forensic tool errors.

    All custom exceptions in this module inherit from this base class,
    allowing for broad exception handling when needed.

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


class MalformedRecordError(MactimeForensicError):
    """
    Raised when a bodyfile line does not contain the expected field count.

    The parser catches this, records it in the run statistics and moves
    on to the next line.

    Attributes:
        field_count: Number of delimiter-separated fields found
        expected: Number of fields a bodyfile record must have
        line_number: Optional 1-based line number in the source
        line: Optional raw line text
    """

    def __init__(
        self,
        field_count: int,
        expected: int = 11,
        line_number: int = None,
        line: str = None,
    ):
        """
        Initialize the malformed record exception.

        Args:
            field_count: Number of fields found on the line
            expected: Number of fields required (default: 11)
            line_number: Optional line number of the record
            line: Optional raw line text
        """
        self.field_count = field_count
        self.expected = expected
        self.line_number = line_number
        self.line = line

        if line_number is not None:
            message = (
                f"Malformed bodyfile record at line {line_number}: "
                f"expected {expected} fields, found {field_count}"
            )
        else:
            message = (
                f"Malformed bodyfile record: "
                f"expected {expected} fields, found {field_count}"
            )

        details = {
            "field_count": field_count,
            "expected": expected,
        }

        if line_number is not None:
            details["line_number"] = line_number

        super().__init__(message, details)


class UnparsableTimestampError(MactimeForensicError):
    """
    Raised when a timestamp field is present but is not a usable integer.

    The parser treats the timestamp kind as absent for that record.

    Attributes:
        field: Name of the timestamp field (atime, mtime, ctime, crtime)
        value: The raw field text
        line_number: Optional 1-based line number
    """

    def __init__(self, field: str, value: str, line_number: int = None):
        self.field = field
        self.value = value
        self.line_number = line_number

        message = f"Unparsable {field} timestamp: {value!r}"

        details = {"field": field}
        if line_number is not None:
            details["line_number"] = line_number

        super().__init__(message, details)


class InvalidFilterSyntaxError(MactimeForensicError):
    """
    Raised when a date filter string does not match YYYY-MM-DD..YYYY-MM-DD.

    This is a fatal configuration error reported before any processing.

    Attributes:
        value: The rejected filter string
        reason: Specific reason the filter was rejected
    """

    EXPECTED_FORMAT = "YYYY-MM-DD..YYYY-MM-DD"

    def __init__(self, value: str, reason: str = None):
        """
        Initialize the invalid filter exception.

        Args:
            value: Filter string supplied by the user
            reason: Specific reason for the rejection
        """
        self.value = value
        self.reason = reason or f"Date filter format: {self.EXPECTED_FORMAT}"

        message = f"Invalid date filter {value!r}. {self.reason}"

        super().__init__(message, {"expected_format": self.EXPECTED_FORMAT})


class TimelineIOError(MactimeForensicError):
    """
    Raised when reading the bodyfile or writing the CSV output fails.

    Attributes:
        file_path: Path involved in the failed operation
        operation: "read" or "write"
        cause: Underlying exception (e.g., OSError, PermissionError)
    """

    def __init__(
        self,
        file_path: str,
        operation: str = "read",
        cause: Exception = None
    ):
        """
        Initialize the I/O error exception.

        Args:
            file_path: Path that could not be read or written
            operation: Operation that failed
            cause: Optional underlying exception
        """
        self.file_path = file_path
        self.operation = operation
        self.cause = cause

        message = f"Failed to {operation} file: {file_path}"
        if cause:
            message += f". {cause}"

        details = {
            "file_path": file_path,
            "operation": operation,
        }

        if cause:
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details)


class ConfigurationError(MactimeForensicError):
    """
    Raised when a configuration file or configuration value is invalid.

    Attributes:
        config_path: Optional path to the configuration file
        cause: Optional underlying exception
    """

    def __init__(self, message: str, config_path: str = None, cause: Exception = None):
        self.config_path = config_path
        self.cause = cause

        details = {}
        if config_path:
            details["config_path"] = config_path
        if cause:
            details["cause"] = str(cause)

        super().__init__(f"Configuration error: {message}", details)
