"""
Custom exceptions for genbridge.

Builders and parsers raise these; GenerationClient, MediaFetcher and the job
poller turn them into ``Err`` results. Each class carries a short ``kind``
tag so callers can branch on the failure family without isinstance chains.
"""


class GenbridgeError(Exception):
    """Base exception for all genbridge errors."""

    kind = "error"


class ValidationError(GenbridgeError):
    """Raised when input validation fails."""

    kind = "validation"

    def __init__(self, message: str, field: str = "") -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the field that failed validation (optional)
        """
        self.field = field
        super().__init__(message)


class TransportError(GenbridgeError):
    """Raised when the request never produced an HTTP response (DNS, connect, stream)."""

    kind = "transport"

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize transport error.

        Args:
            message: Error message
            original_error: The underlying exception that caused this error
        """
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(TransportError):
    """Raised when a connect or read timeout expires."""

    kind = "timeout"


class HttpStatusError(GenbridgeError):
    """Raised when a provider answers with a non-2xx status."""

    kind = "http_status"

    def __init__(self, message: str, status_code: int = 0, response: str = "") -> None:
        """
        Initialize HTTP status error.

        Args:
            message: Error message
            status_code: HTTP status code
            response: Body snippet (if available)
        """
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class ParseError(GenbridgeError):
    """Raised when a 2xx body is not JSON or lacks the expected field."""

    kind = "parse"

    def __init__(self, message: str, response: str = "") -> None:
        self.response = response
        super().__init__(message)


class CancellationError(GenbridgeError):
    """Raised when an operation is cancelled by the user."""

    kind = "cancelled"


class ConfigurationError(GenbridgeError):
    """Raised when there is a configuration problem."""

    kind = "configuration"


class ImageProcessingError(GenbridgeError):
    """Raised when a source image cannot be loaded or encoded."""

    kind = "image_processing"

    def __init__(self, message: str, image_path: str = "") -> None:
        """
        Initialize image processing error.

        Args:
            message: Error message
            image_path: Path to the image that caused the error
        """
        self.image_path = image_path
        super().__init__(message)


class StorageError(GenbridgeError):
    """Raised when a downloaded or decoded artifact cannot be written."""

    kind = "storage"

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)
