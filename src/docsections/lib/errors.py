"""Custom exception hierarchy for docsections configuration and operations."""


class DocSectionsError(Exception):
    """Base exception for all docsections errors.

    All docsections-specific exceptions inherit from this class, enabling
    centralized exception handling at the HTTP and CLI boundaries.
    """

    pass


class ConfigError(DocSectionsError):
    """Exception raised for configuration errors.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class OcrError(DocSectionsError):
    """Base exception for OCR collaborator failures.

    The extraction coordinator catches every OcrError and records it as a
    failed fallback instead of propagating it.
    """

    pass


class OcrConfigurationError(OcrError):
    """Exception raised when the OCR client is missing required settings."""

    def __init__(self, missing: list[str]) -> None:
        """Create a configuration error listing the missing settings.

        Args:
            missing: Names of the settings (usually env vars) that are unset
        """
        self.missing = missing
        super().__init__(
            "Document AI OCR requires " + " and ".join(missing) + " to be set."
        )


class OcrConnectionError(OcrError):
    """Error raised when the OCR endpoint is unreachable.

    Attributes:
        endpoint: The OCR endpoint URL that failed
    """

    def __init__(self, endpoint: str, original_error: Exception | None = None) -> None:
        """Initialize OcrConnectionError with endpoint and optional cause.

        Args:
            endpoint: The OCR endpoint URL that failed to connect
            original_error: The underlying exception that caused the failure
        """
        self.endpoint = endpoint
        message = f"Failed to call Document AI OCR service at {endpoint}."
        if original_error:
            message += f"\nOriginal error: {original_error}"
        super().__init__(message)


class OcrServiceError(OcrError):
    """Error raised when the OCR service answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the service
        detail: Error body returned by the service, if any
    """

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        """Create a service error from an HTTP status and optional body."""
        self.status_code = status_code
        self.detail = detail
        message = f"Document AI OCR failed with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class IngestApiError(DocSectionsError):
    """Exception raised when the remote ingestion API call fails.

    Attributes:
        status_code: HTTP status, or None when the response had no sections
        detail: Response body or description of the failure
    """

    def __init__(self, status_code: int | None, detail: str) -> None:
        """Create an ingestion API error."""
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            super().__init__(f"Ingestion API error: {detail}")
        else:
            super().__init__(f"Ingestion API failed ({status_code}): {detail}")
