"""Error types for the OpenRouter model registry.

This module defines the error types raised by the individual fetch stages and
lookup helpers. The fallback chain itself never lets these escape; they are
recorded as stage failures and surfaced through ``DegradedDataError``.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .fetcher import StageFailure


class ModelRegistryError(Exception):
    """Base class for all registry-related errors.

    This is the parent class for all registry-specific exceptions.
    """

    pass


class ConfigurationError(ModelRegistryError):
    """Raised when registry configuration values are invalid.

    Examples:
        >>> try:
        ...     RegistryConfig(timeout=0)
        ... except ConfigurationError as e:
        ...     print(f"Bad config: {e}")
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            field: Optional name of the offending configuration field
        """
        super().__init__(message)
        self.message = message
        self.field = field


class NetworkError(ModelRegistryError):
    """Raised when the upstream API cannot be reached or answers with an error status.

    Examples:
        >>> try:
        ...     fetch_from_openrouter()
        ... except NetworkError as e:
        ...     print(f"Network error ({e.status_code}): {e}")
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        """Initialize network error.

        Args:
            message: Error message
            url: Optional URL that was being accessed
            status_code: HTTP status code, if a response was received
        """
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code


class InvalidResponseError(ModelRegistryError):
    """Raised when a payload does not have the ``{"data": [...]}`` shape."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        """Initialize invalid response error.

        Args:
            message: Error message
            source: Where the payload came from (URL or file path)
        """
        super().__init__(message)
        self.message = message
        self.source = source


class SnapshotError(ModelRegistryError):
    """Raised when the bundled snapshot cannot be read or is malformed.

    Examples:
        >>> try:
        ...     load_snapshot()
        ... except SnapshotError as e:
        ...     print(f"Snapshot unavailable: {e.path}")
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize snapshot error.

        Args:
            message: Error message
            path: Optional path of the snapshot resource
        """
        super().__init__(message)
        self.message = message
        self.path = path


class ModelNotFoundError(ModelRegistryError):
    """Raised when a model lookup yields no match."""

    def __init__(self, message: str, model: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.model = model

    def __str__(self) -> str:
        return self.message


class DegradedDataError(ModelRegistryError):
    """Describes why the registry was served from a degraded source.

    This is never raised by the fetch path. The client stores it as its
    ``error`` value when the API stage (and possibly the snapshot stage)
    was skipped, while still delivering usable data.
    """

    def __init__(self, message: str, source: str, failures: Optional[List["StageFailure"]] = None) -> None:
        """Initialize degraded data error.

        Args:
            message: Human readable summary
            source: Source tag of the registry that was actually served
            failures: Stage failures that led to the degraded source
        """
        super().__init__(message)
        self.message = message
        self.source = source
        self.failures = list(failures or [])
