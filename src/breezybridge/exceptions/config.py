from __future__ import annotations

from typing import Any

from breezybridge.exceptions.bridge import InitializationError


class ConfigError(InitializationError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when bridge settings cannot be loaded. This includes YAML parsing
    failures, Pydantic validation errors, and invalid environment variable
    values. Settings are read during initialization, so a ConfigError is
    also an :class:`InitializationError` and is cached the same way.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "extensions").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration value",
            field="minimum_version",
            value="three",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
