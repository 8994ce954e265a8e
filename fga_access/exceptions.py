"""
Custom exceptions for FGA_ACCESS.

Dispatcher failures from the OpenFGA SDK are never wrapped here: the
fail-safe policy either converts them to a default value or re-raises
the original error. These types cover bootstrap and configuration.
"""

from typing import Any, Dict, List, Optional


class FgaAccessError(RuntimeError):
    """
    Base exception for FGA access errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (api_url,
                 store_id, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InitializationError(FgaAccessError):
    """
    Raised when store or authorization model provisioning fails.

    Attributes:
        message: Error message
        api_url: OpenFGA API URL (if available)
        store_id: Store identifier (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        api_url: Optional[str] = None,
        store_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if api_url:
            context["api_url"] = api_url
        if store_id:
            context["store_id"] = store_id
        super().__init__(message, context=context)
        self.api_url = api_url
        self.store_id = store_id


class ConfigurationError(FgaAccessError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class ModelDocumentError(FgaAccessError):
    """
    Raised when the authorization model document cannot be parsed.

    Attributes:
        message: Error message
        error_paths: Locations of the validation errors inside the document
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        error_paths: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if error_paths:
            context["error_paths"] = error_paths
        super().__init__(message, context=context)
        self.error_paths = error_paths
