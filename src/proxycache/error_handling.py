"""
Standardized Error Handling for proxycache
==========================================

This module provides the exception hierarchy and the error handling
decorators shared by the signer, the TTL parser and the configuration layer.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)


class ProxyCacheError(Exception):
    """Base exception for all proxycache errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        details = " ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        logger.error(f"{type(self).__name__}: {message}" + (f" [{details}]" if details else ""))


class ProxyCacheConfigurationError(ProxyCacheError):
    """Raised when proxy cache configuration is invalid or incomplete."""

    pass


class InvalidLocatorError(ProxyCacheError, ValueError):
    """Raised when an object locator does not form a valid endpoint URL."""

    pass


class UnrecognizedTTLFormatError(ProxyCacheError, ValueError):
    """Raised when a TTL string cannot be parsed into seconds."""

    pass


def with_error_handling(
    error_type: Type[ProxyCacheError] = ProxyCacheError,
    context: Optional[Dict[str, Any]] = None,
):
    """
    Decorator converting unexpected exceptions into proxycache errors.

    Errors that are already ``ProxyCacheError`` instances pass through
    unchanged.

    Args:
        error_type: Type of ProxyCacheError to raise
        context: Additional context to include in error
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ProxyCacheError:
                raise
            except Exception as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )
                raise error_type(f"Error in {func.__name__}: {e}", error_context) from e

        return wrapper

    return decorator


def log_configuration_validation(config_class: str):
    """
    Decorator to log configuration validation results.

    Args:
        config_class: Name of the configuration class being validated
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                result = func(self, *args, **kwargs)
                logger.debug(f"{config_class} configuration validated successfully")
                return result
            except Exception as e:
                logger.error(f"{config_class} configuration validation failed: {e}")
                raise

        return wrapper

    return decorator
