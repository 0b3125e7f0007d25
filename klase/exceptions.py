# -*- coding: utf-8 -*-
"""Klase Exception Hierarchy.

Exceptions raised by the record hygiene subsystem. Expected outcomes
(duplicates found, malformed input, missing fields) are never raised: they
are returned as structured results. Exceptions are reserved for the record
store and configuration layers, where the caller decides whether to degrade.

Exception Hierarchy:
    KlaseException (base)
    ├── ConfigurationError
    └── DataException
        ├── CorruptedData
        └── DataAccessError

All exceptions include rich context:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred
- traceback: Stack at the raise site for debugging

Example:
    >>> from klase.exceptions import DataAccessError
    >>> raise DataAccessError(
    ...     message="Profile lookup failed",
    ...     data_source="profiles",
    ...     operation="find_by_email",
    ... )

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

import json
import re
import traceback as tb
from datetime import datetime
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class KlaseException(Exception):
    """Base exception for all Klase errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "KL_DATA_DATA_ACCESS_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
        traceback_str: Stack at the raise site
    """

    ERROR_PREFIX = "KL"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()
        self.traceback_str = "".join(tb.format_stack()[:-1])

    def _generate_error_code(self) -> str:
        """Generate error code from the exception class name.

        Returns:
            Error code like "KL_DATA_CORRUPTED_DATA"
        """
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "traceback": self.traceback_str,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


class ConfigurationError(KlaseException):
    """Configuration is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="Hygiene store path is not set",
        ...     context={"env": "KLASE_DH_STORE_PATH"}
        ... )
    """
    pass


# ==============================================================================
# Data Exceptions
# ==============================================================================

class DataException(KlaseException):
    """Base exception for record store errors."""
    ERROR_PREFIX = "KL_DATA"


class CorruptedData(DataException):
    """Stored data is malformed.

    Raised when a persisted collection or report cannot be decoded.

    Example:
        >>> raise CorruptedData(
        ...     message="Collection is not a list",
        ...     data_source="posts",
        ...     corruption_details={"type": "dict"}
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        data_source: Optional[str] = None,
        corruption_details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize corrupted data error.

        Args:
            message: Error message
            context: Error context
            data_source: Source of corrupted data
            corruption_details: Details about the corruption
        """
        context = context or {}
        if data_source:
            context["data_source"] = data_source
        if corruption_details:
            context["corruption_details"] = corruption_details
        super().__init__(message, context=context)


class DataAccessError(DataException):
    """Data access failed.

    Raised when the record store cannot be read or written.

    Example:
        >>> raise DataAccessError(
        ...     message="Failed to query profiles",
        ...     data_source="profiles",
        ...     operation="find_all_in_tenant",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        data_source: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize data access error.

        Args:
            message: Error message
            context: Error context
            data_source: Data source that failed
            operation: Operation that failed
            cause: Original exception
        """
        context = context or {}
        if data_source:
            context["data_source"] = data_source
        if operation:
            context["operation"] = operation
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: BaseException) -> str:
    """Format exception chain for logging.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current: Optional[BaseException] = exc

    while current is not None:
        if isinstance(current, KlaseException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


__all__ = [
    "KlaseException",
    "ConfigurationError",
    "DataException",
    "CorruptedData",
    "DataAccessError",
    "format_exception_chain",
]
