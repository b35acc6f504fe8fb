"""
Domain errors raised by the generation orchestrator.

The pure components (pool builder, scorer, slot filler, shopping list
aggregator) never raise these. Feasibility and coverage failures are
raised by the orchestrator and turned into result dictionaries at the
tool boundary by ``to_error_result``.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

log = logging.getLogger("fridge_menu_mcp.errors")


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATA = "INVALID_DATA"
    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_DISHES = "INSUFFICIENT_DISHES"
    UNKNOWN = "UNKNOWN"


class MenuGenerationError(Exception):
    """A generation request that cannot be satisfied."""

    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        super().__init__(message or code.value)
        self.code = code
        self.message = message or code.value


def insufficient_dishes(message: str) -> MenuGenerationError:
    return MenuGenerationError(ErrorCode.INSUFFICIENT_DISHES, message)


def invalid_data(message: str) -> MenuGenerationError:
    return MenuGenerationError(ErrorCode.INVALID_DATA, message)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def to_error_result(exc: Exception) -> Dict[str, Any]:
    """
    Convert an exception into a failure result dictionary.

    Args:
        exc: Exception raised while handling a request

    Returns:
        Dict with success=False, an error code and a human-readable message
    """
    if isinstance(exc, ValidationError):
        return {
            "success": False,
            "code": ErrorCode.VALIDATION_ERROR.value,
            "error": _describe_validation_error(exc),
        }

    if isinstance(exc, MenuGenerationError):
        return {
            "success": False,
            "code": exc.code.value,
            "error": exc.message,
        }

    if isinstance(exc, ValueError):
        return {
            "success": False,
            "code": ErrorCode.INVALID_DATA.value,
            "error": str(exc),
        }

    log.exception("Unexpected error during menu generation")
    return {
        "success": False,
        "code": ErrorCode.UNKNOWN.value,
        "error": "Internal error",
    }
