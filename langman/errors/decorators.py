"""
Error handling decorators for langman
"""

import functools
from typing import Any, Callable, Optional

import structlog

from .exceptions import LangmanError

logger = structlog.get_logger(__name__)


def log_errors(operation_name: Optional[str] = None):
    """
    Decorator to log errors with context and re-raise them.

    Args:
        operation_name: Custom operation name for logging
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            op_name = operation_name or f"{func.__module__}.{func.__name__}"

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_data = {
                    "operation": op_name,
                    "error_type": type(e).__name__,
                    "error": str(e),
                }
                if isinstance(e, LangmanError):
                    log_data["context"] = e.context

                logger.error("Error in operation", **log_data)
                raise

        return wrapper

    return decorator
