"""
Error handling for langman

- Structured error hierarchy for document and key reference failures
- Logging decorator for catalog operations
"""

from .exceptions import (
    LangmanError,
    ConfigurationError,
    DocumentError,
    DocumentNotFound,
    DocumentUnreadable,
    CodecError,
    MalformedKeyReference,
)

from .decorators import log_errors

__all__ = [
    # Exceptions
    "LangmanError",
    "ConfigurationError",
    "DocumentError",
    "DocumentNotFound",
    "DocumentUnreadable",
    "CodecError",
    "MalformedKeyReference",

    # Decorators
    "log_errors",
]
