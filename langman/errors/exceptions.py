"""
Error hierarchy for langman

Every failure raised by the catalog, the codec or the configuration layer
derives from LangmanError and carries a machine readable code plus the
context needed to report it (usually the document path).
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union


class LangmanError(Exception):
    """
    Base exception for all langman errors.

    Keeps the error code and structured context so the CLI can log the
    failure with structlog and print a short message.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        previous_error: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.previous_error = previous_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "previous_error": str(self.previous_error) if self.previous_error else None,
        }


class ConfigurationError(LangmanError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, context={"config_key": config_key}, **kwargs)


class DocumentError(LangmanError):
    """Base class for errors tied to one translation document."""

    def __init__(self, message: str, path: Union[str, Path], **kwargs):
        context = {"path": str(path)}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, context=context, **kwargs)
        self.path = Path(path)


class DocumentNotFound(DocumentError):
    """A document had to be read but does not exist."""

    def __init__(self, path: Union[str, Path], **kwargs):
        super().__init__(f"File not found: {path}", path, **kwargs)


class DocumentUnreadable(DocumentError):
    """A document exists but does not evaluate to a mapping."""

    def __init__(self, path: Union[str, Path], reason: str = "", **kwargs):
        message = f"Unable to read translations from {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, path, context={"reason": reason}, **kwargs)
        self.reason = reason


class CodecError(LangmanError):
    """Document text could not be parsed."""

    def __init__(self, message: str, position: Optional[int] = None, **kwargs):
        super().__init__(message, context={"position": position}, **kwargs)
        self.position = position


class MalformedKeyReference(LangmanError):
    """A translation call argument has no topic/subkey split."""

    def __init__(self, reference: str, **kwargs):
        super().__init__(
            f"Not a translation key reference: {reference!r}",
            context={"reference": reference},
            **kwargs
        )
        self.reference = reference
