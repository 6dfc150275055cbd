"""Load langman settings from a JSON file and command line overrides."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from ..errors import ConfigurationError
from .settings import Settings

logger = structlog.get_logger(__name__)


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """Build validated settings.

    Args:
        config_file: Optional JSON file with setting values
        **overrides: Values taking precedence over the file (``None`` is ignored)

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the file cannot be read or a value is invalid
    """
    data: Dict[str, Any] = {}

    if config_file is not None:
        try:
            data = json.loads(Path(config_file).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot load configuration file {config_file}: {e}",
                config_key="config_file",
                previous_error=e,
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {config_file} must contain a JSON object",
                config_key="config_file",
            )
        logger.debug("Loaded configuration file", file=str(config_file))

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg')}",
            config_key=key or None,
            previous_error=e,
        ) from e
