"""Configuration for langman."""

from .loader import load_config
from .settings import DEFAULT_KEY_FUNCTIONS, Settings

__all__ = ["DEFAULT_KEY_FUNCTIONS", "Settings", "load_config"]
