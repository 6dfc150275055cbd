"""Langman settings.

Values come from keyword arguments (config file, command line), then from
``LANGMAN_*`` environment variables or a ``.env`` file, then the defaults
below.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Call forms recognised when scanning source files for translation keys.
DEFAULT_KEY_FUNCTIONS = [
    "trans",
    "trans_choice",
    "Lang::get",
    "Lang::choice",
    "Lang::trans",
    "Lang::transChoice",
    "@lang",
    "@choice",
]


class Settings(BaseSettings):
    """Paths and scanning options for one application."""

    model_config = SettingsConfigDict(
        env_prefix="LANGMAN_",
        env_file=".env",
        extra="ignore",
    )

    lang_path: Path = Path("resources/lang")
    sync_paths: List[Path] = Field(
        default_factory=lambda: [Path("app"), Path("resources/views")]
    )
    key_functions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_KEY_FUNCTIONS)
    )
    extension: str = "php"
    debug: bool = False

    @field_validator("extension")
    @classmethod
    def strip_leading_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return value

    @field_validator("key_functions")
    @classmethod
    def require_key_functions(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one key function is required")
        return value
