"""
Pytest configuration and fixtures for langman tests.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from langman.translations import DocumentCodec, FileStore, TranslationCatalog

USER_EN = """<?php

return [
    'name' => 'Name',
    'form' => [
        'submit' => 'Send',
    ],
];
"""

USER_NL = """<?php

return [
    'name' => 'Naam',
];
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write a file below the temporary directory, creating parents."""
    def _write(relative: str, content: str) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def lang_path(temp_dir: Path, write_file) -> Path:
    """Language root with en and nl user files and an empty fr directory."""
    write_file("lang/en/user.php", USER_EN)
    write_file("lang/nl/user.php", USER_NL)
    (temp_dir / "lang" / "fr").mkdir(exist_ok=True)
    return temp_dir / "lang"


@pytest.fixture
def codec() -> DocumentCodec:
    return DocumentCodec(FileStore())


@pytest.fixture
def catalog(lang_path: Path, temp_dir: Path) -> TranslationCatalog:
    return TranslationCatalog(lang_path, sync_paths=[temp_dir / "views"])
