"""Local disk access for language files and scanned source files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

import structlog

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DocumentFile:
    """A file found under the language root."""

    path: Path
    extension: str


@dataclass(frozen=True)
class SourceFile:
    """A scanned application file and its text."""

    path: Path
    contents: str


class FileStore:
    """Filesystem operations used by the catalog.

    Listing a directory that does not exist returns an empty result. Read and
    write failures are plain ``OSError`` and are left to the caller.
    """

    encoding = "utf-8"

    def list_directories(self, root: PathLike) -> List[Path]:
        root = Path(root)
        if not root.is_dir():
            return []
        return sorted(p for p in root.iterdir() if p.is_dir())

    def list_files(self, root: PathLike, extension: str) -> List[DocumentFile]:
        """Recursively list files with ``extension`` under ``root``, sorted by path."""
        root = Path(root)
        if not root.is_dir():
            return []
        return [
            DocumentFile(path=p.resolve(), extension=extension)
            for p in sorted(root.rglob(f"*.{extension}"))
            if p.is_file()
        ]

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding=self.encoding)

    def write_text(self, path: PathLike, text: str) -> None:
        Path(path).write_text(text, encoding=self.encoding)
        logger.debug("Wrote file", path=str(path), size=len(text))

    def make_directories(self, path: PathLike) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def list_all_files(self, paths: Iterable[PathLike]) -> List[SourceFile]:
        """Read every file below the given files or directories.

        Missing paths are skipped. Undecodable bytes are replaced so binary
        assets in a views directory do not abort a scan.
        """
        found: List[Path] = []
        for entry in paths:
            entry = Path(entry)
            if entry.is_file():
                found.append(entry)
            elif entry.is_dir():
                found.extend(sorted(p for p in entry.rglob("*") if p.is_file()))
            else:
                logger.warning("Sync path not found", path=str(entry))

        return [
            SourceFile(
                path=path,
                contents=path.read_text(encoding=self.encoding, errors="replace"),
            )
            for path in found
        ]
