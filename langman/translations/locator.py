"""Where a topic's document for one language lives."""

from dataclasses import dataclass
from pathlib import Path

NAMESPACE_SEPARATOR = "::"


@dataclass(frozen=True)
class DocumentLocator:
    """Address of one (topic, language) document under a language root.

    Application documents live at ``<root>/<language>/<topic>.<ext>``. A
    namespaced topic such as ``package::user`` is only meaningful when the
    root is already the package's vendor directory, so its file name is the
    part after the separator.
    """

    root: Path
    language: str
    topic: str
    extension: str = "php"

    @property
    def base_name(self) -> str:
        return self.topic.rpartition(NAMESPACE_SEPARATOR)[2]

    @property
    def path(self) -> Path:
        return Path(self.root) / self.language / f"{self.base_name}.{self.extension}"

    def __str__(self) -> str:
        return str(self.path)
