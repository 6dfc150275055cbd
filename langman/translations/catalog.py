"""Translation catalog: discovery and editing of an application's language files."""

import re
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import structlog

from ..config.settings import Settings
from ..errors import log_errors
from .codec import DocumentCodec
from .extractor import KeyExtractor
from .keys import Translations, deep_merge, flatten, forget_path, has_path, set_path
from .locator import NAMESPACE_SEPARATOR, DocumentLocator
from .storage import FileStore, PathLike

logger = structlog.get_logger(__name__)

VENDOR_DIRECTORY = "vendor"


class TranslationCatalog:
    """Language files of one application (or one vendor package).

    Documents are read when an operation needs them and written back in
    full; nothing is cached between calls.
    """

    def __init__(
        self,
        path: PathLike,
        sync_paths: Iterable[PathLike] = (),
        store: Optional[FileStore] = None,
        codec: Optional[DocumentCodec] = None,
        extractor: Optional[KeyExtractor] = None,
        extension: str = "php",
    ):
        """Initialize the catalog.

        Args:
            path: Language root containing one directory per language
            sync_paths: Files or directories scanned for translation keys
            store: File access, local disk by default
            codec: Document reader/writer, built on ``store`` by default
            extractor: Key reference scanner
            extension: Language file extension
        """
        self.path = Path(path)
        self.sync_paths = [Path(p) for p in sync_paths]
        self.store = store or FileStore()
        self.codec = codec or DocumentCodec(self.store)
        self.extractor = extractor or KeyExtractor()
        self.extension = extension
        self._lock = threading.Lock()
        self._path_locks: Dict[str, threading.Lock] = {}
        self._vendor_topic_re = re.compile(
            rf"([^/]*)/([^/]*)/([^/]*)\.{re.escape(extension)}$"
        )

    @classmethod
    def from_settings(cls, settings: Settings, store: Optional[FileStore] = None) -> "TranslationCatalog":
        return cls(
            settings.lang_path,
            settings.sync_paths,
            store=store,
            extractor=KeyExtractor(settings.key_functions),
            extension=settings.extension,
        )

    @property
    def is_vendor_scoped(self) -> bool:
        return VENDOR_DIRECTORY in self.path.parts

    def set_vendor_scope(self, package: str) -> None:
        """Point the catalog at the language files of a vendor package."""
        self.path = self.path / VENDOR_DIRECTORY / package
        logger.info("Catalog scoped to vendor package", package=package, path=str(self.path))

    def locate(self, topic: str, language: str) -> DocumentLocator:
        return DocumentLocator(self.path, language, topic, self.extension)

    def list_languages(self) -> List[str]:
        """Sorted language keys, one per directory under the root."""
        return sorted(
            directory.name
            for directory in self.store.list_directories(self.path)
            if directory.name != VENDOR_DIRECTORY
        )

    def list_topics(self) -> Dict[str, Dict[str, Path]]:
        """Documents grouped by topic.

        ex: ``{'user': {'en': Path('/app/lang/en/user.php'), 'nl': ...}}``

        Returns:
            Topic to (language to absolute document path), in listing order
        """
        root = self.path.resolve()
        topics: Dict[str, Dict[str, Path]] = {}

        for document in self.store.list_files(self.path, self.extension):
            topic = self._topic_for(document.path, root)
            topics.setdefault(topic, {})[document.path.parent.name] = document.path

        # Outside a vendor package we are looking at the application's own
        # files, so every vendor topic is left out.
        if not self.is_vendor_scoped:
            topics = {topic: files for topic, files in topics.items() if ":" not in topic}

        return topics

    def _topic_for(self, path: Path, root: Path) -> str:
        try:
            parents = path.relative_to(root).parts[:-1]
        except ValueError:
            parents = path.parts[:-1]

        if self.is_vendor_scoped or VENDOR_DIRECTORY in parents:
            match = self._vendor_topic_re.search(path.as_posix())
            if match:
                return f"{match.group(1)}{NAMESPACE_SEPARATOR}{match.group(3)}"

        return path.name[: -(len(self.extension) + 1)]

    def _lock_for(self, path: Path) -> threading.Lock:
        with self._lock:
            return self._path_locks.setdefault(str(path.resolve()), threading.Lock())

    @log_errors(operation_name="create_document")
    def create_document(self, topic: str) -> List[Path]:
        """Create an empty document for every language that lacks one.

        Returns:
            Paths of the documents created
        """
        created = []
        for language in self.list_languages():
            path = self.locate(topic, language).path
            with self._lock_for(path):
                if self.store.exists(path):
                    continue
                self.codec.write(path, {})
            created.append(path)
            logger.info("Created translation file", topic=topic, language=language, path=str(path))
        return created

    @log_errors(operation_name="fill_keys")
    def fill_keys(self, topic: str, keys: Dict[str, Dict[str, str]]) -> None:
        """Write translations for the given keys in different languages.

        ex: ``{'name': {'en': 'Name', 'nl': 'Naam'}}``

        Existing keys not mentioned in ``keys`` are kept. Missing documents
        and missing levels are created.

        Args:
            topic: Document topic
            keys: Key path to (language to value)
        """
        appends: Dict[Path, Translations] = {}

        for key, values in keys.items():
            for language, value in values.items():
                path = self.locate(topic, language).path
                set_path(appends.setdefault(path, {}), key, value)

        for path, values in appends.items():
            with self._lock_for(path):
                content = self.codec.parse(path, create_if_missing=True)
                self.codec.write(path, deep_merge(content, values))
            logger.info("Filled translation keys", topic=topic, path=str(path))

    @log_errors(operation_name="remove_key")
    def remove_key(self, topic: str, key: str) -> None:
        """Remove a key, and everything below it, from every language.

        Raises:
            DocumentNotFound: If a language has no document for ``topic``;
                languages handled before it are already written
        """
        for language in self.list_languages():
            path = self.locate(topic, language).path
            with self._lock_for(path):
                content = self.codec.parse(path)
                removed = forget_path(content, key)
                self.codec.write(path, content)

            if removed:
                logger.info("Removed translation key", topic=topic, key=key, language=language)
            else:
                logger.debug("Key not present", topic=topic, key=key, language=language)

    def read_topic(self, topic: str) -> Dict[str, Translations]:
        """Parsed document of every language that has one for ``topic``."""
        return {
            language: self.codec.parse(path)
            for language, path in self.list_topics().get(topic, {}).items()
        }

    def missing_keys(self, topic: str) -> Dict[str, List[str]]:
        """Keys defined for some languages of ``topic`` but not for others.

        Returns:
            Dotted key path to the languages lacking it
        """
        documents = self.read_topic(topic)
        languages = self.list_languages()

        seen: Dict[str, None] = {}
        for translations in documents.values():
            for key, _ in flatten(translations):
                seen.setdefault(key)

        missing = {}
        for key in seen:
            absent = [
                language for language in languages
                if not has_path(documents.get(language, {}), key)
            ]
            if absent:
                missing[key] = absent
        return missing

    def collect_keys(self) -> Dict[str, List[str]]:
        """Translation keys referenced in the sync paths, grouped by topic."""
        sources = self.store.list_all_files(self.sync_paths)
        found = self.extractor.extract_all(sources)
        logger.info("Collected translation keys", files=len(sources), topics=len(found))
        return found

    def sync(self) -> Dict[str, List[str]]:
        """Add empty translations for keys used in code or other languages.

        Returns:
            Topic to the key paths that were added
        """
        added: Dict[str, List[str]] = {}
        languages = self.list_languages()

        for topic, subkeys in self.collect_keys().items():
            documents = {
                language: self._read_existing(self.locate(topic, language).path)
                for language in languages
            }
            fills = {}
            for key in subkeys:
                absent = {
                    language: "" for language in languages
                    if not has_path(documents[language], key)
                }
                if absent:
                    fills[key] = absent

            if fills:
                self.fill_keys(topic, fills)
                added.setdefault(topic, []).extend(fills)

        for topic in self.list_topics():
            missing = self.missing_keys(topic)
            if missing:
                self.fill_keys(topic, {
                    key: {language: "" for language in absent}
                    for key, absent in missing.items()
                })
                keys = added.setdefault(topic, [])
                keys.extend(key for key in missing if key not in keys)

        logger.info("Synchronized translations", topics=len(added), keys=sum(map(len, added.values())))
        return added

    def _read_existing(self, path: Path) -> Translations:
        if not self.store.exists(path):
            return {}
        return self.codec.parse(path)
