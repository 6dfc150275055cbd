"""Language file model, key extraction and the translation catalog."""

from .catalog import VENDOR_DIRECTORY, TranslationCatalog
from .codec import EMPTY_DOCUMENT, DocumentCodec
from .extractor import KeyExtractor
from .keys import Translations
from .locator import DocumentLocator
from .storage import DocumentFile, FileStore, SourceFile

__all__ = [
    "VENDOR_DIRECTORY",
    "EMPTY_DOCUMENT",
    "DocumentCodec",
    "DocumentFile",
    "DocumentLocator",
    "FileStore",
    "KeyExtractor",
    "SourceFile",
    "TranslationCatalog",
    "Translations",
]
