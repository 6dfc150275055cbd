"""Find translation keys referenced in application source files."""

import re
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from ..config.settings import DEFAULT_KEY_FUNCTIONS
from ..errors import MalformedKeyReference
from .keys import split_key
from .storage import SourceFile

logger = structlog.get_logger(__name__)


def build_pattern(functions: Sequence[str]) -> "re.Pattern":
    """Regex matching ``<function>('<group>.<key>'`` followed by ``)`` or ``,``.

    The key group is captured as group 2. Quantifiers are lazy so a match
    ends at the first closing quote that is followed by ``)`` or ``,``.
    """
    pattern = (
        "(" + "|".join(re.escape(f) for f in functions) + ")"  # one of the functions
        r"\("                                                   # opening parenthesis
        r"['\"]"                                                # opening quote
        r"("                                                    # the key:
        r"[a-zA-Z0-9_-]+"                                       #   starts with the group
        r"(?:[.][^\x01)]+?)+?"                                  #   followed by one or more keys
        r")"
        r"['\"]"                                                # closing quote
        r"[),]"                                                 # end of call or next argument
    )
    return re.compile(pattern, re.IGNORECASE | re.DOTALL)


class KeyExtractor:
    """Textual scan for translation calls.

    This is a best-effort regex search: it does not understand nested quotes
    or escaped delimiters.
    """

    def __init__(self, functions: Optional[Sequence[str]] = None):
        self.functions = list(functions or DEFAULT_KEY_FUNCTIONS)
        self.pattern = build_pattern(self.functions)

    def extract(self, text: str) -> Dict[str, List[str]]:
        """Map each referenced topic to its subkeys, unique and in order found."""
        found: Dict[str, List[str]] = {}
        self._collect(text, found)
        return found

    def extract_all(self, sources: Iterable[SourceFile]) -> Dict[str, List[str]]:
        found: Dict[str, List[str]] = {}
        for source in sources:
            count = self._collect(source.contents, found)
            if count:
                logger.debug("Scanned source file", path=str(source.path), references=count)
        return found

    def _collect(self, text: str, found: Dict[str, List[str]]) -> int:
        count = 0
        for match in self.pattern.finditer(text):
            try:
                topic, subkey = split_key(match.group(2))
            except MalformedKeyReference as e:
                logger.debug("Skipping key reference", reference=e.reference)
                continue

            count += 1
            subkeys = found.setdefault(topic, [])
            if subkey not in subkeys:
                subkeys.append(subkey)
        return count
