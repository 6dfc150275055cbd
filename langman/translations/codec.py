"""Read and write PHP language files.

A language file is a PHP script returning a (possibly nested) array of
strings::

    <?php

    return [
        'welcome' => 'Welcome',
        'form' => [
            'submit' => 'Send',
        ],
    ];

Files are never executed. ``loads`` understands the literal subset that
language files are written in and rejects anything else; ``serialize``
always produces the canonical layout above, so rewriting a file only
changes the lines whose translations changed.
"""

import re
import sys
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

import structlog

from ..errors import CodecError, DocumentNotFound, DocumentUnreadable
from .keys import Translations, escape
from .storage import FileStore, PathLike

logger = structlog.get_logger(__name__)

PREAMBLE = "<?php\n\nreturn ["
EMPTY_DOCUMENT = "<?php\n\nreturn [];\n"
INDENT = "    "

TOKEN_RE = re.compile(
    r"""
     (?P<ws>\s+)
    |(?P<comment>//[^\n]*|\#[^\n]*|/\*.*?\*/)
    |(?P<open_tag><\?php\b|<\?)
    |(?P<close_tag>\?>)
    |(?P<squote>'(?:[^'\\]|\\.)*')
    |(?P<dquote>"(?:[^"\\]|\\.)*")
    |(?P<number>[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?)
    |(?P<arrow>=>)
    |(?P<punct>[\[\](),;=])
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE | re.DOTALL,
)

INTEGER_KEY_RE = re.compile(r"-?(?:0|[1-9][0-9]*)")
SINGLE_QUOTE_ESCAPE_RE = re.compile(r"\\([\\'])")
DOUBLE_QUOTE_ESCAPE_RE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|x[0-9A-Fa-f]{1,2}|[0-7]{1,3}|.)", re.DOTALL)
DOUBLE_QUOTE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "f": "\f",
    "e": "\x1b",
    "\\": "\\",
    "$": "$",
    '"': '"',
}


class Token(NamedTuple):
    kind: str
    text: str
    position: int


def _unescape_double(match: "re.Match") -> str:
    sequence = match.group(1)
    if sequence.startswith("u{"):
        codepoint = int(sequence[2:-1], 16)
        if codepoint > sys.maxunicode:
            raise CodecError(f"Codepoint too large in \\{sequence}")
        return chr(codepoint)
    if sequence[0] == "x" and len(sequence) > 1:
        return chr(int(sequence[1:], 16))
    if sequence[0] in "01234567":
        return chr(int(sequence, 8) & 0xFF)
    return DOUBLE_QUOTE_ESCAPES.get(sequence, "\\" + sequence)


def tokenize(text: str) -> List[Token]:
    tokens = []
    position = 0
    while position < len(text):
        match = TOKEN_RE.match(text, position)
        if match is None:
            raise CodecError(f"Unexpected character {text[position]!r}", position)
        kind = match.lastgroup
        if kind == "close_tag":
            # Whatever follows the closing tag is output, not code.
            break
        if kind not in ("ws", "comment"):
            tokens.append(Token(kind, match.group(), position))
        position = match.end()
    return tokens


class _Parser:
    """Recursive descent over the tokens of one document."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise CodecError("Unexpected end of document")
        self.index += 1
        return token

    def at(self, kind: str, text: Optional[str] = None) -> bool:
        token = self.peek()
        if token is None or token.kind != kind:
            return False
        return text is None or token.text.lower() == text

    def expect(self, kind: str, text: Optional[str] = None) -> Token:
        if not self.at(kind, text):
            token = self.peek()
            found = repr(token.text) if token else "end of document"
            raise CodecError(
                f"Expected {text or kind}, found {found}",
                token.position if token else None,
            )
        return self.next()

    def document(self) -> Translations:
        if self.at("open_tag"):
            self.next()
        while self.at("name", "declare"):
            self.next()
            self.expect("punct", "(")
            while not self.at("punct", ")"):
                self.next()
            self.next()
            self.expect("punct", ";")

        self.expect("name", "return")
        if not self.at("punct", "[") and not self.at("name", "array"):
            token = self.peek()
            raise CodecError(
                "Document does not return an array",
                token.position if token else None,
            )
        translations = self.array()
        if self.at("punct", ";"):
            self.next()

        token = self.peek()
        if token is not None:
            raise CodecError(f"Unexpected {token.text!r} after array", token.position)
        return translations

    def array(self) -> Translations:
        if self.at("punct", "["):
            self.next()
            closing = "]"
        else:
            self.expect("name", "array")
            self.expect("punct", "(")
            closing = ")"

        translations: Translations = {}
        next_index = 0
        while not self.at("punct", closing):
            start = self.peek()
            value = self.value()
            if self.at("arrow"):
                self.next()
                if isinstance(value, dict):
                    raise CodecError("Array keys must be strings or integers", start.position)
                key = value
                value = self.value()
            else:
                key = str(next_index)

            if INTEGER_KEY_RE.fullmatch(key):
                next_index = max(next_index, int(key) + 1)
            translations[key] = value

            if not self.at("punct", closing):
                self.expect("punct", ",")
        self.next()
        return translations

    def value(self) -> Union[str, Translations]:
        token = self.peek()
        if token is None:
            raise CodecError("Unexpected end of document")
        if token.kind == "squote":
            self.next()
            return SINGLE_QUOTE_ESCAPE_RE.sub(r"\1", token.text[1:-1])
        if token.kind == "dquote":
            self.next()
            return DOUBLE_QUOTE_ESCAPE_RE.sub(_unescape_double, token.text[1:-1])
        if token.kind == "number":
            self.next()
            return token.text
        if self.at("punct", "[") or self.at("name", "array"):
            return self.array()
        raise CodecError(f"Unsupported value {token.text!r}", token.position)


class DocumentCodec:
    """Parse language files into nested mappings and write them back."""

    def __init__(self, store: Optional[FileStore] = None):
        self.store = store or FileStore()

    def loads(self, text: str) -> Translations:
        """Parse document text.

        Raises:
            CodecError: If the text is not a language file
        """
        # A leading byte order mark is not part of the document
        if text.startswith("\ufeff"):
            text = text[1:]
        return _Parser(tokenize(text)).document()

    def serialize(self, translations: Translations) -> str:
        if not translations:
            return EMPTY_DOCUMENT
        return f"{PREAMBLE}{self._lines(translations, 1)}\n];\n"

    def _lines(self, translations: Translations, depth: int) -> str:
        indent = INDENT * depth
        output = ""
        for key, value in translations.items():
            key = escape(str(key))
            if isinstance(value, dict):
                if value:
                    nested = self._lines(value, depth + 1)
                    output += f"\n{indent}'{key}' => [{nested}\n{indent}],"
                else:
                    output += f"\n{indent}'{key}' => [],"
            else:
                output += f"\n{indent}'{key}' => '{escape(str(value))}',"
        return output

    def parse(self, path: PathLike, create_if_missing: bool = False) -> Translations:
        """Load the document at ``path``.

        Args:
            path: Document path
            create_if_missing: Write an empty document instead of failing
                when ``path`` does not exist

        Returns:
            Parsed translations

        Raises:
            DocumentNotFound: If the document is missing and may not be created
            DocumentUnreadable: If the document is not a valid language file
        """
        if not self.store.exists(path):
            if not create_if_missing:
                raise DocumentNotFound(path)

            directory = Path(path).parent
            if not self.store.exists(directory):
                self.store.make_directories(directory)
            self.store.write_text(path, EMPTY_DOCUMENT)
            logger.info("Created translation file", path=str(path))
            return {}

        try:
            return self.loads(self.store.read_text(path))
        except UnicodeDecodeError as e:
            raise DocumentUnreadable(path, "not valid UTF-8", previous_error=e) from e
        except CodecError as e:
            raise DocumentUnreadable(path, e.message, previous_error=e) from e

    def write(self, path: PathLike, translations: Translations) -> None:
        self.store.write_text(path, self.serialize(translations))
