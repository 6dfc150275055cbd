"""Command line entry point for langman."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import structlog

from langman import __version__
from langman.config import load_config
from langman.errors import LangmanError
from langman.translations import TranslationCatalog
from langman.translations.keys import split_key

logger = structlog.get_logger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging."""
    level = logging.DEBUG if debug else logging.INFO

    # Clear any existing handlers to prevent duplication
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Command output goes to stdout, logs to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.dev.ConsoleRenderer(colors=True)
                if debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_language_value(item: str) -> Tuple[str, str]:
    """Turn ``"en=Name"`` into ``("en", "Name")``."""
    language, sep, value = item.partition("=")
    if not sep or not language:
        raise argparse.ArgumentTypeError(f"expected LANGUAGE=VALUE, got {item!r}")
    return language, value


def cmd_languages(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    for language in catalog.list_languages():
        print(language)
    return 0


def cmd_topics(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    for topic, files in catalog.list_topics().items():
        print(f"{topic}: {', '.join(sorted(files))}")
    return 0


def cmd_make(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    created = catalog.create_document(args.topic)
    for path in created:
        print(f"Created {path}")
    if not created:
        print(f"{args.topic} already exists for every language")
    return 0


def cmd_trans(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    topic, key = split_key(args.key)
    values = dict(args.values)
    catalog.fill_keys(topic, {key: values})
    print(f"Saved {args.key} for {', '.join(values)}")
    return 0


def cmd_remove(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    topic, key = split_key(args.key)
    catalog.remove_key(topic, key)
    print(f"Removed {args.key}")
    return 0


def cmd_missing(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    topics = [args.topic] if args.topic else list(catalog.list_topics())
    found = False
    for topic in topics:
        for key, languages in catalog.missing_keys(topic).items():
            found = True
            print(f"{topic}.{key}: {', '.join(languages)}")
    if not found:
        print("All keys synchronized")
    return 1 if found else 0


def cmd_sync(catalog: TranslationCatalog, args: argparse.Namespace) -> int:
    added = catalog.sync()
    for topic, keys in added.items():
        for key in keys:
            print(f"Added {topic}.{key}")
    if not added:
        print("Nothing to sync")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="langman",
        description="Manage PHP language files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"langman {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config-file", type=Path, help="Path to a JSON configuration file")
    parser.add_argument("--path", type=Path, help="Language files directory")
    parser.add_argument("--vendor", metavar="PACKAGE", help="Work on a vendor package's language files")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("languages", help="List languages").set_defaults(handler=cmd_languages)
    commands.add_parser("topics", help="List language files").set_defaults(handler=cmd_topics)

    make = commands.add_parser("make", help="Create a language file in every language")
    make.add_argument("topic")
    make.set_defaults(handler=cmd_make)

    trans = commands.add_parser("trans", help="Set a translation")
    trans.add_argument("key", help="Key as topic.key")
    trans.add_argument("values", nargs="+", type=parse_language_value, metavar="LANGUAGE=VALUE")
    trans.set_defaults(handler=cmd_trans)

    remove = commands.add_parser("remove", help="Remove a key from every language")
    remove.add_argument("key", help="Key as topic.key")
    remove.set_defaults(handler=cmd_remove)

    missing = commands.add_parser("missing", help="List keys missing in some languages")
    missing.add_argument("topic", nargs="?")
    missing.set_defaults(handler=cmd_missing)

    commands.add_parser(
        "sync", help="Add keys used in the source files or in other languages"
    ).set_defaults(handler=cmd_sync)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.debug)

    try:
        config = load_config(args.config_file, lang_path=args.path, debug=args.debug or None)
        if config.debug and not args.debug:
            setup_logging(True)

        catalog = TranslationCatalog.from_settings(config)
        if args.vendor:
            catalog.set_vendor_scope(args.vendor)

        return args.handler(catalog, args)

    except LangmanError as e:
        logger.error("Command failed", **e.to_dict())
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
