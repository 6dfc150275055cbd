"""Dotted key paths over nested translation mappings."""

from typing import Dict, Iterator, Tuple, Union

from ..errors import MalformedKeyReference

# A document level: each value is either a leaf string or a nested level.
Translations = Dict[str, Union[str, "Translations"]]


def set_path(translations: Translations, key: str, value: Union[str, Translations]) -> None:
    """Set ``value`` at dotted ``key``, creating intermediate levels.

    A leaf found where a level is needed is replaced by an empty level.
    """
    *parents, last = key.split(".")
    level = translations
    for part in parents:
        if not isinstance(level.get(part), dict):
            level[part] = {}
        level = level[part]
    level[last] = value


def has_path(translations: Translations, key: str) -> bool:
    if key in translations:
        return True

    level: Union[str, Translations] = translations
    for part in key.split("."):
        if not isinstance(level, dict) or part not in level:
            return False
        level = level[part]
    return True


def forget_path(translations: Translations, key: str) -> bool:
    """Remove the entry at dotted ``key`` together with its children.

    Returns:
        True if something was removed, False when the path does not exist
    """
    if key in translations:
        del translations[key]
        return True

    *parents, last = key.split(".")
    level = translations
    for part in parents:
        child = level.get(part)
        if not isinstance(child, dict):
            return False
        level = child

    if last not in level:
        return False
    del level[last]
    return True


def deep_merge(base: Translations, overlay: Translations) -> Translations:
    """Return ``base`` with ``overlay`` merged in level by level.

    Existing keys keep their position, new keys are appended. Nothing in
    ``base`` is removed unless ``overlay`` replaces it.
    """
    merged: Translations = {}
    for key, value in base.items():
        merged[key] = deep_merge(value, {}) if isinstance(value, dict) else value

    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(value, dict):
            merged[key] = deep_merge(current if isinstance(current, dict) else {}, value)
        else:
            merged[key] = value
    return merged


def flatten(translations: Translations, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield ``(dotted_key, value)`` for every leaf, in document order."""
    for key, value in translations.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from flatten(value, f"{path}.")
        else:
            yield path, value


def escape(value: str) -> str:
    """Escape a string for use inside a single quoted literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def split_key(reference: str) -> Tuple[str, str]:
    """Split ``topic.sub.key`` into ``("topic", "sub.key")`` on the first dot.

    Raises:
        MalformedKeyReference: If there is no dot or either side is empty
    """
    topic, dot, subkey = reference.partition(".")
    if not dot or not topic or not subkey:
        raise MalformedKeyReference(reference)
    return topic, subkey
