"""Langman: keep PHP language files in sync with the keys your code uses."""

__version__ = "0.1.0"
