"""Detect whether a partial update actually changes a loaded record."""

from collections.abc import Mapping
from typing import Any


def changed_fields(original: Mapping[str, Any], candidate: Mapping[str, Any]) -> list[str]:
    """
    List the candidate keys whose value differs from the original.

    Comparison is by value, so 1000 and 1000.0 are equal. A key missing from
    the original compares as None.
    """
    return [key for key, value in candidate.items() if original.get(key) != value]


def has_changes(original: Mapping[str, Any], candidate: Mapping[str, Any]) -> bool:
    return any(original.get(key) != value for key, value in candidate.items())


def extract_changes(original: Mapping[str, Any], candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Return only the candidate entries that differ from the original."""
    return {key: candidate[key] for key in changed_fields(original, candidate)}
