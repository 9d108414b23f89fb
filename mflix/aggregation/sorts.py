"""Sort specification builders."""

from typing import Any


def ascending(*fields: str) -> dict[str, int]:
    return {field: 1 for field in fields}


def descending(*fields: str) -> dict[str, int]:
    return {field: -1 for field in fields}


def orderby(*sorts: dict[str, Any]) -> dict[str, Any]:
    """Combine sort specs; the first occurrence of a field wins."""
    combined: dict[str, Any] = {}
    for spec in sorts:
        for field, direction in spec.items():
            combined.setdefault(field, direction)
    return combined
