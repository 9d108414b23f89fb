"""Query filter builders.

Each builder returns the filter document MongoDB expects, usable both
in ``find`` and in a ``$match`` stage.
"""

from collections.abc import Iterable
from typing import Any


def eq(field: str, value: Any) -> dict[str, Any]:
    """``{field: value}``: matches equal values and arrays containing the value."""
    return {field: value}


def ne(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$ne": value}}


def gt(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$gt": value}}


def gte(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$gte": value}}


def lt(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$lt": value}}


def lte(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$lte": value}}


def in_(field: str, values: Iterable[Any]) -> dict[str, Any]:
    return {field: {"$in": list(values)}}


def nin(field: str, values: Iterable[Any]) -> dict[str, Any]:
    return {field: {"$nin": list(values)}}


def exists(field: str, present: bool = True) -> dict[str, Any]:
    return {field: {"$exists": present}}


def and_(*filters: dict[str, Any]) -> dict[str, Any]:
    if not filters:
        raise ValueError("and_ requires at least one filter")
    return {"$and": list(filters)}


def or_(*filters: dict[str, Any]) -> dict[str, Any]:
    if not filters:
        raise ValueError("or_ requires at least one filter")
    return {"$or": list(filters)}
