"""Accumulator builders for ``$group``, ``$bucket`` and ``$bucketAuto``.

Each builder returns a one-entry mapping ``{output_field: {operator:
expression}}``; stage builders merge them into their output spec.
"""

from typing import Any


def _accumulator(operator: str, field: str, expression: Any) -> dict[str, Any]:
    return {field: {operator: expression}}


def sum_(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$sum", field, expression)


def avg(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$avg", field, expression)


def min_(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$min", field, expression)


def max_(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$max", field, expression)


def first(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$first", field, expression)


def last(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$last", field, expression)


def push(field: str, expression: Any) -> dict[str, Any]:
    return _accumulator("$push", field, expression)


def add_to_set(field: str, expression: Any) -> dict[str, Any]:
    """Collect the distinct values of ``expression`` into an array."""
    return _accumulator("$addToSet", field, expression)


def merge(*accumulators: dict[str, Any]) -> dict[str, Any]:
    """Combine accumulators into one output spec.

    Raises:
        ValueError: If two accumulators write the same output field
    """
    merged: dict[str, Any] = {}
    for accumulator in accumulators:
        for field, expression in accumulator.items():
            if field in merged:
                raise ValueError(f"Duplicate accumulator output field: {field}")
            merged[field] = expression
    return merged
