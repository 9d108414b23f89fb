"""Aggregation stage builders.

Stages are plain documents passed verbatim to the server; nothing is
evaluated locally. Field paths used as expressions keep their ``$``
prefix as written by the caller (``unwind("$cast")``), except where a
builder documents otherwise.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from mflix.aggregation.accumulators import merge


@dataclass(frozen=True, init=False)
class Facet:
    """A named sub-pipeline of a ``$facet`` stage."""

    name: str
    stages: tuple[dict[str, Any], ...]

    def __init__(self, name: str, *stages: dict[str, Any]) -> None:
        if not name or name.startswith("$") or "." in name:
            raise ValueError(f"Invalid facet name: {name!r}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "stages", tuple(stages))

    def to_list(self) -> list[dict[str, Any]]:
        return list(self.stages)


def match(filter: dict[str, Any]) -> dict[str, Any]:
    return {"$match": filter}


def unwind(
    field_path: str,
    *,
    include_array_index: str | None = None,
    preserve_null_and_empty_arrays: bool | None = None,
) -> dict[str, Any]:
    """Emit one document per element of the array at ``field_path``.

    Without options the short ``{"$unwind": "$path"}`` form is used.
    """
    if not field_path.startswith("$"):
        raise ValueError(f"unwind expects a field path starting with '$': {field_path!r}")

    if include_array_index is None and preserve_null_and_empty_arrays is None:
        return {"$unwind": field_path}

    options: dict[str, Any] = {"path": field_path}
    if include_array_index is not None:
        options["includeArrayIndex"] = include_array_index
    if preserve_null_and_empty_arrays is not None:
        options["preserveNullAndEmptyArrays"] = preserve_null_and_empty_arrays
    return {"$unwind": options}


def group(id: Any, *accumulators: dict[str, Any]) -> dict[str, Any]:
    """Group by the ``id`` expression; ``None`` groups every document together."""
    return {"$group": {"_id": id, **merge(*accumulators)}}


def sort_by_count(expression: Any) -> dict[str, Any]:
    """Group by ``expression`` and sort the groups by descending count."""
    return {"$sortByCount": expression}


def bucket(
    group_by: Any,
    boundaries: Sequence[Any],
    *,
    default: Any = None,
    output: Sequence[dict[str, Any]] = (),
) -> dict[str, Any]:
    """Bucket documents into the ranges between consecutive ``boundaries``."""
    if len(boundaries) < 2:
        raise ValueError("bucket requires at least two boundaries")
    if any(lower >= upper for lower, upper in zip(boundaries, boundaries[1:])):
        raise ValueError("bucket boundaries must be strictly ascending")

    spec: dict[str, Any] = {"groupBy": group_by, "boundaries": list(boundaries)}
    if default is not None:
        spec["default"] = default
    if output:
        spec["output"] = merge(*output)
    return {"$bucket": spec}


def bucket_auto(
    group_by: Any,
    buckets: int,
    *,
    output: Sequence[dict[str, Any]] = (),
    granularity: str | None = None,
) -> dict[str, Any]:
    """Let the server split documents into ``buckets`` evenly filled ranges."""
    if buckets <= 0:
        raise ValueError(f"bucket_auto requires a positive bucket count, got {buckets}")

    spec: dict[str, Any] = {"groupBy": group_by, "buckets": buckets}
    if output:
        spec["output"] = merge(*output)
    if granularity is not None:
        spec["granularity"] = granularity
    return {"$bucketAuto": spec}


def facet(*facets: Facet) -> dict[str, Any]:
    """Run each facet's sub-pipeline over the same input documents.

    Produces a single document with one array field per facet.
    """
    if not facets:
        raise ValueError("facet requires at least one Facet")

    spec: dict[str, list[dict[str, Any]]] = {}
    for item in facets:
        if item.name in spec:
            raise ValueError(f"Duplicate facet name: {item.name}")
        spec[item.name] = item.to_list()
    return {"$facet": spec}


def project(projection: dict[str, Any]) -> dict[str, Any]:
    return {"$project": projection}


def sort(specification: dict[str, Any]) -> dict[str, Any]:
    if not specification:
        raise ValueError("sort requires at least one field")
    return {"$sort": specification}


def limit(count: int) -> dict[str, Any]:
    if count <= 0:
        raise ValueError(f"limit must be positive, got {count}")
    return {"$limit": count}


def skip(count: int) -> dict[str, Any]:
    if count < 0:
        raise ValueError(f"skip must not be negative, got {count}")
    return {"$skip": count}


def count(field: str = "count") -> dict[str, Any]:
    return {"$count": field}


def add_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {"$addFields": fields}


def lookup(
    from_: str,
    local_field: str,
    foreign_field: str,
    as_: str,
) -> dict[str, Any]:
    """Left outer join with ``from_`` on local_field == foreign_field."""
    return {
        "$lookup": {
            "from": from_,
            "localField": local_field,
            "foreignField": foreign_field,
            "as": as_,
        }
    }
