"""Aggregation pipeline composition and execution."""

from collections.abc import AsyncIterator, Iterable, Iterator
from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from mflix.db.errors import OperationFailedError
from mflix.observability.logging import get_logger

logger = get_logger(__name__)


class Pipeline:
    """Ordered list of aggregation stages.

    Usage:
        pipeline = Pipeline(stages.match(filters.eq("countries", "Portugal")))
        pipeline.append(stages.sort_by_count("$genres"))
        async for document in pipeline.run(movies):
            ...
    """

    def __init__(self, *stages: dict[str, Any]) -> None:
        self._stages: list[dict[str, Any]] = []
        self.extend(stages)

    def append(self, stage: dict[str, Any]) -> "Pipeline":
        """Add a stage at the end. Returns self for chaining."""
        if len(stage) != 1 or not next(iter(stage)).startswith("$"):
            raise ValueError(f"Not an aggregation stage: {stage!r}")
        self._stages.append(stage)
        return self

    def extend(self, stages: Iterable[dict[str, Any]]) -> "Pipeline":
        for stage in stages:
            self.append(stage)
        return self

    def to_list(self) -> list[dict[str, Any]]:
        """The stage documents in execution order, as sent to the server."""
        return list(self._stages)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"Pipeline({self._stages!r})"

    async def run(
        self, collection: AsyncCollection, **kwargs: Any
    ) -> AsyncIterator[dict[str, Any]]:
        """Execute on ``collection`` and yield result documents lazily.

        Extra keyword arguments are passed to ``collection.aggregate``
        (``allowDiskUse``, ``maxTimeMS``...).

        Raises:
            OperationFailedError: The server rejected the pipeline
        """
        stage_names = [next(iter(stage)) for stage in self._stages]
        logger.debug(
            "aggregation_started",
            collection=collection.name,
            stages=stage_names,
        )
        try:
            async with await collection.aggregate(self.to_list(), **kwargs) as cursor:
                async for document in cursor:
                    yield document
        except PyMongoError as e:
            logger.error(
                "aggregation_error",
                collection=collection.name,
                stages=stage_names,
                error=str(e),
            )
            raise OperationFailedError(str(e), cause=e) from e

    async def collect(
        self, collection: AsyncCollection, **kwargs: Any
    ) -> list[dict[str, Any]]:
        """Execute on ``collection`` and return every result document."""
        return [document async for document in self.run(collection, **kwargs)]
