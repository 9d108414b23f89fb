"""Tests for Pipeline composition and execution."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import OperationFailure

from mflix.aggregation import Pipeline, filters, stages
from mflix.db.errors import OperationFailedError


class FakeCursor:
    """Async-iterable stand-in for AsyncCommandCursor."""

    def __init__(self, documents, fail_after: int | None = None) -> None:
        self._documents = list(documents)
        self._fail_after = fail_after
        self.closed = False

    async def _iterate(self):
        for index, document in enumerate(self._documents):
            if self._fail_after is not None and index == self._fail_after:
                raise OperationFailure("cursor killed")
            yield document

    def __aiter__(self):
        return self._iterate()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True


@pytest.fixture
def movies() -> MagicMock:
    collection = MagicMock()
    collection.name = "movies"
    collection.aggregate = AsyncMock()
    return collection


class TestComposition:
    """Tests for building pipelines."""

    def test_stages_kept_in_order(self) -> None:
        pipeline = Pipeline(stages.match(filters.eq("countries", "Portugal")))
        pipeline.append(stages.unwind("$genres")).append(stages.sort_by_count("$genres"))

        assert pipeline.to_list() == [
            {"$match": {"countries": "Portugal"}},
            {"$unwind": "$genres"},
            {"$sortByCount": "$genres"},
        ]
        assert len(pipeline) == 3

    def test_extend_and_iterate(self) -> None:
        pipeline = Pipeline().extend([stages.limit(5), stages.skip(1)])
        assert list(pipeline) == [{"$limit": 5}, {"$skip": 1}]

    def test_to_list_returns_copy(self) -> None:
        pipeline = Pipeline(stages.limit(5))
        pipeline.to_list().append(stages.skip(1))
        assert len(pipeline) == 1

    @pytest.mark.parametrize("stage", [{}, {"match": {}}, {"$match": {}, "$limit": 1}])
    def test_rejects_non_stage(self, stage) -> None:
        with pytest.raises(ValueError):
            Pipeline(stage)


class TestExecution:
    """Tests for running a pipeline on a collection."""

    @pytest.mark.asyncio
    async def test_run_streams_documents(self, movies) -> None:
        documents = [{"title": "A"}, {"title": "B"}]
        movies.aggregate.return_value = FakeCursor(documents)
        pipeline = Pipeline(stages.match(filters.eq("countries", "Portugal")))

        results = [document async for document in pipeline.run(movies, allowDiskUse=True)]

        assert results == documents
        movies.aggregate.assert_awaited_once_with(
            [{"$match": {"countries": "Portugal"}}], allowDiskUse=True
        )

    @pytest.mark.asyncio
    async def test_cursor_closed_when_consumer_stops_early(self, movies) -> None:
        cursor = FakeCursor([{"title": "A"}, {"title": "B"}])
        movies.aggregate.return_value = cursor
        results = Pipeline(stages.limit(2)).run(movies)

        assert await anext(results) == {"title": "A"}
        await results.aclose()

        assert cursor.closed

    @pytest.mark.asyncio
    async def test_collect(self, movies) -> None:
        movies.aggregate.return_value = FakeCursor([{"_id": "Drama", "count": 3}])

        results = await Pipeline(stages.sort_by_count("$genres")).collect(movies)

        assert results == [{"_id": "Drama", "count": 3}]

    @pytest.mark.asyncio
    async def test_server_rejection_translated(self, movies) -> None:
        movies.aggregate.side_effect = OperationFailure("Unrecognized pipeline stage name")

        with pytest.raises(OperationFailedError, match="Unrecognized pipeline stage"):
            await Pipeline(stages.limit(1)).collect(movies)

    @pytest.mark.asyncio
    async def test_cursor_failure_translated(self, movies) -> None:
        movies.aggregate.return_value = FakeCursor([{"a": 1}, {"a": 2}], fail_after=1)

        with pytest.raises(OperationFailedError):
            await Pipeline(stages.limit(2)).collect(movies)
