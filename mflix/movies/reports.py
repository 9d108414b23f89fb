"""Movie catalog reports built from aggregation stages.

All grouping, bucketing and faceting runs on the server; these
functions only describe the pipelines.
"""

from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from mflix.aggregation import Facet, Pipeline, accumulators, filters, stages
from mflix.config.models.storage import MongoDBConfig


def build_movies_by_country_pipeline(country: str) -> Pipeline:
    """Single ``$match`` stage: movies produced or shot in ``country``."""
    return Pipeline(stages.match(filters.eq("countries", country)))


def build_country_facets_pipeline(country: str, year_buckets: int = 10) -> Pipeline:
    """Facets over the movies of ``country``.

    The result is one document with three fields:
    - cast_members: one group holding the set of cast members
    - genres_count: genres sorted by how many movies carry them
    - year_bucket: ``year_buckets`` evenly filled release-year ranges
    """
    cast_members = Facet(
        "cast_members",
        stages.unwind("$cast"),
        stages.group("", accumulators.add_to_set("cast_list", "$cast")),
    )
    genres_count = Facet(
        "genres_count",
        stages.unwind("$genres"),
        stages.sort_by_count("$genres"),
    )
    year_bucket = Facet("year_bucket", stages.bucket_auto("$year", year_buckets))

    return Pipeline(
        stages.match(filters.eq("countries", country)),
        stages.facet(cast_members, genres_count, year_bucket),
    )


class MovieReports:
    """Runs the report pipelines against the movies collection."""

    def __init__(self, movies: AsyncCollection) -> None:
        self._movies = movies

    @classmethod
    def from_database(
        cls, database: AsyncDatabase, config: MongoDBConfig | None = None
    ) -> "MovieReports":
        config = config or MongoDBConfig()
        return cls(database[config.movies_collection])

    async def movies_by_country(self, country: str) -> list[dict[str, Any]]:
        return await build_movies_by_country_pipeline(country).collect(self._movies)

    async def country_facets(
        self, country: str, year_buckets: int = 10
    ) -> dict[str, Any] | None:
        """The single facets document, or None if the server returned nothing."""
        results = await build_country_facets_pipeline(country, year_buckets).collect(
            self._movies
        )
        return results[0] if results else None
