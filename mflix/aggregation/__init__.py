"""Builders for MongoDB filters and aggregation pipelines.

Stages are composed locally and executed by the server:

    from mflix.aggregation import Facet, Pipeline, accumulators, filters, stages

    pipeline = Pipeline(
        stages.match(filters.eq("countries", "Portugal")),
        stages.facet(
            Facet("genres_count", stages.unwind("$genres"), stages.sort_by_count("$genres")),
        ),
    )
"""

from mflix.aggregation import accumulators, filters, sorts, stages
from mflix.aggregation.pipeline import Pipeline
from mflix.aggregation.stages import Facet

__all__ = [
    "Facet",
    "Pipeline",
    "accumulators",
    "filters",
    "sorts",
    "stages",
]
