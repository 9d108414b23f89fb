"""Reports over the movies collection."""

from mflix.movies.reports import (
    MovieReports,
    build_country_facets_pipeline,
    build_movies_by_country_pipeline,
)

__all__ = [
    "MovieReports",
    "build_country_facets_pipeline",
    "build_movies_by_country_pipeline",
]
