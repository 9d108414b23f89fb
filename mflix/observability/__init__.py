"""Observability: structured logging and Prometheus store metrics."""

from mflix.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
