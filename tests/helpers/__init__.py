"""Shared test helpers."""

from .metric_delta import get_counter_value, get_histogram_count, histogram_observes, metric_delta
from .pages import json_ld_script, next_data_page, preload_script, wrap_page

__all__ = [
    "get_counter_value",
    "get_histogram_count",
    "histogram_observes",
    "json_ld_script",
    "metric_delta",
    "next_data_page",
    "preload_script",
    "wrap_page",
]
