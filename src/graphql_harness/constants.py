"""Harness-wide constants and configuration values."""

import os


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable with fallback to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int_env(key: str, default: int) -> int:
    """Get int from environment variable with fallback to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


DEFAULT_ENDPOINT = os.getenv("GRAPHQL_HARNESS_ENDPOINT", "https://graphqlzero.almansi.me/api")
DEFAULT_TIMEOUT_SECONDS = _get_float_env("GRAPHQL_HARNESS_TIMEOUT_SECONDS", 30.0)
DEFAULT_CONNECT_TIMEOUT_SECONDS = _get_float_env("GRAPHQL_HARNESS_CONNECT_TIMEOUT_SECONDS", 10.0)
DEFAULT_MAX_CONCURRENT_RUNS = _get_int_env("GRAPHQL_HARNESS_MAX_CONCURRENT_RUNS", 8)
RESULTS_ROOT = os.getenv("GRAPHQL_HARNESS_RESULTS_ROOT", "results")

# Status recorded when no HTTP response was received (timeout, connection error)
NO_RESPONSE_STATUS = 0

REPORT_FILENAME = "report.json"
