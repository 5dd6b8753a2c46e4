"""Harness configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from .constants import (
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_CONCURRENT_RUNS,
    DEFAULT_TIMEOUT_SECONDS,
    _get_float_env,
    _get_int_env,
)


@dataclass(frozen=True)
class HarnessConfig:
    """Configuration for a harness run.

    Attributes:
        endpoint: GraphQL endpoint used unless a scenario overrides it
        timeout_seconds: Per-call timeout unless a scenario overrides it
        max_concurrent_runs: Upper bound on scenarios in flight
        fail_on_status: Raise on 4xx/5xx instead of returning the response.
            Negative scenarios rely on inspecting 400 bodies, so this is off
            by default.
        headers: Extra HTTP headers (auth tokens for private deployments)
    """

    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_concurrent_runs: int = DEFAULT_MAX_CONCURRENT_RUNS
    fail_on_status: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.endpoint:
            raise ValueError("HarnessConfig.endpoint cannot be empty")
        if self.max_concurrent_runs < 1:
            raise ValueError("HarnessConfig.max_concurrent_runs must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("HarnessConfig.timeout_seconds must be positive")

    @classmethod
    def from_env(
        cls,
        endpoint: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_concurrent_runs: Optional[int] = None,
        fail_on_status: bool = False,
    ) -> "HarnessConfig":
        """Build a config from explicit values, falling back to the environment.

        The environment is read at call time, so values loaded from a
        ``.env`` file after import still apply.
        """
        return cls(
            endpoint=endpoint or os.getenv("GRAPHQL_HARNESS_ENDPOINT", DEFAULT_ENDPOINT),
            timeout_seconds=timeout_seconds
            if timeout_seconds is not None
            else _get_float_env("GRAPHQL_HARNESS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            max_concurrent_runs=max_concurrent_runs
            if max_concurrent_runs is not None
            else _get_int_env("GRAPHQL_HARNESS_MAX_CONCURRENT_RUNS", DEFAULT_MAX_CONCURRENT_RUNS),
            fail_on_status=fail_on_status,
        )

    def with_endpoint(self, endpoint: str) -> "HarnessConfig":
        return replace(self, endpoint=endpoint)
