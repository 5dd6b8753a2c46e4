"""GraphQL Harness - contract tests for GraphQL CRUD endpoints."""

__version__ = "0.1.0"

# Operation builder
from .operations import EnumValue, Field, Operation, OperationKind, RawOperation, ResultRef, build

# Transport and normalized results
from .transport import RawResponse, TransportClient, send
from .results import GraphQLError, GraphQLErrors, NormalizedResult, Success, TransportError, normalize

# Assertion engine
from .expectations import (
    Expectation,
    Outcome,
    Verdict,
    create_expectation_from_definition,
    evaluate,
    evaluate_all,
)

# Scenarios and execution
from .scenarios import Category, Scenario, ScenarioRegistry
from .config import HarnessConfig
from .orchestrator import HarnessRunner, RunReport, ScenarioResult
from .loader import HarnessLoader, build_registry, load_harness_directory, load_harness_file

# Runtime context and events
from .runtime import RunContext, RunObserver

from .errors import (
    AssertionFailure,
    BuildError,
    DuplicateScenarioError,
    HarnessError,
    HarnessLoadError,
    RegistryError,
    UnresolvedDependencyError,
)

__all__ = [
    "__version__",
    "EnumValue",
    "Field",
    "Operation",
    "OperationKind",
    "RawOperation",
    "ResultRef",
    "build",
    "RawResponse",
    "TransportClient",
    "send",
    "GraphQLError",
    "GraphQLErrors",
    "NormalizedResult",
    "Success",
    "TransportError",
    "normalize",
    "Expectation",
    "Outcome",
    "Verdict",
    "create_expectation_from_definition",
    "evaluate",
    "evaluate_all",
    "Category",
    "Scenario",
    "ScenarioRegistry",
    "HarnessConfig",
    "HarnessRunner",
    "RunReport",
    "ScenarioResult",
    "HarnessLoader",
    "build_registry",
    "load_harness_directory",
    "load_harness_file",
    "RunContext",
    "RunObserver",
    "AssertionFailure",
    "BuildError",
    "DuplicateScenarioError",
    "HarnessError",
    "HarnessLoadError",
    "RegistryError",
    "UnresolvedDependencyError",
]
