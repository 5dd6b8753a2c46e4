"""Assertion engine: declarative expectations over normalized results."""

from .base import AllOf, DataPredicate, Expectation, Outcome, Verdict, evaluate, evaluate_all
from .factory import SUPPORTED_EXPECTATION_TYPES, create_expectation_from_definition
from .paths import PathError, parse_path, resolve_path
from .predicates import (
    AllMatch,
    ArrayLengthEquals,
    ArrayNonEmpty,
    ContainsSubstring,
    ErrorMessageIncludes,
    FieldCompare,
    FieldEquals,
    HasFields,
    IsNull,
    IsSorted,
    NotNull,
    ResultKind,
    SortOrder,
    StatusEquals,
)
from .utils import ComparisonType, compare, json_equal, ordering_kind

__all__ = [
    "AllOf",
    "DataPredicate",
    "Expectation",
    "Outcome",
    "Verdict",
    "evaluate",
    "evaluate_all",
    "SUPPORTED_EXPECTATION_TYPES",
    "create_expectation_from_definition",
    "PathError",
    "parse_path",
    "resolve_path",
    "AllMatch",
    "ArrayLengthEquals",
    "ArrayNonEmpty",
    "ContainsSubstring",
    "ErrorMessageIncludes",
    "FieldCompare",
    "FieldEquals",
    "HasFields",
    "IsNull",
    "IsSorted",
    "NotNull",
    "ResultKind",
    "SortOrder",
    "StatusEquals",
    "ComparisonType",
    "compare",
    "json_equal",
    "ordering_kind",
]
