import pytest

from graphql_harness.errors import BuildError
from graphql_harness.expectations import (
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
    Outcome,
    ResultKind,
    StatusEquals,
    create_expectation_from_definition,
    evaluate,
    evaluate_all,
    resolve_path,
)
from graphql_harness.expectations.paths import PathError, parse_path
from graphql_harness.expectations.utils import ComparisonType, compare, ordering_kind
from graphql_harness.operations import Operation
from graphql_harness.results import GraphQLError, GraphQLErrors, Success, TransportError, normalize
from graphql_harness.transport import RawResponse


def _albums(*titles) -> Success:
    return Success(data={"albums": {"data": [{"id": str(i + 1), "title": t} for i, t in enumerate(titles)]}})


def _errors(*messages, status: int = 400) -> GraphQLErrors:
    return GraphQLErrors(errors=tuple(GraphQLError(m) for m in messages), status_code=status)


def test_paths_resolve_keys_and_indices() -> None:
    data = {"albums": {"data": [{"title": "a"}, {"title": None}]}}

    assert parse_path("albums.data[1].title") == ("albums", "data", 1, "title")
    assert resolve_path(data, "albums.data[0].title") == "a"
    assert resolve_path(data, "albums.data[1].title") is None
    assert resolve_path(data, "") is data
    with pytest.raises(PathError):
        resolve_path(data, "albums.missing")
    with pytest.raises(PathError):
        resolve_path(data, "albums.data[5]")
    with pytest.raises(BuildError):
        parse_path("albums..data")


def test_evaluate_all_reports_first_failure_only() -> None:
    verdict = evaluate_all(
        _albums("a", "b"),
        [
            StatusEquals(200),
            ArrayLengthEquals("albums.data", 5),
            FieldEquals("albums.data[0].title", "zzz"),
        ],
    )

    assert verdict.outcome == Outcome.FAIL
    assert verdict.predicate.startswith("array_length_equals")
    assert "expected 5 items" in verdict.failure_detail
    assert "field_equals" not in verdict.failure_detail


def test_empty_expectations_pass() -> None:
    assert evaluate_all(_albums(), []).passed


def test_status_equals_on_every_variant() -> None:
    assert evaluate(_errors("Syntax Error"), StatusEquals(400)).passed
    assert evaluate(TransportError(status=0, detail="timeout"), StatusEquals(0)).passed
    assert not evaluate(_albums(), StatusEquals(400)).passed


def test_array_length_exact_and_short_page_policy() -> None:
    three = _albums("a", "b", "c")

    assert evaluate(three, ArrayLengthEquals("albums.data", 3)).passed
    short = evaluate(three, ArrayLengthEquals("albums.data", 5))
    assert not short.passed
    assert "short page" in short.failure_detail
    assert evaluate(three, ArrayLengthEquals("albums.data", 5, last_page=True)).passed
    assert not evaluate(_albums(), ArrayLengthEquals("albums.data", 5, last_page=True)).passed
    assert evaluate(_albums(), ArrayLengthEquals("albums.data", 0)).passed
    assert not evaluate(_albums(*"abcdef"), ArrayLengthEquals("albums.data", 5, last_page=True)).passed


def test_array_non_empty() -> None:
    assert evaluate(_albums("a"), ArrayNonEmpty("albums.data")).passed
    assert not evaluate(_albums(), ArrayNonEmpty("albums.data")).passed


def test_is_sorted_ascending_and_descending() -> None:
    assert evaluate(_albums("a", "b", "b", "c"), IsSorted("albums.data", "title", "asc")).passed
    assert evaluate(_albums("c", "b", "a"), IsSorted("albums.data", "title", "desc")).passed

    verdict = evaluate(_albums("a", "c", "b"), IsSorted("albums.data", "title", "asc"))
    assert not verdict.passed
    assert "element [1]" in verdict.failure_detail


def test_is_sorted_uses_code_point_order() -> None:
    assert evaluate(_albums("B", "a"), IsSorted("albums.data", "title")).passed
    assert not evaluate(_albums("a", "B"), IsSorted("albums.data", "title")).passed


def test_is_sorted_is_idempotent_on_sorted_input() -> None:
    sorted_result = _albums("alpha", "beta", "gamma")
    predicate = IsSorted("albums.data", "title", "asc")

    assert evaluate(sorted_result, predicate) == evaluate(sorted_result, predicate)


def test_is_sorted_rejects_nulls_and_mixed_types() -> None:
    with_null = evaluate(_albums("a", None), IsSorted("albums.data", "title"))
    assert "null" in with_null.failure_detail

    mixed = Success(data={"items": [{"v": 1}, {"v": "2"}]})
    assert "mixed" in evaluate(mixed, IsSorted("items", "v")).failure_detail

    numbers = Success(data={"items": [{"v": 2}, {"v": 10}, {"v": 10.5}]})
    assert evaluate(numbers, IsSorted("items", "v")).passed


def test_search_predicate_over_every_element() -> None:
    predicate = AllMatch("albums.data", ContainsSubstring("title", "dolores"))

    assert evaluate(_albums("dolores a", "b dolores"), predicate).passed
    verdict = evaluate(_albums("dolores a", "nothing"), predicate)
    assert not verdict.passed
    assert "element [1]" in verdict.failure_detail


def test_contains_substring_across_fields() -> None:
    users = Success(
        data={
            "users": {
                "data": [
                    {"name": "Leanne Graham", "email": "x@y.z", "username": "Bret"},
                    {"name": "Someone", "email": "leanne@april.biz", "username": "Leanne_x"},
                ]
            }
        }
    )
    predicate = AllMatch("users.data", ContainsSubstring("", "Leanne", fields=("name", "email", "username")))

    assert evaluate(users, predicate).passed
    assert not evaluate(
        users, AllMatch("users.data", ContainsSubstring("", "Graham", fields=("name", "email")))
    ).passed
    assert evaluate(
        users,
        AllMatch("users.data", ContainsSubstring("", "leanne", fields=("name", "email"), case_sensitive=False)),
    ).passed


def test_is_null_distinguishes_null_from_missing() -> None:
    missing_record = Success(data={"album": {"title": None}})

    assert evaluate(missing_record, IsNull("album.title")).passed
    absent = evaluate(missing_record, IsNull("album.userId"))
    assert not absent.passed
    assert "not present" in absent.failure_detail
    assert not evaluate(missing_record, NotNull("album.title")).passed


def test_has_fields_and_field_compare() -> None:
    created = Success(data={"createAlbum": {"id": "101", "title": "t", "user": {"name": "n"}}})

    assert evaluate(created, HasFields("createAlbum", ("id", "title"))).passed
    assert not evaluate(created, HasFields("createAlbum", ("id", "title"), exact=True)).passed
    assert evaluate(Success(data={"count": 7}), FieldCompare("count", 5, "gt")).passed
    assert not evaluate(Success(data={"count": None}), FieldCompare("count", 5, ">=")).passed


def test_data_predicates_fail_on_graphql_errors_with_first_message() -> None:
    verdict = evaluate(_errors("first problem", "second problem"), FieldEquals("album.title", "x"))

    assert not verdict.passed
    assert "first problem" in verdict.failure_detail


def test_error_predicates() -> None:
    result = _errors('Field "CreateUserInput.username" of required type "String!" was not provided.')

    assert evaluate(result, ResultKind("graphql_errors")).passed
    assert evaluate(result, ErrorMessageIncludes("CreateUserInput.username")).passed
    assert not evaluate(result, ErrorMessageIncludes("Syntax Error")).passed
    assert not evaluate(result, ErrorMessageIncludes("x", index=3)).passed
    assert not evaluate(_albums(), ErrorMessageIncludes("x")).passed
    with pytest.raises(BuildError):
        ResultKind("partial")


def test_factory_builds_predicates_from_definitions() -> None:
    expectation = create_expectation_from_definition(
        {
            "type": "allMatch",
            "path": "users.data",
            "predicate": {"type": "contains_substring", "substring": "Leanne", "fields": ["name", "email"]},
        }
    )

    assert isinstance(expectation, AllMatch)
    assert expectation.predicate.fields == ("name", "email")
    assert isinstance(create_expectation_from_definition({"type": "status_equals", "status": 200}), StatusEquals)


@pytest.mark.parametrize(
    "definition",
    [
        {"type": "nope"},
        {"path": "a"},
        {"type": "array_length_equals", "path": "a"},
        {"type": "is_sorted", "path": "a", "field": "t", "order": "sideways"},
        {"type": "all_match", "path": "a", "predicate": {"type": "status_equals", "status": 200}},
        {"type": "field_compare", "path": "a", "expected": 1, "comparison": "~="},
    ],
)
def test_factory_rejects_bad_definitions(definition) -> None:
    with pytest.raises(BuildError):
        create_expectation_from_definition(definition)


def test_compare_orders_strings_and_numbers_only() -> None:
    assert ComparisonType.from_string(">=") is ComparisonType.GREATER_THAN_EQUAL
    assert compare("Bret", "Antonette", "gt")
    assert compare(None, None, "eq")
    assert ordering_kind([1, 2.5]) == "number"
    assert ordering_kind(["a", 1]) == "mixed"
    assert ordering_kind([True, False]) == "mixed"

    with pytest.raises(TypeError):
        compare(True, 0, ">")
    with pytest.raises(TypeError):
        compare("10", 9, "lt")
    with pytest.raises(ValueError):
        ComparisonType.from_string("between")


def test_selected_fields_come_back_exactly() -> None:
    operation = Operation.query("user", {"id": 1}, ["id", "name", {"address": ["city"]}])
    selected = tuple(field.name for field in operation.selection)

    def response(user: dict) -> Success:
        return normalize(RawResponse(status_code=200, body={"data": {"user": user}}, is_json=True))

    matching = response({"id": "1", "name": "Leanne Graham", "address": {"city": "Gwenborough"}})
    assert isinstance(matching, Success)
    assert evaluate(matching, HasFields("user", selected, exact=True)).passed
    assert evaluate(matching, HasFields("user.address", ("city",), exact=True)).passed

    missing = evaluate(response({"id": "1", "address": {"city": "x"}}), HasFields("user", selected, exact=True))
    assert "missing fields ['name']" in missing.failure_detail

    extra = response({"id": "1", "name": "n", "address": {}, "email": "e"})
    assert "unexpected fields ['email']" in evaluate(extra, HasFields("user", selected, exact=True)).failure_detail


def test_equality_keeps_booleans_apart_from_numbers() -> None:
    assert not evaluate(Success(data={"deleteAlbum": 1}), FieldEquals("deleteAlbum", True)).passed
    assert not evaluate(Success(data={"flag": False}), FieldEquals("flag", 0)).passed
    assert evaluate(Success(data={"deleteAlbum": True}), FieldEquals("deleteAlbum", True)).passed
    assert evaluate(Success(data={"count": 1.0}), FieldEquals("count", 1)).passed
    assert not evaluate(Success(data={"ids": [1, True]}), FieldEquals("ids", [1, 1])).passed

    assert not evaluate(Success(data={"flag": 1}), FieldCompare("flag", True, "eq")).passed
    assert evaluate(Success(data={"flag": 0}), FieldCompare("flag", False, "!=")).passed
