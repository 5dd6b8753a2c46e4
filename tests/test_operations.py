import pytest

from graphql_harness.errors import BuildError
from graphql_harness.operations import (
    EnumValue,
    Field,
    Operation,
    OperationKind,
    RawOperation,
    ResultRef,
    build,
    parse_selection,
)


def test_query_renders_nested_arguments_and_selection() -> None:
    op = Operation.query(
        "albums",
        {"options": {"paginate": {"page": 2, "limit": 5}}},
        [{"data": ["id", "title"]}, {"links": [{"next": ["page"]}]}],
    )

    assert op.render() == (
        "query { albums(options: {paginate: {page: 2, limit: 5}}) "
        "{ data { id title } links { next { page } } } }"
    )


def test_no_arguments_omits_parentheses() -> None:
    assert build("query", "albums", None, [{"data": ["id"]}]) == "query { albums { data { id } } }"
    assert build("query", "albums", {}, [{"data": ["id"]}]) == "query { albums { data { id } } }"


def test_scalar_root_field_has_no_selection_braces() -> None:
    assert Operation.mutation("deleteAlbum", {"id": 1}).render() == "mutation { deleteAlbum(id: 1) }"


def test_enum_tokens_render_bare_and_strings_quoted() -> None:
    op = Operation.query(
        "albums",
        {"options": {"sort": {"field": "title", "order": EnumValue("ASC")}}},
        [{"data": ["title"]}],
    )

    assert 'sort: {field: "title", order: ASC}' in op.render()


def test_string_values_are_escaped() -> None:
    text = build("mutation", "createAlbum", {"input": {"title": 'He said "hi"\n\\'}}, ["id"])

    assert 'title: "He said \\"hi\\"\\n\\\\"' in text


def test_literal_types() -> None:
    text = build("query", "search", {"flag": True, "off": False, "none": None, "ratio": 1.5, "ids": [1, 2]}, ["id"])

    assert "(flag: true, off: false, none: null, ratio: 1.5, ids: [1, 2])" in text


def test_invalid_names_are_rejected() -> None:
    with pytest.raises(BuildError):
        Operation.query("albums list")
    with pytest.raises(BuildError):
        Operation.query("albums", {"bad-name": 1})
    with pytest.raises(BuildError):
        parse_selection(["id", "1title"])
    with pytest.raises(BuildError):
        EnumValue("not valid")


def test_unsupported_and_non_finite_values_are_rejected() -> None:
    with pytest.raises(BuildError):
        Operation.query("albums", {"ids": {1, 2}})
    with pytest.raises(BuildError):
        Operation.query("albums", {"limit": float("nan")})


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(BuildError):
        build("subscription", "albums")
    assert OperationKind.from_string(" Mutation ") is OperationKind.MUTATION


def test_selection_full_form_supports_field_arguments() -> None:
    selection = parse_selection(
        [{"name": "albums", "args": {"options": {"paginate": {"limit": 1}}}, "selection": [{"data": ["id"]}]}]
    )

    assert selection == (
        Field(
            "albums",
            selection=(Field("data", selection=(Field("id"),)),),
            arguments=selection[0].arguments,
        ),
    )
    text = Operation.query("user", {"id": 1}, selection).render()
    assert text == "query { user(id: 1) { albums(options: {paginate: {limit: 1}}) { data { id } } } }"


def test_result_refs_must_be_bound_before_rendering() -> None:
    ref = ResultRef("create_user", "createUser.id")
    op = Operation.mutation("deleteUser", {"id": ref})

    assert op.references() == (ref,)
    with pytest.raises(BuildError):
        op.render()

    bound = op.bind({ref: "11"})
    assert bound.references() == ()
    assert bound.render() == 'mutation { deleteUser(id: "11") }'


def test_bind_without_value_is_a_build_error() -> None:
    op = Operation.mutation("deleteUser", {"id": ResultRef("create_user", "createUser.id")})

    with pytest.raises(BuildError):
        op.bind({})


def test_operations_are_immutable_values() -> None:
    first = Operation.query("album", {"id": 1}, ["title"])
    second = Operation.query("album", {"id": 1}, ["title"])

    assert first == second
    with pytest.raises(AttributeError):
        first.root_field = "user"  # type: ignore[misc]


def test_raw_operation_is_sent_verbatim() -> None:
    text = "query {\n  album(id: 1) {\n    title\n"
    raw = RawOperation(text)

    assert raw.render() == text
    assert raw.references() == ()
    with pytest.raises(BuildError):
        RawOperation("   ")


def test_field_called_name_is_not_mistaken_for_full_form() -> None:
    assert parse_selection([{"name": "first"}]) == (Field("name", selection=(Field("first"),)),)
    assert build("query", "user", {"id": 1}, ["id", {"name": "first"}]) == "query { user(id: 1) { id name { first } } }"
    assert parse_selection([{"name": "albums", "selection": ["id"]}]) == (Field("albums", selection=(Field("id"),)),)
