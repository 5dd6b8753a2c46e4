import pytest

from graphql_harness.errors import BuildError, DuplicateScenarioError, UnresolvedDependencyError
from graphql_harness.expectations import StatusEquals
from graphql_harness.operations import Operation, RawOperation, ResultRef
from graphql_harness.scenarios import Category, Scenario, ScenarioRegistry


def _scenario(name: str, resource: str = "albums", category: str = "listing", **kwargs) -> Scenario:
    operation = kwargs.pop("operation", None) or Operation.query(resource, None, [{"data": ["id"]}])
    return Scenario(
        name=name,
        resource=resource,
        category=category,
        operation=operation,
        expectations=kwargs.pop("expectations", (StatusEquals(200),)),
        **kwargs,
    )


def _chained(name: str, depends_on: str, resource: str = "users") -> Scenario:
    return _scenario(
        name,
        resource=resource,
        category="delete",
        operation=Operation.mutation("deleteUser", {"id": ResultRef(depends_on, "createUser.id")}),
    )


def test_registration_order_is_preserved() -> None:
    registry = ScenarioRegistry([_scenario("b"), _scenario("a"), _scenario("c", resource="users")])

    assert [s.qualified_name for s in registry] == ["albums/b", "albums/a", "users/c"]
    assert registry.resources == ["albums", "users"]
    assert len(registry) == 3
    assert "albums/a" in registry


def test_duplicate_names_rejected_within_resource() -> None:
    registry = ScenarioRegistry([_scenario("list")])

    with pytest.raises(DuplicateScenarioError) as excinfo:
        registry.register(_scenario("list"))

    assert excinfo.value.qualified_name == "albums/list"
    registry.register(_scenario("list", resource="users"))
    assert len(registry) == 2


def test_unknown_dependency_rejected_at_registration() -> None:
    registry = ScenarioRegistry()

    with pytest.raises(UnresolvedDependencyError) as excinfo:
        registry.register(_chained("delete_user", "create_user"))

    assert excinfo.value.dependency == "users/create_user"
    assert len(registry) == 0


def test_dependency_must_precede_dependant() -> None:
    registry = ScenarioRegistry([_scenario("create_user", resource="users", category="create")])
    registry.register(_chained("delete_user", "create_user"))

    assert registry.get("delete_user", resource="users").dependencies() == ("users/create_user",)


def test_groups_by_resource_then_category() -> None:
    registry = ScenarioRegistry(
        [
            _scenario("list", category="listing"),
            _scenario("page", category="pagination"),
            _scenario("page_2", category="pagination"),
            _scenario("list", resource="users", category="listing"),
        ]
    )

    groups = registry.groups()

    assert list(groups) == ["albums", "users"]
    assert [s.name for s in groups["albums"][Category.PAGINATION]] == ["page", "page_2"]


def test_select_pulls_in_dependencies() -> None:
    registry = ScenarioRegistry(
        [
            _scenario("list", resource="users"),
            _scenario("create_user", resource="users", category="create"),
            _chained("delete_user", "create_user"),
            _scenario("list"),
        ]
    )

    selected = registry.select(categories=["delete"])
    assert [s.qualified_name for s in selected] == ["users/create_user", "users/delete_user"]

    by_resource = registry.select(resources=["albums"])
    assert [s.qualified_name for s in by_resource] == ["albums/list"]

    by_name = registry.select(names=["users/list"])
    assert [s.qualified_name for s in by_name] == ["users/list"]


def test_scenario_validation() -> None:
    with pytest.raises(BuildError):
        _scenario("")
    with pytest.raises(BuildError):
        _scenario("a/b")
    with pytest.raises(BuildError):
        _scenario("x", category="bogus")
    with pytest.raises(BuildError):
        _scenario("x", operation="query { a }")
    with pytest.raises(BuildError):
        _scenario("x", expectations=("status 200",))
    with pytest.raises(BuildError):
        _scenario("x", timeout=0)


def test_category_aliases() -> None:
    assert _scenario("x", category="errors").category is Category.ERROR_HANDLING
    assert _scenario("y", category="Error Handling").category is Category.ERROR_HANDLING
    assert _scenario("z", operation=RawOperation("query {")).operation.render() == "query {"
