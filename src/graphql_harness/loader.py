"""Load JSON harness files and convert them to scenarios."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Union

from .errors import BuildError, HarnessLoadError
from .expectations import Expectation, create_expectation_from_definition
from .operations import AnyOperation, EnumValue, Operation, OperationKind, RawOperation, ResultRef, is_full_form
from .scenarios import Scenario, ScenarioRegistry

ENUM_KEY = "$enum"
REF_KEY = "$ref"


def parse_value(value: Any) -> Any:
    """Convert a JSON argument value, resolving ``$enum`` and ``$ref`` markers.

    ``{"$enum": "ASC"}`` becomes ``EnumValue("ASC")`` and
    ``{"$ref": "users/create_user", "path": "createUser.id"}`` becomes a
    ``ResultRef``. Other objects and arrays are converted recursively.
    """
    if isinstance(value, Mapping):
        if ENUM_KEY in value:
            if len(value) != 1:
                raise BuildError(f"'{ENUM_KEY}' objects take no other keys: {dict(value)!r}")
            return EnumValue(value[ENUM_KEY])
        if REF_KEY in value:
            if set(value) - {REF_KEY, "path"}:
                raise BuildError(f"'{REF_KEY}' objects take only 'path': {dict(value)!r}")
            return ResultRef(scenario=value[REF_KEY], path=value.get("path", ""))
        return {key: parse_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [parse_value(item) for item in value]
    return value


def _parse_selection(items: Any) -> Any:
    """Resolve special values inside full-form selection entries (field arguments)."""
    if isinstance(items, list):
        return [_parse_selection(item) for item in items]
    if isinstance(items, Mapping):
        if is_full_form(items):
            return {
                "name": items["name"],
                "args": parse_value(items.get("args") or {}),
                "selection": _parse_selection(items.get("selection")),
            }
        return {name: _parse_selection(sub) for name, sub in items.items()}
    return items


def parse_operation(definition: Any) -> AnyOperation:
    """Build an operation from its JSON definition.

    Accepts ``{"text": "..."}`` for verbatim documents or
    ``{"kind": "query", "field": "albums", "args": {...}, "selection": [...]}``.

    Raises:
        BuildError: If the definition is malformed
    """
    if isinstance(definition, str):
        return RawOperation(definition)
    if not isinstance(definition, Mapping):
        raise BuildError(f"Operation must be an object; got {type(definition).__name__}")

    if "text" in definition:
        kind = definition.get("kind")
        return RawOperation(
            definition["text"],
            kind=OperationKind.from_string(kind) if kind else None,
        )

    root_field = definition.get("field")
    if not root_field:
        raise BuildError("Operation requires a 'field' (or 'text' for a raw document)")

    args = definition.get("args") or {}
    if not isinstance(args, Mapping):
        raise BuildError(f"Operation 'args' must be an object; got {type(args).__name__}")

    return Operation.create(
        definition.get("kind", "query"),
        root_field,
        parse_value(args),
        _parse_selection(definition.get("selection")),
    )


def parse_expectations(raw: Any) -> tuple[Expectation, ...]:
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise BuildError(f"'expect' must be an object or list of objects; got {type(raw).__name__}")
    return tuple(create_expectation_from_definition(entry) for entry in raw)


def parse_scenario(entry: Mapping[str, Any], resource: str) -> Scenario:
    """Build a scenario from one entry of a harness file.

    Raises:
        BuildError: If the entry is malformed
    """
    if not isinstance(entry, Mapping):
        raise BuildError(f"Scenario entry must be an object; got {type(entry).__name__}")
    if "operation" not in entry:
        raise BuildError(f"Scenario '{entry.get('name', 'unnamed')}' requires an 'operation'")

    timeout = entry.get("timeout")
    return Scenario(
        name=entry.get("name", ""),
        resource=entry.get("resource", resource),
        category=entry.get("category", ""),
        operation=parse_operation(entry["operation"]),
        expectations=parse_expectations(entry.get("expect")),
        expect_transport_failure=bool(entry.get("expect_transport_failure", False)),
        description=entry.get("description", ""),
        endpoint=entry.get("endpoint"),
        timeout=float(timeout) if timeout is not None else None,
        metadata=dict(entry.get("metadata", {})),
    )


def load_harness_file(path: Path) -> list[Scenario]:
    """Load scenarios from a JSON harness file.

    The file holds one resource group; ``resource`` defaults to the file stem.

    Args:
        path: Path to JSON harness file

    Returns:
        List of Scenario objects, in file order

    Raises:
        HarnessLoadError: If the file cannot be read, is not valid JSON, or
            contains a malformed scenario
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as exc:
        raise HarnessLoadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise HarnessLoadError(f"Invalid JSON in {path}: {exc}") from exc

    if isinstance(payload, list):
        payload = {"scenarios": payload}
    if not isinstance(payload, dict):
        raise HarnessLoadError(f"{path.name}: top level must be an object; got {type(payload).__name__}")

    resource = payload.get("resource") or path.stem
    entries = payload.get("scenarios", [])
    if not isinstance(entries, list):
        raise HarnessLoadError(f"{path.name}: 'scenarios' must be a list")

    scenarios: list[Scenario] = []
    for index, entry in enumerate(entries):
        try:
            scenarios.append(parse_scenario(entry, resource))
        except BuildError as exc:
            label = entry.get("name") if isinstance(entry, Mapping) else None
            raise HarnessLoadError(
                f"{path.name}: scenario #{index} ({label or 'unnamed'}): {exc}"
            ) from exc

    return scenarios


def load_harness_directory(directory: Path) -> dict[str, list[Scenario]]:
    """Load all JSON harness files from a directory.

    Args:
        directory: Path to directory containing JSON files

    Returns:
        Dict mapping file stem to list of scenarios

    Raises:
        HarnessLoadError: If directory doesn't exist or contains no JSON files
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise HarnessLoadError(f"Not a directory: {directory}")

    json_files = sorted(directory.glob("*.json"))
    if not json_files:
        raise HarnessLoadError(f"No JSON files found in directory: {directory}")

    result: dict[str, list[Scenario]] = {}
    for json_file in json_files:
        scenarios = load_harness_file(json_file)
        if scenarios:
            result[json_file.stem] = scenarios

    if not result:
        raise HarnessLoadError(f"No valid scenarios found in directory: {directory}")

    return result


class HarnessLoader:
    """Utility class for loading harness files with a fluent API."""

    def __init__(self):
        self.scenarios: list[Scenario] = []
        self.file_map: dict[str, list[Scenario]] = {}

    def load_file(self, path: Path) -> "HarnessLoader":
        """Load scenarios from a single file.

        Returns:
            Self for chaining
        """
        path = Path(path)
        scenarios = load_harness_file(path)
        self.scenarios.extend(scenarios)
        self.file_map[path.stem] = scenarios
        return self

    def load_directory(self, directory: Path) -> "HarnessLoader":
        """Load scenarios from all JSON files in a directory.

        Returns:
            Self for chaining
        """
        for file_stem, scenarios in load_harness_directory(directory).items():
            self.scenarios.extend(scenarios)
            self.file_map[file_stem] = scenarios
        return self

    def load(self, path: Path) -> "HarnessLoader":
        """Load a file or a directory, whichever ``path`` is."""
        path = Path(path)
        if path.is_dir():
            return self.load_directory(path)
        if not path.exists():
            raise HarnessLoadError(f"Harness path not found: {path}")
        return self.load_file(path)

    def get_scenarios(self) -> list[Scenario]:
        return self.scenarios

    def get_file_map(self) -> dict[str, list[Scenario]]:
        return self.file_map

    def build_registry(self) -> ScenarioRegistry:
        """Register loaded scenarios in load order.

        Raises:
            RegistryError: On duplicate names or unresolved bindings
        """
        return ScenarioRegistry(self.scenarios)


def build_registry(paths: Union[Path, str, Iterable[Union[Path, str]]]) -> ScenarioRegistry:
    """Load harness files/directories and register their scenarios."""
    if isinstance(paths, (str, Path)):
        paths = [paths]
    loader = HarnessLoader()
    for path in paths:
        loader.load(Path(path))
    return loader.build_registry()
