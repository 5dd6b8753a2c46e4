"""Typed GraphQL operation builder.

Operations are immutable values. Argument literals are serialized per type
(strings quoted and escaped, numbers and enum tokens bare, input objects
rendered recursively), so operation text never comes from string
interpolation.

```python
op = Operation.query(
    "albums",
    {"options": {"sort": {"field": "title", "order": EnumValue("ASC")}}},
    [{"data": ["id", "title"]}],
)
op.render()
# 'query { albums(options: {sort: {field: "title", order: ASC}}) { data { id title } } }'
```
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .errors import BuildError

_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


class OperationKind(str, Enum):
    """GraphQL operation type."""

    QUERY = "query"
    MUTATION = "mutation"

    @classmethod
    def from_string(cls, value: str) -> "OperationKind":
        normalized = str(value).lower().strip()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise BuildError(f"Unsupported operation kind: '{value}'. Supported: query, mutation")


@dataclass(frozen=True)
class EnumValue:
    """Enum token rendered bare (e.g. ``ASC``)."""

    name: str

    def __post_init__(self) -> None:
        _check_name(self.name, "enum value")


@dataclass(frozen=True)
class ResultRef:
    """Argument value taken from the data of a previously executed scenario.

    Attributes:
        scenario: Name of the scenario that produces the value. Either a
            qualified ``resource/name`` or a bare name within the same resource.
        path: Dotted path into that scenario's ``data`` (e.g. ``createUser.id``)
    """

    scenario: str
    path: str

    def __post_init__(self) -> None:
        if not self.scenario or not self.path:
            raise BuildError("ResultRef requires both a scenario and a path")


@dataclass(frozen=True)
class InputObject:
    """Frozen GraphQL input object literal (ordered key/value pairs)."""

    fields: tuple[tuple[str, Any], ...]

    def items(self) -> tuple[tuple[str, Any], ...]:
        return self.fields


@dataclass(frozen=True)
class Field:
    """A selected field, optionally with arguments and a sub-selection."""

    name: str
    selection: tuple["Field", ...] = ()
    arguments: tuple[tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name, "field")


ArgumentValue = Union[str, int, float, bool, None, EnumValue, ResultRef, InputObject, tuple, Mapping, list]


def _check_name(name: Any, what: str) -> None:
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise BuildError(f"Invalid GraphQL {what} name: {name!r}")


def freeze_value(value: Any) -> Any:
    """Convert a Python argument value into its immutable literal form.

    Raises:
        BuildError: If the value has an unsupported type
    """
    if value is None or isinstance(value, (str, bool, int, EnumValue, ResultRef, InputObject)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise BuildError(f"Float argument must be finite, got {value!r}")
        return value
    if isinstance(value, Mapping):
        return InputObject(freeze_arguments(value))
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    raise BuildError(
        f"Unsupported argument value type: {type(value).__name__}. "
        "Supported: str, int, float, bool, None, EnumValue, ResultRef, mapping, list"
    )


def freeze_arguments(args: Optional[Mapping[str, Any]]) -> tuple[tuple[str, Any], ...]:
    """Freeze an argument mapping, validating argument names."""
    if not args:
        return ()
    frozen = []
    for key, value in args.items():
        _check_name(key, "argument")
        frozen.append((key, freeze_value(value)))
    return tuple(frozen)


def is_full_form(item: Mapping[str, Any]) -> bool:
    """Whether a selection mapping is the full ``{"name", "args", "selection"}`` form.

    A lone ``{"name": "first"}`` is a field called ``name`` selecting ``first``.
    """
    return isinstance(item.get("name"), str) and ("args" in item or "selection" in item)


def parse_selection(items: Optional[Iterable[Any]]) -> tuple[Field, ...]:
    """Parse a selection description into ``Field`` objects.

    Accepted item forms:
    - ``"id"``: plain field
    - ``Field(...)``: passed through
    - ``{"albums": [...]}``: field with sub-selection (one or more keys)
    - ``{"name": "albums", "args": {...}, "selection": [...]}``: full form
      (needs ``args`` or ``selection``)

    Raises:
        BuildError: If an item has an unsupported shape
    """
    if items is None:
        return ()
    if isinstance(items, (str, Mapping, Field)):
        items = [items]

    fields: list[Field] = []
    for item in items:
        if isinstance(item, Field):
            fields.append(item)
        elif isinstance(item, str):
            fields.append(Field(item))
        elif isinstance(item, Mapping):
            if is_full_form(item):
                fields.append(
                    Field(
                        item["name"],
                        selection=parse_selection(item.get("selection")),
                        arguments=freeze_arguments(item.get("args")),
                    )
                )
            else:
                for name, sub in item.items():
                    fields.append(Field(name, selection=parse_selection(sub)))
        else:
            raise BuildError(f"Unsupported selection item: {item!r}")
    return tuple(fields)


def render_value(value: Any) -> str:
    """Render a frozen argument value as a GraphQL literal."""
    if isinstance(value, ResultRef):
        raise BuildError(
            f"Unresolved result reference {value.scenario}:{value.path}; "
            "bind the operation before rendering"
        )
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, EnumValue):
        return value.name
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        # JSON string escapes are a subset of GraphQL's
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, InputObject):
        return "{" + ", ".join(f"{key}: {render_value(item)}" for key, item in value.items()) + "}"
    if isinstance(value, tuple):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    raise BuildError(f"Cannot render argument value of type {type(value).__name__}")


def _render_arguments(arguments: tuple[tuple[str, Any], ...]) -> str:
    if not arguments:
        return ""
    return "(" + ", ".join(f"{key}: {render_value(value)}" for key, value in arguments) + ")"


def render_field(node: Field) -> str:
    text = node.name + _render_arguments(node.arguments)
    if node.selection:
        text += " { " + " ".join(render_field(child) for child in node.selection) + " }"
    return text


def _iter_refs(value: Any) -> Iterator[ResultRef]:
    if isinstance(value, ResultRef):
        yield value
    elif isinstance(value, InputObject):
        for _, item in value.items():
            yield from _iter_refs(item)
    elif isinstance(value, tuple):
        for item in value:
            yield from _iter_refs(item)


def _bind_value(value: Any, values: Mapping[ResultRef, Any]) -> Any:
    if isinstance(value, ResultRef):
        if value not in values:
            raise BuildError(f"No value bound for result reference {value.scenario}:{value.path}")
        return freeze_value(values[value])
    if isinstance(value, InputObject):
        return InputObject(tuple((key, _bind_value(item, values)) for key, item in value.items()))
    if isinstance(value, tuple):
        return tuple(_bind_value(item, values) for item in value)
    return value


def _bind_field(node: Field, values: Mapping[ResultRef, Any]) -> Field:
    return Field(
        node.name,
        selection=tuple(_bind_field(child, values) for child in node.selection),
        arguments=tuple((key, _bind_value(value, values)) for key, value in node.arguments),
    )


@dataclass(frozen=True)
class Operation:
    """Immutable GraphQL query or mutation.

    Attributes:
        kind: Operation type
        root_field: Name of the single root field
        arguments: Frozen ``(name, value)`` pairs for the root field
        selection: Ordered selection set of the root field
    """

    kind: OperationKind
    root_field: str
    arguments: tuple[tuple[str, Any], ...] = ()
    selection: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OperationKind):
            object.__setattr__(self, "kind", OperationKind.from_string(self.kind))
        _check_name(self.root_field, "root field")

    @classmethod
    def create(
        cls,
        kind: Union[OperationKind, str],
        root_field: str,
        args: Optional[Mapping[str, Any]] = None,
        selection: Optional[Iterable[Any]] = None,
    ) -> "Operation":
        """Build an operation from plain Python values."""
        return cls(
            kind=kind if isinstance(kind, OperationKind) else OperationKind.from_string(kind),
            root_field=root_field,
            arguments=freeze_arguments(args),
            selection=parse_selection(selection),
        )

    @classmethod
    def query(cls, root_field: str, args=None, selection=None) -> "Operation":
        return cls.create(OperationKind.QUERY, root_field, args, selection)

    @classmethod
    def mutation(cls, root_field: str, args=None, selection=None) -> "Operation":
        return cls.create(OperationKind.MUTATION, root_field, args, selection)

    def references(self) -> tuple[ResultRef, ...]:
        """Return result references used anywhere in the operation's arguments."""
        refs: list[ResultRef] = []

        def visit(node: Field) -> None:
            for _, value in node.arguments:
                refs.extend(_iter_refs(value))
            for child in node.selection:
                visit(child)

        visit(self._root())
        return tuple(dict.fromkeys(refs))

    def bind(self, values: Mapping[ResultRef, Any]) -> "Operation":
        """Return a copy with every ``ResultRef`` replaced by its bound value."""
        if not self.references():
            return self
        root = _bind_field(self._root(), values)
        return Operation(self.kind, self.root_field, root.arguments, root.selection)

    def render(self) -> str:
        return f"{self.kind.value} {{ {render_field(self._root())} }}"

    def _root(self) -> Field:
        return Field(self.root_field, selection=self.selection, arguments=self.arguments)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class RawOperation:
    """Operation given as verbatim text (used for malformed-document scenarios)."""

    text: str
    kind: Optional[OperationKind] = field(default=None)

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise BuildError("RawOperation.text cannot be empty")

    def references(self) -> tuple[ResultRef, ...]:
        return ()

    def bind(self, values: Mapping[ResultRef, Any]) -> "RawOperation":
        return self

    def render(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


AnyOperation = Union[Operation, RawOperation]


def build(
    kind: Union[OperationKind, str],
    root_field: str,
    args: Optional[Mapping[str, Any]] = None,
    selection: Optional[Iterable[Any]] = None,
) -> str:
    """Build and render an operation in one step.

    Args:
        kind: ``query`` or ``mutation``
        root_field: Root field name (e.g. ``albums``)
        args: Argument mapping; empty or None omits the parentheses
        selection: Selection description (see :func:`parse_selection`)

    Returns:
        Operation text

    Raises:
        BuildError: If names or values are malformed
    """
    return Operation.create(kind, root_field, args, selection).render()
