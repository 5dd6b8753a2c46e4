"""Normalized GraphQL results and the response normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from .transport import RawResponse


@dataclass(frozen=True)
class GraphQLError:
    """Single entry of a GraphQL ``errors`` array."""

    message: str
    path: Optional[tuple[Any, ...]] = None
    locations: Optional[tuple[dict[str, Any], ...]] = None
    extensions: Optional[dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "GraphQLError":
        if not isinstance(payload, dict):
            return cls(message=str(payload))
        path = payload.get("path")
        locations = payload.get("locations")
        extensions = payload.get("extensions")
        return cls(
            message=str(payload.get("message", "")),
            path=tuple(path) if isinstance(path, list) else None,
            locations=tuple(locations) if isinstance(locations, list) else None,
            extensions=extensions if isinstance(extensions, dict) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {"message": self.message}
        if self.path is not None:
            entry["path"] = list(self.path)
        if self.locations is not None:
            entry["locations"] = list(self.locations)
        if self.extensions is not None:
            entry["extensions"] = self.extensions
        return entry


@dataclass(frozen=True)
class Success:
    """Server returned data and no errors."""

    kind: ClassVar[str] = "success"

    data: Any
    status_code: int = 200

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "status": self.status_code, "data": self.data}


@dataclass(frozen=True)
class GraphQLErrors:
    """Server reported one or more GraphQL errors.

    ``data`` keeps any partial result sent alongside the errors.
    """

    kind: ClassVar[str] = "graphql_errors"

    errors: tuple[GraphQLError, ...]
    data: Any = None
    status_code: int = 200

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "status": self.status_code,
            "errors": [error.to_dict() for error in self.errors],
            "data": self.data,
        }


@dataclass(frozen=True)
class TransportError:
    """No usable GraphQL payload: network failure, timeout, non-JSON body or
    an error status without a GraphQL ``errors`` array."""

    kind: ClassVar[str] = "transport_error"

    status: int
    body: Any = None
    detail: Optional[str] = field(default=None)

    @property
    def status_code(self) -> int:
        return self.status

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "status": self.status,
            "body": self.body,
            "detail": self.detail,
        }


NormalizedResult = Union[Success, GraphQLErrors, TransportError]

RESULT_KINDS = (Success.kind, GraphQLErrors.kind, TransportError.kind)


def normalize(raw: RawResponse) -> NormalizedResult:
    """Classify a raw response into exactly one normalized variant.

    - body not JSON (or not a JSON object): ``TransportError``
    - non-empty ``errors`` array: ``GraphQLErrors``, whatever the status
    - 2xx: ``Success``
    - otherwise: ``TransportError``
    """
    if not raw.is_json:
        return TransportError(status=raw.status_code, body=raw.body, detail=raw.error or "Response body is not JSON")

    body = raw.body
    if not isinstance(body, dict):
        return TransportError(status=raw.status_code, body=body, detail="Response body is not a JSON object")

    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        return GraphQLErrors(
            errors=tuple(GraphQLError.from_payload(entry) for entry in errors),
            data=body.get("data"),
            status_code=raw.status_code,
        )

    if 200 <= raw.status_code < 300:
        return Success(data=body.get("data"), status_code=raw.status_code)

    return TransportError(status=raw.status_code, body=body, detail=f"HTTP {raw.status_code}")
