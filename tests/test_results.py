from graphql_harness.results import GraphQLErrors, Success, TransportError, normalize
from graphql_harness.transport import RawResponse


def _raw(status: int, body, is_json: bool = True, error=None) -> RawResponse:
    return RawResponse(status_code=status, body=body, is_json=is_json, error=error)


def test_data_without_errors_is_success() -> None:
    result = normalize(_raw(200, {"data": {"album": {"title": None}}}))

    assert isinstance(result, Success)
    assert result.data == {"album": {"title": None}}
    assert result.status_code == 200
    assert result.kind == "success"


def test_errors_take_precedence_over_data() -> None:
    result = normalize(
        _raw(200, {"data": {"album": None}, "errors": [{"message": "boom", "path": ["album"]}]})
    )

    assert isinstance(result, GraphQLErrors)
    assert result.messages == ["boom"]
    assert result.errors[0].path == ("album",)
    assert result.data == {"album": None}


def test_error_status_with_errors_array_is_graphql_errors() -> None:
    result = normalize(
        _raw(
            400,
            {
                "errors": [
                    {
                        "message": 'Field "CreateAlbumInput.title" of required type "String!" was not provided.',
                        "locations": [{"line": 3, "column": 29}],
                        "extensions": {"code": "GRAPHQL_VALIDATION_FAILED"},
                    }
                ]
            },
        )
    )

    assert isinstance(result, GraphQLErrors)
    assert result.status_code == 400
    assert result.errors[0].extensions == {"code": "GRAPHQL_VALIDATION_FAILED"}
    assert result.to_dict()["errors"][0]["locations"] == [{"line": 3, "column": 29}]


def test_empty_errors_array_is_ignored() -> None:
    assert isinstance(normalize(_raw(200, {"data": {"a": 1}, "errors": []})), Success)


def test_no_response_is_transport_error() -> None:
    result = normalize(_raw(0, None, is_json=False, error="Request timed out after 1.0s (ReadTimeout)"))

    assert isinstance(result, TransportError)
    assert result.status == 0
    assert result.body is None
    assert "timed out" in result.detail


def test_non_json_body_is_transport_error() -> None:
    result = normalize(_raw(502, "<html>Bad Gateway</html>", is_json=False))

    assert isinstance(result, TransportError)
    assert result.status_code == 502
    assert result.body == "<html>Bad Gateway</html>"


def test_json_that_is_not_an_object_is_transport_error() -> None:
    assert isinstance(normalize(_raw(200, ["unexpected"])), TransportError)


def test_error_status_without_errors_is_transport_error() -> None:
    result = normalize(_raw(503, {"message": "Service Unavailable"}))

    assert isinstance(result, TransportError)
    assert result.detail == "HTTP 503"
