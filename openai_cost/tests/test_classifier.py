import pytest

from openai_cost.api.classifier import INVALID_BODY_PLACEHOLDER, classify_error
from openai_cost.models.errors import ErrorKind


@pytest.mark.parametrize(
    "error_type, kind",
    [
        ("server_error", ErrorKind.SERVER_ERROR),
        ("invalid_request_error", ErrorKind.INVALID_REQUEST),
        ("insufficient_quota", ErrorKind.QUOTA_EXCEEDED),
        ("api_error", ErrorKind.API_ERROR),
    ],
)
def test_known_error_types_map_to_kinds(error_type, kind):
    body = ('{"error":{"message":"boom","type":"%s"}}' % error_type).encode()

    err = classify_error(500, body)

    assert err.kind is kind
    assert err.message == "boom"
    assert err.status_code == 500
    assert err.is_http_failure


def test_unknown_type_is_other_error_with_literal_type():
    err = classify_error(403, b'{"error":{"message":"no access","type":"permission_denied","code":"x"}}')

    assert err.kind is ErrorKind.OTHER_ERROR
    assert err.error_type == "permission_denied"
    assert err.message == "no access"
    assert err.code == "x"


def test_non_json_body_falls_back_to_status_code():
    err = classify_error(429, b"rate limited")

    assert err.kind is ErrorKind.OTHER_ERROR
    assert (err.error_type, err.message) == ("429", "rate limited")


def test_empty_body_falls_back_to_status_code():
    err = classify_error(502, b"")
    assert (err.kind, err.error_type, err.message) == (ErrorKind.OTHER_ERROR, "502", "")


def test_shape_mismatch_falls_back_to_raw_text():
    err = classify_error(400, b'{"detail":"wrong shape"}')
    assert err.error_type == "400"
    assert err.message == '{"detail":"wrong shape"}'


def test_invalid_utf8_body_uses_placeholder():
    err = classify_error(500, b"\xff\xfe\xfa")
    assert err.kind is ErrorKind.OTHER_ERROR
    assert err.message == INVALID_BODY_PLACEHOLDER


def test_describe_includes_code_and_param():
    err = classify_error(
        400, b'{"error":{"message":"bad limit","type":"invalid_request_error","code":"c1","param":"limit"}}'
    )
    assert err.describe() == "Invalid Request: bad limit (code: c1, param: limit)"


def test_deeply_nested_body_falls_back_to_status_code():
    body = b"[" * 100000 + b"]" * 100000

    err = classify_error(500, body)

    assert err.kind is ErrorKind.OTHER_ERROR
    assert err.error_type == "500"
    assert err.message == body.decode()
