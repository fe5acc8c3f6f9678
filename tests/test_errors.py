from __future__ import annotations

import pytest

from stratus.errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    StratusError,
    TimeParseError,
    TypeMismatchError,
)

pytestmark = pytest.mark.unit


def test_api_error_structured_metadata() -> None:
    err = APIError(
        "boom",
        hint="do this",
        retryable=True,
        status_code=503,
        method="GET",
        url="http://clustering.test/v1/receivers",
    )

    assert str(err) == "boom"
    assert err.hint == "do this"
    assert err.retryable is True
    assert err.status_code == 503
    assert err.method == "GET"
    assert err.url == "http://clustering.test/v1/receivers"


def test_api_error_defaults_to_none() -> None:
    err = APIError("fail")
    assert err.hint is None
    assert err.retryable is None
    assert err.status_code is None
    assert err.method is None
    assert err.url is None


def test_subclass_hierarchy() -> None:
    """Decode failures are catchable as DecodeError and StratusError."""
    mismatch = TypeMismatchError(path="receiver.name", expected="string", actual=5)
    bad_time = TimeParseError(path="receiver.created_at", value=1446614501)

    for err in (mismatch, bad_time):
        assert isinstance(err, DecodeError)
        assert isinstance(err, StratusError)
        assert not isinstance(err, APIError)
    assert isinstance(ConfigurationError("x"), StratusError)


@pytest.mark.parametrize(
    ("actual", "kind"),
    [
        (None, "null"),
        (True, "boolean"),
        (3, "number"),
        (1.5, "number"),
        ("s", "string"),
        ([1], "array"),
        ({"a": 1}, "object"),
    ],
)
def test_type_mismatch_names_the_json_kind(actual: object, kind: str) -> None:
    err = TypeMismatchError(path="x.y", expected="integer", actual=actual)

    assert err.path == "x.y"
    assert err.expected == "integer"
    assert err.actual_kind == kind
    assert str(err) == f"x.y: expected integer, got {kind}"


def test_time_parse_error_keeps_the_offending_value() -> None:
    err = TimeParseError(path="receiver.updated_at", value="invalid")

    assert err.value == "invalid"
    assert "receiver.updated_at" in str(err)
    assert err.hint is not None
