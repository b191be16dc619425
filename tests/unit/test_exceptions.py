from devwatch.core.exceptions import (
    ConflictError,
    DevwatchError,
    InvalidArgumentError,
    NotFoundError,
)


def test_devwatch_error_to_dict():
    err = DevwatchError(code="test_error", message="Something broke", status=500)
    d = err.to_dict()
    assert d["error"]["code"] == "test_error"
    assert d["error"]["message"] == "Something broke"
    assert d["error"]["status"] == 500
    assert "details" not in d["error"]


def test_devwatch_error_with_details():
    err = DevwatchError(code="x", message="y", status=400, details={"hint": "try again"})
    d = err.to_dict()
    assert d["error"]["details"]["hint"] == "try again"


def test_invalid_argument_defaults():
    err = InvalidArgumentError()
    assert err.status == 400
    assert err.code == "invalid_argument"


def test_not_found_defaults():
    err = NotFoundError()
    assert err.status == 404


def test_conflict_defaults():
    err = ConflictError()
    assert err.status == 409
    assert err.code == "conflict"
