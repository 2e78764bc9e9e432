from hubsearch.clients.detail import (
    DetailText,
    FieldError,
    FieldErrors,
    NestedDetail,
    describe_detail,
    parse_error_detail,
)


def test_parse_plain_string_detail() -> None:
    """
    A string detail is kept verbatim.
    """
    detail = parse_error_detail({"detail": "Session expired"})
    assert detail == DetailText(text="Session expired")
    assert describe_detail(detail) == "Session expired"


def test_parse_validation_error_list() -> None:
    """
    FastAPI validation errors are joined as ``loc: msg`` pairs.
    """
    body = {
        "detail": [
            {"loc": ["body", "message"], "msg": "Field required", "type": "missing"},
            {"loc": ["body", 0], "msg": "Input should be a valid string"},
        ]
    }
    detail = parse_error_detail(body)
    assert isinstance(detail, FieldErrors)
    assert detail.errors[0] == FieldError(loc=("body", "message"), msg="Field required")
    assert (
        describe_detail(detail)
        == "body.message: Field required, body.0: Input should be a valid string"
    )


def test_parse_nested_message() -> None:
    """
    An object detail contributes its message.
    """
    detail = parse_error_detail({"detail": {"message": "Quota exceeded", "code": 7}})
    assert detail == NestedDetail(message="Quota exceeded")
    assert describe_detail(detail) == "Quota exceeded"


def test_nested_error_field_only_when_requested() -> None:
    """
    The ``error`` field of a nested detail is used only by clients that opt in.
    """
    detail = parse_error_detail({"detail": {"error": "file too large"}})
    assert describe_detail(detail) is None
    assert describe_detail(detail, use_error_field=True) == "file too large"


def test_unusable_bodies_yield_nothing() -> None:
    """
    Bodies without a usable detail parse to None.
    """
    assert parse_error_detail(None) is None
    assert parse_error_detail(["not", "a", "dict"]) is None
    assert parse_error_detail({"message": "no detail key"}) is None
    assert parse_error_detail({"detail": []}) is None
    assert parse_error_detail({"detail": {"code": 3}}) is None
    assert describe_detail(None) is None
