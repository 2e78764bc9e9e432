"""
Error ``detail`` payloads returned by the backend.

FastAPI-style error bodies carry ``detail`` as a plain string, a list of
validation errors, or an object with a ``message`` (or ``error``) field.
They are parsed once into one of the variants below so callers never
inspect the raw shape.
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class DetailText:
    """``detail`` was a plain string."""

    text: str


@dataclass(frozen=True)
class FieldError:
    """One entry of a validation error list."""

    loc: tuple[str, ...]
    msg: str


@dataclass(frozen=True)
class FieldErrors:
    """``detail`` was a list of ``{loc, msg}`` entries."""

    errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class NestedDetail:
    """``detail`` was an object carrying a message."""

    message: str | None = None
    error: str | None = None


ErrorDetail = Union[DetailText, FieldErrors, NestedDetail]


def parse_error_detail(body: Any) -> ErrorDetail | None:
    """
    Parse the ``detail`` field of a decoded error body.

    Args:
        body (Any): The decoded JSON body of a non-success response.

    Returns:
        ErrorDetail | None: The parsed detail, or None if the body carries none.
    """
    if not isinstance(body, dict):
        return None
    detail = body.get("detail")
    if not detail:
        return None

    if isinstance(detail, str):
        return DetailText(text=detail)

    if isinstance(detail, list):
        errors = []
        for item in detail:
            if not isinstance(item, dict):
                continue
            loc = item.get("loc") or []
            if not isinstance(loc, (list, tuple)):
                loc = [loc]
            errors.append(
                FieldError(
                    loc=tuple(str(part) for part in loc),
                    msg=str(item.get("msg", "")),
                )
            )
        return FieldErrors(errors=tuple(errors)) if errors else None

    if isinstance(detail, dict):
        message = detail.get("message")
        error = detail.get("error")
        if not message and not error:
            return None
        return NestedDetail(
            message=str(message) if message else None,
            error=str(error) if error else None,
        )

    return None


def describe_detail(detail: ErrorDetail | None, *, use_error_field: bool = False) -> str | None:
    """
    Join a parsed detail into one human-readable string.

    Args:
        detail (ErrorDetail | None): The parsed detail.
        use_error_field (bool, optional): Fall back to ``NestedDetail.error`` when no message is set. Defaults to False.

    Returns:
        str | None: The message, or None if nothing usable was found.
    """
    if isinstance(detail, DetailText):
        return detail.text
    if isinstance(detail, FieldErrors):
        return ", ".join(f"{'.'.join(e.loc)}: {e.msg}" for e in detail.errors)
    if isinstance(detail, NestedDetail):
        if detail.message:
            return detail.message
        if use_error_field and detail.error:
            return detail.error
    return None
