"""Rendering of annotation-style doc-comment lines."""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from class_maker.exceptions import AnnotationValueError


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise AnnotationValueError(f"Annotation values must be finite numbers, got {value!r}")
    text = repr(value)
    if "e" in text or "E" in text:
        # annotation literals have no exponent form
        text = format(Decimal(text), "f")
    if "." not in text:
        text = f"{text}.0"
    return text


def quote_annotation_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, list | tuple | Mapping):
        raise AnnotationValueError("Nested arrays are not supported in annotation options")
    text = str(value).replace('"', '""')
    return f'"{text}"'


def format_annotation_option(option: str, value: Any) -> str:
    if isinstance(value, Mapping):
        items = ", ".join(f'"{key}" = {quote_annotation_value(val)}' for key, val in value.items())
        return f"{option}={{{items}}}"
    if isinstance(value, list | tuple):
        items = ", ".join(quote_annotation_value(val) for val in value)
        return f"{option}={{{items}}}"
    return f"{option}={quote_annotation_value(value)}"


def build_annotation_line(name: str, options: Mapping[str, Any]) -> str:
    """Render ``@Name(key=value, ...)`` keeping the caller's option order.

    Strings are double-quoted, numbers and booleans are bare, lists become
    ``{a, b}`` and mappings ``{"key" = value}``. Anything nested deeper, and
    non-finite floats, raise ``AnnotationValueError``.
    """
    annotation = name if name.startswith("@") else f"@{name}"
    formatted = ", ".join(format_annotation_option(key, value) for key, value in options.items())
    return f"{annotation}({formatted})"
