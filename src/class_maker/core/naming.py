"""Name conventions for generated PHP members."""

import re

from class_maker.models import PhpType

_WORD_SEPARATORS = re.compile(r"[_.\\\s-]+")
_BOOL_PREFIXES = ("is", "has")


def as_camel_case(value: str) -> str:
    """``first_name`` -> ``FirstName``; only the first letter of each word changes."""
    words = _WORD_SEPARATORS.split(value)
    return "".join(word[:1].upper() + word[1:] for word in words if word)


def as_lower_camel_case(value: str) -> str:
    camel = as_camel_case(value)
    return camel[:1].lower() + camel[1:]


def as_class_name(value: str, suffix: str = "") -> str:
    name = as_camel_case(value)
    if suffix and not name.endswith(suffix):
        name = f"{name}{suffix}"
    return name


def as_variable_name(value: str) -> str:
    return as_lower_camel_case(value.rsplit("\\", 1)[-1])


def _has_bool_prefix(property_name: str) -> bool:
    for prefix in _BOOL_PREFIXES:
        rest = property_name[len(prefix) :]
        if property_name[: len(prefix)].lower() == prefix and rest[:1].isupper():
            return True
    return False


def getter_name(property_name: str, type: PhpType | None = None) -> str:
    """``getX``, or ``isX`` when the declared type is exactly ``bool``.

    A bool property already named ``isActive`` or ``hasItems`` keeps its
    name. Unions that merely contain ``bool`` use ``get``.
    """
    if type is None or not type.is_bool:
        return f"get{as_camel_case(property_name)}"
    if _has_bool_prefix(property_name):
        return as_lower_camel_case(property_name)
    return f"is{as_camel_case(property_name)}"


def setter_name(property_name: str) -> str:
    return f"set{as_camel_case(property_name)}"
