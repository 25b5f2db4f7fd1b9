"""Mapping of ORM column types to PHP type hints."""

from class_maker.models import FieldDescriptor, PhpType

_COLUMN_TYPE_HINTS = {
    "array": "array",
    "simple_array": "array",
    "json": "array",
    "json_array": "array",
    "boolean": "bool",
    "integer": "int",
    "smallint": "int",
    "bigint": "string",
    "decimal": "string",
    "string": "string",
    "text": "string",
    "ascii_string": "string",
    "guid": "string",
    "uuid": "string",
    "float": "float",
    "date": "\\DateTimeInterface",
    "time": "\\DateTimeInterface",
    "datetime": "\\DateTimeInterface",
    "datetimetz": "\\DateTimeInterface",
    "date_immutable": "\\DateTimeImmutable",
    "time_immutable": "\\DateTimeImmutable",
    "datetime_immutable": "\\DateTimeImmutable",
    "datetimetz_immutable": "\\DateTimeImmutable",
    "dateinterval": "\\DateInterval",
    "object": "object",
}


def php_hint_for_column(column_type: str | None) -> str | None:
    """Return the PHP hint for a column type, or None for unknown types."""
    if column_type is None:
        return None
    return _COLUMN_TYPE_HINTS.get(column_type.strip().lower())


def php_type_for_field(field: FieldDescriptor) -> PhpType | None:
    if field.kind == "association":
        if not field.target:
            return None
        return PhpType(name=field.target, nullable=field.nullable)
    hint = php_hint_for_column(field.type)
    if hint is None:
        return None
    return PhpType(name=hint, nullable=field.nullable)
