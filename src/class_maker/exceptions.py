"""Errors raised by the class source manipulator."""

from __future__ import annotations


class ClassMakerError(Exception):
    """Base exception for all class-maker errors."""


class ParseError(ClassMakerError):
    """Raised when source text is not a single recognizable class."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        if path:
            super().__init__(f"Failed to parse {path}: {message}")
        else:
            super().__init__(message)

    def with_path(self, path: str) -> ParseError:
        return ParseError(self.message, path=path)


class UnknownMemberError(ClassMakerError):
    """Raised when an edit references a member the class does not have."""

    def __init__(self, member: str, class_name: str | None = None) -> None:
        self.member = member
        self.class_name = class_name
        where = f" in class {class_name}" if class_name else ""
        super().__init__(f"Unknown member '{member}'{where}")


class DuplicateImportConflict(ClassMakerError):
    """Raised when two different classes would be imported under one alias."""

    def __init__(self, alias: str, existing: str, requested: str) -> None:
        self.alias = alias
        self.existing = existing
        self.requested = requested
        super().__init__(f"Cannot import {requested} as '{alias}': the name is already used by {existing}")


class UnsupportedMemberError(ClassMakerError):
    """Raised when an existing member cannot be edited structurally."""

    def __init__(self, member: str, class_name: str, reason: str) -> None:
        self.member = member
        self.class_name = class_name
        self.reason = reason
        super().__init__(f"Cannot edit member '{member}' in class {class_name}: {reason}")


class AnnotationValueError(ClassMakerError, ValueError):
    """Raised when an annotation option has no annotation literal form."""
