"""Semantic edits applied to one parsed PHP class."""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from class_maker.config import ManipulatorConfig
from class_maker.core.annotations import build_annotation_line
from class_maker.core.naming import getter_name, setter_name
from class_maker.core.parser import assignment_pattern, parse_class_source
from class_maker.core.printer import member_indent, render_class
from class_maker.core.registry import MemberRegistry
from class_maker.core.types import php_type_for_field
from class_maker.exceptions import DuplicateImportConflict
from class_maker.models import (
    AnnotationLine,
    ClassModel,
    ConstructorModel,
    FieldDescriptor,
    Member,
    MemberKind,
    MethodModel,
    OpaqueMember,
    Parameter,
    PhpType,
    PropertyModel,
    UseImport,
)

logger = logging.getLogger(__name__)

TypeArg = PhpType | str | None

_LEADING_WHITESPACE = re.compile(r"[ \t]*")


def _coerce_type(type: TypeArg, nullable: bool | None = None) -> PhpType | None:
    if type is None:
        return None
    php_type = PhpType.parse(type) if isinstance(type, str) else type.model_copy()
    if nullable is not None:
        php_type.nullable = php_type.nullable or nullable
    return php_type


class ClassSourceManipulator:
    """Applies add-operations to a ClassModel and renders the result.

    One instance edits one class during one run. Additions are idempotent:
    members that already exist are left alone, except accessors when
    ``overwrite_existing_methods`` is set, which are replaced in place.
    """

    def __init__(self, source: str | ClassModel, config: ManipulatorConfig | None = None) -> None:
        self.config = config or ManipulatorConfig()
        self.model = parse_class_source(source) if isinstance(source, str) else source
        self.registry = MemberRegistry(self.model)

    def get_source_code(self) -> str:
        return render_class(self.model)

    # -----------------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------------

    def add_property(
        self,
        name: str,
        type: TypeArg = None,
        default: str | None = None,
        comment_lines: Sequence[str] | None = None,
        visibility: str = "private",
    ) -> None:
        if self.registry.has_property(name):
            logger.debug("Property %s already exists on %s", name, self.model.name)
            return

        php_type = _coerce_type(type)
        if default is None and php_type is not None and php_type.nullable:
            default = "null"

        doc_lines: list[str] = []
        if self.config.use_annotations:
            doc_lines.extend(comment_lines or [])
            if php_type is not None and php_type.is_collection:
                doc_lines.append(f"@var {php_type.name}<int, {php_type.item_type}>")

        prop = PropertyModel(
            name=name,
            type=php_type,
            default=default,
            visibility=visibility,
            doc_lines=doc_lines,
        )
        index = self._property_insert_index()
        previous = self.model.members[index - 1] if index > 0 else None
        blank_line = previous is not None and (
            not _declares_property(previous) or _has_doc(previous) or prop.has_doc
        )
        self._insert_member(index, prop, blank_line)
        logger.debug("Added property %s to %s", name, self.model.name)

    def add_doc_comment_line(self, property_name: str, annotation_name: str, options: Mapping[str, Any]) -> None:
        """Append one annotation line to a property's doc comment."""
        prop = self.registry.get_property(property_name)
        if not self.config.use_annotations:
            return
        line = AnnotationLine(name=annotation_name, options=dict(options))
        # unsupported option values fail here rather than at render time
        line.render()
        if prop.raw is None and not prop.has_doc:
            self._ensure_blank_lines_around(prop)
        prop.annotations.append(line)

    def build_annotation_line(self, name: str, options: Mapping[str, Any]) -> str:
        return build_annotation_line(name, options)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def _accessor_type(self, property_name: str, type: TypeArg, nullable: bool) -> PhpType | None:
        if type is None:
            prop = self.registry.find_property(property_name)
            type = prop.type if prop is not None else None
        return _coerce_type(type, nullable)

    def add_getter(
        self,
        property_name: str,
        type: TypeArg,
        nullable: bool,
        comment_lines: Sequence[str] | None = None,
    ) -> None:
        self.registry.require_property(property_name)
        if self.config.omit_getters_setters:
            return

        php_type = self._accessor_type(property_name, type, nullable)
        doc_lines: list[str] = []
        if self.config.use_annotations:
            doc_lines.extend(comment_lines or [])
            if php_type is not None and php_type.is_collection:
                doc_lines.append(f"@return {php_type.name}<int, {php_type.item_type}>")

        method = MethodModel(
            name=getter_name(property_name, php_type),
            return_type=php_type.hint if php_type is not None else None,
            statements=[f"return $this->{property_name};"],
            doc_lines=doc_lines,
        )
        self._add_method_model(method)

    def add_setter(
        self,
        property_name: str,
        type: TypeArg,
        nullable: bool,
        fluent: bool | None = None,
    ) -> None:
        self.registry.require_property(property_name)
        if self.config.omit_getters_setters:
            return

        fluent = self.config.use_fluent_mutators if fluent is None else fluent
        php_type = self._accessor_type(property_name, type, nullable)
        statements = [f"$this->{property_name} = ${property_name};"]
        if fluent:
            statements.extend(["", "return $this;"])

        method = MethodModel(
            name=setter_name(property_name),
            parameters=[Parameter(name=property_name, type=php_type.hint if php_type is not None else None)],
            return_type="static" if fluent else "void",
            statements=statements,
            fluent=fluent,
        )
        self._add_method_model(method)

    def add_method(
        self,
        name: str,
        parameters: Sequence[Parameter] = (),
        return_type: str | None = None,
        statements: Sequence[str] = (),
        comment_lines: Sequence[str] | None = None,
        visibility: str = "public",
        static: bool = False,
    ) -> None:
        """Append a generated method; same skip/overwrite rules as accessors."""
        method = MethodModel(
            name=name,
            parameters=list(parameters),
            return_type=return_type,
            statements=list(statements),
            doc_lines=list(comment_lines or []) if self.config.use_annotations else [],
            visibility=visibility,
            static=static,
        )
        self._add_method_model(method)

    def add_entity_field(
        self,
        name: str,
        field: FieldDescriptor,
        comment_lines: Sequence[str] | None = None,
    ) -> None:
        """Mirror one mapped field as a property plus its accessors."""
        php_type = php_type_for_field(field)
        default = None
        if php_type is not None and php_type.name == "array":
            default = "[]"
        elif php_type is not None:
            # typed properties start out null until a value is set
            php_type.nullable = True

        visibility = "public" if self.config.omit_getters_setters else "private"
        self.add_property(name, php_type, default, comment_lines, visibility=visibility)
        self.add_getter(name, php_type, nullable=php_type is not None and php_type.name != "array")
        if not field.id:
            setter_type = php_type.model_copy(update={"nullable": field.nullable}) if php_type else None
            self.add_setter(name, setter_type, nullable=field.nullable)

    def _add_method_model(self, method: MethodModel) -> None:
        existing = self.registry.find_method(method.name)
        if existing is None:
            self._insert_member(len(self.model.members), method, blank_line=True)
            logger.debug("Added method %s to %s", method.name, self.model.name)
            return

        if not self.config.overwrite_existing_methods:
            logger.debug("Method %s already exists on %s, skipping", method.name, self.model.name)
            return

        index = self._member_index(existing)
        method.leading = existing.leading
        self.model.members[index] = method
        logger.debug("Replaced method %s on %s", method.name, self.model.name)

    # -----------------------------------------------------------------------
    # Constructor
    # -----------------------------------------------------------------------

    def add_constructor_parameter(
        self,
        name: str,
        type: TypeArg,
        promote_to_property: bool,
        default: str | None = None,
    ) -> None:
        if promote_to_property:
            self.registry.require_property(name)

        constructor = self.model.constructor
        if constructor is None:
            constructor = ConstructorModel()
            index = self._constructor_insert_index()
            self._insert_member(index, constructor, blank_line=index > 0)
            logger.debug("Created constructor on %s", self.model.name)

        php_type = _coerce_type(type)
        parameter = Parameter(name=name, type=php_type.hint if php_type is not None else None, default=default)
        add_parameter = not self.registry.has_constructor_param(name)
        add_assignment = (
            promote_to_property
            and name not in constructor.bound_properties
            and name not in constructor.promoted_properties
        )
        if constructor.raw is None:
            if add_parameter:
                constructor.parameters.append(parameter)
            if add_assignment:
                constructor.statements.append(f"$this->{name} = ${name};")
                constructor.bound_properties.append(name)
            return

        if add_parameter:
            self._append_constructor_parameter(constructor, parameter)
        if add_assignment:
            self._append_constructor_assignment(constructor, name)

    def _append_constructor_parameter(self, constructor: ConstructorModel, parameter: Parameter) -> None:
        if constructor.parameters_span is None or constructor.raw is None:
            raise ValueError(f"Constructor of {self.model.name} has no parameter list to extend")
        raw = constructor.raw
        start, end = constructor.parameters_span
        inner = raw[start + 1 : end - 1]
        updated = _append_to_list(inner, parameter.render())
        constructor.raw = raw[: start + 1] + updated + raw[end - 1 :]
        delta = len(updated) - len(inner)
        constructor.parameters_span = (start, end + delta)
        if constructor.body_span is not None:
            body_start, body_end = constructor.body_span
            constructor.body_span = (body_start + delta, body_end + delta)
        constructor.parameters.append(parameter)

    def _append_constructor_assignment(self, constructor: ConstructorModel, name: str) -> None:
        if constructor.body_span is None or constructor.raw is None:
            logger.warning("Constructor of %s has no body, cannot assign %s", self.model.name, name)
            return
        raw = constructor.raw
        start, end = constructor.body_span
        block = raw[start:end]
        if not assignment_pattern(name).search(block):
            indent = member_indent(constructor.leading)
            block = _append_statement(block, f"$this->{name} = ${name};", indent, self.config.indent)
            constructor.raw = raw[:start] + block + raw[end:]
            constructor.body_span = (start, start + len(block))
            constructor.body = block
        constructor.bound_properties.append(name)

    # -----------------------------------------------------------------------
    # Imports
    # -----------------------------------------------------------------------

    def add_use_import(self, fqcn: str, alias: str | None = None) -> str:
        """Import ``fqcn`` if needed and return the name to use in code."""
        name = fqcn.strip().lstrip("\\")
        short_name = alias or name.rsplit("\\", 1)[-1]

        for use in self.model.imports:
            if use.name is not None and use.name.lower() == name.lower():
                return use.short_name or short_name

        for use in self.model.imports:
            taken = use.short_name
            if use.name is not None and taken is not None and taken.lower() == short_name.lower():
                raise DuplicateImportConflict(short_name, use.name, name)
        if short_name.lower() == self.model.name.lower() and name.lower() != self.model.fqcn.lower():
            raise DuplicateImportConflict(short_name, self.model.fqcn, name)

        namespace = name.rsplit("\\", 1)[0] if "\\" in name else None
        if alias is None and namespace is not None and namespace == self.model.namespace:
            return short_name

        new_use = UseImport(name=name, alias=alias)
        imports = self.model.imports
        index = len(imports)
        for position, use in enumerate(imports):
            if use.name is not None and use.name.lower() > name.lower():
                index = position
                break

        if not imports:
            new_use.leading = "\n\n"
        elif index < len(imports):
            new_use.leading = imports[index].leading
            imports[index].leading = "\n"
        else:
            new_use.leading = "\n"
        imports.insert(index, new_use)
        logger.debug("Imported %s into %s", name, self.model.name)
        return short_name

    # -----------------------------------------------------------------------
    # Placement
    # -----------------------------------------------------------------------

    def _member_index(self, member: Member) -> int:
        for index, candidate in enumerate(self.model.members):
            if candidate is member:
                return index
        raise ValueError(f"{member.kind} is not part of {self.model.name}")

    def _property_insert_index(self) -> int:
        """Right after the last property, else after constants and trait uses."""
        members = self.model.members
        for matches in (_declares_property, _is_constant_or_trait_use):
            for index in range(len(members) - 1, -1, -1):
                if matches(members[index]):
                    return index + 1
        return 0

    def _constructor_insert_index(self) -> int:
        for index, member in enumerate(self.model.members):
            if isinstance(member, MethodModel):
                return index
        return self._property_insert_index()

    def _member_indent(self) -> str:
        """Indentation of the parsed members, else the configured one."""
        for member in self.model.members:
            if member.raw is not None and "\n" in member.leading:
                return member_indent(member.leading)
        return self.config.indent

    def _ensure_blank_lines_around(self, member: Member) -> None:
        members = self.model.members
        index = self._member_index(member)
        if index > 0 and member.leading.count("\n") < 2:
            member.leading = "\n" + member.leading
        if index + 1 < len(members):
            following = members[index + 1]
            if not following.leading.strip() and following.leading.count("\n") < 2:
                following.leading = "\n" + following.leading

    def _insert_member(self, index: int, member: Member, blank_line: bool) -> None:
        members = self.model.members
        indent = self._member_indent()
        if index == 0 or not blank_line:
            member.leading = f"\n{indent}"
        else:
            member.leading = f"\n\n{indent}"

        if index < len(members):
            following = members[index]
            if not following.leading.strip() and following.leading.count("\n") < 2:
                following.leading = "\n" + following.leading
        members.insert(index, member)


def _declares_property(member: Member) -> bool:
    return isinstance(member, PropertyModel) or (isinstance(member, OpaqueMember) and bool(member.declared_properties))


def _is_constant_or_trait_use(member: Member) -> bool:
    return member.kind in (MemberKind.CONSTANT, MemberKind.TRAIT_USE)


def _has_doc(member: Member) -> bool:
    return isinstance(member, PropertyModel) and member.has_doc


def _append_to_list(inner: str, item: str) -> str:
    """Append ``item`` to a comma separated list, keeping its layout."""
    content = inner.rstrip()
    trailing = inner[len(content) :]
    if not content.strip():
        return item
    if "\n" in inner:
        last_line = content.rsplit("\n", 1)[-1]
        line_indent = _LEADING_WHITESPACE.match(last_line).group()  # type: ignore[union-attr]
        if content.endswith(","):
            return f"{content}\n{line_indent}{item},{trailing}"
        return f"{content},\n{line_indent}{item}{trailing}"
    return f"{content}, {item}{trailing}"


def _append_statement(block: str, statement: str, indent: str, unit: str) -> str:
    """Append ``statement`` as the last line of a ``{ ... }`` block."""
    inner = block[1:-1]
    content = inner.rstrip()
    closing = inner[len(content) :]
    if "\n" not in closing:
        closing = f"\n{indent}"

    statement_indent = indent + unit
    for line in reversed(content.split("\n")):
        if line.strip():
            if "\n" in content:
                statement_indent = _LEADING_WHITESPACE.match(line).group()  # type: ignore[union-attr]
            break

    return "{" + content + f"\n{statement_indent}{statement}" + closing + "}"
