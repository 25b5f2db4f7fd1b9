"""Serialization of a ClassModel back to PHP source.

Parsed text is emitted verbatim. Generated members take their indentation
from the whitespace after the last line break of their ``leading`` text.
Method bodies go one level deeper: a tab for tab-indented members, four
spaces otherwise.
"""

from class_maker.models import (
    ClassModel,
    MethodModel,
    OpaqueMember,
    PropertyModel,
    UseImport,
)

_DEFAULT_INDENT = "    "


def member_indent(leading: str) -> str:
    last_line = leading.rsplit("\n", 1)[-1]
    if "\n" in leading and not last_line.strip():
        return last_line
    return _DEFAULT_INDENT


def render_doc_comment(lines: list[str], indent: str) -> str:
    rendered = ["/**"]
    for line in lines:
        rendered.append(f"{indent} * {line}" if line else f"{indent} *")
    rendered.append(f"{indent} */")
    return "\n".join(rendered)


def render_use_statement(use: UseImport) -> str:
    if use.alias:
        return f"use {use.name} as {use.alias};"
    return f"use {use.name};"


def render_property_declaration(prop: PropertyModel) -> str:
    parts = [prop.visibility]
    if prop.type is not None:
        parts.append(prop.type.hint)
    declaration = " ".join(parts) + f" ${prop.name}"
    if prop.default is not None:
        declaration += f" = {prop.default}"
    return declaration + ";"


def render_property(prop: PropertyModel) -> str:
    indent = member_indent(prop.leading)
    if prop.raw is not None and not prop.annotations:
        doc = f"{prop.doc_raw}{prop.doc_gap}" if prop.doc_raw is not None else ""
        return f"{prop.leading}{doc}{prop.raw}"

    lines = prop.doc_lines + [annotation.render() for annotation in prop.annotations]
    doc = f"{render_doc_comment(lines, indent)}\n{indent}" if lines else ""
    declaration = prop.raw if prop.raw is not None else render_property_declaration(prop)
    return f"{prop.leading}{doc}{declaration}"


def render_signature(method: MethodModel) -> str:
    modifiers = method.visibility + (" static" if method.static else "")
    parameters = ", ".join(p.render() for p in method.parameters)
    signature = f"{modifiers} function {method.name}({parameters})"
    if method.return_type:
        signature += f": {method.return_type}"
    return signature


def render_method(method: MethodModel) -> str:
    if method.raw is not None:
        doc = f"{method.doc_raw}{method.doc_gap}" if method.doc_raw is not None else ""
        return f"{method.leading}{doc}{method.raw}"

    indent = member_indent(method.leading)
    doc = f"{render_doc_comment(method.doc_lines, indent)}\n{indent}" if method.doc_lines else ""
    unit = "\t" if indent.startswith("\t") else _DEFAULT_INDENT
    body = [f"{indent}{{"]
    for statement in method.statements:
        body.append(f"{indent}{unit}{statement}" if statement else "")
    body.append(f"{indent}}}")
    return f"{method.leading}{doc}{render_signature(method)}\n" + "\n".join(body)


def render_member(member: PropertyModel | MethodModel | OpaqueMember) -> str:
    if isinstance(member, PropertyModel):
        return render_property(member)
    if isinstance(member, MethodModel):
        return render_method(member)
    return f"{member.leading}{member.raw}"


def render_class(model: ClassModel) -> str:
    """Render the full file text for ``model``; a pure function."""
    parts = [model.header]
    for use in model.imports:
        parts.append(use.leading)
        parts.append(use.raw if use.raw is not None else render_use_statement(use))
    parts.append(model.preamble)
    if model.doc_comment is not None:
        parts.append(model.doc_comment + model.doc_gap)
    parts.append(model.head)
    for member in model.members:
        parts.append(render_member(member))

    trailing = model.trailing
    if model.members and model.members[-1].raw is None and "\n" not in trailing:
        trailing = "\n" + trailing
    parts.append(trailing)
    parts.append(model.tail)
    return "".join(parts)
