import logging
import re
from pathlib import Path

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from class_maker.exceptions import ParseError
from class_maker.models import (
    ClassModel,
    ConstructorModel,
    MemberKind,
    MethodModel,
    OpaqueMember,
    Parameter,
    PhpType,
    PropertyModel,
    UseImport,
)

logger = logging.getLogger(__name__)

_LANGUAGE = "php"

_USE_STATEMENT = re.compile(
    r"^use\s+\\?(?P<name>[A-Za-z_\x80-\uffff][\w\\]*)(?:\s+as\s+(?P<alias>\w+))?\s*;$",
    re.IGNORECASE | re.DOTALL,
)
_RETURNS_THIS = re.compile(r"\breturn\s+\$this\s*;")

_PARAMETER_NODES = {"simple_parameter", "property_promotion_parameter", "variadic_parameter"}
_OPAQUE_KINDS = {
    "const_declaration": MemberKind.CONSTANT,
    "use_declaration": MemberKind.TRAIT_USE,
    "comment": MemberKind.COMMENT,
}


class _Source:
    """Byte-addressed view of the parsed text."""

    def __init__(self, data: bytes) -> None:
        self.data = data

    def slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8")

    def text(self, node: Node) -> str:
        return self.slice(node.start_byte, node.end_byte)


def _find_descendant(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
        found = _find_descendant(child, node_type)
        if found is not None:
            return found
    return None


def _first_child(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _type_node(node: Node) -> Node | None:
    typed = node.child_by_field_name("type")
    if typed is not None:
        return typed
    for child in node.named_children:
        if child.type.endswith("_type"):
            return child
    return None


def _variable_name(node: Node, src: _Source) -> str | None:
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type != "variable_name":
        name_node = _find_descendant(node, "variable_name")
    if name_node is None:
        return None
    return src.text(name_node).lstrip("$")


def _is_doc_comment(text: str) -> bool:
    return text.startswith("/**")


def doc_comment_lines(raw: str) -> list[str]:
    """Return the content lines of a ``/** ... */`` block without the stars."""
    body = raw.strip()
    body = body[3:] if body.startswith("/**") else body
    body = body[:-2] if body.endswith("*/") else body
    lines = []
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith("*"):
            stripped = stripped[1:]
            if stripped.startswith(" "):
                stripped = stripped[1:]
        lines.append(stripped.rstrip())
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


def _find_class(root: Node) -> tuple[Node, Node, Node | None]:
    """Return (container, class node, namespace node) for the single class."""
    candidates: list[tuple[Node, Node, Node | None]] = []
    current_namespace: Node | None = None
    for child in root.children:
        if child.type == "namespace_definition":
            current_namespace = child
            body = child.child_by_field_name("body")
            if body is not None:
                for inner in body.children:
                    if inner.type == "class_declaration":
                        candidates.append((body, inner, child))
        elif child.type == "class_declaration":
            candidates.append((root, child, current_namespace))

    if not candidates:
        raise ParseError("no top-level class declaration found")
    if len(candidates) > 1:
        raise ParseError(f"expected a single top-level class declaration, found {len(candidates)}")
    return candidates[0]


def _parse_import(node: Node, src: _Source, leading: str) -> UseImport:
    raw = src.text(node)
    match = _USE_STATEMENT.match(raw)
    if match is None:
        return UseImport(name=None, raw=raw, leading=leading)
    return UseImport(name=match.group("name"), alias=match.group("alias"), raw=raw, leading=leading)


def _header_anchor(root: Node, container: Node, namespace: Node | None) -> int:
    if container is not root:
        return container.start_byte + 1
    if namespace is not None:
        return namespace.end_byte
    # imports must follow declare(strict_types=1)
    anchor = 0
    for child in root.children:
        if child.type in ("php_tag", "declare_statement"):
            anchor = child.end_byte
        elif child.type not in ("comment", "text"):
            break
    return anchor


def parse_class_source(source: str) -> ClassModel:
    """Parse PHP source holding exactly one class into a ClassModel."""
    src = _Source(source.encode("utf-8"))
    tree = get_parser(_LANGUAGE).parse(src.data)
    root = tree.root_node

    container, class_node, namespace_node = _find_class(root)
    if class_node.has_error:
        raise ParseError("class declaration contains syntax errors")

    name_node = class_node.child_by_field_name("name")
    body = class_node.child_by_field_name("body")
    if name_node is None or body is None:
        raise ParseError("class declaration has no name or body")

    namespace = None
    if namespace_node is not None:
        ns_name = namespace_node.child_by_field_name("name")
        if ns_name is not None:
            namespace = src.text(ns_name).lstrip("\\")

    siblings = container.children
    class_index = next(i for i, child in enumerate(siblings) if child.start_byte == class_node.start_byte)
    import_nodes = [child for child in siblings[:class_index] if child.type == "namespace_use_declaration"]

    imports: list[UseImport] = []
    if import_nodes:
        header = src.slice(0, import_nodes[0].start_byte)
        position = import_nodes[0].start_byte
        for node in import_nodes:
            imports.append(_parse_import(node, src, src.slice(position, node.start_byte)))
            position = node.end_byte
    else:
        position = _header_anchor(root, container, namespace_node)
        header = src.slice(0, position)

    doc_node = None
    if class_index > 0:
        previous = siblings[class_index - 1]
        gap = src.slice(previous.end_byte, class_node.start_byte)
        if previous.type == "comment" and _is_doc_comment(src.text(previous)) and not gap.strip():
            if previous.start_byte >= position:
                doc_node = previous

    class_start = doc_node.start_byte if doc_node is not None else class_node.start_byte
    model = ClassModel(
        name=src.text(name_node),
        namespace=namespace,
        imports=imports,
        header=header,
        preamble=src.slice(position, class_start),
        head=src.slice(class_node.start_byte, body.start_byte + 1),
    )
    if doc_node is not None:
        model.doc_comment = src.text(doc_node)
        model.doc_gap = src.slice(doc_node.end_byte, class_node.start_byte)

    _parse_members(model, body, src)
    logger.debug("Parsed class %s with %d members", model.fqcn, len(model.members))
    return model


def parse_class_file(path: str | Path) -> ClassModel:
    file_path = Path(path)
    try:
        return parse_class_source(file_path.read_text(encoding="utf-8"))
    except ParseError as exc:
        raise exc.with_path(str(file_path)) from None


# ---------------------------------------------------------------------------
# Class body
# ---------------------------------------------------------------------------


def _parse_members(model: ClassModel, body: Node, src: _Source) -> None:
    children = body.children
    if not children or children[0].type != "{" or children[-1].type != "}":
        raise ParseError("class body is not enclosed in braces")
    inner = children[1:-1]

    position = body.start_byte + 1
    pending_doc: Node | None = None
    for index, child in enumerate(inner):
        following = inner[index + 1] if index + 1 < len(inner) else None
        if pending_doc is None and _attaches_to_next(child, following, src):
            pending_doc = child
            continue

        doc_start = pending_doc.start_byte if pending_doc is not None else child.start_byte
        leading = src.slice(position, doc_start)
        if child.type == "property_declaration":
            member = _parse_property(child, src, leading)
        elif child.type == "method_declaration":
            member = _parse_method(child, src, leading)
        else:
            member = None

        if member is None:
            if pending_doc is not None:
                model.members.append(
                    OpaqueMember(kind=MemberKind.COMMENT, raw=src.text(pending_doc), leading=leading)
                )
                leading = src.slice(pending_doc.end_byte, child.start_byte)
            opaque = OpaqueMember(
                kind=_OPAQUE_KINDS.get(child.type, MemberKind.OTHER), raw=src.text(child), leading=leading
            )
            if child.type == "property_declaration":
                opaque.declared_properties = _property_names(child, src)
            model.members.append(opaque)
        else:
            if pending_doc is not None:
                member.doc_raw = src.text(pending_doc)
                member.doc_gap = src.slice(pending_doc.end_byte, child.start_byte)
                member.doc_lines = doc_comment_lines(member.doc_raw)
            model.members.append(member)
        pending_doc = None
        position = child.end_byte

    model.trailing = src.slice(position, children[-1].start_byte)
    model.tail = src.slice(children[-1].start_byte, len(src.data))


def _attaches_to_next(node: Node, following: Node | None, src: _Source) -> bool:
    if node.type != "comment" or following is None:
        return False
    if following.type not in ("property_declaration", "method_declaration"):
        return False
    if not _is_doc_comment(src.text(node)):
        return False
    gap = src.slice(node.end_byte, following.start_byte)
    return not gap.strip() and gap.count("\n") <= 1


def _visibility(node: Node, src: _Source, default: str) -> str:
    modifier = _first_child(node, "visibility_modifier")
    return src.text(modifier) if modifier is not None else default


def _property_names(node: Node, src: _Source) -> list[str]:
    names = []
    for child in node.named_children:
        if child.type == "property_element":
            name = _variable_name(child, src)
            if name is not None:
                names.append(name)
    return names


def _parse_property(node: Node, src: _Source, leading: str) -> PropertyModel | None:
    elements = [child for child in node.named_children if child.type == "property_element"]
    if len(elements) != 1:
        # ``private $a, $b;`` stays opaque
        return None
    name = _variable_name(elements[0], src)
    if name is None:
        return None

    element_text = src.text(elements[0])
    default = None
    if "=" in element_text:
        default = element_text.split("=", 1)[1].strip()

    type_node = _type_node(node)
    return PropertyModel(
        name=name,
        type=PhpType.parse(src.text(type_node)) if type_node is not None else None,
        default=default,
        visibility=_visibility(node, src, "public"),
        existing=True,
        leading=leading,
        raw=src.text(node),
    )


def _parse_parameters(node: Node | None, src: _Source) -> list[Parameter]:
    if node is None:
        return []
    parameters = []
    for child in node.named_children:
        if child.type not in _PARAMETER_NODES:
            continue
        name = _variable_name(child, src)
        if name is None:
            continue
        type_node = _type_node(child)
        default_node = child.child_by_field_name("default_value")
        visibility = None
        if child.type == "property_promotion_parameter":
            visibility = _visibility(child, src, "public")
        parameters.append(
            Parameter(
                name=name,
                type=src.text(type_node) if type_node is not None else None,
                default=src.text(default_node) if default_node is not None else None,
                promoted_visibility=visibility,
            )
        )
    return parameters


def _parse_method(node: Node, src: _Source, leading: str) -> MethodModel | None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    name = src.text(name_node)
    params_node = node.child_by_field_name("parameters")
    return_node = node.child_by_field_name("return_type")
    body_node = node.child_by_field_name("body")
    body = src.text(body_node) if body_node is not None else None

    fields = {
        "name": name,
        "parameters": _parse_parameters(params_node, src),
        "return_type": src.text(return_node) if return_node is not None else None,
        "visibility": _visibility(node, src, "public"),
        "static": _first_child(node, "static_modifier") is not None,
        "body": body,
        "fluent": bool(body and _RETURNS_THIS.search(body)),
        "existing": True,
        "leading": leading,
        "raw": src.text(node),
    }
    if name.lower() != "__construct":
        return MethodModel(**fields)

    constructor = ConstructorModel(**fields)
    if params_node is not None:
        constructor.parameters_span = _relative_span(node, params_node, src)
    if body_node is not None:
        constructor.body_span = _relative_span(node, body_node, src)
    constructor.bound_properties = [
        p.name for p in constructor.parameters if body and assignment_pattern(p.name).search(body)
    ]
    return constructor


def assignment_pattern(name: str) -> re.Pattern[str]:
    """Match ``$this->name = $name;`` inside a method body."""
    escaped = re.escape(name)
    return re.compile(rf"\$this->{escaped}\s*=\s*\${escaped}\s*;")


def _relative_span(outer: Node, inner: Node, src: _Source) -> tuple[int, int]:
    """Character offsets of ``inner`` within the text of ``outer``."""
    start = len(src.slice(outer.start_byte, inner.start_byte))
    return start, start + len(src.text(inner))
