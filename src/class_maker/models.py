"""In-memory model of one PHP class being edited.

Parsed members keep their verbatim source text (``raw``, ``doc_raw`` and the
opaque ``leading`` text in front of them) so that rendering an unmodified
model reproduces the original bytes. Members created during a run have no
``raw`` text and are synthesized by the printer.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from class_maker.core.annotations import build_annotation_line


class MemberKind(str, Enum):
    PROPERTY = "property"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    CONSTANT = "constant"
    TRAIT_USE = "trait_use"
    COMMENT = "comment"
    OTHER = "other"


class PhpType(BaseModel):
    """A declared PHP type: scalar, class reference or collection of T."""

    name: str
    nullable: bool = False
    item_type: str | None = None

    @property
    def hint(self) -> str:
        if not self.nullable or self.name in ("mixed", "null"):
            return self.name
        if "|" in self.name:
            return f"{self.name}|null"
        return f"?{self.name}"

    @property
    def is_bool(self) -> bool:
        return self.name.lower() == "bool"

    @property
    def is_collection(self) -> bool:
        return self.item_type is not None

    @classmethod
    def parse(cls, text: str) -> PhpType:
        """Read a type hint as written in source (``?T``, ``T|null``, unions)."""
        hint = text.strip()
        if hint.startswith("?"):
            return cls(name=hint[1:].strip(), nullable=True)
        parts = [p.strip() for p in hint.split("|")]
        if len(parts) > 1 and any(p.lower() == "null" for p in parts):
            rest = [p for p in parts if p.lower() != "null"]
            return cls(name="|".join(rest), nullable=True)
        return cls(name=hint)


class Parameter(BaseModel):
    name: str
    type: str | None = None
    default: str | None = None
    promoted_visibility: str | None = None

    def render(self) -> str:
        text = f"${self.name}"
        if self.type:
            text = f"{self.type} {text}"
        if self.promoted_visibility:
            text = f"{self.promoted_visibility} {text}"
        if self.default is not None:
            text = f"{text} = {self.default}"
        return text


class UseImport(BaseModel):
    """One ``use`` statement above the class.

    ``name`` is None for statements that are kept verbatim but not read
    structurally (grouped, function and const imports).
    """

    name: str | None
    alias: str | None = None
    raw: str | None = None
    leading: str = ""

    @property
    def short_name(self) -> str | None:
        if self.alias:
            return self.alias
        if self.name is None:
            return None
        return self.name.rsplit("\\", 1)[-1]


class AnnotationLine(BaseModel):
    """A structured doc-comment entry such as ``@Assert\\Length(max=255)``."""

    name: str
    options: dict[str, Any] = Field(default_factory=dict)

    def render(self) -> str:
        return build_annotation_line(self.name, self.options)


class PropertyModel(BaseModel):
    kind: Literal[MemberKind.PROPERTY] = MemberKind.PROPERTY
    name: str
    type: PhpType | None = None
    default: str | None = None
    visibility: str = "private"
    doc_lines: list[str] = Field(default_factory=list)
    annotations: list[AnnotationLine] = Field(default_factory=list)
    existing: bool = False
    leading: str = ""
    raw: str | None = None
    doc_raw: str | None = None
    doc_gap: str = ""

    @property
    def has_doc(self) -> bool:
        return bool(self.doc_raw or self.doc_lines or self.annotations)


class MethodModel(BaseModel):
    """A method of the class.

    Parsed methods keep their full block in ``body`` (braces included);
    generated methods carry unindented ``statements`` instead.
    """

    kind: Literal[MemberKind.METHOD] = MemberKind.METHOD
    name: str
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: str | None = None
    visibility: str = "public"
    static: bool = False
    body: str | None = None
    statements: list[str] = Field(default_factory=list)
    fluent: bool = False
    doc_lines: list[str] = Field(default_factory=list)
    existing: bool = False
    leading: str = ""
    raw: str | None = None
    doc_raw: str | None = None
    doc_gap: str = ""


class ConstructorModel(MethodModel):
    kind: Literal[MemberKind.CONSTRUCTOR] = MemberKind.CONSTRUCTOR  # type: ignore[assignment]
    name: str = "__construct"
    bound_properties: list[str] = Field(default_factory=list)
    # offsets into ``raw`` of the parameter list parentheses and body braces
    parameters_span: tuple[int, int] | None = None
    body_span: tuple[int, int] | None = None

    @property
    def promoted_properties(self) -> list[str]:
        return [p.name for p in self.parameters if p.promoted_visibility]


class OpaqueMember(BaseModel):
    """Class body content kept verbatim: constants, trait uses, comments."""

    kind: Literal[MemberKind.CONSTANT, MemberKind.TRAIT_USE, MemberKind.COMMENT, MemberKind.OTHER]
    raw: str
    leading: str = ""
    # names declared by a kept-verbatim ``private $a, $b;``
    declared_properties: list[str] = Field(default_factory=list)


Member = Annotated[
    PropertyModel | ConstructorModel | MethodModel | OpaqueMember,
    Field(discriminator="kind"),
]


class ClassModel(BaseModel):
    """One class and everything around it in its file.

    Rendering concatenates ``header``, the imports, ``preamble``, the class doc
    comment, ``head`` (declaration up to and including ``{``), the members,
    ``trailing`` and ``tail`` (closing brace to end of file).
    """

    name: str
    namespace: str | None = None
    imports: list[UseImport] = Field(default_factory=list)
    doc_comment: str | None = None
    doc_gap: str = ""
    members: list[Member] = Field(default_factory=list)
    header: str = ""
    preamble: str = ""
    head: str = ""
    trailing: str = ""
    tail: str = ""

    @property
    def fqcn(self) -> str:
        if self.namespace:
            return f"{self.namespace}\\{self.name}"
        return self.name

    @property
    def properties(self) -> list[PropertyModel]:
        return [m for m in self.members if isinstance(m, PropertyModel)]

    @property
    def methods(self) -> list[MethodModel]:
        return [m for m in self.members if isinstance(m, MethodModel)]

    @property
    def constructor(self) -> ConstructorModel | None:
        for member in self.members:
            if isinstance(member, ConstructorModel):
                return member
        return None


# ---------------------------------------------------------------------------
# Field metadata supplied by the metadata-reading collaborator
# ---------------------------------------------------------------------------


class ConstraintSpec(BaseModel):
    """A validation constraint copied onto a mirrored field."""

    name: str
    options: dict[str, Any] = Field(default_factory=dict)


class FieldDescriptor(BaseModel):
    type: str | None = None
    nullable: bool = False
    kind: Literal["scalar", "association"] = "scalar"
    id: bool = False
    declared: str | None = None
    target: str | None = None
    constraints: list[ConstraintSpec] = Field(default_factory=list)
