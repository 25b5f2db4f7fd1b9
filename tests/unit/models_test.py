"""Unit tests for Pydantic models."""

import pytest
from pydantic import TypeAdapter, ValidationError

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
    PropertyModel,
    UseImport,
)


class TestParameterModel:
    """Tests for the Parameter model."""

    def test_renders_plain_parameter(self) -> None:
        assert Parameter(name="id").render() == "$id"

    def test_renders_typed_parameter_with_default(self) -> None:
        assert Parameter(name="name", type="?string", default="null").render() == "?string $name = null"

    def test_renders_promoted_parameter(self) -> None:
        parameter = Parameter(name="sku", type="string", promoted_visibility="private")
        assert parameter.render() == "private string $sku"


class TestUseImportModel:
    """Tests for the UseImport model."""

    def test_short_name_without_alias(self) -> None:
        assert UseImport(name="App\\Entity\\Tag").short_name == "Tag"

    def test_short_name_prefers_alias(self) -> None:
        assert UseImport(name="Doctrine\\ORM\\Mapping", alias="ORM").short_name == "ORM"

    def test_opaque_import_has_no_short_name(self) -> None:
        assert UseImport(name=None, raw="use function strlen;").short_name is None


class TestMemberModels:
    """Tests for the member union and class model helpers."""

    def test_annotation_line_renders(self) -> None:
        assert AnnotationLine(name="Assert\\Email").render() == "@Assert\\Email()"

    def test_has_doc(self) -> None:
        assert not PropertyModel(name="a").has_doc
        assert PropertyModel(name="a", doc_lines=["@var int"]).has_doc
        assert PropertyModel(name="a", annotations=[AnnotationLine(name="NotNull")]).has_doc

    def test_member_union_discriminates_on_kind(self) -> None:
        adapter = TypeAdapter(list[Member])
        members = adapter.validate_python(
            [
                {"kind": MemberKind.PROPERTY, "name": "a"},
                {"kind": MemberKind.METHOD, "name": "run"},
                {"kind": MemberKind.CONSTRUCTOR},
                {"kind": MemberKind.CONSTANT, "raw": "const A = 1;"},
            ]
        )
        assert [type(m) for m in members] == [PropertyModel, MethodModel, ConstructorModel, OpaqueMember]

    def test_opaque_member_rejects_structured_kinds(self) -> None:
        with pytest.raises(ValidationError):
            OpaqueMember(kind=MemberKind.PROPERTY, raw="private $a;")  # type: ignore[arg-type]

    def test_class_model_views(self) -> None:
        constructor = ConstructorModel(parameters=[Parameter(name="id", promoted_visibility="public")])
        model = ClassModel(
            name="Tag",
            namespace="App\\Entity",
            members=[PropertyModel(name="label"), constructor, MethodModel(name="getLabel")],
        )
        assert model.fqcn == "App\\Entity\\Tag"
        assert [p.name for p in model.properties] == ["label"]
        assert [m.name for m in model.methods] == ["__construct", "getLabel"]
        assert model.constructor is constructor
        assert constructor.promoted_properties == ["id"]


class TestFieldDescriptor:
    """Tests for field metadata validation."""

    def test_defaults_to_scalar(self) -> None:
        field = FieldDescriptor(type="string")
        assert field.kind == "scalar"
        assert not field.nullable
        assert field.constraints == []

    def test_validates_constraints(self) -> None:
        field = FieldDescriptor.model_validate(
            {"type": "string", "constraints": [{"name": "Length", "options": {"max": 20}}]}
        )
        assert field.constraints[0].name == "Length"
        assert field.constraints[0].options == {"max": 20}

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValidationError):
            FieldDescriptor.model_validate({"kind": "embedded"})
