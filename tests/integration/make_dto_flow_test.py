"""End-to-end runs of the maker against a project directory on disk."""

import json
from pathlib import Path

from typer.testing import CliRunner

from class_maker.cli.app import app
from class_maker.cli.make import load_fields
from class_maker.config import MakerSettings
from class_maker.core.dto import DtoRequest, run_make_dto
from class_maker.core.manipulator import ClassSourceManipulator
from class_maker.core.parser import parse_class_source
from class_maker.core.printer import render_class
from class_maker.files import LocalFileManager
from class_maker.models import FieldDescriptor

DTO_PATH = "src/Form/Data/ProductData.php"
HAND_WRITTEN = """
    public function isEmpty(): bool
    {
        return $this->name === null;
    }
"""

runner = CliRunner()


def _request(project_dir: Path) -> DtoRequest:
    return DtoRequest(name="Product", bound_class="Product", fields=load_fields(project_dir / "product_fields.json"))


class TestDtoLifecycle:
    """A DTO is generated, edited by hand, then extended with a new field."""

    def test_rerun_keeps_hand_edits(self, project_dir: Path, project_files: LocalFileManager) -> None:
        settings = MakerSettings()
        first = run_make_dto(project_files, _request(project_dir), settings)
        assert first.created
        assert (project_dir / DTO_PATH).is_file()

        edited = first.source.replace("return $this->name;", "return trim((string) $this->name);")
        edited = edited[: -len("}\n")] + HAND_WRITTEN + "}\n"
        project_files.write(DTO_PATH, edited)

        request = _request(project_dir)
        request.fields["description"] = FieldDescriptor.model_validate(
            {"type": "text", "nullable": True, "constraints": [{"name": "Length", "options": {"max": 1000}}]}
        )
        second = run_make_dto(project_files, request, settings)
        source = (project_dir / DTO_PATH).read_text(encoding="utf-8")

        assert not second.created
        assert second.assertions_imported
        assert second.source == source
        assert "return trim((string) $this->name);" in source
        assert source.index("public function isEmpty(): bool") < source.index("public function getDescription()")
        assert source.count("use Symfony\\Component\\Validator\\Constraints as Assert;") == 1
        assert (
            "    private ?bool $active = null;\n"
            "\n"
            "    /**\n"
            "     * @Assert\\Length(max=1000)\n"
            "     */\n"
            "    private ?string $description = null;\n"
            "\n"
            "    public function getName(): ?string\n" in source
        )
        assert "    public function setDescription(?string $description): static\n" in source
        assert render_class(parse_class_source(source)) == source


class TestEntityEdit:
    """A hand-written entity is extended in place and inspected from the CLI."""

    def test_add_constructor_injected_property(self, project_dir: Path, project_files: LocalFileManager) -> None:
        path = "src/Entity/Product.php"
        original = project_files.read(path)
        manipulator = ClassSourceManipulator(original)
        manipulator.add_property("description", "?string")
        manipulator.add_constructor_parameter("description", "?string", True, default="null")
        manipulator.add_getter("description", None, True)
        project_files.write(path, manipulator.get_source_code())

        result = runner.invoke(app, ["inspect", str(project_dir / path)])
        assert result.exit_code == 0
        assert "(11 members)" in result.output

        model = parse_class_source(project_files.read(path))
        assert model.constructor is not None
        assert model.constructor.bound_properties == ["name", "description"]
        assert [m.name for m in model.methods] == ["__construct", "getId", "getName", "getDescription"]

    def test_cli_make_dto_with_exported_metadata(self, project_dir: Path) -> None:
        fields = project_dir / "product_fields.json"
        assert set(json.loads(fields.read_text(encoding="utf-8"))) == {"id", "name", "price", "active", "category"}
        result = runner.invoke(
            app, ["make-dto", "Product", "Product", "--fields", str(fields), "--root", str(project_dir)]
        )
        assert result.exit_code == 0
        assert "created" in result.output
        assert "The maker imported assertion annotations." in result.output
        assert (project_dir / DTO_PATH).is_file()
