import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape

from class_maker.config import MakerSettings
from class_maker.core.dto import DTO_NAMESPACE, DTO_SUFFIX, DtoRequest, class_path, resolve_class_name, run_make_dto
from class_maker.core.manipulator import ClassSourceManipulator
from class_maker.core.ports.files import FileManager
from class_maker.exceptions import ClassMakerError, ParseError
from class_maker.files import InMemoryFileManager, LocalFileManager
from class_maker.models import FieldDescriptor, PhpType

console = Console()

_FIELDS_ADAPTER = TypeAdapter(dict[str, FieldDescriptor])


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(1)


def load_fields(path: Path) -> dict[str, FieldDescriptor]:
    """Read the field metadata exported for the bound entity."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return _FIELDS_ADAPTER.validate_python(data)


def _dry_run_files(local: LocalFileManager, path: str) -> InMemoryFileManager:
    files = InMemoryFileManager()
    if local.exists(path):
        files.files[path] = local.read(path)
    return files


def make_dto(
    name: Annotated[str, typer.Argument(help="Name of the DTO class (e.g. ProductData).")],
    bound_class: Annotated[str, typer.Argument(help="Entity the DTO is bound to.")],
    fields: Annotated[Path, typer.Option(help="JSON file with the entity's field metadata.")],
    helpers: Annotated[bool, typer.Option(help="Add fill/extract helper methods.")] = False,
    omit_getters_setters: Annotated[bool, typer.Option(help="Use public properties instead of accessors.")] = False,
    root: Annotated[str, typer.Option(help="Project root directory.")] = ".",
    dry_run: Annotated[bool, typer.Option(help="Print the class instead of writing it.")] = False,
) -> None:
    """Create a data transfer object class from an entity's fields."""
    try:
        field_map = load_fields(fields)
    except (OSError, ValueError, ValidationError) as exc:
        raise _fail(f"Could not read field metadata from {fields}: {exc}") from None

    settings = MakerSettings.from_env()
    request = DtoRequest(
        name=name,
        bound_class=bound_class,
        fields=field_map,
        add_helpers=helpers,
        omit_getters_setters=omit_getters_setters,
    )
    local = LocalFileManager(root)
    files: FileManager = local
    if dry_run:
        dto_class = resolve_class_name(name, settings.root_namespace, DTO_NAMESPACE, DTO_SUFFIX)
        files = _dry_run_files(local, class_path(dto_class, settings))

    try:
        result = run_make_dto(files, request, settings)
    except ClassMakerError as exc:
        raise _fail(str(exc)) from None

    if dry_run:
        console.print(result.source, markup=False, highlight=False, soft_wrap=True)
        return

    action = "created" if result.created else "updated"
    console.print(f"[green]{action}[/green]: {escape(result.path)}")
    console.print("[bold green]Success![/bold green]")
    if result.assertions_imported:
        console.print("[yellow]Note:[/yellow] The maker imported assertion annotations.")
        console.print("Consider removing them from the entity or make sure to keep them updated in both places.")
    entity_name = bound_class.rsplit("\\", 1)[-1]
    console.print("Next: Create your form with this DTO and start using it:")
    console.print(f"$ php bin/console make:form {escape(entity_name)}", markup=False)
    console.print("Enter fully qualified data class name to bind to the form:")
    console.print(f"> \\{result.class_name}", markup=False)


def add_property(
    path: Annotated[str, typer.Argument(help="Path to an existing PHP class file.")],
    name: Annotated[str, typer.Argument(help="Property name.")],
    type: Annotated[
        str | None, typer.Option("--type", help="PHP type hint (e.g. string, int, ?\\DateTimeInterface).")
    ] = None,
    nullable: Annotated[bool, typer.Option(help="Allow null values.")] = False,
    default: Annotated[str | None, typer.Option(help="Default value as PHP source (e.g. 0, 'draft', []).")] = None,
    accessors: Annotated[bool, typer.Option(help="Generate a getter and a setter.")] = True,
    fluent: Annotated[bool, typer.Option(help="Make the setter return the instance.")] = True,
    dry_run: Annotated[bool, typer.Option(help="Print the class instead of writing it.")] = False,
) -> None:
    """Add a property (and its accessors) to an existing class."""
    files = LocalFileManager()
    try:
        source = files.read(path)
    except OSError as exc:
        raise _fail(str(exc)) from None

    config = MakerSettings.from_env().manipulator.model_copy(
        update={"omit_getters_setters": not accessors, "use_fluent_mutators": fluent}
    )
    php_type = None
    if type is not None:
        php_type = PhpType.parse(type)
        php_type.nullable = php_type.nullable or nullable

    try:
        manipulator = ClassSourceManipulator(source, config)
        manipulator.add_property(name, php_type, default)
        manipulator.add_getter(name, php_type, nullable)
        manipulator.add_setter(name, php_type, nullable)
        rendered = manipulator.get_source_code()
    except ParseError as exc:
        raise _fail(str(exc.with_path(path))) from None
    except ClassMakerError as exc:
        raise _fail(str(exc)) from None

    if dry_run:
        console.print(rendered, markup=False, highlight=False, soft_wrap=True)
        return
    files.write(path, rendered)
    console.print(f"[green]updated[/green]: {escape(path)}")
