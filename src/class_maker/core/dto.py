"""Generation of data transfer objects mirroring an entity's mapped fields."""

import logging
from collections.abc import Mapping

from pydantic import BaseModel, Field

from class_maker.config import MakerSettings
from class_maker.core.manipulator import ClassSourceManipulator
from class_maker.core.naming import as_class_name, as_variable_name, getter_name, setter_name
from class_maker.core.ports.files import FileManager
from class_maker.core.skeleton import empty_class_source
from class_maker.core.types import php_type_for_field
from class_maker.exceptions import ParseError
from class_maker.models import FieldDescriptor, Parameter

logger = logging.getLogger(__name__)

ASSERT_NAMESPACE = "Symfony\\Component\\Validator\\Constraints"
ASSERT_ALIAS = "Assert"
DTO_NAMESPACE = "Form\\Data"
DTO_SUFFIX = "Data"
ENTITY_NAMESPACE = "Entity"


class DtoRequest(BaseModel):
    name: str
    bound_class: str
    fields: dict[str, FieldDescriptor] = Field(default_factory=dict)
    add_helpers: bool = False
    omit_getters_setters: bool = False


class DtoResult(BaseModel):
    class_name: str
    path: str
    source: str
    created: bool
    assertions_imported: bool = False
    mirrored_fields: list[str] = Field(default_factory=list)


def resolve_class_name(name: str, root_namespace: str, namespace_prefix: str = "", suffix: str = "") -> str:
    """Expand a short class name the way the maker commands do.

    A leading backslash marks an already fully qualified name.
    """
    if name.startswith("\\"):
        return name.lstrip("\\")
    *relative, short_name = name.replace("/", "\\").split("\\")
    parts = [root_namespace.strip("\\")]
    if namespace_prefix:
        parts.append(namespace_prefix.strip("\\"))
    parts.extend(as_class_name(part) for part in relative if part)
    parts.append(as_class_name(short_name, suffix))
    return "\\".join(part for part in parts if part)


def class_path(fqcn: str, settings: MakerSettings) -> str:
    """PSR-4 location of ``fqcn`` below the configured source directory."""
    root = settings.root_namespace.strip("\\")
    relative = fqcn
    if root and fqcn.startswith(root + "\\"):
        relative = fqcn[len(root) + 1 :]
    return "/".join([settings.source_dir.rstrip("/"), *relative.split("\\")]) + ".php"


def mirrored_fields(fields: Mapping[str, FieldDescriptor]) -> dict[str, FieldDescriptor]:
    """Drop identifiers and associations; only scalar columns are mirrored."""
    mirrored = {}
    for name, field in fields.items():
        if field.id:
            logger.debug("Skipping identifier field %s", name)
            continue
        if field.kind == "association":
            logger.debug("Skipping association field %s", name)
            continue
        mirrored[name] = field
    return mirrored


def _add_helpers(
    manipulator: ClassSourceManipulator,
    entity_class: str,
    fields: Mapping[str, FieldDescriptor],
) -> None:
    entity_name = manipulator.add_use_import(entity_class)
    variable = as_variable_name(entity_name)
    omit_accessors = manipulator.config.omit_getters_setters

    fill_statements = []
    extract_statements = []
    for name, field in fields.items():
        entity_getter = f"${variable}->{getter_name(name, php_type_for_field(field))}()"
        if omit_accessors:
            fill_statements.append(f"${variable}->{setter_name(name)}($this->{name});")
            extract_statements.append(f"$this->{name} = {entity_getter};")
        else:
            dto_getter = getter_name(name, manipulator.registry.property_type(name))
            fill_statements.append(f"${variable}->{setter_name(name)}($this->{dto_getter}());")
            extract_statements.append(f"$this->{setter_name(name)}({entity_getter});")

    parameter = Parameter(name=variable, type=entity_name)
    manipulator.add_method(
        "fill",
        [parameter],
        entity_name,
        [*fill_statements, *([""] if fill_statements else []), f"return ${variable};"],
        comment_lines=[f"Copy the data of this object onto the given {entity_name}."],
    )
    manipulator.add_method(
        "extract",
        [parameter],
        "static",
        [*extract_statements, *([""] if extract_statements else []), "return $this;"],
        comment_lines=[f"Load the data of the given {entity_name} into this object."],
    )


def run_make_dto(files: FileManager, request: DtoRequest, settings: MakerSettings | None = None) -> DtoResult:
    """Create or extend the DTO class bound to ``request.bound_class``.

    The file is written once, after rendering succeeded.
    """
    settings = settings or MakerSettings()
    dto_class = resolve_class_name(request.name, settings.root_namespace, DTO_NAMESPACE, DTO_SUFFIX)
    entity_class = resolve_class_name(request.bound_class, settings.root_namespace, ENTITY_NAMESPACE)
    path = class_path(dto_class, settings)

    created = not files.exists(path)
    if created:
        entity_name = entity_class.rsplit("\\", 1)[-1]
        source = empty_class_source(dto_class, doc_lines=[f"Data transfer object for {entity_name}."])
    else:
        source = files.read(path)

    config = settings.manipulator.model_copy(update={"omit_getters_setters": request.omit_getters_setters})
    try:
        manipulator = ClassSourceManipulator(source, config)
    except ParseError as exc:
        raise exc.with_path(path) from None

    fields = mirrored_fields(request.fields)
    assertions_imported = False
    for name, field in fields.items():
        manipulator.add_entity_field(name, field)
        prop = manipulator.registry.find_property(name)
        if prop is None or prop.existing or not field.constraints or not config.use_annotations:
            continue
        alias = manipulator.add_use_import(ASSERT_NAMESPACE, ASSERT_ALIAS)
        for constraint in field.constraints:
            manipulator.add_doc_comment_line(name, f"{alias}\\{constraint.name}", constraint.options)
        assertions_imported = True

    if request.add_helpers:
        _add_helpers(manipulator, entity_class, fields)

    rendered = manipulator.get_source_code()
    files.write(path, rendered)
    logger.info("%s %s with %d mirrored fields", "Created" if created else "Updated", dto_class, len(fields))
    return DtoResult(
        class_name=dto_class,
        path=path,
        source=rendered,
        created=created,
        assertions_imported=assertions_imported,
        mirrored_fields=list(fields),
    )
