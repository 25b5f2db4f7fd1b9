"""FastMCP server exposing class-maker tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from class_maker.config import MakerSettings
from class_maker.core.dto import DtoRequest, run_make_dto
from class_maker.core.parser import parse_class_source
from class_maker.core.ports.files import FileManager
from class_maker.models import FieldDescriptor, MethodModel, PropertyModel


def create_mcp_server(files: FileManager, settings: MakerSettings | None = None) -> FastMCP:
    """Create a FastMCP server working on the given files."""

    settings = settings or MakerSettings()
    mcp = FastMCP("class-maker", instructions="Generate and extend PHP classes without losing hand-written code.")

    @mcp.tool()
    async def inspect_class(path: str) -> dict[str, Any]:
        """List the imports, properties and methods of a PHP class file."""
        model = parse_class_source(files.read(path))
        return {
            "class": model.fqcn,
            "imports": [use.name for use in model.imports if use.name is not None],
            "properties": [
                {"name": m.name, "type": m.type.hint if m.type else None}
                for m in model.members
                if isinstance(m, PropertyModel)
            ],
            "methods": [m.name for m in model.members if isinstance(m, MethodModel)],
        }

    @mcp.tool()
    async def make_dto(
        name: str,
        bound_class: str,
        fields: dict[str, dict[str, Any]],
        add_helpers: bool = False,
        omit_getters_setters: bool = False,
    ) -> dict[str, Any]:
        """Create or extend a DTO class mirroring an entity's fields."""
        request = DtoRequest(
            name=name,
            bound_class=bound_class,
            fields={key: FieldDescriptor.model_validate(value) for key, value in fields.items()},
            add_helpers=add_helpers,
            omit_getters_setters=omit_getters_setters,
        )
        result = run_make_dto(files, request, settings)
        return {
            "class": result.class_name,
            "path": result.path,
            "created": result.created,
            "assertions_imported": result.assertions_imported,
            "fields": result.mirrored_fields,
        }

    return mcp
