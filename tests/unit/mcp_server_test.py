"""Tests for the MCP server tool definitions."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

from class_maker.files import InMemoryFileManager
from class_maker.mcp.server import create_mcp_server


def _call(server: Any, tool: str, **kwargs: Any) -> Any:
    fn = server._tool_manager._tools[tool].fn
    return asyncio.run(fn(**kwargs))


class TestMcpServerCreation:
    def test_creates_server(self) -> None:
        server = create_mcp_server(InMemoryFileManager())
        assert server is not None
        assert server.name == "class-maker"

    def test_server_has_tools(self) -> None:
        server = create_mcp_server(InMemoryFileManager())
        tool_names = {t.name for t in server._tool_manager._tools.values()}
        assert tool_names == {"inspect_class", "make_dto"}

    def test_make_dto_defaults(self) -> None:
        """Helpers and public properties are opt-in."""
        server = create_mcp_server(InMemoryFileManager())
        sig = inspect.signature(server._tool_manager._tools["make_dto"].fn)
        assert sig.parameters["add_helpers"].default is False
        assert sig.parameters["omit_getters_setters"].default is False


class TestMcpTools:
    def test_inspect_class(self, product_source: str) -> None:
        files = InMemoryFileManager(files={"src/Entity/Product.php": product_source})
        server = create_mcp_server(files)
        result = _call(server, "inspect_class", path="src/Entity/Product.php")
        assert result["class"] == "App\\Entity\\Product"
        assert result["imports"] == ["App\\Repository\\ProductRepository", "Doctrine\\ORM\\Mapping"]
        assert result["properties"] == [
            {"name": "id", "type": "?int"},
            {"name": "name", "type": "?string"},
            {"name": "price", "type": "int"},
        ]
        assert result["methods"] == ["__construct", "getId", "getName"]

    def test_make_dto_writes_through_file_manager(self) -> None:
        files = InMemoryFileManager()
        server = create_mcp_server(files)
        result = _call(
            server,
            "make_dto",
            name="Tag",
            bound_class="Tag",
            fields={"label": {"type": "string"}, "id": {"type": "integer", "id": True}},
        )
        assert result == {
            "class": "App\\Form\\Data\\TagData",
            "path": "src/Form/Data/TagData.php",
            "created": True,
            "assertions_imported": False,
            "fields": ["label"],
        }
        assert "private ?string $label = null;" in files.files["src/Form/Data/TagData.php"]
