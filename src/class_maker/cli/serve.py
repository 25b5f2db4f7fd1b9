from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("mcp")
def mcp(
    root: Annotated[str, typer.Option(help="Project root directory.")] = ".",
    transport: str = "stdio",
) -> None:
    """Start the MCP server."""
    from class_maker.config import MakerSettings
    from class_maker.files import LocalFileManager
    from class_maker.mcp.server import create_mcp_server

    server = create_mcp_server(LocalFileManager(root), MakerSettings.from_env())
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
