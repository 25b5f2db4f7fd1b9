from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from class_maker.core.parser import parse_class_file
from class_maker.exceptions import ClassMakerError
from class_maker.models import ClassModel, MethodModel, OpaqueMember, PropertyModel

console = Console()


def member_rows(model: ClassModel) -> list[tuple[str, str, str]]:
    rows = []
    for member in model.members:
        if isinstance(member, PropertyModel):
            rows.append(("property", member.name, member.type.hint if member.type else ""))
        elif isinstance(member, MethodModel):
            parameters = ", ".join(p.render() for p in member.parameters)
            rows.append((member.kind.value, f"{member.name}({parameters})", member.return_type or ""))
        elif isinstance(member, OpaqueMember):
            first_line = member.raw.strip().splitlines()[0] if member.raw.strip() else ""
            rows.append((member.kind.value, first_line, ""))
    return rows


def inspect_class(
    path: Annotated[str, typer.Argument(help="Path to a PHP class file.")],
) -> None:
    """Show the members of a PHP class."""
    try:
        model = parse_class_file(path)
    except (ClassMakerError, OSError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[bold]{model.fqcn}[/bold]")
    for use in model.imports:
        if use.name is not None:
            console.print(f"  use {use.name}" + (f" as {use.alias}" if use.alias else ""))

    table = Table(show_lines=False)
    for header in ("kind", "name", "type"):
        table.add_column(header)
    rows = member_rows(model)
    for row in rows:
        table.add_row(*(escape(value) for value in row))
    console.print(table)
    console.print(f"({len(rows)} members)")
