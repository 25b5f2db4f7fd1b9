import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from class_maker.cli.inspect import inspect_class
from class_maker.cli.make import add_property, make_dto
from class_maker.cli.serve import serve_app

app = typer.Typer(
    name="class-maker",
    help="Generate and extend PHP classes without losing hand-written code.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("make-dto")(make_dto)
app.command("add-property")(add_property)
app.command("inspect")(inspect_class)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
