"""Main CLI entry point for docslice."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docslice import __version__
from docslice.config import load_config
from docslice.context.index import DocIndex
from docslice.errors import DocsliceError
from docslice.output.lookup import DocLookup
from docslice.utils.logging import setup_logging

# Create the main Typer app
app = typer.Typer(
    name="docslice",
    help="Extract doc comments and runnable examples from Python sources.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Console for rich output
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"docslice version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """docslice.

    Index a directory of Python sources and print doc excerpts and examples.
    """
    pass


# Common arguments and options used across commands
DirectoryArgument = Annotated[
    Path,
    typer.Argument(
        help="Directory of Python sources to index (not searched recursively).",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        help="Verbosity level (-v info, -vv debug, -vvv debug with locals).",
        min=0,
        max=3,
        count=True,
    ),
]


def _open_lookup(directory: Path, config: Optional[Path], verbose: int) -> DocLookup:
    """Load configuration, set up logging and build the index."""
    cfg = load_config(config_path=config, verbose=verbose or None)
    setup_logging(verbosity=cfg.output.verbosity)
    index = DocIndex.build(directory, cfg.scan)
    return DocLookup(index, cfg)


def _fail(error: Exception) -> None:
    """Report an error and exit with status 1."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", highlight=False)
    raise typer.Exit(code=1)


@app.command()
def index(
    directory: DirectoryArgument,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """List the doc and example keys found in a directory.

    Example:
        docslice index ./mypkg
    """
    try:
        lookup = _open_lookup(directory, config, verbose)
    except DocsliceError as e:
        _fail(e)

    table = Table(title=f"Index of {lookup.index.name}")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Summary", style="green", overflow="fold")

    for key, text in sorted(lookup.index.docs.items()):
        summary = text.strip().splitlines()[0] if text.strip() else ""
        table.add_row(key, "doc", summary)
    for key, example in sorted(lookup.index.examples.items()):
        summary = "has output" if example.has_output else ""
        table.add_row(key, "example", summary)

    console.print(table)


@app.command()
def doc(
    directory: DirectoryArgument,
    name: Annotated[str, typer.Argument(help="Doc key, optionally sliced: Name[0:2,4].")],
    slice_spec: Annotated[
        Optional[str],
        typer.Option("--slice", "-s", help="Slice spec selecting sentences, e.g. 0:2."),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Print a doc entry or an excerpt of it.

    Example:
        docslice doc ./mypkg "Client.send[0:2]"
    """
    try:
        lookup = _open_lookup(directory, config, verbose)
        typer.echo(lookup.lookup_doc(name, slice_spec))
    except DocsliceError as e:
        _fail(e)


@app.command()
def example(
    directory: DirectoryArgument,
    name: Annotated[str, typer.Argument(help="Example key, e.g. example_send.")],
    plain: Annotated[
        bool,
        typer.Option("--plain", "-p", help="Print the whole block without its output comments."),
    ] = False,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Print the code of an example.

    Example:
        docslice example ./mypkg example_send
    """
    try:
        lookup = _open_lookup(directory, config, verbose)
        handle = lookup.lookup_example(name)
        typer.echo(lookup.render_example_code(handle, annotated=not plain))
    except DocsliceError as e:
        _fail(e)


@app.command()
def output(
    directory: DirectoryArgument,
    name: Annotated[str, typer.Argument(help="Example key.")],
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Print the recorded output of an example."""
    try:
        lookup = _open_lookup(directory, config, verbose)
        typer.echo(lookup.render_example_output(lookup.lookup_example(name)))
    except DocsliceError as e:
        _fail(e)


@app.command()
def play(
    directory: DirectoryArgument,
    name: Annotated[str, typer.Argument(help="Example key.")],
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Print an example as a standalone script."""
    try:
        lookup = _open_lookup(directory, config, verbose)
        typer.echo(lookup.render_playground(lookup.lookup_example(name)), nl=False)
    except DocsliceError as e:
        _fail(e)


if __name__ == "__main__":
    app()
