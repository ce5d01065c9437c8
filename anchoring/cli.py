"""Command-line interface for anchoring annotations in HTML documents."""

import asyncio
import json
import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from anchoring import __version__
from anchoring.batch import anchor_annotations
from anchoring.config import validate_ignore_selector, validate_offsets
from anchoring.document import HtmlDocument
from anchoring.logging_config import setup_logging
from anchoring.models import load_annotations
from anchoring.orchestrator import Anchorer
from anchoring.protocols import AnchorOptions

app = typer.Typer(
    name="anchoring",
    help="Anchor W3C annotation selectors in HTML documents.",
)
console = Console()


@app.command()
def anchor(
    document: Path = typer.Argument(
        ...,
        help="HTML document to anchor in",
    ),
    annotations: Path = typer.Argument(
        ...,
        help="YAML or JSON file with annotations",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every strategy attempt",
    ),
) -> None:
    """Anchor stored annotations and report which are orphaned."""
    if verbose:
        setup_logging(logging.DEBUG)

    try:
        doc = HtmlDocument.from_file(document)
        loaded = load_annotations(annotations)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    results = asyncio.run(anchor_annotations(doc, loaded))

    if json_output:
        typer.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
        return

    table = Table(title=f"Annotations in {document.name}")
    table.add_column("Annotation")
    table.add_column("Status")
    table.add_column("Offsets")
    table.add_column("Text")
    for result in results:
        status = (
            "[green]anchored[/green]" if result.found else "[yellow]orphaned[/yellow]"
        )
        offsets = f"{result.start}-{result.end}" if result.found else ""
        table.add_row(
            escape(result.annotation_id or "-"),
            status,
            offsets,
            escape(result.text or ""),
        )
    console.print(table)

    orphaned = sum(1 for r in results if r.orphaned)
    console.print(f"{len(results) - orphaned} anchored, {orphaned} orphaned")


@app.command()
def describe(
    document: Path = typer.Argument(
        ...,
        help="HTML document containing the range",
    ),
    start: int = typer.Option(
        ...,
        "--start",
        "-s",
        help="Start offset in the document text",
    ),
    end: int = typer.Option(
        ...,
        "--end",
        "-e",
        help="End offset in the document text",
    ),
    ignore_selector: str | None = typer.Option(
        None,
        "--ignore-selector",
        help="XPath of elements to leave out of RangeSelector paths",
    ),
) -> None:
    """Print the selectors describing a range of the document text."""
    try:
        validate_offsets(start, end)
        if ignore_selector:
            validate_ignore_selector(ignore_selector)
        doc = HtmlDocument.from_file(document)
        text_range = doc.range(start, end)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    selectors = Anchorer().describe(
        doc, text_range, AnchorOptions(ignore_selector=ignore_selector)
    )
    typer.echo(
        yaml.safe_dump(
            [s.to_wire() for s in selectors], sort_keys=False, allow_unicode=True
        ),
        nl=False,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"anchoring {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
