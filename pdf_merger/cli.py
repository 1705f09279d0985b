"""
Command-line interface for PDF merger.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.table import Table

from pdf_merger import __version__, extract_links
from pdf_merger.config import UNIT_SCALES, MergeOptions
from pdf_merger.exceptions import PDFMergerException
from pdf_merger.merger import PDFMerger
from pdf_merger.pages import parse_page_spec
from pdf_merger.types import OutputMode, PageJumpTarget
from pdf_merger.utils import format_file_size, get_logger

console = Console()


def _configure_logging(verbose):
    logger = get_logger("pdf_merger")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(error):
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    PDF Merger CLI - Merge PDF files or selected pages, keeping hyperlinks.
    """
    _configure_logging(verbose)


@cli.command(name="merge")
@click.argument('inputs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output', '-o',
    required=True,
    help='Output PDF file',
    type=click.Path(dir_okay=False)
)
@click.option(
    '--pages', '-p',
    multiple=True,
    help="Pages to take, e.g. '1,3,6,12-16' or 'all'. Give once for every input or once per input.",
    type=str
)
@click.option(
    '--unit',
    default='mm',
    show_default=True,
    type=click.Choice(sorted(UNIT_SCALES)),
    help='Output document unit'
)
@click.option(
    '--box',
    default='CropBox',
    show_default=True,
    type=click.Choice(['MediaBox', 'CropBox', 'BleedBox', 'TrimBox', 'ArtBox'], case_sensitive=False),
    help='Page box used to size imported pages'
)
@click.option('--title', help='Title of the merged document')
@click.option('--author', help='Author of the merged document')
@click.option('--subject', help='Subject of the merged document')
@click.option('--keywords', help='Keywords of the merged document')
@click.option(
    '--no-metadata',
    is_flag=True,
    help='Do not copy metadata from the first document'
)
def merge(inputs, output, pages, unit, box, title, author, subject, keywords, no_metadata):
    """
    Merge INPUTS into a single PDF.

    Examples:

        pdf-merger merge a.pdf b.pdf -o merged.pdf

        pdf-merger merge a.pdf b.pdf -o merged.pdf -p 12-16,1-5 -p all
    """
    if pages and len(pages) not in (1, len(inputs)):
        _fail("If using --pages, supply one per input or a single selection applied to all.")

    selections = list(pages) if len(pages) == len(inputs) else [pages[0] if pages else "all"] * len(inputs)
    document_info = {
        key: value
        for key, value in (("title", title), ("author", author), ("subject", subject), ("keywords", keywords))
        if value
    }

    try:
        options = MergeOptions(
            unit=unit,
            page_box=box,
            copy_metadata=not no_metadata,
            document_info=document_info or None,
        )
        merger = PDFMerger(options)
        for input_pdf, selection in zip(inputs, selections):
            merger.add_document(input_pdf, selection)

        console.print(f"\n[bold cyan]Merging {len(inputs)} file(s)...[/bold cyan]")
        output_path = merger.merge(OutputMode.FILE, output)
    except PDFMergerException as e:
        _fail(e)

    result = merger.last_output
    table = Table(title="Merge Summary", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Output", os.path.abspath(output_path))
    table.add_row("Pages", str(result.page_count))
    table.add_row("Links", str(result.link_count))
    table.add_row("Size", format_file_size(os.path.getsize(output_path)))
    console.print(table)
    console.print(f"\n[bold green]✓ Wrote[/bold green] {output_path}\n")


@cli.command(name="links")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--pages', '-p',
    default='all',
    help="Pages to inspect, e.g. '1-3'",
    type=str
)
def show_links(input_pdf, pages):
    """
    List the hyperlinks found on the pages of a PDF.

    Example:

        pdf-merger links input.pdf -p 1-3
    """
    try:
        found = extract_links(input_pdf, pages)
    except PDFMergerException as e:
        _fail(e)

    if not found:
        console.print(f"\n[yellow]No links found in {os.path.basename(input_pdf)}[/yellow]\n")
        return

    table = Table(title=f"Links: {os.path.basename(input_pdf)}")
    table.add_column("Page", style="cyan", justify="right")
    table.add_column("Rect (x, y, w, h)", style="dim")
    table.add_column("Kind", style="magenta")
    table.add_column("Target", style="green")
    for page_number, link in found:
        rect = f"{link.x:.1f}, {link.y:.1f}, {link.w:.1f}, {link.h:.1f}"
        if isinstance(link.target, PageJumpTarget):
            table.add_row(str(page_number), rect, "page", str(link.target.page_number))
        else:
            table.add_row(str(page_number), rect, "uri", link.target.uri)
    console.print()
    console.print(table)
    console.print()


@cli.command(name="pages")
@click.argument('spec')
def show_pages(spec):
    """
    Expand a page specification.

    Example:

        pdf-merger pages '12-16,1-5'
    """
    try:
        selection = parse_page_spec(spec)
    except PDFMergerException as e:
        _fail(e)
    console.print(str(selection))


if __name__ == '__main__':
    cli()
