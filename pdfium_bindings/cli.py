"""
Command-line interface for pdfium-bindings.
"""

import sys
from typing import Iterable, Optional

import click
from rich.console import Console
from rich.table import Table

from pdfium_bindings.config import LIBRARY_PATH_ENV
from pdfium_bindings.document import Document
from pdfium_bindings.exceptions import (
    DocumentLoadError,
    LibraryNotFoundError,
    OperationError,
    PdfiumError,
)
from pdfium_bindings.library import get_backend
from pdfium_bindings.text import TextPage
from pdfium_bindings.utils import configure_logging, format_rect

console = Console()

password_option = click.option(
    '--password',
    default=None,
    help='Password for encrypted PDFs',
    type=str
)
page_option = click.option(
    '--page', '-p',
    default=None,
    help='Page number (1-indexed); all pages when omitted',
    type=click.IntRange(min=1)
)


def _open(ctx: click.Context, input_pdf: str, password: Optional[str]) -> Document:
    backend = get_backend(ctx.obj.get("library_path"))
    return Document(input_pdf, password, backend=backend)


def _page_indices(document: Document, page: Optional[int]) -> Iterable[int]:
    if page is None:
        return range(document.page_count())
    return [page - 1]


def _fail(exc: PdfiumError) -> None:
    if isinstance(exc, LibraryNotFoundError):
        console.print(f"\n[bold red]✗ Error:[/bold red] {exc}")
        console.print(f"[dim]Install PDFium or set {LIBRARY_PATH_ENV} to its location.[/dim]")
    elif isinstance(exc, DocumentLoadError):
        console.print(f"\n[bold red]✗ Error loading document:[/bold red] {exc}")
    elif isinstance(exc, OperationError):
        console.print(f"\n[bold red]✗ Error during operation:[/bold red] {exc}")
    else:
        console.print(f"\n[bold red]✗ Error:[/bold red] {exc}")
    sys.exit(1)


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    '--library-path',
    envvar=LIBRARY_PATH_ENV,
    default=None,
    help='Path to the PDFium shared library',
    type=click.Path()
)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, library_path, verbose):
    """
    PDFium tool - inspect PDF pages, annotations, text and links.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["library_path"] = library_path


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True))
@password_option
@click.pass_context
def show_info(ctx, input_pdf, password):
    """
    Display page count, page sizes and annotation count.

    Example:

        pdfium-tool info input.pdf
    """
    try:
        with _open(ctx, input_pdf, password) as document:
            page_count = document.page_count()

            table = Table(title=f"PDF Information: {click.format_filename(input_pdf, shorten=True)}")
            table.add_column("Page", style="cyan", no_wrap=True)
            table.add_column("Width (pt)", style="green", justify="right")
            table.add_column("Height (pt)", style="green", justify="right")
            table.add_column("Annotations", style="magenta", justify="right")

            total_annotations = 0
            for page_index in range(page_count):
                width, height = document.dimensions_for_page(page_index)
                annotations = document.annotations_by_page(page_index)
                total_annotations += len(annotations)
                table.add_row(str(page_index + 1), f"{width:.2f}", f"{height:.2f}", str(len(annotations)))

        console.print()
        console.print(f"[bold]Pages:[/bold] {page_count}")
        console.print(f"[bold]Annotations:[/bold] {total_annotations}")
        console.print(table)
        console.print()

    except PdfiumError as e:
        _fail(e)


@cli.command(name="annotations")
@click.argument('input_pdf', type=click.Path(exists=True))
@page_option
@password_option
@click.pass_context
def list_annotations(ctx, input_pdf, page, password):
    """
    List annotations with their type, position and contents.

    Examples:

        pdfium-tool annotations input.pdf

        pdfium-tool annotations input.pdf --page 2
    """
    try:
        with _open(ctx, input_pdf, password) as document:
            annotations = []
            for page_index in _page_indices(document, page):
                annotations.extend(document.annotations_by_page(page_index))

        if not annotations:
            console.print("\n[yellow]No annotations found.[/yellow]\n")
            return

        table = Table(title="Annotations")
        table.add_column("Page", style="cyan", no_wrap=True)
        table.add_column("#", justify="right")
        table.add_column("Type", style="magenta")
        table.add_column("Position", style="green")
        table.add_column("Contents")

        for annotation in annotations:
            rect = annotation.rect
            table.add_row(
                str(annotation.page + 1),
                str(annotation.index + 1),
                annotation.subtype,
                format_rect(rect.left, rect.bottom, rect.right, rect.top),
                annotation.contents,
            )

        console.print()
        console.print(table)
        console.print()

    except PdfiumError as e:
        _fail(e)


@cli.command(name="text")
@click.argument('input_pdf', type=click.Path(exists=True))
@page_option
@password_option
@click.pass_context
def extract_text(ctx, input_pdf, page, password):
    """
    Print the text of each page.

    Example:

        pdfium-tool text input.pdf --page 1
    """
    try:
        with _open(ctx, input_pdf, password) as document:
            for page_index in _page_indices(document, page):
                with document.load_page(page_index) as pdf_page, TextPage.load(pdf_page) as text_page:
                    char_count = text_page.count_chars()
                    console.print(
                        f"\n[bold cyan]Page {page_index + 1}[/bold cyan] [dim]({char_count} characters)[/dim]"
                    )
                    console.print(text_page.get_text(), markup=False, highlight=False)
        console.print()

    except PdfiumError as e:
        _fail(e)


@cli.command(name="search")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.argument('term', type=str)
@page_option
@click.option('--match-case', is_flag=True, help='Match letter case')
@click.option('--whole-word', is_flag=True, help='Match whole words only')
@click.option(
    '--limit',
    default=5,
    help='Maximum number of matches to show per page',
    type=click.IntRange(min=0)
)
@password_option
@click.pass_context
def search_text(ctx, input_pdf, term, page, match_case, whole_word, limit, password):
    """
    Search for TERM and show where it occurs.

    Examples:

        pdfium-tool search input.pdf invoice

        pdfium-tool search input.pdf Total --match-case --whole-word
    """
    try:
        table = Table(title=f"Matches for '{term}'")
        table.add_column("Page", style="cyan", no_wrap=True)
        table.add_column("Index", justify="right")
        table.add_column("Match", style="green")
        table.add_column("Position")

        total = 0
        with _open(ctx, input_pdf, password) as document:
            for page_index in _page_indices(document, page):
                with document.load_page(page_index) as pdf_page, TextPage.load(pdf_page) as text_page:
                    with text_page.create_search(term, match_case=match_case, match_whole_word=whole_word) as search:
                        shown = 0
                        while search.find_next():
                            total += 1
                            if shown >= limit:
                                continue
                            selection = search.get_selection()
                            box = text_page.get_char_box(selection.start_index)
                            table.add_row(
                                str(page_index + 1),
                                str(selection.start_index),
                                selection.get_text(),
                                format_rect(box.left, box.bottom, box.right, box.top),
                            )
                            shown += 1

        console.print()
        if total:
            console.print(table)
        console.print(f"[bold]Total matches:[/bold] {total}\n")

    except PdfiumError as e:
        _fail(e)


@cli.command(name="links")
@click.argument('input_pdf', type=click.Path(exists=True))
@page_option
@password_option
@click.pass_context
def list_links(ctx, input_pdf, page, password):
    """
    List web links detected in the page text.

    Example:

        pdfium-tool links input.pdf
    """
    try:
        table = Table(title="Web Links")
        table.add_column("Page", style="cyan", no_wrap=True)
        table.add_column("URL", style="green")
        table.add_column("Text", style="magenta")

        total = 0
        with _open(ctx, input_pdf, password) as document:
            for page_index in _page_indices(document, page):
                with document.load_page(page_index) as pdf_page, TextPage.load(pdf_page) as text_page:
                    with text_page.extract_links() as links:
                        for link_index in range(links.count()):
                            selection = links.get_selection(link_index)
                            table.add_row(str(page_index + 1), links.get_url(link_index), selection.get_text())
                            total += 1

        console.print()
        if total:
            console.print(table)
        console.print(f"[bold]Links found:[/bold] {total}\n")

    except PdfiumError as e:
        _fail(e)


if __name__ == '__main__':
    cli()
