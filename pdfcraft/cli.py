"""
Command-line interface for pdfcraft.
"""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from pdfcraft import __version__
from pdfcraft.compress import RASTERIZATION_NOTICE, compress_document, compression_report
from pdfcraft.config import DEFAULT_QUALITY, DEFAULT_SCALE, CompressionOptions
from pdfcraft.core.document import SourceDocument, describe
from pdfcraft.core.utils import base_name, format_file_size, get_logger
from pdfcraft.exceptions import PDFCraftError
from pdfcraft.merge import RemoteMerger, dedupe_sources, merge_documents
from pdfcraft.split import iter_split, normalize_ranges, parse_ranges

console = Console()


def _progress() -> Progress:
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    )


def _fail(error: Exception) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _load(path: str) -> SourceDocument:
    return SourceDocument.from_path(path)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    pdfcraft - split, merge and compress PDF files.
    """
    if verbose:
        get_logger("pdfcraft").setLevel(logging.DEBUG)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def show_info(input_pdf):
    """
    Display information about a PDF file.

    Example:

        pdfcraft info input.pdf
    """
    try:
        info = describe(_load(input_pdf))
    except PDFCraftError as e:
        _fail(e)

    table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("File Path", os.path.abspath(input_pdf))
    table.add_row("File Size", format_file_size(info.file_size))
    table.add_row("Number of Pages", str(info.page_count))
    if info.title:
        table.add_row("Title", info.title)
    if info.author:
        table.add_row("Author", info.author)
    if info.producer:
        table.add_row("Producer", info.producer)
    table.add_row("Encrypted", "Yes" if info.encrypted else "No")

    console.print()
    console.print(table)
    console.print()


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--ranges', '-r',
    required=True,
    help="Page ranges separated by commas, semicolons or newlines (e.g. '1-3, 5; 7-9')",
    type=str
)
@click.option(
    '--output-dir', '-o',
    default='./output',
    help='Output directory',
    type=click.Path(file_okay=False)
)
@click.option(
    '--strict',
    is_flag=True,
    help='Reject out-of-bounds ranges instead of clamping them to the document'
)
def split(input_pdf, ranges, output_dir, strict):
    """
    Split a PDF into one file per page range.

    Each range is written to <name>_pages_<from>-<to>.pdf.

    Examples:

        pdfcraft split input.pdf -r '1-3,5,7-9'

        pdfcraft split input.pdf --ranges '10-2' -o chapters
    """
    try:
        source = _load(input_pdf)
        parsed = parse_ranges(ranges)
        if not strict:
            parsed = normalize_ranges(parsed, source.page_count)

        console.print(f"[dim]Ranges to extract: {', '.join(str(r) for r in parsed)}[/dim]")

        output_path = Path(output_dir)
        created = []
        with _progress() as progress:
            task = progress.add_task("Processing ranges", total=len(parsed))
            for part in iter_split(source, parsed):
                created.append(part.document.save(output_path / part.filename(source.name)))
                progress.update(task, completed=len(created))
    except PDFCraftError as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Successfully created {len(created)} file(s)[/bold green]")
    console.print(f"[dim]Output directory: {os.path.abspath(output_dir)}[/dim]")
    for file_path in created:
        console.print(f"  • {file_path.name}")
    console.print()


@cli.command(name="merge")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output', '-o',
    default='merged.pdf',
    help='Output PDF path',
    type=click.Path(dir_okay=False)
)
@click.option('--bookmarks', is_flag=True, help='Add one bookmark per input document')
@click.option('--no-metadata', is_flag=True, help='Do not copy metadata from the first document')
@click.option('--remote', default=None, help='Delegate merging to a merge service at this URL')
def merge(input_pdfs, output, bookmarks, no_metadata, remote):
    """
    Merge PDFs, in the order given, into a single file.

    Examples:

        pdfcraft merge a.pdf b.pdf -o combined.pdf

        pdfcraft merge a.pdf b.pdf c.pdf --bookmarks
    """
    try:
        loaded = [_load(path) for path in input_pdfs]
        sources = dedupe_sources(loaded)
        if len(sources) < len(loaded):
            console.print(
                f"[bold yellow]⚠ Skipped {len(loaded) - len(sources)} duplicate file(s)[/bold yellow]"
            )

        if remote:
            console.print(f"[bold cyan]Sending {len(sources)} file(s) to {remote}...[/bold cyan]")
            result = RemoteMerger(remote).merge(sources)
        else:
            with _progress() as progress:
                task = progress.add_task("Merging documents", total=len(sources))
                result = merge_documents(
                    sources,
                    metadata=not no_metadata,
                    bookmarks=bookmarks,
                    progress_callback=lambda current, total: progress.update(task, completed=current),
                )
        destination = result.save(output)
    except PDFCraftError as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Successfully created:[/bold green] {destination}")
    console.print(f"[dim]{result.page_count} page(s), {format_file_size(result.size)}[/dim]")
    console.print()


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output', '-o',
    default=None,
    help='Output PDF path (default: <name>_compressed.pdf next to the input)',
    type=click.Path(dir_okay=False)
)
@click.option(
    '--level',
    type=click.Choice(['low', 'medium', 'high'], case_sensitive=False),
    default=None,
    help='Compression preset; --quality and --scale override it'
)
@click.option('--quality', '-q', type=float, default=None, help=f'JPEG quality in (0, 1] (default {DEFAULT_QUALITY})')
@click.option('--scale', '-s', type=float, default=None, help=f'Render scale, > 0 (default {DEFAULT_SCALE})')
@click.option('--no-metadata', is_flag=True, help='Do not copy document metadata')
def compress(input_pdf, output, level, quality, scale, no_metadata):
    """
    Compress a PDF by re-rendering every page as a JPEG image.

    Lower scale gives smaller, blurrier output; 1.0-1.4 is a good start.

    Examples:

        pdfcraft compress scan.pdf

        pdfcraft compress scan.pdf --level high -o small.pdf

        pdfcraft compress scan.pdf -q 0.5 -s 1.0
    """
    console.print(f"[bold yellow]⚠ {RASTERIZATION_NOTICE}[/bold yellow]")
    try:
        if level:
            options = CompressionOptions.from_level(level, preserve_metadata=not no_metadata)
        else:
            options = CompressionOptions(preserve_metadata=not no_metadata)

        source = _load(input_pdf)
        with _progress() as progress:
            task = progress.add_task("Rasterizing pages", total=source.page_count)
            result = compress_document(
                source,
                quality,
                scale,
                options=options,
                progress_callback=lambda current, total: progress.update(task, completed=current),
            )

        if output is None:
            output = Path(input_pdf).with_name(f"{base_name(source.name)}_compressed.pdf")
        destination = result.save(output)
    except PDFCraftError as e:
        _fail(e)

    report = compression_report(source, result)
    console.print(f"\n[bold green]✓ Successfully created:[/bold green] {destination}")
    console.print(
        f"[dim]Before: {format_file_size(report.original_size)} → "
        f"After: {format_file_size(report.compressed_size)} "
        f"({report.compression_ratio:.0%} of original)[/dim]"
    )
    console.print()


if __name__ == '__main__':
    cli()
