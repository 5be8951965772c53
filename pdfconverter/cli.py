"""
Command-line interface for pdfconverter.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from pdfconverter import __version__
from pdfconverter.compress import LEVELS
from pdfconverter.config import load_settings
from pdfconverter.exceptions import PdfConverterError
from pdfconverter.service import PdfManipulationService, iter_part_names
from pdfconverter.utils import configure_logging, format_file_size

console = Console()


def _fail(error: Exception) -> NoReturn:
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _write(path: str | Path, data: bytes) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
    return destination


@click.group()
@click.version_option(version=__version__)
@click.option("--strict", is_flag=True, default=False, help="Reject out-of-bounds page ranges.")
@click.option("--log-level", default=None, help="Logging level (defaults to PDFCONVERTER_LOG_LEVEL).")
@click.pass_context
def cli(ctx: click.Context, strict: bool, log_level: str | None):
    """
    PDF Converter - merge, split, extract, watermark and compress PDF files.
    """
    settings = load_settings()
    if strict:
        settings = replace(settings, strict_ranges=True)
    if log_level:
        settings = replace(settings, log_level=log_level)
    configure_logging(settings.log_level)
    ctx.obj = PdfManipulationService(settings=settings)


@cli.command(name="info")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def show_info(service: PdfManipulationService, input_pdf):
    """
    Display information about a PDF file.

    Example:

        pdfconverter info input.pdf
    """
    try:
        info = service.get_info(Path(input_pdf).read_bytes())
    except PdfConverterError as e:
        _fail(e)

    table = Table(title=f"PDF Information: {Path(input_pdf).name}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Number of Pages", str(info.num_pages))
    table.add_row("File Size", format_file_size(info.file_size))
    for key, value in sorted(info.metadata.items()):
        table.add_row(key.lstrip("/"), value)

    console.print()
    console.print(table)
    console.print()


@cli.command(name="merge")
@click.argument("input_pdfs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default="merged.pdf", show_default=True, type=click.Path(dir_okay=False))
@click.pass_obj
def merge(service: PdfManipulationService, input_pdfs, output):
    """
    Merge PDF files in the order given.

    Example:

        pdfconverter merge a.pdf b.pdf -o combined.pdf
    """
    try:
        merged = service.merge_pdfs([Path(path).read_bytes() for path in input_pdfs])
    except PdfConverterError as e:
        _fail(e)

    destination = _write(output, merged)
    console.print(f"\n[bold green]✓ Merged {len(input_pdfs)} files into {destination}[/bold green]")


@cli.command(name="split")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--after", "-a", "split_after_page", required=True, type=int, help="Last page of the first part")
@click.option("--output-dir", "-o", default="./output", show_default=True, type=click.Path(file_okay=False))
@click.pass_obj
def split(service: PdfManipulationService, input_pdf, split_after_page, output_dir):
    """
    Split a PDF into two files after the given page.

    Example:

        pdfconverter split input.pdf --after 3 -o parts
    """
    try:
        parts = service.split_pdf(Path(input_pdf).read_bytes(), split_after_page)
    except PdfConverterError as e:
        _fail(e)

    names = iter_part_names(Path(input_pdf).stem, len(parts))
    console.print("\n[bold green]✓ Split complete[/bold green]")
    for part, name in zip(parts, names):
        destination = _write(Path(output_dir) / name, part)
        console.print(f"  • {destination.name} ({format_file_size(len(part))})")


@cli.command(name="extract")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--start", "-s", required=True, type=int, help="Starting page number (1-indexed)")
@click.option("--end", "-e", required=True, type=int, help="Ending page number (1-indexed, inclusive)")
@click.option("--output", "-o", default="extracted.pdf", show_default=True, type=click.Path(dir_okay=False))
@click.pass_obj
def extract(service: PdfManipulationService, input_pdf, start, end, output):
    """
    Extract a page range into a new PDF.

    Example:

        pdfconverter extract input.pdf -s 2 -e 5 -o excerpt.pdf
    """
    try:
        extracted = service.extract_pages(Path(input_pdf).read_bytes(), start, end)
    except PdfConverterError as e:
        _fail(e)

    destination = _write(output, extracted)
    console.print(f"\n[bold green]✓ Extracted pages {start}-{end} to {destination}[/bold green]")


@cli.command(name="watermark")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--text", "-t", required=True, help="Watermark text")
@click.option("--output", "-o", default="watermarked.pdf", show_default=True, type=click.Path(dir_okay=False))
@click.pass_obj
def watermark(service: PdfManipulationService, input_pdf, text, output):
    """
    Stamp a text watermark on every page.
    """
    try:
        watermarked = service.add_watermark(Path(input_pdf).read_bytes(), text)
    except PdfConverterError as e:
        _fail(e)

    destination = _write(output, watermarked)
    console.print(f"\n[bold green]✓ Watermarked PDF written to {destination}[/bold green]")


@cli.command(name="compress")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--level",
    "-l",
    default="1",
    show_default=True,
    type=click.Choice([str(level) for level in sorted(LEVELS)]),
    help="1 light, 2 strong, 3 ultra",
)
@click.option("--output", "-o", default="compressed.pdf", show_default=True, type=click.Path(dir_okay=False))
@click.pass_obj
def compress(service: PdfManipulationService, input_pdf, level, output):
    """
    Compress a PDF.
    """
    try:
        result = service.compress_pdf(Path(input_pdf).read_bytes(), int(level))
    except PdfConverterError as e:
        _fail(e)

    destination = _write(output, result.data)
    console.print(
        f"\n[bold green]✓ Compressed {format_file_size(result.original_size)} → "
        f"{format_file_size(result.compressed_size)}[/bold green]"
    )
    console.print(f"[dim]Output: {destination}[/dim]")


if __name__ == "__main__":  # pragma: no cover
    cli()
