"""
Command-line interface for the template prefix swap pipeline.

Each pipeline stage is a command reading the same config.json; `run`
executes all three in order.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from prefix_swap.core.config import get_settings
from prefix_swap.core.exceptions import PrefixSwapError
from prefix_swap.core.factory import ComponentFactory
from prefix_swap.core.logging_config import setup_logging
from prefix_swap.core.pipeline_config import (
    build_pipeline_config,
    load_pipeline_config,
    save_pipeline_config,
    validate_prefix,
)
from prefix_swap.engine.artifacts import write_document
from prefix_swap.pipeline import (
    ReplacerResult,
    run_analyzer,
    run_generator,
    run_pipeline,
    run_replacer,
)

app = typer.Typer(
    name="prefix-swap",
    help="Rename the namespace prefix of template placeholders in Word XML",
    add_completion=False,
)
console = Console()

CONFIG_ARGUMENT = typer.Argument(
    Path("config.json"),
    help="Pipeline configuration file",
)


@app.callback()
def main() -> None:
    """Configure logging for every command."""
    setup_logging(get_settings())


def _fail(error: Exception) -> None:
    console.print(f"[red]✗[/red] {error}")
    raise typer.Exit(1)


def _print_replacer_summary(result: ReplacerResult) -> None:
    report = result.report
    console.print(
        f"[green]✓[/green] {report.total} replacements "
        f"({report.text_total} text, {report.encoded_total} base64) "
        f"in {result.elapsed_ms:.0f}ms -> {result.output_path}"
    )

    verification = result.verification
    if verification is None:
        return
    if verification.all_clean:
        console.print("[green]✓[/green] No original field forms remain")
        return

    table = Table(title="Remaining original occurrences")
    table.add_column("Field", style="cyan")
    table.add_column("Text", justify="right")
    table.add_column("Base64", justify="right")
    for residue in verification.residues:
        table.add_row(residue.original, str(residue.text_count), str(residue.encoded_count))
    console.print(table)


@app.command()
def analyze(config_path: Path = CONFIG_ARGUMENT):
    """Extract unique prefixed field names from the source XML."""
    try:
        config = load_pipeline_config(config_path)
        result = run_analyzer(config.section("analyzer"), ComponentFactory(get_settings()))
    except PrefixSwapError as e:
        _fail(e)

    console.print(
        f"[green]✓[/green] {len(result.names)} unique names "
        f"({result.names.strategy} strategy) -> {result.output_path}"
    )


@app.command()
def generate(config_path: Path = CONFIG_ARGUMENT):
    """Build the replacement map from the analyzer output."""
    try:
        config = load_pipeline_config(config_path)
        result = run_generator(config.section("generator"))
    except PrefixSwapError as e:
        _fail(e)

    rmap = result.replacement_map
    console.print(
        f"[green]✓[/green] {len(rmap)} replacements "
        f"{rmap.prefix_from!r} -> {rmap.prefix_to!r} -> {result.output_path}"
    )


@app.command()
def replace(config_path: Path = CONFIG_ARGUMENT):
    """Apply the replacement map to the source XML."""
    try:
        config = load_pipeline_config(config_path)
        result = run_replacer(config.section("replacer"))
    except PrefixSwapError as e:
        _fail(e)

    _print_replacer_summary(result)


@app.command()
def run(config_path: Path = CONFIG_ARGUMENT):
    """Run analyze, generate and replace in order."""
    try:
        config = load_pipeline_config(config_path)
        result = run_pipeline(config, ComponentFactory(get_settings()))
    except PrefixSwapError as e:
        _fail(e)

    console.print(f"[green]✓[/green] {len(result.analyzer.names)} unique names")
    console.print(f"[green]✓[/green] {len(result.generator.replacement_map)} map entries")
    _print_replacer_summary(result.replacer)


@app.command()
def init(
    old_prefix: str = typer.Argument(..., help="Prefix to replace, without separator"),
    new_prefix: str = typer.Argument(..., help="New prefix, without separator"),
    config_path: Path = typer.Option(Path("config.json"), "--config", "-c", help="Where to write"),
    work_dir: Path = typer.Option(Path("."), "--work-dir", "-w", help="Directory holding IN/ and OUT/"),
):
    """Write a config.json for the standard IN/OUT layout."""
    for label, prefix in (("Old prefix", old_prefix), ("New prefix", new_prefix)):
        problem = validate_prefix(prefix)
        if problem:
            console.print(f"[red]✗[/red] {label}: {problem}")
            raise typer.Exit(1)
    if old_prefix == new_prefix:
        console.print("[red]✗[/red] Prefixes must differ")
        raise typer.Exit(1)

    try:
        path = save_pipeline_config(build_pipeline_config(old_prefix, new_prefix, work_dir), config_path)
    except PrefixSwapError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Config written to {path}")


@app.command()
def unpack(
    archive: Path = typer.Argument(..., help="Template archive (.docx or .fdt)"),
    output: Optional[Path] = typer.Argument(None, help="Where to write the XML (default IN/document.xml)"),
):
    """Extract the document XML from a template archive."""
    output = output or Path("IN") / "document.xml"
    reader = ComponentFactory(get_settings()).get_archive_reader()

    try:
        xml = reader.read_document(archive)
        write_document(output, xml)
    except (FileNotFoundError, PrefixSwapError) as e:
        _fail(e)

    console.print(f"[green]✓[/green] {len(xml)} characters -> {output}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
):
    """Start the web front end."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "prefix_swap.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
