"""
draftkit.cli - Typer CLI entry point.

Provides the generate/export/inspect subcommands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from draftkit import __version__
from draftkit.config import CONFIG_FILENAME, create_default_config, resolve_config, write_config
from draftkit.exceptions import ConfigError, DraftkitError
from draftkit.logging import configure_logging
from draftkit.pipeline import GenerationResult, GenerationStatus, export_project, generate_project
from draftkit.timerange import format_srt_timestamp, us_to_seconds
from draftkit.utils import format_duration, format_size

app = typer.Typer(
    name="draftkit",
    help="CapCut / Jianying draft assembler.\n\n"
    "Builds an editable draft from a narration track, scene images and "
    "optional SRT captions, and installs it into the editor's draft folder.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"draftkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """draftkit - CapCut / Jianying draft assembler."""
    pass


def _load_config(input_dir: Path | None, config_file: str | None):
    try:
        return resolve_config(input_dir, Path(config_file) if config_file else None)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _report(result: GenerationResult) -> None:
    if result.status == GenerationStatus.NOTHING_WRITTEN:
        console.print(f"[red]Error: {escape(str(result.error))}[/red]")
        console.print("[dim]Nothing was written.[/dim]")
        raise typer.Exit(1)

    if result.project_dir:
        console.print(f"[green]✓[/green] Draft installed: {result.project_dir}")
    if result.document_path:
        console.print(f"[dim]  Document: {result.document_path}[/dim]")

    if result.status == GenerationStatus.WRITTEN_WITH_WARNINGS:
        console.print(f"\n[yellow]⚠ Written with {len(result.warnings)} warning(s):[/yellow]")
        for warning in result.warnings:
            console.print(f"[yellow]  - {escape(warning)}[/yellow]")
        console.print("[dim]The draft may need manual repair in the editor.[/dim]")


@app.command("generate")
def generate(
    input_dir: str = typer.Argument(..., help="Directory with narration, images and captions"),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Stable draft folder name (re-running overwrites it)"
    ),
    draft_root: str | None = typer.Option(
        None, "--draft-root", "-d", help="Editor draft folder (auto-detected if omitted)"
    ),
    config_file: str | None = typer.Option(None, "--config", "-c", help=f"Path to {CONFIG_FILENAME}"),
    fallback_duration: float | None = typer.Option(
        None, "--fallback-duration", help="Audio length in seconds if ffprobe cannot read it"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Build a draft and install it into the editor's draft folder."""
    configure_logging(verbose)
    source = Path(input_dir).expanduser()
    config = _load_config(source, config_file)

    result = generate_project(
        source,
        config=config,
        name=name,
        draft_root=Path(draft_root).expanduser() if draft_root else None,
        fallback_seconds=fallback_duration,
    )
    _report(result)
    if result.project_dir:
        console.print("\nOpen the editor to review and export the draft.")


@app.command("export")
def export(
    input_dir: str = typer.Argument(..., help="Directory with narration, images and captions"),
    output: str = typer.Option("output", "--output", "-o", help="Directory for the draft document"),
    config_file: str | None = typer.Option(None, "--config", "-c", help=f"Path to {CONFIG_FILENAME}"),
    fallback_duration: float | None = typer.Option(
        None, "--fallback-duration", help="Audio length in seconds if ffprobe cannot read it"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Write the draft document to a directory without installing it."""
    configure_logging(verbose)
    source = Path(input_dir).expanduser()
    config = _load_config(source, config_file)

    result = export_project(
        source,
        Path(output).expanduser(),
        config=config,
        fallback_seconds=fallback_duration,
    )
    _report(result)


@app.command("scan")
def scan(
    input_dir: str = typer.Argument(..., help="Directory to classify"),
) -> None:
    """Show how the files of an input directory will be used."""
    from draftkit.scan import scan_assets

    try:
        bundle = scan_assets(Path(input_dir).expanduser())
    except DraftkitError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Assets in {bundle.directory.name}")
    table.add_column("#", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Role", style="green")
    table.add_column("Size")

    table.add_row("", bundle.audio_file.name, "narration", format_size(bundle.audio_file))
    for i, image in enumerate(bundle.image_files, 1):
        table.add_row(str(i), image.name, "scene", format_size(image))
    if bundle.caption_file:
        table.add_row("", bundle.caption_file.name, "captions", format_size(bundle.caption_file))
    else:
        table.add_row("", "-", "[dim]no captions[/dim]", "")

    console.print(table)


@app.command("captions")
def captions(
    srt_file: str = typer.Argument(..., help="SRT caption file"),
) -> None:
    """Parse an SRT file and list its entries."""
    from draftkit.captions import parse_srt_file

    try:
        entries = parse_srt_file(Path(srt_file).expanduser())
    except DraftkitError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Captions ({len(entries)})")
    table.add_column("#", style="dim")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Text")

    for entry in entries:
        table.add_row(
            str(entry.sequence_number),
            format_srt_timestamp(entry.start),
            format_srt_timestamp(entry.end),
            escape(entry.text.replace("\n", " / ")),
        )

    console.print(table)
    if entries:
        console.print(f"[dim]Last caption ends at {format_duration(us_to_seconds(entries[-1].end))}[/dim]")


@app.command("doctor")
def run_doctor(
    input_dir: str | None = typer.Argument(None, help="Optional input directory to validate"),
) -> None:
    """Check dependencies and environment setup."""
    console.print("[cyan]Running preflight checks...[/cyan]\n")

    from draftkit.validation import run_preflight_checks

    input_path = Path(input_dir).expanduser() if input_dir else None
    config = _load_config(input_path, None)
    results = run_preflight_checks(input_path, config.draft_roots)
    checks = results["checks"]

    table = Table(title="Dependency Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Version/Details")

    ffprobe = checks["ffprobe"]
    if "error" in ffprobe:
        table.add_row("FFprobe", "✗ Missing", escape(ffprobe.get("install_hint") or ffprobe["error"]))
    else:
        table.add_row("FFprobe", "✓ Installed", ffprobe.get("ffprobe_version", "unknown"))

    store = checks["draft_store"]
    if store["found"]:
        table.add_row("Draft folder", "✓ Found", escape(store["path"]))
    else:
        table.add_row("Draft folder", "✗ Not found", escape(store["error"]))

    if "input" in checks:
        check = checks["input"]
        if check["valid"]:
            details = f"{check['images']} image(s), {check['size_mb']} MB"
            if check["captions"]:
                details += ", captions"
            table.add_row("Input", "✓ Valid", details)
        else:
            table.add_row("Input", "✗ Invalid", escape(check["error"]))

    if "disk_space" in checks:
        disk = checks["disk_space"]
        if "error" in disk:
            table.add_row("Disk space", "✗ Unknown", escape(disk["error"]))
        else:
            details = f"{disk['available_mb']} MB free, {disk['required_mb']} MB needed"
            status = "✓ OK" if disk["sufficient"] else "✗ Insufficient"
            table.add_row("Disk space", status, details)

    console.print(table)

    if results["passed"]:
        console.print("\n[green]✓ All checks passed[/green]")
    else:
        console.print("\n[yellow]⚠ Some checks failed[/yellow]")
        console.print("[dim]Fix the issues above before generating drafts[/dim]")
        raise typer.Exit(1)


@app.command("init-config")
def init_config(
    path: str = typer.Argument(".", help="Directory to write draftkit.yaml into"),
    profile: str = typer.Option(
        "portrait",
        "--profile",
        "-p",
        help="Canvas profile: portrait, landscape, or square",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a draftkit.yaml with default settings."""
    from draftkit.config import BUILTIN_PROFILES

    if profile not in BUILTIN_PROFILES:
        console.print(f"[red]Error: Unknown profile '{profile}'[/red]")
        raise typer.Exit(1)

    config_path = Path(path).expanduser() / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[red]Error: '{config_path}' already exists[/red]")
        raise typer.Exit(1)

    write_config(create_default_config(profile), config_path)
    console.print(f"[green]✓[/green] Wrote {config_path} with profile '{profile}'")
