"""
Command-line interface for the asset curator.
Provides commands for curation, reference scanning and configuration.
"""

import os
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, BarColumn, MofNCompleteColumn, SpinnerColumn, TextColumn

from .config import CuratorConfig, ENV_PREFIX
from .pipeline import CurationPipeline, CurationReport, PipelineError
from .scanner import ReferenceScanner, build_essential_set
from .processing.copier import AssetCopier
from .processing.manifest import BYTES_PER_MB
from .processing.manual_picks import ManualPicksScanner

app = typer.Typer(
    name="curate-assets",
    help="Asset curator - shrink the asset pool to a deployable, size-bounded bundle with a manifest",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]curate-assets curate[/cyan]                          Run the full curation pass
  [cyan]curate-assets curate --seed 42 --workers 4[/cyan]    Reproducible mutations, parallel copy
  [cyan]curate-assets scan[/cyan]                            List essential asset references
  [cyan]curate-assets config --env-vars[/cyan]               Show environment overrides
    """
)
console = Console()


@app.command()
def curate(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    source_dir: Optional[Path] = typer.Option(None, "--source", help="Source asset directory"),
    target_dir: Optional[Path] = typer.Option(None, "--target", help="Curated output directory"),
    manual_picks_dir: Optional[Path] = typer.Option(None, "--manual-picks", help="Manual picks directory"),
    scan_dir: Optional[Path] = typer.Option(None, "--scan-dir", help="Directory of source files to scan"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Parallel asset workers"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for video mutation selection"),
    no_mutations: bool = typer.Option(False, "--no-mutations", help="Copy videos without mutations"),
):
    """Curate essential assets and manual picks and write the manifest."""
    config = _load_config(config_file)

    if source_dir:
        config.source_dir = str(source_dir)
    if target_dir:
        config.target_dir = str(target_dir)
        if not manual_picks_dir:
            config.manual_picks_dir = config.curated_manual_picks_dir
    if manual_picks_dir:
        config.manual_picks_dir = str(manual_picks_dir)
    if scan_dir:
        config.scan_dir = str(scan_dir)
    if workers:
        config.workers = workers
    if seed is not None:
        config.mutation_seed = seed
    if no_mutations:
        config.mutations_enabled = False

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]✗[/red] {error}")
        raise typer.Exit(1)

    console.print("[bold blue]Asset curator[/bold blue]")
    console.print(f"Target size: {config.target_size_mb}MB")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console
    ) as progress:
        task = progress.add_task("Curating essential assets...", total=None)

        def on_asset(done: int, total: int, reference: str) -> None:
            progress.update(task, completed=done, total=total, description=f"Curating {Path(reference).name}")

        pipeline = CurationPipeline(config, on_asset=on_asset)
        try:
            report = pipeline.run()
        except PipelineError as e:
            console.print(f"[red]Curation failed:[/red] {e}")
            raise typer.Exit(1)
        progress.update(task, description="✓ Essential assets curated")

    _display_report(report, config)


@app.command()
def scan(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    scan_dir: Optional[Path] = typer.Option(None, "--scan-dir", help="Directory of source files to scan"),
    missing_only: bool = typer.Option(False, "--missing", help="Only list references missing on disk"),
):
    """List the essential asset set and whether each source exists."""
    config = _load_config(config_file)
    scanner = ReferenceScanner(config.asset_prefix, config.scan_extensions)
    scanned = scanner.scan_directory(scan_dir or config.scan_dir)
    essentials = build_essential_set(scanned, config.core_assets, config.extra_assets)
    copier = AssetCopier(config)

    table = Table(title=f"Essential assets ({len(essentials)})")
    table.add_column("Reference", style="cyan")
    table.add_column("Origin", style="dim")
    table.add_column("Exists", width=6)

    missing = 0
    for reference in sorted(essentials):
        try:
            source, _ = copier.resolve(reference)
            exists = source.is_file()
        except ValueError:
            exists = False
        missing += not exists
        if missing_only and exists:
            continue
        origin = "scan" if reference in scanned else "core"
        table.add_row(reference, origin, "[green]✓[/green]" if exists else "[red]✗[/red]")

    console.print(table)
    console.print(f"[dim]{len(scanned)} scanned references, {missing} missing on disk[/dim]")


@app.command()
def picks(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    manual_picks_dir: Optional[Path] = typer.Option(None, "--manual-picks", help="Manual picks directory"),
):
    """Inventory the manual picks directory and write its manifest."""
    config = _load_config(config_file)
    scanner = ManualPicksScanner(manual_picks_dir or config.manual_picks_dir)
    inventory = scanner.scan()

    try:
        path = scanner.write_manifest(inventory)
    except OSError as e:
        console.print(f"[red]Cannot write manual picks manifest:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Manual picks ({len(inventory.assets)})")
    table.add_column("Path", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Size", style="yellow", justify="right")
    for entry in inventory.assets:
        table.add_row(entry.path, entry.type, _format_mb(entry.size))

    console.print(table)
    console.print(f"[green]✓[/green] Wrote {path}")


@app.command()
def config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables"),
    validate: bool = typer.Option(False, "--validate", help="Validate configuration"),
):
    """Show, validate or document the configuration."""
    if env_vars:
        _display_env_vars()
        return

    cfg = _load_config(config_file)

    if validate:
        errors = cfg.validate()
        if errors:
            for error in errors:
                console.print(f"[red]✗[/red] {error}")
            raise typer.Exit(1)
        console.print("[green]✓[/green] Configuration is valid")
        return

    _display_config(cfg)


def _load_config(config_file: Optional[Path]) -> CuratorConfig:
    """Load configuration from file or use defaults with environment variable support."""
    config = None

    if config_file:
        if not config_file.exists():
            console.print(f"[red]Configuration file not found:[/red] {config_file}")
            raise typer.Exit(1)
        config = CuratorConfig.from_file(config_file)
        console.print(f"[dim]Using configuration: {config_file}[/dim]")
    else:
        default_configs = [
            Path("asset_curator.toml"),
            Path("asset_curator.json"),
            Path("scripts/asset_curator.toml"),
            Path("scripts/asset_curator.json")
        ]

        for config_path in default_configs:
            if config_path.exists():
                console.print(f"[dim]Using configuration: {config_path}[/dim]")
                config = CuratorConfig.from_file(config_path)
                break

        if config is None:
            config = CuratorConfig()

    config = CuratorConfig._apply_env_overrides(config)

    env_vars_used = [key for key in os.environ if key.startswith(ENV_PREFIX)]
    if env_vars_used:
        console.print(f"[dim]Environment overrides applied: {len(env_vars_used)} variables[/dim]")

    return config


def _format_mb(size: int) -> str:
    return f"{size / BYTES_PER_MB:.2f}MB"


def _display_report(report: CurationReport, config: CuratorConfig) -> None:
    """Display curation summary."""
    stats = report.manifest.stats

    console.print("\n[bold]Curation complete[/bold]")
    console.print("=" * 50)

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Total assets", str(stats.total_assets))
    summary.add_row("Total size", f"{stats.total_size_mb}MB")
    summary.add_row("Essentials curated", f"{report.state.assets_curated}/{report.state.assets_requested}")
    summary.add_row("Video mutations", str(report.state.mutations_created))
    summary.add_row("Manual picks", str(len(report.manifest.manual_picks.assets)))
    summary.add_row("Manifest", str(report.manifest_path))
    console.print(summary)

    for title, breakdown in (("Breakdown by type", stats.by_type), ("Breakdown by project", stats.by_project)):
        if not breakdown:
            continue
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Files", justify="right")
        table.add_column("Size", style="yellow", justify="right")
        for name, entry in breakdown.items():
            table.add_row(name, str(entry.count), _format_mb(entry.size))
        console.print(table)

    if report.within_budget:
        console.print(f"\n[green]✓[/green] Size target achieved! ({stats.total_size_mb}MB <= {config.target_size_mb}MB)")
    else:
        console.print(
            f"\n[yellow]Warning:[/yellow] Total size ({stats.total_size_mb}MB) exceeds target ({config.target_size_mb}MB)"
        )
        console.print("[dim]Consider removing some assets or increasing compression[/dim]")

    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"1. Drop your favorite assets in {config.manual_picks_dir}")
    console.print("2. Run this command again to update the manifest")


def _display_config(config: CuratorConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Asset Curator Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Public Directory", config.public_dir)
    table.add_row("Source Directory", config.source_dir)
    table.add_row("Target Directory", config.target_dir)
    table.add_row("Manual Picks Directory", config.manual_picks_dir)
    table.add_row("Scan Directory", config.scan_dir)
    table.add_row("Asset Prefix", config.asset_prefix)
    table.add_row("Scan Extensions", ", ".join(config.scan_extensions))

    table.add_row("Max Image Width", str(config.max_image_width))
    table.add_row("Image Format", config.image_format)
    table.add_row("WebP Quality", str(config.webp_quality))
    table.add_row("JPEG Quality", str(config.jpeg_quality))
    table.add_row("Preserve Original Quality", ", ".join(config.preserve_original_quality))

    table.add_row("FFmpeg", config.ffmpeg_binary)
    table.add_row("FFmpeg Timeout", f"{config.ffmpeg_timeout:g}s")
    table.add_row("Video Mutations", str(config.mutations_enabled))
    table.add_row("Mutation Seed", str(config.mutation_seed))

    table.add_row("Target Size", f"{config.target_size_mb:g}MB")
    table.add_row("Core Assets", str(len(config.core_assets)))
    table.add_row("Extra Assets", str(len(config.extra_assets)))
    table.add_row("Workers", str(config.workers))

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Asset Curator Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    env_vars = [
        ("PUBLIC_DIR", "Web root that curated paths are reported against", "public"),
        ("SOURCE_DIR", "Source asset directory", "public/assets"),
        ("TARGET_DIR", "Curated output directory", "public/assets-curated"),
        ("MANUAL_PICKS_DIR", "Manual picks directory", "public/assets-curated/manual-picks"),
        ("SCAN_DIR", "Directory of source files to scan", "src/mutations"),
        ("ASSET_PREFIX", "Prefix of asset references", "/assets/"),
        ("SCAN_EXTENSIONS", "Comma-separated scannable extensions", ".js,.jsx"),
        ("MAX_IMAGE_WIDTH", "Maximum image width in pixels", "1920"),
        ("WEBP_QUALITY", "WebP quality (1-100)", "85"),
        ("JPEG_QUALITY", "JPEG quality (1-100)", "85"),
        ("IMAGE_FORMAT", "Target image format (webp/jpeg)", "webp"),
        ("PRESERVE_ORIGINAL_QUALITY", "Comma-separated extensions copied as-is", "svg,ico"),
        ("FFMPEG", "ffmpeg executable", "ffmpeg"),
        ("FFMPEG_TIMEOUT", "Timeout per mutation in seconds", "300"),
        ("MUTATIONS", "Create video mutations (true/false)", "true"),
        ("MUTATION_SEED", "Seed for mutation selection", "42"),
        ("TARGET_SIZE_MB", "Size budget in MB", "40"),
        ("WORKERS", "Parallel asset workers", "4"),
    ]

    for name, description, example in env_vars:
        table.add_row(ENV_PREFIX + name, description, example)

    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")
    console.print(f"[dim]Example: export {ENV_PREFIX}TARGET_SIZE_MB=60[/dim]")


if __name__ == "__main__":
    app()
