"""dna-trait-loader: parse consumer DNA exports and report genetic traits."""

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from . import __version__
from .config import ConfigValidationError, load_config
from .export.csv_export import write_variants_csv
from .loader import DNAFileParser, LoadConfig
from .models import ParseResult, RiskLevel
from .progress import ProgressChannel, ProgressEvent
from .qc.variant_stats import analyze_variants
from .traits.knowledge_base import KnowledgeBaseError, load_knowledge_base
from .traits.matcher import match_traits, summarize_risk
from .traits.recommendations import aggregate_recommendations

RISK_STYLES = {
    RiskLevel.HIGH: "red",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.LOW: "green",
    RiskLevel.PROTECTIVE: "cyan",
    RiskLevel.UNKNOWN: "dim",
}


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="dna-trait-loader",
    help="Parse 23andMe and AncestryDNA raw data files and report genetic traits",
)
console = Console()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool, default_level: str = "INFO") -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(default_level)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("dna_trait_loader").setLevel(level)


def _add_log_file(log_file: Path) -> None:
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    logging.getLogger("dna_trait_loader").addHandler(file_handler)


def _resolve_config(config_file: Path | None) -> LoadConfig:
    if config_file is None:
        return LoadConfig()
    try:
        return load_config(config_file)
    except (FileNotFoundError, ConfigValidationError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1) from None


def _check_input(file_path: Path) -> None:
    if not file_path.exists():
        console.print(f"[red]Error: DNA file not found: {file_path}[/red]")
        raise typer.Exit(1)


def _run_parse(file_path: Path, config: LoadConfig, show_progress: bool) -> ParseResult:
    if not show_progress:
        return asyncio.run(DNAFileParser(config).parse_file(file_path))

    channel = ProgressChannel()
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress_bar:
        task = progress_bar.add_task("Reading file...", total=100)

        def update_progress(event: ProgressEvent) -> None:
            progress_bar.update(task, completed=event.progress, description=event.message)

        channel.subscribe(update_progress)
        return asyncio.run(DNAFileParser(config, channel).parse_file(file_path))


def _print_messages(label: str, style: str, messages: list[str], limit: int) -> None:
    if not messages:
        return
    console.print(f"[{style}]{label}: {len(messages):,}[/{style}]")
    for message in messages[:limit]:
        console.print(f"  {message}")
    if len(messages) > limit:
        console.print(f"  ... and {len(messages) - limit} more")


def _print_parse_summary(result: ParseResult, max_messages: int) -> None:
    info = result.file_info
    if result.success:
        console.print(f"[green]✓[/green] Parsed {len(result.variants):,} variants")
    else:
        console.print(f"[red]✗[/red] Failed to parse {info.file_name}")
    console.print(f"  Source: {info.source.value}")
    console.print(f"  Format: {result.metadata.format} (header: {result.metadata.has_header})")
    console.print(f"  Lines: {result.metadata.total_lines:,}")
    console.print(f"  Time: {result.processing_time:.2f}s")
    _print_messages("Errors", "red", result.errors, max_messages)
    _print_messages("Warnings", "yellow", result.warnings, max_messages)


@app.command()
def parse(
    file_path: Path = typer.Argument(..., help="Raw DNA data file (.txt, .csv)"),
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    export: Annotated[
        Path | None, typer.Option("--export", "-e", help="Write parsed variants to CSV")
    ] = None,
    report: Annotated[
        Path | None, typer.Option("--report", "-r", help="Write JSON report to file")
    ] = None,
    log_file: Annotated[Path | None, typer.Option("--log", help="Write log to file")] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress bar"),
    max_messages: int = typer.Option(
        10, "--max-messages", help="Maximum errors/warnings to print"
    ),
) -> None:
    """Parse a 23andMe or AncestryDNA raw data file."""
    config = _resolve_config(config_file)
    setup_logging(verbose, quiet, config.log_level)
    _check_input(file_path)

    if log_file:
        _add_log_file(log_file)

    result = _run_parse(file_path, config, progress and not quiet)

    if not quiet or not result.success:
        _print_parse_summary(result, max_messages)

    if result.success and not quiet:
        statistics = analyze_variants(result.variants)
        console.print("\n[bold]Variants per chromosome[/bold]")
        for chrom, count in statistics.sorted_chromosome_distribution():
            console.print(f"  {chrom:>3}  {count:,}")

    if export and result.success:
        written = write_variants_csv(export, result.variants)
        if not quiet:
            console.print(f"  Exported {written:,} variants to {export}")

    if report:
        report_data = result.to_dict()
        report_data["input_file"] = str(file_path)
        report_data["timestamp"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        with open(report, "w") as f:
            json.dump(report_data, f, indent=2)
            f.write("\n")
        if not quiet:
            console.print(f"  Report: {report}")

    if not result.success:
        raise typer.Exit(1)


@app.command()
def traits(
    file_path: Path = typer.Argument(..., help="Raw DNA data file (.txt, .csv)"),
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    examples: bool = typer.Option(
        False, "--examples", help="Show illustrative examples when few traits match"
    ),
    normalize_alleles: bool = typer.Option(
        False, "--normalize-alleles", help="Match genotypes regardless of allele order"
    ),
    knowledge_base: Annotated[
        Path | None, typer.Option("--knowledge-base", "-k", help="Custom knowledge-base JSON")
    ] = None,
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Match a DNA file against the genetic trait knowledge base."""
    setup_logging(verbose, quiet=json_output)
    _check_input(file_path)

    config = _resolve_config(config_file)
    kb_path = knowledge_base or config.knowledge_base_path

    try:
        kb = load_knowledge_base(kb_path) if kb_path else None
    except KnowledgeBaseError as e:
        console.print(f"[red]Knowledge base error: {e}[/red]")
        raise typer.Exit(1) from None

    result = _run_parse(file_path, config, show_progress=False)
    if not result.success:
        _print_parse_summary(result, max_messages=10)
        raise typer.Exit(1)

    match = match_traits(
        result.variants,
        knowledge_base=kb,
        include_examples=examples or config.illustrative_examples,
        normalize_alleles=normalize_alleles or config.normalize_alleles,
    )
    recommendations = aggregate_recommendations(match.matched)

    if json_output:
        output = match.to_dict()
        output["summary"] = summarize_risk(match.matched)
        output["recommendations"] = [r.to_dict() for r in recommendations]
        print(json.dumps(output, indent=2))
        return

    console.print(
        f"\n[bold]Genetic traits[/bold] ({len(match.matched)} matched "
        f"from {len(result.variants):,} variants)"
    )
    if not match.matched:
        console.print("  No known trait SNPs found in this file")
    for trait in match.matched:
        style = RISK_STYLES[trait.risk_level]
        console.print(
            f"  [{style}]{trait.risk_level.value:<10}[/{style}] "
            f"{trait.gene:<8} {trait.rsid:<11} {trait.genotype:<3} {trait.name}"
        )

    if match.illustrative_examples:
        console.print("\n[bold]Illustrative examples[/bold] (not from your data)")
        for trait in match.illustrative_examples:
            console.print(
                f"  [dim]{trait.gene:<8} {trait.rsid:<11} {trait.genotype:<3} {trait.name}[/dim]"
            )

    if recommendations:
        console.print("\n[bold]Recommendations[/bold]")
        for rec in recommendations:
            console.print(
                f"  {rec.priority.value.upper():<6} {rec.service} - {rec.frequency} "
                f"(~${rec.estimated_cost:,.0f})"
            )


@app.command()
def stats(
    file_path: Path = typer.Argument(..., help="Raw DNA data file (.txt, .csv)"),
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Show chromosome and genotype distributions for a DNA file."""
    setup_logging(verbose=False, quiet=True)
    _check_input(file_path)

    config = _resolve_config(config_file)
    result = _run_parse(file_path, config, show_progress=False)
    if not result.success:
        _print_parse_summary(result, max_messages=10)
        raise typer.Exit(1)

    statistics = analyze_variants(result.variants)

    if json_output:
        print(json.dumps(statistics.to_dict(), indent=2))
        return

    quality = statistics.quality_metrics
    console.print(f"[bold]{file_path.name}[/bold]")
    console.print(f"  Total variants: {statistics.total_variants:,}")
    console.print(f"  Average confidence: {quality.average_confidence:.3f}")
    console.print(f"  Scored / unscored: {quality.valid_variants:,} / {quality.invalid_variants:,}")

    console.print("\n[bold]Chromosomes[/bold]")
    for chrom, count in statistics.sorted_chromosome_distribution():
        console.print(f"  {chrom:>3}  {count:,}")

    console.print("\n[bold]Genotypes[/bold]")
    for genotype, count in statistics.to_dict()["genotype_distribution"].items():
        console.print(f"  {genotype:>3}  {count:,}")


@app.command()
def benchmark(
    file_path: Annotated[
        Path | None, typer.Option("--file", "-f", help="Path to a raw DNA file")
    ] = None,
    synthetic: Annotated[
        int | None,
        typer.Option("--synthetic", "-s", help="Generate a synthetic file with N variants"),
    ] = None,
    vendor: str = typer.Option(
        "23andme", "--format", help="Synthetic file layout: 23andme or ancestry"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output"),
) -> None:
    """Run parsing throughput benchmarks.

    Examples:

        # Generate and benchmark 100K synthetic variants
        dna-trait-loader benchmark --synthetic 100000

        # Benchmark an AncestryDNA-style synthetic file
        dna-trait-loader benchmark --synthetic 100000 --format ancestry

        # Benchmark a specific raw data file
        dna-trait-loader benchmark --file genome.txt
    """
    from .benchmark import run_benchmark

    if file_path is None and synthetic is None:
        synthetic = 100_000

    if file_path and not file_path.exists():
        console.print(f"[red]Error: DNA file not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        result = run_benchmark(
            file_path=file_path,
            synthetic_count=synthetic if file_path is None else None,
            vendor=vendor,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if json_output:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if not quiet:
        source = "synthetic" if result.synthetic else Path(result.file_path).name
        console.print(f"\n[bold]Benchmark Results[/bold] ({source})")
        console.print(f"  Variants: {result.variant_count:,}")
        console.print(f"  Source: {result.source}")
        console.print(f"  Errors / warnings: {result.error_count} / {result.warning_count}")
        console.print()

    console.print(
        f"[cyan]Parsing:[/cyan] {result.variant_count:,} variants in "
        f"{result.parsing_time:.2f}s ([green]{result.parsing_rate:,.0f}/sec[/green])"
    )


if __name__ == "__main__":
    app()
