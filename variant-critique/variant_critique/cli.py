"""
Command-Line Interface

CLI using rich for colored output, progress indicators and formatted
results. Collects variants from every source given, then runs the
analysis once.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import requests
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config
from .errors import InsufficientVariants, VariantCritiqueError
from .models import AnalysisResult
from .providers import get_provider
from .session import VariantSession


console = Console()
err_console = Console(stderr=True)


@click.command()
@click.option(
    '--github', 'github_urls',
    multiple=True,
    help='GitHub repo, tree or pull request URL. Repeatable.'
)
@click.option(
    '--path', 'variant_path',
    default=None,
    help='Sub-path holding the variant folders (overrides the path in the URL)'
)
@click.option(
    '--image', 'images',
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help='Screenshot (png/jpeg) to add as a variant. Repeatable.'
)
@click.option(
    '--folder', 'folders',
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help='Local folder whose sub-folders are variants. Repeatable.'
)
@click.option(
    '--provider',
    default=None,
    type=click.Choice(['anthropic', 'openai', 'local'], case_sensitive=False),
    help='Analysis provider to use. Defaults to ANALYSIS_PROVIDER from .env'
)
@click.option(
    '--output',
    default='rich',
    type=click.Choice(['rich', 'json'], case_sensitive=False),
    help='Output format: rich (colored terminal) or json'
)
@click.option(
    '--env-file',
    default=None,
    type=click.Path(exists=True),
    help='Path to .env file (defaults to ./.env)'
)
@click.option(
    '--dry-run',
    is_flag=True,
    help='Collect variants and show them without calling the model'
)
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.version_option(version=__version__)
def main(
    github_urls: tuple[str, ...],
    variant_path: Optional[str],
    images: tuple[str, ...],
    folders: tuple[str, ...],
    provider: Optional[str],
    output: str,
    env_file: Optional[str],
    dry_run: bool,
    verbose: bool
):
    """
    Variant Critique - A/B UI Variant Analysis Tool

    Compare UI variants with an LLM and get scores, a winner and
    actionable improvements.

    Examples:

      # Two screenshots
      variant-critique --image a.png --image b.png

      # Every folder under src/variants on the dev branch
      variant-critique --github https://github.com/acme/site/tree/dev/src/variants

      # Base vs head of a pull request, JSON output
      variant-critique --github https://github.com/acme/site/pull/42 --output json
    """
    _setup_logging(verbose)
    status = err_console if output == 'json' else console

    try:
        config = load_config(Path(env_file) if env_file else None)
        session = VariantSession(config)

        failures = _collect_variants(session, github_urls, variant_path, images, folders, status)

        if output == 'rich':
            _print_variants(session)

        if dry_run:
            _print_dry_run(session, output, provider or config.analysis_provider)
            sys.exit(1 if failures and not len(session) else 0)

        if len(session) < 2:
            raise InsufficientVariants(len(session))

        provider_name = provider or config.analysis_provider
        result = asyncio.run(_run_analysis(session, provider_name, config, status))

        if output == 'json':
            _output_json(result)
        else:
            _output_rich(result, session, provider_name)

    except KeyboardInterrupt:
        status.print("\n[yellow]⚠️  Interrupted by user[/yellow]")
        sys.exit(130)
    except VariantCritiqueError as e:
        status.print(f"[red]❌ {str(e)}[/red]")
        sys.exit(1)
    except Exception as e:
        status.print(f"[red]❌ Error: {str(e)}[/red]")
        if verbose:
            status.print_exception()
        sys.exit(1)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _collect_variants(
    session: VariantSession,
    github_urls: tuple[str, ...],
    variant_path: Optional[str],
    images: tuple[str, ...],
    folders: tuple[str, ...],
    status: Console
) -> int:
    """
    Add variants from every source; each source fails on its own.

    Returns:
        Number of sources that failed
    """
    failures = 0

    for image in images:
        try:
            session.add_image(Path(image))
        except (OSError, ValueError) as e:
            failures += 1
            status.print(f"[red]❌ {image}: {str(e)}[/red]")

    for folder in folders:
        try:
            added = session.add_folder(Path(folder))
        except OSError as e:
            failures += 1
            status.print(f"[red]❌ {folder}: {str(e)}[/red]")
            continue
        if not added:
            failures += 1
            status.print(f"[yellow]⚠️  {folder}: no UI files found[/yellow]")

    for url in github_urls:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=status,
            transient=True
        ) as progress:
            progress.add_task(f"[cyan]Fetching {url}...", total=None)
            try:
                asyncio.run(session.add_github(url, variant_path))
            except (VariantCritiqueError, requests.RequestException) as e:
                failures += 1
                status.print(f"[red]❌ {str(e)}[/red]")

    return failures


async def _run_analysis(
    session: VariantSession, provider_name: str, config, status: Console
) -> AnalysisResult:
    """Run the analysis with a progress indicator"""

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=status,
        transient=True
    ) as progress:

        task = progress.add_task("[cyan]Initializing analysis provider...", total=None)
        analysis_provider = get_provider(provider_name, config)

        if not analysis_provider.is_available():
            raise VariantCritiqueError(f"Provider '{provider_name}' is not available")

        progress.update(
            task,
            description=f"[cyan]Analyzing {len(session)} variants with {provider_name}..."
        )
        result = await session.analyze(analysis_provider)

        progress.update(task, description="[green]✓ Analysis complete", completed=True)

    return result


def _print_variants(session: VariantSession):
    if not len(session):
        return

    table = Table(title="Variants", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Origin")
    table.add_column("Source")
    table.add_column("Files", justify="right")

    for variant in session.variants:
        if variant.kind == "image":
            source = variant.image.filename
        elif variant.metadata is not None:
            meta = variant.metadata
            source = f"{meta.owner}/{meta.repo}@{meta.branch} ({variant.folder_name})"
        else:
            source = variant.folder_name or ""
        table.add_row(
            variant.name,
            variant.kind,
            variant.origin,
            source,
            str(variant.file_count) if variant.kind == "code" else "-"
        )

    console.print(table)


def _print_dry_run(session: VariantSession, output: str, provider_name: str):
    if len(session) < 2:
        (err_console if output == 'json' else console).print(
            f"[yellow]⚠️  {len(session)} variant(s) collected; at least 2 are needed[/yellow]"
        )
        return

    request = session.build_request(provider_name)
    if output == 'json':
        print(json.dumps(request, indent=2))
        return

    text_chars = sum(
        len(block.get("text", ""))
        for block in request["messages"][0]["content"]
    )
    console.print(f"[dim]Request: {len(request['messages'][0]['content'])} content blocks, "
                  f"{text_chars:,} characters of text[/dim]")


def _get_score_color(score: Optional[float]) -> str:
    if score is None:
        return "dim"
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    else:
        return "red"


def _get_impact_color(level: Optional[str]) -> str:
    return {"high": "red", "medium": "yellow", "low": "green"}.get((level or "").lower(), "yellow")


def _output_rich(result: AnalysisResult, session: VariantSession, provider_name: str):
    """Output result in rich formatted terminal output"""

    console.print()
    console.print(Panel.fit(
        f"[bold]A/B Variant Analysis[/bold]\n"
        f"Provider: {provider_name} · Variants: {len(session)}",
        border_style="cyan"
    ))

    # Scores
    console.print("\n[bold]📊 Scores[/bold]")
    scores_table = Table(show_header=True, header_style="bold magenta")
    scores_table.add_column("Variant", style="cyan")
    scores_table.add_column("Score", justify="right")
    scores_table.add_column("Conversion", justify="center")
    scores_table.add_column("Audience")

    winner_id = result.winner.id if result.winner else None
    for assessment in result.variants:
        name = assessment.name or f"#{assessment.id}"
        if winner_id is not None and str(assessment.id) == str(winner_id):
            name = f"🏆 {name}"
        score = assessment.score
        scores_table.add_row(
            name,
            f"[{_get_score_color(score)}]{score:g}/100[/]" if score is not None else "-",
            assessment.conversion_potential or "-",
            assessment.target_audience or ""
        )
    console.print(scores_table)

    for assessment in result.variants:
        console.print(f"\n[bold cyan]{assessment.name or assessment.id}[/bold cyan]")
        for strength in assessment.strengths:
            console.print(f"  [green]+[/green] {strength}")
        for weakness in assessment.weaknesses:
            console.print(f"  [red]-[/red] {weakness}")
        if assessment.code_quality:
            console.print(f"  [dim]Code quality: {assessment.code_quality}[/dim]")

    if result.winner:
        console.print(Panel(
            result.winner.reason or "",
            title=f"🏆 Winner: {_winner_name(result)}",
            border_style="green"
        ))

    if result.comparison:
        console.print("\n[bold]⚖️  Comparison[/bold]")
        for dimension, text in result.comparison.items():
            console.print(f"  [cyan]{dimension}[/cyan]: {text}")

    if result.improvements:
        console.print(f"\n[bold]💡 Improvements ({len(result.improvements)})[/bold]")
        for improvement in result.improvements:
            console.print(
                f"  [{_get_impact_color(improvement.impact)}]impact {improvement.impact or '?'}[/] · "
                f"effort {improvement.effort or '?'} · variant {improvement.variant}: "
                f"{improvement.suggestion or ''}"
            )

    if result.gaps:
        console.print(f"\n[bold]🔍 Gaps ({len(result.gaps)})[/bold]")
        for gap in result.gaps:
            affected = ", ".join(str(v) for v in gap.affected_variants)
            console.print(f"  ⚠️  {gap.issue} [dim](variants {affected})[/dim]")
            if gap.recommendation:
                console.print(f"     💡 {gap.recommendation}")

    if result.testing_recommendations:
        console.print("\n[bold]🧪 Testing Recommendations[/bold]")
        for i, recommendation in enumerate(result.testing_recommendations, 1):
            console.print(f"  {i}. {recommendation}")

    console.print()


def _winner_name(result: AnalysisResult) -> str:
    assessment = result.winning_assessment
    if assessment is not None and assessment.name:
        return assessment.name
    return str(result.winner.id)


def _output_json(result: AnalysisResult):
    """Output result as JSON"""
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
