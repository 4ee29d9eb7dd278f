"""
Recipe Intake - CLI Entry Point.

Usage:
    recipe-intake extract recipe.txt         Extract a recipe from a text file
    recipe-intake extract page1.jpg page2.jpg --photo
    recipe-intake scale "1 1/2" 2 --unit cup
    recipe-intake health                     Check configuration
    recipe-intake --help                     Show help
"""

import asyncio
import base64
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

app = typer.Typer(
    name="recipe-intake",
    help="Recipe Intake - turn recipe photos and text into structured recipes.",
    add_completion=False,
)
console = Console()


def _read_photos(paths: list[Path]) -> str:
    from recipe_intake.recipe_import.normalizer import IMAGE_SEPARATOR

    images = []
    for path in paths:
        mime = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        images.append(f"data:{mime};base64,{encoded}")
    return IMAGE_SEPARATOR.join(images)


@app.command()
def extract(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Text file or photos"),
    photo: bool = typer.Option(False, "--photo", "-p", help="Treat the files as photos of recipe pages"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all model prompts to prompt_logs/"),
) -> None:
    """Run the extraction pipeline locally and print the recipe."""
    from recipe_intake.exceptions import RecipeIntakeError
    from recipe_intake.jobs.service import JobService
    from recipe_intake.jobs.store import InMemoryJobStore
    from recipe_intake.llm.client import OpenAIModelClient
    from recipe_intake.llm.prompt_logger import enable_prompt_logging, get_session_log_dir
    from recipe_intake.observability import configure_logging
    from recipe_intake.recipe_import.extractor import ExtractionOrchestrator
    from recipe_intake.storage.base import InMemoryObjectStorage, InMemoryRecipeRepository

    configure_logging("WARNING")
    if log_prompts:
        enable_prompt_logging(True)

    if photo:
        kind, content = "photo", _read_photos(files)
    else:
        kind, content = "text", "\n\n".join(f.read_text(encoding="utf-8") for f in files)

    store = InMemoryJobStore()
    service = JobService(
        store=store,
        orchestrator=ExtractionOrchestrator(
            models=OpenAIModelClient(),
            object_storage=InMemoryObjectStorage(),
            recipes=InMemoryRecipeRepository(),
            job_store=store,
        ),
    )

    try:
        job_id = service.create_job("cli", kind, content)
        with Live(Spinner("dots", text="Extracting..."), console=console, transient=True):
            outcome = asyncio.run(service.run_job(job_id))
    except RecipeIntakeError as e:
        console.print(f"\n[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if outcome.candidate is None:
        console.print(f"\n[red]❌ {outcome.job.error_message}[/red]")
        raise typer.Exit(1)

    recipe = outcome.candidate
    console.print(
        Panel.fit(
            f"[bold green]{recipe.name}[/bold green]\n"
            f"{recipe.category.value} · serves {recipe.servings}"
            f" · prep {recipe.prep_time_minutes or '?'} min · cook {recipe.cook_time_minutes or '?'} min",
            title="Recipe",
            border_style="green",
        )
    )
    for group in recipe.groups:
        table = Table(title=group.name, show_header=True)
        table.add_column("Amount", justify="right")
        table.add_column("Unit")
        table.add_column("Ingredient")
        for ing in group.ingredients:
            table.add_row(ing.amount, ing.unit, ing.name)
        console.print(table)
        for i, step in enumerate(group.instructions, 1):
            console.print(f"  {i}. {step}")

    if outcome.degraded:
        console.print(f"\n[yellow]⚠️  Skipped: {', '.join(outcome.degraded)}[/yellow]")

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"\n[dim]📝 Prompts logged to: {log_dir}[/dim]")


@app.command()
def scale(
    amount: str = typer.Argument(..., help='Amount, e.g. "1 1/2"'),
    factor: float = typer.Argument(..., help="Serving multiplier"),
    unit: str = typer.Option("", "--unit", "-u", help="Ingredient unit"),
    exact: bool = typer.Option(False, "--exact", help="Disable unit-aware rounding"),
) -> None:
    """Scale a single amount."""
    from recipe_intake.tools.units import scale_amount

    if factor <= 0:
        console.print("[red]Factor must be positive[/red]")
        raise typer.Exit(1)

    console.print(f"{scale_amount(amount, factor, unit, unit_aware=not exact)} {unit}".rstrip())


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from recipe_intake.config import get_settings

    console.print("\n[bold]Recipe Intake Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.intake_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Models: {settings.extraction_model} / {settings.image_model}")

        if settings.openai_api_key.startswith("sk-"):
            console.print("✅ OpenAI API key configured")
        else:
            console.print("⚠️  OpenAI API key may be invalid")

        if settings.supabase_configured:
            console.print("✅ Supabase configured")
        else:
            console.print("ℹ️  Supabase not configured, using in-memory stores")

        console.print(
            f"   Quota: {settings.rate_limit_max_jobs} jobs / "
            f"{int(settings.rate_limit_window_seconds)}s per user"
        )
        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from recipe_intake import __version__

    console.print(f"Recipe Intake version {__version__}")


if __name__ == "__main__":
    app()
