"""Command-line interface for the proof-of-place scoring engine using Typer and Rich."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from proof_of_place.config.logging import get_logger
from proof_of_place.config.scoring_tables import load_scoring_tables
from proof_of_place.config.settings import settings
from proof_of_place.data_management.schemas import Classification
from proof_of_place.errors import RequestValidationError, handle_error
from proof_of_place.intake import build_request
from proof_of_place.scoring import ScoringEngine

app = typer.Typer(
    help="Proof-of-Place CLI - score location claims of social posts",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

_CLASSIFICATION_STYLES = {
    Classification.PASS: "bold green",
    Classification.LOW_CONFIDENCE: "bold yellow",
    Classification.FLAGGED: "bold red",
}


def _build_engine() -> ScoringEngine:
    return ScoringEngine(tables=load_scoring_tables(settings.scoring_tables_path))


@app.command()
def score(
    text: str = typer.Option(..., "--text", "-t", help="Post text"),
    poi: Optional[str] = typer.Option(None, "--poi", help="Claimed venue name"),
    city: Optional[str] = typer.Option(None, "--city", help="City of the claimed venue"),
    lat: Optional[float] = typer.Option(None, "--lat", help="Claimed latitude"),
    lng: Optional[float] = typer.Option(None, "--lng", help="Claimed longitude"),
    timestamp: Optional[str] = typer.Option(None, "--timestamp", help="ISO-8601 post time (default: now)"),
    image: Optional[Path] = typer.Option(None, "--image", exists=True, dir_okay=False, help="Image file"),
    submitter: Optional[str] = typer.Option(None, "--submitter", help="Submitter ID for burst detection"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """
    Score a single post against its claimed location.

    Provide either --poi and --city, or --lat and --lng.
    """
    location_type = "poi" if poi is not None or city is not None else "coordinates"
    image_bytes = image.read_bytes() if image is not None else None

    try:
        request = build_request(
            text=text,
            location_type=location_type,
            lat=lat,
            lng=lng,
            poi_name=poi,
            city=city,
            timestamp=timestamp,
            image=image_bytes,
            submitter_id=submitter,
        )
    except RequestValidationError as e:
        payload, status_code = handle_error(e)
        logger.warning(f"Rejected request: {e.code.value}")
        console.print(f"[bold red]Error ({payload['code']}, {status_code}):[/bold red] {payload['error']}")
        raise typer.Exit(code=1)

    response = asyncio.run(_build_engine().validate(request))

    if as_json:
        console.print_json(response.to_json())
        return

    style = _CLASSIFICATION_STYLES[response.classification]
    console.print(
        f"\n[bold]Score:[/bold] {response.score * 100:.1f}%   "
        f"[{style}]{response.classification.value}[/{style}]\n"
    )

    table = Table(title="Signals", show_header=True, header_style="bold magenta")
    table.add_column("Signal", style="cyan", width=20)
    table.add_column("Value", style="green", width=10)
    table.add_column("Weight", style="yellow")
    table.add_row("Text-place match", f"{response.signals.text_place_match:.4f}", "40%")
    table.add_row("Image evidence", f"{response.signals.image_landmark:.4f}", "30%")
    table.add_row("Time plausibility", f"{response.signals.time_plausibility:.4f}", "20%")
    table.add_row("Spam risk", f"{response.signals.spam_risk:.4f}", "penalty up to 10%")
    console.print(table)

    console.print(Panel(response.explanation, title="Explanation", border_style="blue"))


@app.command()
def status() -> None:
    """
    Display configuration and lookup-table status.
    """
    logger.info("Displaying system status")

    table = Table(title="Proof-of-Place Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)

    try:
        tables = load_scoring_tables(settings.scoring_tables_path)
        source = settings.scoring_tables_path or "built-in"
        table.add_row(
            "Lookup tables",
            "✓ Loaded",
            f"v{tables.version} from {source} "
            f"({len(tables.venue_nicknames)} nicknamed venues, {len(tables.city_tokens)} city tokens)",
        )
    except Exception as e:
        logger.error(f"Failed to load lookup tables: {e}")
        table.add_row("Lookup tables", "✗ Error", str(e))

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    limits = f"Text: {settings.max_text_length:,} chars, Image: {settings.max_image_bytes:,} bytes"
    table.add_row("Intake limits", "✓ Active", limits)

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
