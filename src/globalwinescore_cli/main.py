"""CLI entry point for the globalwinescore tool.

This module is the composition root of the application.  It is the only
place that imports concrete implementations (GlobalWineScoreClient,
TokenAuth, ConfigStore).  All other layers depend solely on abstractions.
"""

import csv
import io
import json
import logging
import os
import sys
from collections.abc import Callable
from enum import Enum

# Ensure UTF-8 output on Windows where stdout may default to cp1252.
# reconfigure() is a no-op when encoding is already utf-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from globalwinescore import __version__
from globalwinescore.auth.credentials import ConfigStore
from globalwinescore.core.exceptions import (
    AuthenticationRequiredError,
    GlobalWineScoreError,
)
from globalwinescore.core.models import ScoreFilter, ScorePage, WineColor
from globalwinescore.providers.globalwinescore.auth import (
    CONFIG_KEY_API_TOKEN,
    TokenAuth,
)
from globalwinescore.providers.globalwinescore.client import GlobalWineScoreClient
from globalwinescore.services.score_service import ScoreService

app = typer.Typer(
    help="GlobalWineScore CLI - wine ratings and scores from your terminal.",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage CLI configuration.")

app.add_typer(config_app, name="config")

console = Console(legacy_windows=False)
err_console = Console(stderr=True, legacy_windows=False)

_USER_AGENT = f"globalwinescore-cli/{__version__}"
_BASE_URL = os.getenv("GLOBALWINESCORE_BASE_URL")
_TOKEN_URL = "https://www.globalwinescore.com/"


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Supported output formats for score commands."""

    table = "table"
    json = "json"
    csv = "csv"


_OUTPUT_OPTION = typer.Option(
    OutputFormat.table, "--output", "-o", help="Output format."
)

_COLUMN_LABELS: dict[str, str] = {
    "wine_name": "Wine",
    "vintage": "Vintage",
    "score": "Score",
    "confidence": "Confidence",
    "appellation": "Appellation",
    "color": "Color",
}

_ALL_COLUMNS = tuple(_COLUMN_LABELS)
_NO_COLOR_COLUMNS = (
    "wine_name", "vintage", "score", "confidence", "appellation",
)

_CSV_FIELDS = [
    "wine_id", "wine_name", "vintage", "score", "confidence_index",
    "appellation", "color", "lwin", "lwin_11", "is_primeurs",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_store() -> ConfigStore:
    """Return the user's configuration store."""
    return ConfigStore()


def _get_service() -> ScoreService:
    """Build and return a ScoreService backed by the GlobalWineScore API.

    Returns:
        A :class:`~globalwinescore.services.score_service.ScoreService`.
    """
    auth = TokenAuth(store=_get_store())
    provider = GlobalWineScoreClient(
        auth, base_url=_BASE_URL, user_agent=_USER_AGENT
    )
    return ScoreService(provider)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_filter(**values) -> ScoreFilter:
    """Build a :class:`ScoreFilter`, exiting with an error if it is invalid."""
    try:
        return ScoreFilter(**values)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)


def _fetch(message: str, call: Callable[[], ScorePage]) -> ScorePage:
    """Run a score query behind a spinner and report failures.

    Args:
        message: Text shown next to the spinner.
        call: Zero-argument callable performing the query.

    Returns:
        The :class:`ScorePage` returned by ``call``.

    Raises:
        typer.Exit: With code 1 when the query raises a
            :class:`GlobalWineScoreError`.
    """
    try:
        with console.status(f"[dim]{message}[/dim]", spinner="dots"):
            return call()
    except GlobalWineScoreError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        if isinstance(e, AuthenticationRequiredError):
            console.print(
                "Run [bold]globalwinescore config set --api-token "
                "YOUR_TOKEN[/bold] to configure a token.\n"
                f"[dim]Get your API token at: {_TOKEN_URL}[/dim]"
            )
        raise typer.Exit(1)


def _display_row(wine: dict) -> dict[str, str]:
    """Return a result's table cells with placeholders for missing fields.

    Args:
        wine: One result object from a :class:`ScorePage`.

    Returns:
        A mapping from column key to display string.
    """
    return {
        "wine_name": str(wine.get("wine_name") or wine.get("wine") or "N/A"),
        "vintage": str(wine.get("vintage") or "NV"),
        "score": str(wine.get("score") or "N/A"),
        "confidence": str(wine.get("confidence_index") or "N/A"),
        "appellation": str(wine.get("appellation") or "N/A"),
        "color": str(wine.get("color") or "N/A"),
    }


def _to_csv(rows: list[dict], fieldnames: list[str]) -> str:
    """Serialise a list of dicts to a CSV string.

    Args:
        rows: List of dictionaries to serialise.
        fieldnames: Ordered column names.  Extra keys in ``rows`` are ignored.

    Returns:
        A CSV-formatted string including a header row.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(
        buf, fieldnames=fieldnames, extrasaction="ignore"
    )
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()


def _render(
    page: ScorePage,
    output: OutputFormat,
    title: str,
    columns: tuple[str, ...] = _ALL_COLUMNS,
    empty_message: str = "No results found.",
    hint: str | None = None,
) -> None:
    """Print a page as JSON, CSV, or a table.

    Args:
        page: The page to print.
        output: The requested output format.
        title: Table title (table output only).
        columns: Column keys to show, in order (table output only).
        empty_message: Shown instead of an empty table.
        hint: Extra dim line shown when more results are available.
    """
    if output == OutputFormat.json:
        print(json.dumps(page.to_dict(), indent=2))
        return
    if output == OutputFormat.csv:
        print(_to_csv(page.results, _CSV_FIELDS), end="")
        return

    if not page.results:
        console.print(f"[yellow]{escape(empty_message)}[/yellow]")
        return

    table = Table(title=title, show_lines=False)
    for key in columns:
        if key == "score":
            table.add_column(_COLUMN_LABELS[key], justify="right", style="green")
        elif key == "wine_name":
            table.add_column(_COLUMN_LABELS[key], style="cyan")
        else:
            table.add_column(_COLUMN_LABELS[key])

    for wine in page.results:
        cells = _display_row(wine)
        table.add_row(*(escape(cells[key]) for key in columns))

    console.print(table)
    if page.has_more:
        console.print(
            f"[dim]Showing {len(page.results)} of {page.count} total results[/]"
        )
        if hint:
            console.print(f"[dim]{hint}[/]")
    else:
        console.print(f"[dim]{len(page.results)} result(s)[/]")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"globalwinescore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log HTTP requests to stderr."
    ),
):
    """GlobalWineScore CLI - wine ratings and scores from your terminal."""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# config commands
# ---------------------------------------------------------------------------


@config_app.command(name="set")
def config_set(
    api_token: str | None = typer.Option(
        None, "--api-token", help="GlobalWineScore API token."
    ),
):
    """Set configuration values."""
    if not api_token:
        console.print("[red]Error:[/red] No options provided. Use --api-token")
        raise typer.Exit(1)
    store = _get_store()
    store.set(CONFIG_KEY_API_TOKEN, api_token)
    console.print(f"[green]✓ API token saved to:[/green] {store.path}")


@config_app.command(name="show")
def config_show():
    """Show the current configuration."""
    auth = TokenAuth(store=_get_store())
    token = auth.token()
    console.print("\n[bold]GlobalWineScore CLI Configuration[/bold]\n")
    if token is None:
        console.print("API token : [red]not set[/red]")
        return
    masked = f"{token[:8]}...{token[-4:]}" if len(token) > 12 else "****"
    console.print(f"API token : [green]{escape(masked)}[/green]")
    console.print(f"Source    : {auth.token_source()}")


@config_app.command(name="clear")
def config_clear():
    """Remove the locally saved configuration."""
    if _get_store().clear():
        console.print("[green]✓ Configuration removed.[/green]")
    else:
        console.print("[yellow]No saved configuration found.[/yellow]")


# ---------------------------------------------------------------------------
# score commands
# ---------------------------------------------------------------------------


@app.command()
def latest(
    wine_id: str | None = typer.Option(
        None, "--wine-id", help="Filter by wine ID."
    ),
    vintage: str | None = typer.Option(
        None, "--vintage", help="Filter by vintage year (or NV)."
    ),
    color: WineColor | None = typer.Option(
        None, "--color", case_sensitive=False, help="Filter by color."
    ),
    lwin: str | None = typer.Option(
        None, "--lwin", help="Filter by L-WIN identifier."
    ),
    lwin_11: str | None = typer.Option(
        None, "--lwin-11", help="Filter by L-WIN 11 identifier."
    ),
    primeurs: bool = typer.Option(
        False, "--primeurs", help="Show only en primeur scores."
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of results."),
    offset: int | None = typer.Option(
        None, "--offset", help="Skip this many results."
    ),
    ordering: str | None = typer.Option(
        None, "--ordering", help="Sort order (score, -score, date, -date)."
    ),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get the latest wine scores."""
    filters = _build_filter(
        wine_id=wine_id,
        vintage=vintage,
        color=color.value if color else None,
        is_primeurs=True if primeurs else None,
        lwin=lwin,
        lwin_11=lwin_11,
        limit=limit,
        offset=offset,
        ordering=ordering,
    )
    service = _get_service()
    page = _fetch(
        "Fetching latest wine scores…", lambda: service.latest(filters)
    )
    _render(
        page,
        output,
        "Latest GlobalWineScores",
        columns=_NO_COLOR_COLUMNS,
        hint="Use --limit, --offset or --output json for more results",
    )


@app.command()
def vintage(
    year: str = typer.Argument(..., help="Vintage year (or NV)."),
    color: WineColor | None = typer.Option(
        None, "--color", case_sensitive=False, help="Filter by color."
    ),
    limit: int = typer.Option(30, "--limit", "-n", help="Number of results."),
    offset: int | None = typer.Option(
        None, "--offset", help="Skip this many results."
    ),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get scores by vintage year."""
    filters = _build_filter(
        vintage=year,
        color=color.value if color else None,
        limit=limit,
        offset=offset,
    )
    service = _get_service()
    page = _fetch(
        f"Fetching {year} vintage scores…",
        lambda: service.by_vintage(year, filters),
    )
    _render(
        page,
        output,
        f"{year} Vintage Scores",
        columns=("wine_name", "score", "confidence", "appellation", "color"),
    )


@app.command()
def color(
    wine_color: WineColor = typer.Argument(
        ..., metavar="TYPE", case_sensitive=False, help="red, white or pink."
    ),
    vintage: str | None = typer.Option(
        None, "--vintage", help="Filter by vintage year (or NV)."
    ),
    limit: int = typer.Option(30, "--limit", "-n", help="Number of results."),
    offset: int | None = typer.Option(
        None, "--offset", help="Skip this many results."
    ),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get scores by wine color (red, white, pink)."""
    filters = _build_filter(vintage=vintage, limit=limit, offset=offset)
    service = _get_service()
    page = _fetch(
        f"Fetching {wine_color.value} wine scores…",
        lambda: service.by_color(wine_color.value, filters),
    )
    _render(
        page,
        output,
        f"{wine_color.value.capitalize()} Wine Scores",
        columns=_NO_COLOR_COLUMNS,
    )


@app.command()
def top(
    color: WineColor | None = typer.Option(
        None, "--color", case_sensitive=False, help="Filter by color."
    ),
    vintage: str | None = typer.Option(
        None, "--vintage", help="Filter by vintage year (or NV)."
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of results."),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get the top-rated wines."""
    filters = _build_filter(
        color=color.value if color else None, vintage=vintage, limit=limit
    )
    service = _get_service()
    page = _fetch(
        "Fetching top-rated wines…", lambda: service.top_rated(filters)
    )
    _render(page, output, "Top-Rated Wines")


@app.command()
def wine(
    wine_id: str = typer.Argument(..., metavar="ID", help="Wine ID."),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get scores for a specific wine by ID."""
    service = _get_service()
    page = _fetch(
        f"Fetching wine {wine_id}…", lambda: service.by_wine_id(wine_id)
    )
    _render(
        page,
        output,
        f"Wine ID: {wine_id}",
        empty_message="No wine found with this ID.",
    )


@app.command()
def lwin(
    identifier: str = typer.Argument(..., help="L-WIN identifier."),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get scores by L-WIN identifier."""
    service = _get_service()
    page = _fetch(
        f"Fetching L-WIN {identifier}…", lambda: service.by_lwin(identifier)
    )
    _render(
        page,
        output,
        f"L-WIN: {identifier}",
        empty_message="No wine found with this L-WIN.",
    )


@app.command()
def historical(
    wine_id: str | None = typer.Option(
        None, "--wine-id", help="Filter by wine ID."
    ),
    vintage: str | None = typer.Option(
        None, "--vintage", help="Filter by vintage year (or NV)."
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of results."),
    offset: int | None = typer.Option(
        None, "--offset", help="Skip this many results."
    ),
    output: OutputFormat = _OUTPUT_OPTION,
):
    """Get historical score data (requires a business plan)."""
    filters = _build_filter(
        wine_id=wine_id, vintage=vintage, limit=limit, offset=offset
    )
    service = _get_service()
    page = _fetch(
        "Fetching historical scores…", lambda: service.historical(filters)
    )
    _render(
        page,
        output,
        "Historical GlobalWineScores",
        columns=_NO_COLOR_COLUMNS,
    )
