"""pinsynth CLI - generate, anonymize and check non-personal PINs."""

from pathlib import Path
from typing import List, Optional
import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import Config, set_config
from .engine import codec
from .errors import DecodingError, PinsynthError
from .generator import Generator

logger = logging.getLogger("pinsynth")

app = typer.Typer(
    name="pinsynth",
    help="Generate and anonymize non-personal (fake) personal identification numbers",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
):
    """Configure logging and load configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )
    try:
        set_config(Config.load(config_path))
    except PinsynthError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _fail(e: PinsynthError):
    err_console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(1)


def _emit(pins: List[str]):
    for pin in pins:
        typer.echo(pin)


# =============================================================================
# GENERATE
# =============================================================================

@app.command()
def generate(
    count: int = typer.Option(10, "--count", "-n", help="Number of PINs"),
    l_birth: Optional[str] = typer.Option(None, "--from", help="Earliest birthdate (YYYY-MM-DD)"),
    u_birth: Optional[str] = typer.Option(None, "--to", help="Latest birthdate (YYYY-MM-DD)"),
    male_prob: Optional[float] = typer.Option(None, "--male-prob", "-m", help="Probability of a man"),
    unique: Optional[bool] = typer.Option(None, "--unique/--no-unique", help="Sample without replacement"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
):
    """Generate fake PINs with uniformly distributed birthdates."""
    try:
        batch = Generator(rng=seed).generate(
            count, l_birth=l_birth, u_birth=u_birth, male_prob=male_prob, unique=unique,
        )
    except PinsynthError as e:
        _fail(e)
    _emit(batch.pins)


# =============================================================================
# ANONYMIZE
# =============================================================================

@app.command()
def anonymize(
    path: str = typer.Argument(..., help="File with one PIN per line ('-' for stdin)"),
    l_birth: Optional[str] = typer.Option(None, "--from", help="Earliest birthdate (YYYY-MM-DD)"),
    u_birth: Optional[str] = typer.Option(None, "--to", help="Latest birthdate (YYYY-MM-DD)"),
    male_prob: Optional[float] = typer.Option(None, "--male-prob", "-m", help="Probability of a man"),
    unique: Optional[bool] = typer.Option(None, "--unique/--no-unique", help="Distinct output values"),
    keep_rel: Optional[bool] = typer.Option(None, "--keep-rel/--no-keep-rel", help="Keep repeated PINs repeated"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
):
    """Replace PINs by fake ones with the same age and sex distribution."""
    if path == "-":
        lines = sys.stdin.read().splitlines()
    else:
        file = Path(path)
        if not file.exists():
            err_console.print(f"[red]File not found:[/red] {path}")
            raise typer.Exit(1)
        lines = file.read_text().splitlines()

    source = [line.strip() for line in lines if line.strip()]
    logger.debug(f"Read {len(source)} PINs from {path}")

    try:
        batch = Generator(rng=seed).anonymize(
            source, l_birth=l_birth, u_birth=u_birth, male_prob=male_prob,
            unique=unique, keep_rel=keep_rel,
        )
    except PinsynthError as e:
        _fail(e)
    _emit(batch.pins)


# =============================================================================
# CHECK
# =============================================================================

@app.command()
def check(
    pins: List[str] = typer.Argument(..., help="PINs to check"),
):
    """Decode PINs and report whether they are valid and non-personal."""
    table = Table(title="PIN check")
    table.add_column("PIN", style="cyan")
    table.add_column("Birthdate")
    table.add_column("Birth no.")
    table.add_column("Sex")
    table.add_column("Valid")
    table.add_column("Non-personal")

    all_valid = True
    for pin in pins:
        try:
            fields = codec.decode(pin)
        except DecodingError as e:
            all_valid = False
            logger.debug(f"{pin}: {e}")
            table.add_row(pin, "-", "-", "-", "[red]no[/red]", "-")
            continue

        table.add_row(
            codec.normalize(pin),
            fields.birthdate.isoformat(),
            f"{fields.birth_number:03d}",
            fields.sex.value,
            "[green]yes[/green]",
            "[green]yes[/green]" if fields.is_non_personal else "[yellow]no[/yellow]",
        )

    console.print(table)
    if not all_valid:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
