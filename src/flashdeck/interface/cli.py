"""flashdeck CLI: scheduler commands, config, and the HTTP server."""

import json
import logging
import sys
from typing import Annotated

import typer

from flashdeck.application.config import resolve_config
from flashdeck.domain.constants import INITIAL_EASINESS, MS_PER_DAY
from flashdeck.domain.scheduling.errors import InvalidQualityError
from flashdeck.domain.scheduling.models import ReviewState
from flashdeck.domain.scheduling.sm2 import initialize_state, now_ms, review

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashdeck: SM-2 flashcard scheduling.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage flashdeck configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _log_level(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def _echo_state(state: ReviewState) -> None:
    typer.echo(json.dumps(state.to_record(), indent=2))


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for flashdeck."""
    ctx.ensure_object(dict)
    # Each -v raises the configured level (1 = info unless FLASHDECK_VERBOSE says otherwise)
    level = resolve_config().verbose + verbose
    ctx.obj["verbose"] = level
    logging.getLogger("flashdeck").setLevel(_log_level(level))


# ---------------------------------------------------------------------------
# Scheduler commands
# ---------------------------------------------------------------------------


@app.command("new-state")
def new_state(
    now: Annotated[
        int | None, typer.Option(help="Creation time in epoch ms. Defaults to now.")
    ] = None,
):
    """Print the scheduling state of a newly created card."""
    _echo_state(initialize_state(now))


@app.command("review")
def review_command(
    quality: Annotated[int, typer.Option("--quality", "-q", help="Grade 0 (blackout) to 5.")],
    easiness: Annotated[float, typer.Option(help="Current easiness factor.")] = INITIAL_EASINESS,
    interval: Annotated[int, typer.Option(min=0, help="Current interval in days.")] = 0,
    repetition: Annotated[int, typer.Option(min=0, help="Current success streak.")] = 0,
    due_at: Annotated[
        int | None, typer.Option(help="Current due time in epoch ms. Defaults to --now.")
    ] = None,
    now: Annotated[
        int | None, typer.Option(help="Review time in epoch ms. Defaults to now.")
    ] = None,
):
    """[bold green]Review[/bold green] a card state with a grade and print the next state."""
    if now is None:
        now = now_ms()
    previous = ReviewState(
        easiness=easiness,
        interval=interval,
        repetition=repetition,
        due_at=due_at if due_at is not None else now,
    )
    try:
        state = review(previous, quality, now)
    except InvalidQualityError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(2) from None
    _echo_state(state)


@app.command("simulate")
def simulate(
    grades: Annotated[list[int], typer.Argument(help="Grades in review order, e.g. 5 4 3 2 5.")],
    start: Annotated[
        int | None, typer.Option(help="Card creation time in epoch ms. Defaults to now.")
    ] = None,
):
    """Preview how a sequence of grades spaces a card's reviews.

    Each grade is applied on the day the card falls due.
    """
    from flashdeck.application.forecast import simulate_schedule

    if start is None:
        start = now_ms()
    try:
        steps = simulate_schedule(grades, start)
    except InvalidQualityError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(2) from None

    typer.echo(f"{'day':>6} {'grade':>5} {'interval':>8} {'rep':>4} {'easiness':>8}")
    for step in steps:
        day = (step.reviewed_at - start) // MS_PER_DAY
        s = step.state
        typer.echo(
            f"{day:>6} {step.quality:>5} {s.interval:>8} {s.repetition:>4} {s.easiness:>8.2f}"
        )
    if steps:
        final_day = (steps[-1].state.due_at - start) // MS_PER_DAY
        typer.echo(f"Next review on day {final_day}.")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Print the resolved configuration as JSON."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Auto-reload on code changes.")] = False,
):
    """Start the flashdeck HTTP server."""
    import uvicorn

    config = resolve_config({"host": host, "port": port})
    uvicorn.run("flashdeck.server:app", host=config.host, port=config.port, reload=reload)


def main():
    app()


if __name__ == "__main__":
    main()
