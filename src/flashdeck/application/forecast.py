"""
Schedule forecast for a sequence of grades.

Replays grades against a fresh card, each one given the moment the card
falls due, to show how reviews would be spaced. Pure computation, no I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from flashdeck.domain.scheduling.models import ReviewState
from flashdeck.domain.scheduling.sm2 import initialize_state, review


@dataclass(frozen=True)
class ForecastStep:
    quality: int
    reviewed_at: int  # epoch ms
    state: ReviewState  # state after this review


def simulate_schedule(grades: Iterable[int], start: int | None = None) -> list[ForecastStep]:
    state = initialize_state(start)
    steps: list[ForecastStep] = []

    for quality in grades:
        reviewed_at = state.due_at
        state = review(state, quality, reviewed_at)
        steps.append(ForecastStep(quality=quality, reviewed_at=reviewed_at, state=state))

    return steps
