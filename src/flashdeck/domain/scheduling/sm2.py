"""
SM-2 review scheduler.

This is a pure computation module with no I/O: every call takes an explicit
state and returns a new one.
"""

import logging
import math
import time

from flashdeck.domain.constants import (
    FIRST_INTERVAL,
    INITIAL_EASINESS,
    LAPSE_INTERVAL,
    MAX_QUALITY,
    MIN_EASINESS,
    MIN_QUALITY,
    MS_PER_DAY,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)

from .errors import InvalidQualityError
from .models import ReviewState

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero for positive values.

    Python's round() uses banker's rounding (2.5 -> 2); intervals need 7.5 -> 8.
    """
    return math.floor(value + 0.5)


def validate_quality(quality: object) -> int:
    # bool is an int subclass but never a grade
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise InvalidQualityError(quality)
    return int(quality)


def initialize_state(now: int | None = None) -> ReviewState:
    """State of a freshly created card: due immediately, no streak."""
    if now is None:
        now = now_ms()
    return ReviewState(easiness=INITIAL_EASINESS, interval=0, repetition=0, due_at=now)


def next_easiness(easiness: float, quality: int) -> float:
    miss = MAX_QUALITY - quality
    updated = easiness + (0.1 - miss * (0.08 + miss * 0.02))
    return max(updated, MIN_EASINESS)


def review(previous: ReviewState, quality: int, now: int | None = None) -> ReviewState:
    """
    Apply one graded review and return the card's next state.

    Args:
        previous: State before the review. Not validated and never mutated.
        quality: Grade 0 (blackout) to 5 (perfect recall).
        now: Review time in epoch ms; defaults to the current time.

    Returns:
        New ReviewState with due_at = now + interval days.

    Raises:
        InvalidQualityError: quality is not an integer in 0..5.
    """
    quality = validate_quality(quality)
    if now is None:
        now = now_ms()

    easiness = previous.easiness
    if quality < PASSING_QUALITY:
        repetition = 0
        interval = LAPSE_INTERVAL
    else:
        if previous.repetition == 0:
            interval = FIRST_INTERVAL
        elif previous.repetition == 1:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(previous.interval * previous.easiness)
        repetition = previous.repetition + 1
        easiness = next_easiness(previous.easiness, quality)

    state = ReviewState(
        easiness=easiness,
        interval=interval,
        repetition=repetition,
        due_at=now + interval * MS_PER_DAY,
    )
    logger.debug(
        "q=%d: rep %d->%d, interval %d->%d, easiness %.3f->%.3f",
        quality,
        previous.repetition,
        state.repetition,
        previous.interval,
        state.interval,
        previous.easiness,
        state.easiness,
    )
    return state
