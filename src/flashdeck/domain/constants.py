"""Centralized constants for flashdeck.

Scheduler tunables and time units live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_DAY = 24 * 60 * 60 * 1000

# ---------- SM-2 ----------
INITIAL_EASINESS = 2.5
MIN_EASINESS = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3  # grades below this break the streak

FIRST_INTERVAL = 1  # days, after the first successful review
SECOND_INTERVAL = 6  # days, after the second successful review
LAPSE_INTERVAL = 1  # days, after a failed review

# ---------- Study session ----------
DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8787
