# horde/definitions/calendar.py
"""Defines the in-game day cycle and the time constants the clock runs on."""

#--- Time Progression ratio ---
# Real seconds per game minute. At 1.0 a full 24 hour day lasts 24 real minutes.
SECONDS_PER_GAME_MINUTE: float = 1.0

# --- Day structure ---
MINUTES_PER_HOUR: int = 60
HOURS_PER_DAY: int = 24
MINUTES_PER_DAY: int = MINUTES_PER_HOUR * HOURS_PER_DAY

# --- Day/Night Cycle ---
DAWN_HOUR: float = 7.3
DUSK_HOUR: float = 19.8

# --- Starting Date ---
STARTING_DAY: int = 1
STARTING_HOUR: int = 12  # Servers come up at noon unless a saved time exists


def minute_to_time_of_day(minute_of_day: int) -> float:
    """Converts a minute index (0..1439) into a fractional hour on the 0-24 axis."""
    return (minute_of_day % MINUTES_PER_DAY) / MINUTES_PER_HOUR


def time_of_day_to_minute(time_of_day: float) -> int:
    """Converts a fractional hour into the nearest whole minute of the day."""
    return int(round(time_of_day * MINUTES_PER_HOUR)) % MINUTES_PER_DAY


def is_night(time_of_day: float) -> bool:
    """Returns True between dusk and dawn."""
    return not (DAWN_HOUR <= time_of_day < DUSK_HOUR)
