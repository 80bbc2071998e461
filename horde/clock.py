# horde/clock.py
"""
The game clock. Turns ticker delta time into game minutes and notifies
attached handlers on every minute and at every midnight.
"""
import logging
from typing import Callable, List, Optional

from .definitions import calendar as calendar_defs

log = logging.getLogger(__name__)

MinuteHandler = Callable[[float], None]  # receives the new time of day
DayHandler = Callable[[], None]


class GameClock:
    def __init__(self, minute_of_day: Optional[int] = None, day: int = calendar_defs.STARTING_DAY,
                 seconds_per_game_minute: float = calendar_defs.SECONDS_PER_GAME_MINUTE):
        if seconds_per_game_minute <= 0:
            raise ValueError("seconds_per_game_minute must be positive")
        if minute_of_day is None:
            minute_of_day = calendar_defs.STARTING_HOUR * calendar_defs.MINUTES_PER_HOUR
        self.minute_of_day: int = minute_of_day % calendar_defs.MINUTES_PER_DAY
        self.day: int = day
        self.seconds_per_game_minute = seconds_per_game_minute
        self._accumulator: float = 0.0
        self._minute_handlers: List[MinuteHandler] = []
        self._day_handlers: List[DayHandler] = []

    @property
    def time_of_day(self) -> float:
        """Fractional hour on the 0-24 axis."""
        return calendar_defs.minute_to_time_of_day(self.minute_of_day)

    def set_time(self, time_of_day: float):
        self.minute_of_day = calendar_defs.time_of_day_to_minute(time_of_day)

    # --- Subscriptions ---
    def attach_minute(self, handler: MinuteHandler):
        if handler not in self._minute_handlers:
            self._minute_handlers.append(handler)

    def detach_minute(self, handler: MinuteHandler):
        if handler in self._minute_handlers:
            self._minute_handlers.remove(handler)

    def attach_day(self, handler: DayHandler):
        if handler not in self._day_handlers:
            self._day_handlers.append(handler)

    def detach_day(self, handler: DayHandler):
        if handler in self._day_handlers:
            self._day_handlers.remove(handler)

    # --- Progression ---
    async def update(self, dt: float):
        """Ticker: accumulates real time and advances whole game minutes."""
        self._accumulator += dt
        if self._accumulator < self.seconds_per_game_minute:
            return
        minutes_passed = int(self._accumulator / self.seconds_per_game_minute)
        self._accumulator -= minutes_passed * self.seconds_per_game_minute
        self.advance_minutes(minutes_passed)

    def advance_minutes(self, minutes: int = 1):
        """Steps the clock minute by minute so no handler call is skipped."""
        for _ in range(minutes):
            self.minute_of_day += 1
            if self.minute_of_day >= calendar_defs.MINUTES_PER_DAY:
                self.minute_of_day = 0
                self.day += 1
                log.info("A new day dawns: day %d.", self.day)
                for handler in list(self._day_handlers):
                    self._call(handler)
            now = self.time_of_day
            for handler in list(self._minute_handlers):
                self._call(handler, now)

    @staticmethod
    def _call(handler: Callable[..., None], *args):
        try:
            handler(*args)
        except Exception:
            log.exception("Clock handler %r failed.", handler)
