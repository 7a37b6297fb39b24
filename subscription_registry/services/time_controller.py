"""Host clocks.

Responsibilities:
- Provide the current time to registry operations
- SystemClock reads the wall clock in whole seconds
- TimeController is a virtual clock that can be fast-forwarded or pinned
  for tests and local runs
"""

import time
from typing import Optional, Protocol, Union

from subscription_registry.config import get_config
from subscription_registry.logging_config import get_logger

logger = get_logger(__name__)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


class Clock(Protocol):
    def get_current_time(self) -> int: ...


class SystemClock:
    """Wall clock in whole seconds."""

    def get_current_time(self) -> int:
        return int(time.time())

    def __repr__(self) -> str:
        return "SystemClock()"


class TimeController:
    """Virtual clock for time manipulation and fast-forwarding.

    The virtual time stays where it is until advanced, set or reset, so
    consecutive operations observe the same timestamp.

    Args:
        start_time: initial virtual time; defaults to the current wall clock
    """

    def __init__(self, start_time: Optional[int] = None) -> None:
        real_time = int(time.time())
        self._virtual_time = real_time if start_time is None else start_time
        self._time_offset = self._virtual_time - real_time

        logger.info(
            "time_controller_initialized",
            virtual_time=self._virtual_time,
        )

    def get_current_time(self) -> int:
        """Get the current virtual time."""
        return self._virtual_time

    @property
    def time_offset(self) -> int:
        """Distance between virtual time and the wall clock when it was last moved."""
        return self._time_offset

    def advance_time(
            self,
            days: int = 0,
            hours: int = 0,
            minutes: int = 0,
            seconds: int = 0,
    ) -> dict:
        """Advance virtual time.

        Args:
            days: number of days to advance
            hours: number of hours to advance
            minutes: number of minutes to advance
            seconds: number of seconds to advance

        Returns:
            Dictionary with:
                - old_time: time before advancement
                - new_time: time after advancement
                - time_advanced: amount of time advanced
        Raises
            ValueError: if any value is negative
        """
        if days < 0 or hours < 0 or minutes < 0 or seconds < 0:
            raise ValueError("Cannot advance time backwards, negative values are not allowed.")

        to_advance = (
            days * SECONDS_PER_DAY
            + hours * SECONDS_PER_HOUR
            + minutes * SECONDS_PER_MINUTE
            + seconds
        )

        old_time = self._virtual_time
        self._virtual_time += to_advance
        self._time_offset += to_advance

        if to_advance:
            logger.info(
                "time_advanced",
                old_time=old_time,
                new_time=self._virtual_time,
                days=days,
                hours=hours,
                minutes=minutes,
                seconds=seconds,
            )

        return {
            "old_time": old_time,
            "new_time": self._virtual_time,
            "time_advanced": to_advance,
        }

    def set_time(self, timestamp: int) -> dict:
        """Set virtual time to a specific timestamp.

        Args:
            timestamp: time to set

        Returns:
            Dictionary with old_time and new_time

        Raises:
            ValueError: If timestamp is before the current virtual time
        """
        old_time = self._virtual_time

        if timestamp < old_time:
            raise ValueError(
                f"cannot set time backwards, current: {old_time}, requested: {timestamp}"
            )

        self._virtual_time = timestamp
        self._time_offset += timestamp - old_time

        logger.info(
            "time_set",
            old_time=old_time,
            new_time=timestamp,
            time_jump=timestamp - old_time,
        )

        return {
            "old_time": old_time,
            "new_time": timestamp,
        }

    def reset_time(self) -> dict:
        """Reset virtual time back to the wall clock."""
        old_time = self._virtual_time
        real_current_time = int(time.time())
        self._virtual_time = real_current_time
        self._time_offset = 0

        logger.info(
            "time_reset",
            old_time=old_time,
            new_time=real_current_time,
        )

        return {
            "old_time": old_time,
            "new_time": real_current_time,
        }

    def __repr__(self) -> str:
        return f"TimeController(virtual_time={self._virtual_time})"


_time_controller_instance: Optional[TimeController] = None
_system_clock = SystemClock()


def get_time_controller() -> TimeController:
    global _time_controller_instance
    if _time_controller_instance is None:
        _time_controller_instance = TimeController()
    return _time_controller_instance


def get_clock() -> Union[SystemClock, TimeController]:
    """Get the host clock selected by configuration."""
    if get_config().clock_mode == "virtual":
        return get_time_controller()
    return _system_clock
