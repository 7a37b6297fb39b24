"""Unit tests for host clocks."""
import time
from unittest.mock import MagicMock, patch

import pytest

from subscription_registry.services.time_controller import (
    SECONDS_PER_DAY,
    SystemClock,
    TimeController,
    get_clock,
    get_time_controller,
)


@pytest.fixture
def time_controller():
    return TimeController()


class TestTimeControllerBasics:
    """Tests for basic time controller functionality"""

    def test_init_with_current_time(self, time_controller):
        """virtual time starts near real time"""
        time_diff = abs(time_controller.get_current_time() - int(time.time()))
        assert time_diff <= 1, f"virtual time should start near real time, diff: {time_diff}"
        assert time_controller.time_offset <= 1

    def test_init_with_start_time(self):
        controller = TimeController(start_time=1000)
        assert controller.get_current_time() == 1000

    def test_get_current_time_is_consistent(self, time_controller):
        """virtual clock does not tick on its own"""
        time1 = time_controller.get_current_time()
        time2 = time_controller.get_current_time()
        assert time1 == time2, "Time should not change unless explicitly advanced"

    def test_advance_time_by_days(self, time_controller):
        old_time = time_controller.get_current_time()

        result = time_controller.advance_time(days=30)
        new_time = time_controller.get_current_time()

        expected_advance = 30 * SECONDS_PER_DAY
        assert new_time - old_time == expected_advance
        assert result["time_advanced"] == expected_advance
        assert result["old_time"] == old_time
        assert result["new_time"] == new_time

    def test_advance_time_mixed_units(self):
        controller = TimeController(start_time=0)
        controller.advance_time(days=1, hours=2, minutes=3, seconds=4)
        assert controller.get_current_time() == 86400 + 7200 + 180 + 4

    def test_advance_zero_is_noop(self):
        controller = TimeController(start_time=1000)
        result = controller.advance_time()
        assert result == {"old_time": 1000, "new_time": 1000, "time_advanced": 0}

    @pytest.mark.parametrize(
        "kwargs",
        [{"days": -1}, {"hours": -1}, {"minutes": -1}, {"seconds": -1}],
    )
    def test_advance_negative_raises(self, kwargs):
        controller = TimeController(start_time=1000)
        with pytest.raises(ValueError):
            controller.advance_time(**kwargs)
        assert controller.get_current_time() == 1000

    def test_advance_updates_offset(self, time_controller):
        before = time_controller.time_offset
        time_controller.advance_time(seconds=120)
        assert time_controller.time_offset == before + 120


class TestSetAndReset:
    def test_set_time(self):
        controller = TimeController(start_time=1000)
        result = controller.set_time(5000)
        assert controller.get_current_time() == 5000
        assert result == {"old_time": 1000, "new_time": 5000}

    def test_set_time_backwards_raises(self):
        controller = TimeController(start_time=1000)
        with pytest.raises(ValueError):
            controller.set_time(999)
        assert controller.get_current_time() == 1000

    def test_set_time_same_value_allowed(self):
        controller = TimeController(start_time=1000)
        controller.set_time(1000)
        assert controller.get_current_time() == 1000

    def test_reset_time(self):
        controller = TimeController(start_time=1000)
        result = controller.reset_time()

        assert result["old_time"] == 1000
        assert abs(controller.get_current_time() - int(time.time())) <= 1
        assert controller.time_offset == 0


class TestClockSelection:
    def test_system_clock_reads_wall_clock(self):
        assert abs(SystemClock().get_current_time() - int(time.time())) <= 1

    def test_get_clock_system(self):
        config = MagicMock()
        config.clock_mode = "system"
        with patch("subscription_registry.services.time_controller.get_config", return_value=config):
            assert isinstance(get_clock(), SystemClock)

    def test_get_clock_virtual(self):
        config = MagicMock()
        config.clock_mode = "virtual"
        with patch("subscription_registry.services.time_controller.get_config", return_value=config):
            assert get_clock() is get_time_controller()
