from __future__ import annotations

from dataclasses import dataclass

import pytest

from countdown_overlay.render import format_text
from countdown_overlay.timer import HMS, RealClock, Timer, split_hms


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += float(dt)


def test_new_timer_reports_full_duration_without_overtime() -> None:
    clock = FakeClock(t=1000.0)
    timer = Timer(3723.0, clock=clock)

    assert timer.end_at == timer.started_at + timer.duration_s
    assert timer.until_end_hms() == HMS(overtime=False, h=1, m=2, s=3)


def test_new_timer_with_real_clock_is_within_one_second_of_duration() -> None:
    timer = Timer(20 * 60.0, clock=RealClock())
    hms = timer.until_end_hms()

    assert hms.overtime is False
    total = hms.h * 3600 + hms.m * 60 + hms.s
    assert 20 * 60 - 1 <= total <= 20 * 60


def test_partial_seconds_are_truncated() -> None:
    clock = FakeClock()
    timer = Timer(5.0, clock=clock)

    clock.advance(0.4)
    assert timer.until_end_hms() == HMS(overtime=False, h=0, m=0, s=4)


def test_overtime_starts_at_end_instant_and_counts_up() -> None:
    clock = FakeClock()
    timer = Timer(5.0, clock=clock)
    assert format_text(timer.until_end_hms()) == "00:05"

    clock.advance(5.0)
    assert timer.until_end_hms() == HMS(overtime=True, h=0, m=0, s=0)
    assert format_text(timer.until_end_hms()) == "+00:00"

    clock.advance(1.0)
    assert format_text(timer.until_end_hms()) == "+00:01"

    clock.advance(3600.0)
    assert format_text(timer.until_end_hms()) == "+1:00:01"
    assert timer.remaining_s() == pytest.approx(-3601.0)


def test_restart_resets_to_full_duration_from_countdown() -> None:
    clock = FakeClock()
    timer = Timer(15 * 60.0, clock=clock)

    clock.advance(2 * 60.0)
    assert format_text(timer.until_end_hms()) == "13:00"

    timer.restart()
    assert timer.started_at == clock.t
    assert timer.end_at == clock.t + 15 * 60.0
    assert format_text(timer.until_end_hms()) == "15:00"


def test_restart_resets_to_full_duration_from_overtime() -> None:
    clock = FakeClock()
    timer = Timer(5.0, clock=clock)

    clock.advance(42.0)
    assert timer.until_end_hms().overtime is True

    timer.restart()
    assert timer.until_end_hms() == HMS(overtime=False, h=0, m=0, s=5)


def test_set_duration_rebases_against_original_start() -> None:
    clock = FakeClock()
    timer = Timer(600.0, clock=clock)

    clock.advance(100.0)
    timer.set_duration(300.0)

    assert timer.started_at == 0.0
    assert timer.end_at == 300.0
    # 300s from the original start, not from now.
    assert format_text(timer.until_end_hms()) == "03:20"


def test_set_duration_shorter_than_elapsed_goes_straight_to_overtime() -> None:
    clock = FakeClock()
    timer = Timer(600.0, clock=clock)

    clock.advance(100.0)
    timer.set_duration(60.0)

    assert timer.until_end_hms() == HMS(overtime=True, h=0, m=0, s=40)


def test_zero_duration_is_immediately_overtime() -> None:
    timer = Timer(0.0, clock=FakeClock())
    assert format_text(timer.until_end_hms()) == "+00:00"


def test_negative_duration_is_rejected() -> None:
    with pytest.raises(ValueError):
        Timer(-1.0, clock=FakeClock())

    timer = Timer(1.0, clock=FakeClock())
    with pytest.raises(ValueError):
        timer.set_duration(-5.0)


def test_split_hms_decomposition_and_clamping() -> None:
    assert split_hms(0.0) == HMS(overtime=False, h=0, m=0, s=0)
    assert split_hms(59.999) == HMS(overtime=False, h=0, m=0, s=59)
    assert split_hms(3600.0) == HMS(overtime=False, h=1, m=0, s=0)
    assert split_hms(25 * 3600.0 + 61.0, overtime=True) == HMS(overtime=True, h=25, m=1, s=1)
    assert split_hms(-3.0) == HMS(overtime=False, h=0, m=0, s=0)
