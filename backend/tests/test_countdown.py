from conftest import FakeClock

from writing_practice.services.session.countdown import Countdown, seconds_until


def test_seconds_until_rounds_up_and_floors_at_zero():
    assert seconds_until(10_000, 0) == 10
    assert seconds_until(10_000, 1) == 10
    assert seconds_until(10_000, 9_001) == 1
    assert seconds_until(10_000, 10_000) == 0
    assert seconds_until(10_000, 25_000) == 0


def test_remaining_is_derived_from_deadline():
    clock = FakeClock(0)
    countdown = Countdown(5_000, clock)
    assert countdown.seconds_remaining == 5
    clock.advance(250)
    countdown.tick()
    assert countdown.seconds_remaining == 5
    clock.advance(750)
    countdown.tick()
    assert countdown.seconds_remaining == 4


def test_remaining_is_monotonic_non_increasing():
    clock = FakeClock(0)
    countdown = Countdown(3_000, clock)
    readings = []
    for _ in range(20):
        countdown.tick()
        readings.append(countdown.seconds_remaining)
        clock.advance(250)
    assert readings == sorted(readings, reverse=True)
    assert readings[-1] == 0


def test_late_tick_reads_true_remaining_value():
    # A suspended process wakes up long after several missed ticks
    clock = FakeClock(0)
    countdown = Countdown(600_000, clock)
    clock.advance(421_300)
    countdown.tick()
    assert countdown.seconds_remaining == 179


def test_expiry_reported_exactly_once():
    clock = FakeClock(0)
    countdown = Countdown(1_000, clock)
    assert countdown.tick() is False
    clock.advance(1_000)
    fired = [countdown.tick() for _ in range(10)]
    assert fired.count(True) == 1
    assert fired[0] is True
    assert countdown.seconds_remaining == 0
