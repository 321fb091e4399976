from pkgscore.analyzers.timer import Timer

from conftest import FakeClock


def make_timer(clock: FakeClock, wall: float = 1_700_000_000.0) -> Timer:
    return Timer(wall_clock=lambda: wall, monotonic_clock=clock)


def test_now_starts_at_wall_clock():
    timer = make_timer(FakeClock())
    assert timer.now() == 1_700_000_000.0


def test_now_advances_with_monotonic_clock():
    clock = FakeClock()
    timer = make_timer(clock)
    clock.advance(1.5)
    assert timer.now() == 1_700_000_001.5


def test_now_has_millisecond_resolution():
    clock = FakeClock()
    timer = make_timer(clock)
    clock.advance(0.0004)
    assert timer.now() == 1_700_000_000.0
    clock.advance(0.0008)
    assert timer.now() == 1_700_000_000.001


def test_now_never_runs_backwards():
    clock = FakeClock()
    timer = make_timer(clock)
    clock.advance(-5)
    assert timer.now() == 1_700_000_000.0


def test_elapsed_ms():
    clock = FakeClock()
    timer = make_timer(clock)
    start = timer.now()
    clock.advance(0.25)
    assert timer.elapsed_ms(start) == 250.0


def test_elapsed_ms_is_never_negative():
    timer = make_timer(FakeClock())
    assert timer.elapsed_ms(timer.now() + 10) == 0.0


def test_default_clocks():
    timer = Timer()
    start = timer.now()
    assert timer.now() >= start
    assert timer.elapsed_ms(start) >= 0.0
