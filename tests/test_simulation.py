import io
import re

import pytest

from philodine.parsing import Settings
from philodine.simulation import (
    dine,
    dine_alone,
    eat,
    monitor,
    philosopher_died,
    start_dinner,
    think,
    write_status,
)
from philodine.table import Status, build_table
from philodine.timing import now_ms, now_us

LINE = re.compile(r"^(\d+)\t(\d+) (has taken a fork|is eating|is sleeping|is thinking|died)$")


def make_table(count=2, die=800_000, eat_us=60_000, sleep_us=60_000, meals=-1):
    out = io.StringIO()
    settings = Settings(count, die, eat_us, sleep_us, meals)
    table = build_table(settings, out)
    table.start_time = now_ms()
    return table, out


def lines(out):
    return [line for line in out.getvalue().splitlines() if line]


@pytest.mark.parametrize(
    "status, text",
    [
        (Status.EATING, "is eating"),
        (Status.SLEEPING, "is sleeping"),
        (Status.THINKING, "is thinking"),
        (Status.TAKE_LEFT_FORK, "has taken a fork"),
        (Status.TAKE_RIGHT_FORK, "has taken a fork"),
        (Status.DIED, "died"),
    ],
)
def test_write_status_format(status, text):
    table, out = make_table()
    write_status(status, table.philosophers[1])
    [line] = lines(out)
    match = LINE.match(line)
    assert match is not None
    assert match.group(2) == "2"
    assert match.group(3) == text


def test_write_status_after_end_only_reports_death():
    table, out = make_table()
    table.end_simulation()
    philosopher = table.philosophers[0]
    for status in (Status.EATING, Status.SLEEPING, Status.THINKING, Status.TAKE_LEFT_FORK):
        write_status(status, philosopher)
    assert out.getvalue() == ""
    write_status(Status.DIED, philosopher)
    assert lines(out)[0].endswith("\t1 died")


def test_full_philosopher_still_reports_forks():
    table, out = make_table()
    philosopher = table.philosophers[0]
    philosopher.mark_full()
    write_status(Status.SLEEPING, philosopher)
    write_status(Status.EATING, philosopher)
    assert out.getvalue() == ""
    write_status(Status.TAKE_RIGHT_FORK, philosopher)
    assert lines(out)[0].endswith("1 has taken a fork")


def test_philosopher_died_after_long_hunger():
    table, _ = make_table(die=100_000)
    philosopher = table.philosophers[0]
    philosopher.record_meal(now_ms() - 500)
    assert philosopher_died(philosopher) is True


def test_philosopher_alive_after_recent_meal():
    table, _ = make_table(die=100_000)
    philosopher = table.philosophers[0]
    philosopher.record_meal(now_ms())
    assert philosopher_died(philosopher) is False


def test_full_philosopher_never_dies():
    table, _ = make_table(die=100_000)
    philosopher = table.philosophers[0]
    philosopher.record_meal(now_ms() - 500)
    philosopher.mark_full()
    assert philosopher_died(philosopher) is False


def test_eat_counts_meal_reports_and_releases_forks():
    table, out = make_table(meals=1)
    philosopher = table.philosophers[0]
    eat(philosopher)
    assert philosopher.meals_eaten == 1
    assert philosopher.is_full() is True
    messages = [LINE.match(line).group(3) for line in lines(out)]
    assert messages == ["has taken a fork", "has taken a fork", "is eating"]
    assert philosopher.left_fork.lock.acquire(blocking=False)
    assert philosopher.right_fork.lock.acquire(blocking=False)


def test_eat_without_limit_never_fills():
    table, _ = make_table(meals=-1)
    philosopher = table.philosophers[0]
    eat(philosopher)
    eat(philosopher)
    assert philosopher.meals_eaten == 2
    assert philosopher.is_full() is False


def test_think_at_even_table_only_reports():
    table, out = make_table(count=2)
    think(table.philosophers[0], False)
    assert [LINE.match(line).group(3) for line in lines(out)] == ["is thinking"]


def test_think_pre_simulation_is_silent():
    table, out = make_table(count=3, eat_us=60_000, sleep_us=200_000)
    think(table.philosophers[0], True)
    assert out.getvalue() == ""


def test_think_at_odd_table_pauses():
    table, _ = make_table(count=3, eat_us=60_000, sleep_us=60_000)
    started = now_us()
    think(table.philosophers[0], True)
    assert now_us() - started >= 25_000


def test_start_dinner_with_zero_meals_does_nothing():
    table, out = make_table(meals=0)
    start_dinner(table)
    assert out.getvalue() == ""
    assert all(p.thread is None for p in table.philosophers)
    assert table.monitor_thread is None


def test_start_dinner_everyone_eats_once_at_odd_table():
    table, out = make_table(count=3, meals=1)
    start_dinner(table)
    parsed = [LINE.match(line) for line in lines(out)]
    assert all(match is not None for match in parsed)
    assert not any(match.group(3) == "died" for match in parsed)
    for philosopher in table.philosophers:
        assert philosopher.meals_eaten == 1
        eating = [m for m in parsed if m.group(2) == str(philosopher.id) and m.group(3) == "is eating"]
        assert len(eating) == 1
    assert table.simulation_finished() is True


def test_start_dinner_timestamps_never_decrease_per_philosopher():
    table, out = make_table(count=4, meals=2)
    start_dinner(table)
    parsed = [LINE.match(line) for line in lines(out)]
    for philosopher in table.philosophers:
        stamps = [int(m.group(1)) for m in parsed if m.group(2) == str(philosopher.id)]
        assert stamps == sorted(stamps)
        assert philosopher.meals_eaten == 2


def test_start_dinner_lone_philosopher_dies():
    table, out = make_table(count=1, die=100_000)
    start_dinner(table)
    parsed = [LINE.match(line) for line in lines(out)]
    assert [m.group(3) for m in parsed] == ["has taken a fork", "died"]
    assert int(parsed[1].group(1)) >= 100
    assert table.simulation_finished() is True


def test_dine_alone_returns_when_finished():
    table, out = make_table(count=1)
    table.release()
    table.end_simulation()
    dine_alone(table.philosophers[0])
    assert table.all_running() is True
    assert out.getvalue() == ""


def test_dine_stops_immediately_when_finished():
    table, out = make_table(count=2)
    table.release()
    table.end_simulation()
    dine(table.philosophers[0])
    assert table.philosophers[0].meals_eaten == 0
    assert out.getvalue() == ""


def test_monitor_reports_single_death():
    table, out = make_table(count=2, die=100_000)
    for philosopher in table.philosophers:
        table.register_running()
        philosopher.record_meal(now_ms() - 1000)
    monitor(table)
    died = [line for line in lines(out) if line.endswith("died")]
    assert len(died) == 1
    assert table.simulation_finished() is True