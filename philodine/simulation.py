"""The dinner itself: philosopher routines, the monitor and the thread setup."""

from __future__ import annotations

import threading
import time

from philodine.table import Philosopher, Status, Table
from philodine.timing import now_ms, precise_sleep

_EVEN_START_DELAY_US = 30_000
_LONE_POLL_US = 200
_THINK_FACTOR = 0.42

_MESSAGES = {
    Status.TAKE_LEFT_FORK: "has taken a fork",
    Status.TAKE_RIGHT_FORK: "has taken a fork",
    Status.EATING: "is eating",
    Status.SLEEPING: "is sleeping",
    Status.THINKING: "is thinking",
    Status.DIED: "died",
}


def _sleep(usec: float, table: Table) -> None:
    precise_sleep(int(usec), table.simulation_finished)


def write_status(status: Status, philosopher: Philosopher) -> None:
    """Print one timestamped status line for ``philosopher``.

    Nothing but a death is reported once the simulation has ended, and a
    philosopher who has eaten enough reports nothing but taking forks.
    """
    table = philosopher.table
    elapsed = now_ms() - table.start_time
    is_fork = status in (Status.TAKE_LEFT_FORK, Status.TAKE_RIGHT_FORK)
    if not is_fork and status is not Status.DIED and philosopher.is_full():
        return
    if status is Status.DIED and philosopher.is_full():
        return
    with table.write_lock:
        if status is not Status.DIED and table.simulation_finished():
            return
        print(f"{elapsed}\t{philosopher.id} {_MESSAGES[status]}", file=table.out)


def eat(philosopher: Philosopher) -> None:
    """Take both forks, eat for the configured time, then put them down."""
    table = philosopher.table
    settings = table.settings
    with philosopher.left_fork.lock:
        write_status(Status.TAKE_LEFT_FORK, philosopher)
        with philosopher.right_fork.lock:
            write_status(Status.TAKE_RIGHT_FORK, philosopher)
            philosopher.record_meal(now_ms())
            philosopher.meals_eaten += 1
            write_status(Status.EATING, philosopher)
            _sleep(settings.time_to_eat, table)
            if 0 < settings.meals_required == philosopher.meals_eaten:
                philosopher.mark_full()


def think(philosopher: Philosopher, pre_simulation: bool) -> None:
    """Report thinking and, at an odd-sized table, pause to stay fair."""
    table = philosopher.table
    settings = table.settings
    if not pre_simulation:
        write_status(Status.THINKING, philosopher)
    if settings.philosopher_count % 2 == 0:
        return
    thinking = max(settings.time_to_eat * 2 - settings.time_to_sleep, 0)
    _sleep(thinking * _THINK_FACTOR, table)


def philosopher_died(philosopher: Philosopher) -> bool:
    """Whether ``philosopher`` has gone hungry longer than allowed."""
    if philosopher.is_full():
        return False
    elapsed = philosopher.time_since_meal(now_ms())
    return elapsed > philosopher.table.settings.time_to_die // 1000


def _desynchronize(philosopher: Philosopher) -> None:
    table = philosopher.table
    if table.settings.philosopher_count % 2 == 0:
        if philosopher.id % 2 == 0:
            _sleep(_EVEN_START_DELAY_US, table)
    elif philosopher.id % 2:
        think(philosopher, True)


def _join_table(philosopher: Philosopher) -> None:
    table = philosopher.table
    table.wait_all_ready()
    philosopher.record_meal(now_ms())
    table.register_running()


def dine(philosopher: Philosopher) -> None:
    """Eat, sleep and think until full or until the simulation ends."""
    table = philosopher.table
    _join_table(philosopher)
    _desynchronize(philosopher)
    while not table.simulation_finished():
        if philosopher.is_full():
            break
        eat(philosopher)
        write_status(Status.SLEEPING, philosopher)
        _sleep(table.settings.time_to_sleep, table)
        think(philosopher, False)


def dine_alone(philosopher: Philosopher) -> None:
    """A single philosopher takes the only fork and waits in vain."""
    table = philosopher.table
    _join_table(philosopher)
    write_status(Status.TAKE_LEFT_FORK, philosopher)
    while not table.simulation_finished():
        _sleep(_LONE_POLL_US, table)


def monitor(table: Table) -> None:
    """Watch every philosopher and end the simulation at the first death."""
    while not table.all_running():
        time.sleep(0)
    while not table.simulation_finished():
        for philosopher in table.philosophers:
            if table.simulation_finished():
                break
            if philosopher_died(philosopher):
                table.end_simulation()
                write_status(Status.DIED, philosopher)
        time.sleep(0)


def start_dinner(table: Table) -> None:
    """Run the whole simulation and return once every thread has finished."""
    if table.settings.meals_required == 0:
        return
    routine = dine_alone if len(table.philosophers) == 1 else dine
    for philosopher in table.philosophers:
        philosopher.thread = threading.Thread(
            target=routine, args=(philosopher,), daemon=True
        )
        philosopher.thread.start()
    table.monitor_thread = threading.Thread(target=monitor, args=(table,), daemon=True)
    table.monitor_thread.start()
    table.start_time = now_ms()
    table.release()
    for philosopher in table.philosophers:
        philosopher.thread.join()
    table.end_simulation()
    table.monitor_thread.join()