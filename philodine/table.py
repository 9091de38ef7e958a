"""Shared state of the dinner: the table, its forks and its philosophers."""

from __future__ import annotations

import enum
import sys
import threading
from dataclasses import dataclass, field
from typing import TextIO

from philodine.parsing import Settings


class Status(enum.Enum):
    """What a philosopher is reporting."""

    EATING = enum.auto()
    SLEEPING = enum.auto()
    THINKING = enum.auto()
    TAKE_LEFT_FORK = enum.auto()
    TAKE_RIGHT_FORK = enum.auto()
    DIED = enum.auto()


@dataclass(eq=False)
class Fork:
    """A fork on the table, guarded by its own lock."""

    fork_id: int
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class Philosopher:
    """One diner with its two forks and its meal bookkeeping."""

    def __init__(self, philosopher_id: int, table: Table, left_fork: Fork, right_fork: Fork):
        self.id = philosopher_id
        self.table = table
        self.left_fork = left_fork
        self.right_fork = right_fork
        self.meals_eaten = 0
        self.thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._full = False
        self._last_meal = 0

    def __repr__(self) -> str:
        return f"Philosopher(id={self.id}, meals_eaten={self.meals_eaten})"

    def record_meal(self, when: int) -> None:
        """Remember ``when`` (milliseconds) as the start of the latest meal."""
        with self._lock:
            self._last_meal = when

    def time_since_meal(self, now: int) -> int:
        """Milliseconds between the latest meal and ``now``."""
        with self._lock:
            return now - self._last_meal

    def mark_full(self) -> None:
        """Record that this philosopher has eaten enough."""
        with self._lock:
            self._full = True

    def is_full(self) -> bool:
        """Whether this philosopher has eaten enough."""
        with self._lock:
            return self._full


class Table:
    """The settings, the shared flags and the diners of one simulation."""

    def __init__(self, settings: Settings, out: TextIO | None = None):
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self.forks: list[Fork] = []
        self.philosophers: list[Philosopher] = []
        self.start_time = 0
        self.write_lock = threading.Lock()
        self.monitor_thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._running = 0
        self._ready = threading.Event()
        self._finished = threading.Event()

    def __repr__(self) -> str:
        return f"Table(settings={self.settings!r})"

    def simulation_finished(self) -> bool:
        """Whether the simulation has been ended."""
        return self._finished.is_set()

    def end_simulation(self) -> None:
        """Mark the simulation as ended."""
        self._finished.set()

    def release(self) -> None:
        """Let every waiting thread start."""
        self._ready.set()

    def wait_all_ready(self) -> None:
        """Block until ``release`` has been called."""
        self._ready.wait()

    def register_running(self) -> None:
        """Count one more philosopher thread as running."""
        with self._lock:
            self._running += 1

    def all_running(self) -> bool:
        """Whether every philosopher thread has registered as running."""
        with self._lock:
            return self._running == len(self.philosophers)


def build_table(settings: Settings, out: TextIO | None = None) -> Table:
    """Lay the table: one fork per seat, each philosopher between two forks.

    Even-numbered philosophers reach for the next fork first, odd-numbered
    ones for their own, which keeps the diners from deadlocking.
    """
    table = Table(settings, out)
    count = settings.philosopher_count
    table.forks = [Fork(index) for index in range(count)]
    for index in range(count):
        own = table.forks[index]
        following = table.forks[(index + 1) % count]
        philosopher_id = index + 1
        if philosopher_id % 2 == 0:
            left, right = following, own
        else:
            left, right = own, following
        table.philosophers.append(Philosopher(philosopher_id, table, left, right))
    return table