# philodine

A console simulation of the dining philosophers problem. Each philosopher
runs in its own thread and shares one fork with each neighbour. A
philosopher eats, sleeps and thinks in a loop. A separate monitor thread
ends the simulation as soon as one philosopher has gone too long since the
start of their last meal.

## Installation

```
pip install .
```

## Usage

```
philodine NUMBER_OF_PHILOSOPHERS TIME_TO_DIE TIME_TO_EAT TIME_TO_SLEEP [MEALS]
```

- `NUMBER_OF_PHILOSOPHERS`: how many philosophers sit at the table. There
  are the same number of forks.
- `TIME_TO_DIE`: milliseconds a philosopher can go without starting a meal.
- `TIME_TO_EAT`: milliseconds a meal takes.
- `TIME_TO_SLEEP`: milliseconds a philosopher sleeps after eating.
- `MEALS` (optional): a philosopher who has eaten this many times stops.
  The run ends once every philosopher has stopped or one has died. A value
  of `0` ends the run straight away without printing anything.

There must be four or five arguments, each made of digits only. All three
times must be at least 60 milliseconds. Otherwise the command prints an
error message and exits with status 1.

Example:

```
philodine 5 800 200 200 7
```

Each event is printed as the number of milliseconds since the start, a tab,
the philosopher's number and what happened, for example:

```
0	1 has taken a fork
0	1 has taken a fork
0	1 is eating
200	1 is sleeping
400	1 is thinking
```

When a philosopher starves, a `died` line is printed and the simulation
stops. With a single philosopher the command prints that the philosopher
took a fork at 0 and died at `TIME_TO_DIE + 1`, then exits with status 1.

## Library use

```python
import sys

from philodine.parsing import parse_settings
from philodine.simulation import start_dinner
from philodine.table import build_table

settings = parse_settings(["4", "410", "200", "200", "3"])
table = build_table(settings, sys.stdout)
start_dinner(table)
```

- `philodine.parsing`: `validate_args` checks the raw argument list and
  raises `ArgumentError` when it is wrong; `parse_settings` turns the
  arguments into a `Settings` (durations in microseconds);
  `parse_leading_int` reads a leading signed integer from text.
- `philodine.table`: `build_table` lays out the `Table` with its `Fork`s
  and `Philosopher`s; `Status` lists the reported events.
- `philodine.simulation`: `start_dinner` runs the threads and returns when
  they have all finished; `write_status`, `eat`, `think`,
  `philosopher_died`, `dine`, `dine_alone` and `monitor` are the pieces it
  is made of.
- `philodine.timing`: `now_ms`, `now_us` and `precise_sleep`, a sleep that
  stops early when asked.
- `philodine.cli.main` runs the whole command and returns its exit status.