"""Command-line entry point for the dining philosophers simulation."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from philodine.parsing import ArgumentError, parse_leading_int, parse_settings, validate_args
from philodine.simulation import start_dinner
from philodine.table import build_table


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulation.

    Arguments: number_of_philosophers time_to_die time_to_eat time_to_sleep
    [number_of_times_each_philosopher_must_eat], times in milliseconds.
    Returns the exit status.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        args = validate_args(args)
        settings = parse_settings(args)
    except ArgumentError as error:
        sys.stdout.write(str(error))
        sys.stdout.flush()
        return 1
    table = build_table(settings, sys.stdout)
    if args[0] == "1":
        first = table.philosophers[0]
        print(f"0\t{first.id} has taken a fork")
        print(f"{parse_leading_int(args[1]) + 1}\t{first.id} died")
        return 1
    start_dinner(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())