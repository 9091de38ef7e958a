"""Command-line argument checking and conversion into simulation settings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

_WHITESPACE = "\t\n\v\f\r "
_DIGITS = "0123456789"
_MIN_TIME_US = 60_000


class ArgumentError(ValueError):
    """Raised when the command-line arguments are unusable."""


@dataclass(frozen=True)
class Settings:
    """Simulation parameters; all durations are in microseconds."""

    philosopher_count: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    meals_required: int = -1


def parse_leading_int(text: str) -> int:
    """Read an optionally signed integer from the start of ``text``.

    Leading whitespace is skipped and parsing stops at the first non-digit;
    text with no digits yields 0.
    """
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    value = 0
    for char in rest:
        if char not in _DIGITS:
            break
        value = value * 10 + int(char)
    return sign * value


def validate_args(args: Sequence[str]) -> list[str]:
    """Check argument count and that every argument is made of digits only.

    ``args`` excludes the program name. Returns the arguments as a list.
    """
    if len(args) not in (4, 5):
        raise ArgumentError("Error, en el numero de argumentos")
    if any(char not in _DIGITS for arg in args for char in arg):
        raise ArgumentError("Error, los argumentos tienen que ser numericos")
    return list(args)


def parse_settings(args: Sequence[str]) -> Settings:
    """Convert arguments (without the program name) into ``Settings``.

    Times are given in milliseconds and must each be at least 60.
    """
    time_to_die = parse_leading_int(args[1]) * 1000
    time_to_eat = parse_leading_int(args[2]) * 1000
    time_to_sleep = parse_leading_int(args[3]) * 1000
    if min(time_to_die, time_to_eat, time_to_sleep) < _MIN_TIME_US:
        raise ArgumentError("Error, usa tiempos mayores de 60")
    meals = parse_leading_int(args[4]) if len(args) > 4 else -1
    return Settings(
        philosopher_count=parse_leading_int(args[0]),
        time_to_die=time_to_die,
        time_to_eat=time_to_eat,
        time_to_sleep=time_to_sleep,
        meals_required=meals,
    )