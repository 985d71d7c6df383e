import argparse
from typing import Any, Iterable

_TRUE_WORDS = frozenset({"yes", "y", "true", "t", "1", "on"})
_FALSE_WORDS = frozenset({"no", "n", "false", "f", "0", "off"})


def tobool(value: Any) -> bool:
    """Interpret a command line, config file or environment value as a bool.

    u16view.conf and U16VIEW_* variables arrive as text, so "on", "Y" and
    "0" must all work. Anything else raises ValueError.
    """
    word = str(value).lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"Cannot read {value!r} as a boolean")


def _switch_group(parser: argparse.ArgumentParser, name: str, help: str | None):
    group = parser.add_mutually_exclusive_group()
    return group, f"{help} --no-{name} switches it off."


def add_boolean_argument(
    parser: argparse.ArgumentParser,
    name: str,
    dest: str | None = None,
    default: bool = False,
    help: str | None = None
) -> None:
    """Add --name [VALUE] and --no-name.

    The optional VALUE goes through tobool so a config file can say
    "time = off".
    """
    dest = dest or name
    group, switch_help = _switch_group(parser, name, help)
    group.add_argument(
        f"--{name}",
        metavar="",
        nargs="?",
        dest=dest,
        default=default,
        const=True,
        type=tobool,
        help=switch_help,
    )
    group.add_argument(f"--no-{name}", dest=dest, action="store_false")


def add_flag_argument(
    parser: argparse.ArgumentParser,
    name: str,
    dest: str | None = None,
    default: bool = False,
    help: str | None = None
) -> None:
    """Add a plain --name / --no-name pair that takes no value."""
    dest = dest or name
    group, switch_help = _switch_group(parser, name, help)
    group.add_argument(
        f"--{name}", dest=dest, default=default, action="store_true", help=switch_help
    )
    group.add_argument(
        f"--no-{name}", dest=dest, action="store_false", default=not default
    )


def ordered_unique(iterable: Iterable[Any]) -> list[Any]:
    """Drop repeats, keeping first-seen order (a file named twice is scanned once)."""
    return list(dict.fromkeys(iterable))
