import numbers
from collections.abc import Sized
from datetime import date
from functools import singledispatch
from typing import Any

from databags.bag import AbstractDataBag
from databags.config import config_setting
from databags.kinds import Symbol, type_name


class DisplaySettings:
    """Settings of :func:`render`, bound through :mod:`databags.config`.

    Examples
    --------
    >>> from databags.config import bind_config_values
    >>> bind_config_values(DisplaySettings={'indent': 4})
    >>> DisplaySettings().indent
    4
    """

    @config_setting(default=2)
    def indent(self) -> int:
        """Number of spaces before each entry."""
        ...

    @config_setting(default=' => ')
    def separator(self) -> str:
        """Text between a key and its value."""
        ...

    @config_setting(default=True)
    def align_keys(self) -> bool:
        """Pad keys so that values line up."""
        ...


def summary(bag: AbstractDataBag) -> str:
    count = len(bag)
    return f'{type(bag).__name__} with {count} {"entry" if count == 1 else "entries"}'


def render(bag: AbstractDataBag, settings: DisplaySettings | None = None) -> str:
    """Render the entries of ``bag``, one per line, sorted by key.

    Keys that cannot be compared with each other are sorted by type name and
    ``repr`` instead.
    """
    settings = settings or DisplaySettings()
    keys = list(bag.keys())
    if not keys:
        return summary(bag)

    try:
        keys.sort()
    except TypeError:
        keys.sort(key=lambda key: (type(key).__name__, repr(key)))

    labels = [format_key(key) for key in keys]
    width = max(len(label) for label in labels) if settings.align_keys else 0
    margin = ' ' * settings.indent

    lines = [summary(bag) + ':']
    for key, label in zip(keys, labels):
        lines.append(f'{margin}{label.ljust(width)}{settings.separator}{format_value(bag[key])}')
    return '\n'.join(lines)


def format_key(key: Any) -> str:
    if isinstance(key, Symbol):
        return str(key)
    return repr(key)


@singledispatch
def format_value(value: Any) -> str:
    """Short text for a value; register new implementations for other types."""
    if isinstance(value, Sized) and not isinstance(value, type):
        return f'{len(value)}-element {type_name(type(value))}'
    return f'<{type_name(type(value))}>'


@format_value.register
def _(value: numbers.Number) -> str:
    return str(value)


@format_value.register(str)
@format_value.register(range)
def _(value: str | range) -> str:
    return repr(value)


@format_value.register(date)
def _(value: date) -> str:
    return f'{type(value).__name__}({value.isoformat()!r})'


@format_value.register
def _(value: AbstractDataBag) -> str:
    return summary(value)

