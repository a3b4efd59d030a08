import numbers
from enum import Enum
from types import UnionType
from typing import Any

from databags.errors import IncompatibleConversionError


class Symbol(str):
    """Symbolic key: an identifier-like token.

    A ``Symbol`` compares and hashes equal to the plain string spelled the
    same way, so a symbol-keyed mapping can also be indexed with strings.

    Examples
    --------
    >>> Symbol('units') == 'units'
    True
    >>> Symbol('units')
    Symbol('units')
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f'Symbol({str.__repr__(self)})'


class KeyKind(Enum):
    SYMBOLIC = 'symbolic'
    TEXTUAL = 'textual'
    OTHER = 'other'


def key_kind(key_type: Any) -> KeyKind:
    if key_type is Symbol:
        return KeyKind.SYMBOLIC
    if key_type is str:
        return KeyKind.TEXTUAL
    return KeyKind.OTHER


def check_type_parameter(tp: Any) -> Any:
    """Return ``tp`` if it may be used as a key or value type bound."""
    if tp is Any or isinstance(tp, (type, UnionType)):
        return tp
    raise TypeError(f'Type parameters must be `Any`, a class or a union of classes, got {tp!r}')


def type_name(tp: Any) -> str:
    if tp is Any:
        return 'Any'
    if isinstance(tp, type):
        return tp.__qualname__
    if isinstance(tp, UnionType):
        return ' | '.join(type_name(arg) for arg in tp.__args__)
    return repr(tp)


def satisfies(bound: Any, value: Any) -> bool:
    return bound is Any or isinstance(value, bound)


def coerce(bound: Any, value: Any) -> Any:
    """Convert ``value`` so that it satisfies the type ``bound``.

    Parameters
    ----------
    bound : Any
        A type parameter (see :func:`check_type_parameter`).
    value : Any
        The key or value to store.

    Returns
    -------
    Any
        ``value`` itself, or an equal value of type ``bound``.

    Raises
    ------
    IncompatibleConversionError
        When no exact conversion exists.
    """
    if bound is Any:
        return value
    if bound is str and isinstance(value, Symbol):
        return str(value)
    if isinstance(value, bound):
        return value
    if bound is Symbol and isinstance(value, str):
        return Symbol(value)
    if (
        isinstance(bound, type)
        and issubclass(bound, numbers.Number)
        and isinstance(value, numbers.Number)
    ):
        try:
            converted = bound(value)  # pyright: ignore[reportCallIssue]
        except (TypeError, ValueError, OverflowError) as ex:
            raise _incompatible(bound, value) from ex
        if converted == value:
            return converted

    raise _incompatible(bound, value)


def _incompatible(bound: Any, value: Any) -> IncompatibleConversionError:
    return IncompatibleConversionError(
        f'Cannot convert {value!r} of type `{type_name(type(value))}` to `{type_name(bound)}`'
    )
