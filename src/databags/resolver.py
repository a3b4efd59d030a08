import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from databags.kinds import Symbol

# Abstract numeric classes are registered, not inherited, so they never show
# up in a MRO.
_NUMERIC_TOWER: tuple[type, ...] = (
    numbers.Integral,
    numbers.Rational,
    numbers.Real,
    numbers.Complex,
    numbers.Number,
)


class InputStyle(Enum):
    EMPTY = 'empty'
    FIELDS = 'fields'
    PAIRS = 'pairs'
    MAPPING = 'mapping'


@dataclass
class ConstructionInput:
    """Normalized construction arguments of a data-bag.

    Attributes
    ----------
    style : InputStyle
        How the entries were supplied.
    items : list[tuple[Any, Any]]
        The key/value pairs, in the order they were supplied.
    source : Mapping[Any, Any] | None
        The mapping the entries were taken from when ``style`` is
        ``InputStyle.MAPPING``.
    """

    style: InputStyle
    items: list[tuple[Any, Any]] = field(default_factory=list)
    source: Mapping[Any, Any] | None = None


def common_type(types: Iterable[type]) -> Any:
    """Return the most specific common supertype of ``types``.

    When every type is a string type, ``str`` is preferred over any looser
    common ancestor. ``Any`` is returned when nothing more specific than
    ``object`` is shared or when ``types`` is empty.
    """
    candidates = list(dict.fromkeys(types))
    if not candidates:
        return Any
    if len(candidates) == 1:
        return candidates[0]
    if all(issubclass(tp, str) for tp in candidates):
        return str

    for base in candidates[0].__mro__:
        if base is object:
            break
        if all(issubclass(tp, base) for tp in candidates):
            return base

    for base in _NUMERIC_TOWER:
        if all(issubclass(tp, base) for tp in candidates):
            return base

    return Any


def common_key_type(keys: Iterable[Any]) -> Any:
    return common_type(type(key) for key in keys)


def narrowest_value_type(values: Iterable[Any]) -> Any:
    """Return the single exact type shared by all ``values``, else ``Any``."""
    found = set(type(value) for value in values)
    if len(found) == 1:
        return found.pop()
    return Any


def declared_types(mapping: Mapping[Any, Any]) -> tuple[Any, Any] | None:
    """Return the declared ``(key_type, value_type)`` of ``mapping``.

    Typed mappings and data-bags declare their key and value types; plain
    mappings do not, in which case ``None`` is returned.
    """
    key_type = getattr(type(mapping), 'key_type', None)
    value_type = getattr(type(mapping), 'value_type', None)
    if key_type is None or value_type is None:
        return None
    return key_type, value_type


def resolve_types(
    source: ConstructionInput,
    *,
    key_type: Any = None,
    value_type: Any = None,
    narrow_values: bool = False,
) -> tuple[Any, Any]:
    """Choose the key and value types of a new backing mapping.

    Rules, first match wins for each parameter:

    1. An explicit ``key_type``/``value_type`` is used verbatim.
    2. Keyword fields, and no input at all, give ``Symbol`` keys.
    3. Pairs give the common type of their keys (see :func:`common_type`).
    4. A mapping gives its declared key type; the key type of an untyped
       mapping is inferred from its keys as for pairs.
    5. Values are ``Any`` unless ``narrow_values`` is set and all values
       share one exact type.

    Parameters
    ----------
    source : ConstructionInput
        The normalized construction arguments.
    key_type : Any, optional
        Explicit key type, by default None
    value_type : Any, optional
        Explicit value type, by default None
    narrow_values : bool, optional
        Opt in to value type narrowing, by default False

    Returns
    -------
    tuple[Any, Any]
        The resolved key and value types.
    """
    if key_type is None:
        match source.style:
            case InputStyle.EMPTY | InputStyle.FIELDS:
                key_type = Symbol
            case InputStyle.PAIRS:
                key_type = common_key_type(key for key, _ in source.items)
            case InputStyle.MAPPING:
                assert source.source is not None
                declared = declared_types(source.source)
                if declared is not None:
                    key_type = declared[0]
                else:
                    key_type = common_key_type(key for key, _ in source.items)

    if value_type is None:
        if narrow_values:
            value_type = narrowest_value_type(value for _, value in source.items)
        else:
            value_type = Any

    return key_type, value_type
