from typing import Any, Iterable, Mapping

from databags.errors import AmbiguousConstructionError
from databags.kinds import Symbol
from databags.mapping import TypedMapping, typed_mapping_type
from databags.resolver import ConstructionInput, InputStyle, resolve_types


def classify(args: tuple[Any, ...], fields: Mapping[str, Any]) -> ConstructionInput:
    """Normalize the positional and keyword arguments of a constructor.

    Accepted forms are: nothing, keyword fields, a single mapping, any
    number of ``(key, value)`` tuples, or a single iterable of pairs.

    Raises
    ------
    AmbiguousConstructionError
        When keyword fields are combined with positional arguments, or a
        mapping is combined with other positional arguments.
    TypeError
        When a positional argument is not a key/value pair.
    """
    if args and fields:
        raise AmbiguousConstructionError(
            'Cannot build a data-bag from both positional arguments and keyword fields'
        )

    if not args:
        if not fields:
            return ConstructionInput(InputStyle.EMPTY)
        return ConstructionInput(
            InputStyle.FIELDS, [(Symbol(name), value) for name, value in fields.items()]
        )

    if any(isinstance(arg, Mapping) for arg in args):
        if len(args) > 1:
            raise AmbiguousConstructionError(
                'Cannot build a data-bag from a mapping combined with other arguments'
            )
        source: Mapping[Any, Any] = args[0]
        return ConstructionInput(
            InputStyle.MAPPING, [(key, source[key]) for key in source], source
        )

    # A lone empty tuple is an empty sequence of pairs, not a malformed pair.
    if len(args) == 1 and (args[0] == () if isinstance(args[0], tuple) else not isinstance(args[0], (str, bytes))):
        pairs: Iterable[Any] = args[0]
        return ConstructionInput(InputStyle.PAIRS, [_as_pair(item) for item in pairs])

    return ConstructionInput(InputStyle.PAIRS, [_as_pair(arg) for arg in args])


def build_contents(
    args: tuple[Any, ...],
    fields: Mapping[str, Any],
    *,
    key_type: Any = None,
    value_type: Any = None,
    narrow_values: bool = False,
) -> TypedMapping:
    """Build a new backing mapping out of constructor arguments.

    The key and value types of the result are chosen by
    :func:`databags.resolver.resolve_types`. Entries given as a mapping are
    copied one level deep, so the result never aliases the argument. When a
    key is repeated, the last value wins.

    Parameters
    ----------
    args : tuple[Any, ...]
        Positional constructor arguments.
    fields : Mapping[str, Any]
        Keyword constructor arguments.
    key_type : Any, optional
        Explicit key type, by default None
    value_type : Any, optional
        Explicit value type, by default None
    narrow_values : bool, optional
        Use the exact type shared by all values as value type, by default
        False

    Returns
    -------
    TypedMapping
        A new, exclusively owned mapping.
    """
    source = classify(args, fields)
    key_type, value_type = resolve_types(
        source, key_type=key_type, value_type=value_type, narrow_values=narrow_values
    )
    return typed_mapping_type(key_type, value_type)(source.items)


def _as_pair(item: Any) -> tuple[Any, Any]:
    if isinstance(item, (tuple, list)) and len(item) == 2:  # pyright: ignore[reportUnknownArgumentType]
        return item[0], item[1]  # pyright: ignore[reportUnknownVariableType]
    raise TypeError(f'Expected a (key, value) pair, got {item!r}')
