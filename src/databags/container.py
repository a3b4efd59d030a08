from typing import Any, MutableMapping, Self

from databags.bag import AbstractDataBag, bag_type_for, origin_of
from databags.builder import build_contents


class Container(AbstractDataBag):
    """
    General purpose data-bag with parametric key and value types.

    A ``Container`` is built like a ``dict`` and its entries can be accessed
    as items or as attributes. The constructors always copy their argument,
    use :func:`databags.wrap` to share an existing mapping instead.

    Parameters
    ----------
    *args : Any
        Nothing, a mapping, ``(key, value)`` pairs, or an iterable of pairs.
    **fields : Any
        Entries given as keywords. Their keys are symbols. Keyword fields
        cannot be combined with positional arguments.

    Notes
    -----
    - Without type parameters, the key type is inferred from the arguments
      (symbols for keywords and for an empty container) and values are not
      constrained.
    - ``Container[K]`` and ``Container[K, V]`` fix the key type and the value
      type of the built container, keys and values are converted to them.

    Examples
    --------
    >>> bag = Container(units='km', dx=0.20)
    >>> bag.units
    'km'
    >>> bag.dy = 0.15
    >>> Container[str, float]({'dx': 1}).dx
    1.0
    """

    __slots__ = ('_data', '_ownership')

    _parametric = True

    def __new__(cls, *args: Any, **fields: Any) -> Self:
        data = build_contents(args, fields, key_type=cls._key_param, value_type=cls._value_param)
        return bag_type_for(origin_of(cls), data.key_type, data.value_type)._adopt(data)

    def contents(self) -> MutableMapping[Any, Any]:
        return object.__getattribute__(self, '_data')
