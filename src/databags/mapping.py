from typing import Any, ClassVar, Iterable, Mapping, Self

from databags.kinds import check_type_parameter, coerce, type_name


class TypedMapping(dict[Any, Any]):
    """Dictionary whose keys and values are bound to declared types.

    ``TypedMapping[K, V]`` is a cached subclass with ``key_type = K`` and
    ``value_type = V``. Every write converts keys and values with
    :func:`databags.kinds.coerce` and fails with
    :class:`~databags.errors.IncompatibleConversionError` when that is not
    possible, so the contents never drift from the declared types.

    Examples
    --------
    >>> data = TypedMapping[str, float](dx=1)
    >>> data
    TypedMapping[str, float]({'dx': 1.0})
    """

    key_type: ClassVar[Any] = Any
    value_type: ClassVar[Any] = Any

    _specializations: ClassVar[dict[tuple[Any, Any], type['TypedMapping']]] = {}

    def __class_getitem__(cls, params: Any) -> type['TypedMapping']:  # pyright: ignore[reportIncompatibleMethodOverride]
        if not isinstance(params, tuple):
            params = (params, Any)
        if len(params) != 2:
            raise TypeError(f'{cls.__name__}[...] takes a key type and a value type')
        return typed_mapping_type(*params)

    def __init__(self, other: Mapping[Any, Any] | Iterable[tuple[Any, Any]] = (), /, **kwargs: Any) -> None:
        super().__init__()
        self.update(other, **kwargs)

    def __setitem__(self, key: Any, value: Any) -> None:
        key, value = self._coerce_item(key, value)
        super().__setitem__(key, value)

    def update(self, other: Mapping[Any, Any] | Iterable[tuple[Any, Any]] = (), /, **kwargs: Any) -> None:  # pyright: ignore[reportIncompatibleMethodOverride]
        # Convert everything first so that a rejected entry leaves the
        # mapping untouched.
        if isinstance(other, Mapping) or hasattr(other, 'keys'):
            items = [(key, other[key]) for key in other.keys()]  # type: ignore
        else:
            items = list(other)
        items.extend(kwargs.items())
        super().update(self._coerce_item(key, value) for key, value in items)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        key = coerce(self.key_type, key)
        if key in self:
            return self[key]
        value = coerce(self.value_type, default)
        super().__setitem__(key, value)
        return value

    @classmethod
    def fromkeys(cls, iterable: Iterable[Any], value: Any = None) -> Self:  # type: ignore
        return cls((key, value) for key in iterable)

    def copy(self) -> Self:
        return type(self)(self)

    def empty(self, key_type: Any = None, value_type: Any = None) -> 'TypedMapping':
        """Return a new empty mapping, optionally with other key/value types."""
        return typed_mapping_type(
            self.key_type if key_type is None else key_type,
            self.value_type if value_type is None else value_type,
        )()

    def __or__(self, other: Any) -> Self:  # type: ignore
        if not isinstance(other, Mapping):
            return NotImplemented
        result = self.copy()
        result.update(other)
        return result

    def __ror__(self, other: Any) -> Self:  # type: ignore
        if not isinstance(other, Mapping):
            return NotImplemented
        result = type(self)(other)
        result.update(self)
        return result

    def __ior__(self, other: Any) -> Self:  # type: ignore
        self.update(other)
        return self

    def __repr__(self) -> str:
        return f'{type(self).__name__}({super().__repr__()})'

    def __reduce__(self) -> tuple[Any, ...]:
        return (_restore_typed_mapping, (self.key_type, self.value_type, dict(self)))

    def _coerce_item(self, key: Any, value: Any) -> tuple[Any, Any]:
        return coerce(self.key_type, key), coerce(self.value_type, value)


def typed_mapping_type(key_type: Any, value_type: Any) -> type[TypedMapping]:
    """Return the ``TypedMapping`` subclass for the given key and value types."""
    key_type = check_type_parameter(key_type)
    value_type = check_type_parameter(value_type)
    if key_type is Any and value_type is Any:
        return TypedMapping

    cache = TypedMapping._specializations  # pyright: ignore[reportPrivateUsage]
    params = (key_type, value_type)
    cls = cache.get(params)
    if cls is None:
        name = f'TypedMapping[{type_name(key_type)}, {type_name(value_type)}]'
        cls = type(
            name,
            (TypedMapping,),
            {
                '__slots__': (),
                '__module__': __name__,
                '__qualname__': name,
                'key_type': key_type,
                'value_type': value_type,
            },
        )
        cache[params] = cls
    return cls


def _restore_typed_mapping(key_type: Any, value_type: Any, data: dict[Any, Any]) -> TypedMapping:
    return typed_mapping_type(key_type, value_type)(data)
