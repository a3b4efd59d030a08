# pyright: reportPrivateUsage=false
import copy
from abc import ABCMeta
from enum import Enum
from logging import getLogger
from typing import Any, Callable, ClassVar, Iterable, Iterator, Mapping, MutableMapping, Self, TypeVar

from databags.attributes import is_dunder, property_key, supports_attributes
from databags.errors import IncompatibleConversionError, MissingExtensionPointError, NotFoundError
from databags.kinds import check_type_parameter, coerce, satisfies, type_name
from databags.resolver import common_key_type, declared_types, narrowest_value_type

_logger = getLogger(__name__)

_MISSING: Any = object()

_SPECIALIZATIONS: dict[tuple[type, Any, Any], type['AbstractDataBag']] = {}


class Ownership(Enum):
    """Whether a data-bag owns its contents or shares them with the caller."""

    OWNED = 'owned'
    SHARED = 'shared'


class DataBagMeta(ABCMeta):
    """Metaclass of data-bags.

    It makes parametric data-bag types subscriptable (``Container[str]``,
    ``Container[str, float]``) and lets ``isinstance`` honour the type
    parameters: a ``Container[str, float]`` instance is an instance of
    ``Container``, ``Container[str]`` and ``Container[str, float]``, but not
    of ``Container[Symbol]``.
    """

    def __getitem__(cls, params: Any) -> type[Any]:
        if not isinstance(params, tuple):
            params = (params,)
        if len(params) not in (1, 2):  # pyright: ignore[reportUnknownArgumentType]
            raise TypeError(f'{cls.__name__}[...] takes a key type and an optional value type')
        return specialize(cls, *params)  # pyright: ignore[reportArgumentType]

    def __instancecheck__(cls, instance: Any) -> bool:
        if '_origin' not in cls.__dict__:
            return super().__instancecheck__(instance)
        return cls.__subclasscheck__(type(instance))

    def __subclasscheck__(cls, subclass: type) -> bool:
        origin = cls.__dict__.get('_origin')
        if origin is None:
            return super().__subclasscheck__(subclass)
        # Nominal check only: ABCMeta walks the subclasses of `origin`, which
        # include this very class.
        if not isinstance(subclass, type) or origin not in subclass.__mro__:
            return False
        key_param = cls.__dict__['_key_param']
        value_param = cls.__dict__['_value_param']
        return (key_param is None or getattr(subclass, 'key_type', None) == key_param) and (
            value_param is None or getattr(subclass, 'value_type', None) == value_param
        )


class AbstractDataBag(MutableMapping[Any, Any], metaclass=DataBagMeta):
    """
    Super-type of data-bags: mappings whose entries are also attributes.

    A data-bag delegates every mapping operation to a backing mapping, the
    one returned by :meth:`contents`. Overriding :meth:`contents` is the only
    thing a concrete data-bag type has to do to inherit the whole behavior
    implemented here. The key and value types of a data-bag type are the
    class attributes ``key_type`` and ``value_type``.

    Attribute access is translated into key access for symbol and string
    keys (see :func:`databags.attributes.property_key`): ``bag.x`` is
    ``bag[Symbol('x')]`` or ``bag['x']``. Attributes defined by the class,
    such as methods, take precedence over entries with the same name.

    Notes
    -----
    - Item and attribute reads of a missing key raise
      :class:`~databags.errors.NotFoundError`.
    - Types which do not store their contents in the ``_data`` slot should
      also override :meth:`_adopt` to support :func:`wrap`.
    """

    __slots__ = ()

    key_type: ClassVar[Any] = Any
    value_type: ClassVar[Any] = Any

    _parametric: ClassVar[bool] = False
    _key_param: ClassVar[Any] = None
    _value_param: ClassVar[Any] = None

    def contents(self) -> MutableMapping[Any, Any]:
        """Return the mapping which stores the entries of this data-bag."""
        raise MissingExtensionPointError(type(self))

    @classmethod
    def _adopt(cls, data: MutableMapping[Any, Any], ownership: Ownership = Ownership.OWNED) -> Self:
        # Object creation bypasses the constructor: `data` is used as is.
        bag = object.__new__(cls)
        object.__setattr__(bag, '_data', data)
        object.__setattr__(bag, '_ownership', ownership)
        return bag

    @property
    def ownership(self) -> Ownership:
        try:
            return object.__getattribute__(self, '_ownership')
        except AttributeError:
            return Ownership.OWNED

    # Mapping protocol

    def __getitem__(self, key: Any) -> Any:
        try:
            return self.contents()[key]
        except KeyError:
            raise NotFoundError(key) from None

    def __setitem__(self, key: Any, value: Any) -> None:
        key, value = _coerce_entry(type(self), key, value)
        self.contents()[key] = value

    def __delitem__(self, key: Any) -> None:
        try:
            del self.contents()[key]
        except KeyError:
            raise NotFoundError(key) from None

    def __iter__(self) -> Iterator[Any]:
        return iter(self.contents())

    def __len__(self) -> int:
        return len(self.contents())

    def __contains__(self, key: Any) -> bool:
        return key in self.contents()

    def keys(self):  # pyright: ignore[reportIncompatibleMethodOverride]
        return self.contents().keys()

    def values(self):  # pyright: ignore[reportIncompatibleMethodOverride]
        return self.contents().values()

    def items(self):  # pyright: ignore[reportIncompatibleMethodOverride]
        return self.contents().items()

    def get(self, key: Any, default: Any = None) -> Any:
        return self.contents().get(key, default)

    def get_key(self, key: Any, default: Any = None) -> Any:
        """Return the stored key equal to ``key``, or ``default``."""
        data = self.contents()
        if key not in data:
            return default
        for stored in data:
            if stored == key:
                return stored
        return default

    def setdefault(self, key: Any, default: Any = None) -> Any:
        data = self.contents()
        if key in data:
            return data[key]
        key, value = _coerce_entry(type(self), key, default)
        data[key] = value
        return value

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        try:
            return self.contents().pop(key)
        except KeyError:
            if default is _MISSING:
                raise NotFoundError(key) from None
            return default

    def popitem(self) -> tuple[Any, Any]:
        return self.contents().popitem()

    def delete(self, key: Any) -> Self:
        """Remove the entry for ``key`` and return this data-bag.

        Raises
        ------
        NotFoundError
            When ``key`` is absent.
        """
        del self[key]
        return self

    def clear(self) -> Self:  # pyright: ignore[reportIncompatibleMethodOverride]
        self.contents().clear()
        return self

    def merge_into(
        self,
        *others: Mapping[Any, Any] | Iterable[tuple[Any, Any]],
        combine: Callable[[Any, Any], Any] | None = None,
    ) -> Self:
        """Merge the entries of ``others`` into this data-bag, left to right.

        Parameters
        ----------
        *others : Mapping[Any, Any] | Iterable[tuple[Any, Any]]
            Mappings (or data-bags) or iterables of key/value pairs.
        combine : Callable[[Any, Any], Any] | None, optional
            When given and a key is already present, the stored value becomes
            ``combine(existing, incoming)``; otherwise the last value wins,
            by default None

        Returns
        -------
        Self
            This data-bag.

        Raises
        ------
        IncompatibleConversionError
            When an entry does not fit the key/value types. Nothing is
            written in that case.
        """
        cls = type(self)
        # Convert everything first so that a rejected entry leaves the
        # data-bag untouched.
        staged: dict[Any, Any] = {}
        for other in others:
            items = other.items() if isinstance(other, Mapping) else other
            for key, value in items:
                key = coerce(cls.key_type, key)
                if combine is not None:
                    if key in staged:
                        value = combine(staged[key], value)
                    elif key in self:
                        value = combine(self[key], value)
                staged[key] = coerce(cls.value_type, value)
        self.contents().update(staged)
        return self

    def update(self, other: Any = (), /, **fields: Any) -> None:  # pyright: ignore[reportIncompatibleMethodOverride]
        self.merge_into(other, fields)

    def merge(
        self,
        *others: Mapping[Any, Any] | Iterable[tuple[Any, Any]],
        combine: Callable[[Any, Any], Any] | None = None,
    ) -> Self:
        """Return a merged copy of this data-bag, see :meth:`merge_into`."""
        return self.copy().merge_into(*others, combine=combine)

    def __or__(self, other: Any) -> Self:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.merge(other)  # pyright: ignore[reportUnknownArgumentType]

    def __ror__(self, other: Any) -> Self:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.empty().merge_into(other, self)  # pyright: ignore[reportUnknownArgumentType]

    def __ior__(self, other: Any) -> Self:
        return self.merge_into(other)

    # Copies and conversions

    def empty(self, key_type: Any = None, value_type: Any = None) -> 'AbstractDataBag':
        """Return a new, empty data-bag of the same kind.

        Parameters
        ----------
        key_type : Any, optional
            Key type of the result, by default the key type of this data-bag.
        value_type : Any, optional
            Value type of the result, by default the value type of this
            data-bag.

        Raises
        ------
        IncompatibleConversionError
            When other key/value types are requested for a data-bag type with
            fixed key and value types.
        """
        cls = type(self)
        key_type = cls.key_type if key_type is None else check_type_parameter(key_type)
        value_type = cls.value_type if value_type is None else check_type_parameter(value_type)

        data = self.contents()
        empty_data = getattr(data, 'empty', None)
        if callable(empty_data):
            fresh = empty_data(key_type, value_type)
        else:
            fresh = type(data)()

        if key_type == cls.key_type and value_type == cls.value_type:
            return cls._adopt(fresh)
        return bag_type_for(origin_of(cls), key_type, value_type)._adopt(fresh)

    def copy(self) -> Self:
        return self.empty().merge_into(self)  # type: ignore

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        bag: Self = self.empty()  # type: ignore
        memo[id(self)] = bag
        for key, value in self.items():
            bag[copy.deepcopy(key, memo)] = copy.deepcopy(value, memo)
        return bag

    @classmethod
    def convert(cls, bag: Mapping[Any, Any]) -> Self:
        """Convert ``bag`` into an instance of this data-bag type.

        ``bag`` itself is returned if it already is an instance, otherwise a
        new data-bag owning a copy of the entries is built.

        Raises
        ------
        IncompatibleConversionError
            When an entry does not satisfy the key/value types of ``cls``.
        """
        if isinstance(bag, cls):
            return bag
        return cls(bag)  # pyright: ignore[reportCallIssue]

    def narrowed(self) -> 'AbstractDataBag':
        """Return this data-bag with the tightest value type fitting its values.

        Narrowing only applies when all values have the same exact type;
        otherwise, or when the value type is already that tight, the data-bag
        itself is returned.
        """
        cls = type(self)
        value_type = narrowest_value_type(self.values())
        if value_type is Any or value_type == cls.value_type:
            return self
        return specialize(origin_of(cls), cls.key_type, value_type).convert(self)

    # Attribute access

    def __getattr__(self, name: str) -> Any:
        if is_dunder(name):
            raise AttributeError(name)
        # A missing contents() override is reported before key conversion.
        self.contents()
        return self[property_key(type(self), name)]

    def __setattr__(self, name: str, value: Any) -> None:
        if is_dunder(name):
            object.__setattr__(self, name, value)
            return
        self.contents()
        self[property_key(type(self), name)] = value

    def __delattr__(self, name: str) -> None:
        self.contents()
        del self[property_key(type(self), name)]

    def __dir__(self) -> Iterable[str]:
        names = list(super().__dir__())
        if supports_attributes(type(self)):
            names.extend(str(key) for key in self if isinstance(key, str) and key.isidentifier())
        return names

    # Presentation and pickling

    def __repr__(self) -> str:
        return f'{type(self).__name__}({dict(self.items())!r})'

    def _repr_pretty_(self, printer: Any, cycle: bool) -> None:
        from databags.display import render, summary

        printer.text(summary(self) if cycle else render(self))

    def __reduce__(self) -> tuple[Any, ...]:
        cls = type(self)
        if '_origin' in cls.__dict__:
            return (_restore, (cls.__dict__['_origin'], cls.key_type, cls.value_type, self.contents()))
        return (_restore, (cls, None, None, self.contents()))


def origin_of(cls: type) -> type[AbstractDataBag]:
    """Return the unparametrized data-bag type of ``cls``."""
    return cls.__dict__.get('_origin', cls)


def specialize(cls: type[AbstractDataBag], key_type: Any, value_type: Any = None) -> type[Any]:
    """Return the data-bag type ``cls`` parametrized by key and value types.

    Specializations are cached so ``Container[str, float] is
    Container[str, float]``. Without ``value_type`` the result only fixes the
    key type; building an instance of it resolves the value type.

    Raises
    ------
    TypeError
        When ``cls`` is already parametrized or is not a parametric type.
    """
    if '_origin' in cls.__dict__:
        raise TypeError(f'{cls.__name__} is already parametrized')
    if not cls._parametric:
        raise TypeError(f'{cls.__name__} is not a parametric data-bag type')

    key_type = check_type_parameter(key_type)
    if value_type is not None:
        value_type = check_type_parameter(value_type)

    params = (cls, key_type, value_type)
    bag_type = _SPECIALIZATIONS.get(params)
    if bag_type is None:
        if value_type is None:
            name = f'{cls.__name__}[{type_name(key_type)}]'
        else:
            name = f'{cls.__name__}[{type_name(key_type)}, {type_name(value_type)}]'
        bag_type = type(cls)(
            name,
            (cls,),
            {
                '__slots__': (),
                '__module__': cls.__module__,
                '__qualname__': name,
                '_origin': cls,
                '_key_param': key_type,
                '_value_param': value_type,
                'key_type': key_type,
                'value_type': Any if value_type is None else value_type,
            },
        )
        _SPECIALIZATIONS[params] = bag_type
        _logger.debug('Created data-bag type %s', name)
    return bag_type


def bag_type_for(origin: type[AbstractDataBag], key_type: Any, value_type: Any) -> type[Any]:
    """Return the concrete data-bag type of ``origin`` for the given key and value types."""
    if origin._parametric:
        return specialize(origin, key_type, value_type)
    if key_type != origin.key_type or value_type != origin.value_type:
        raise IncompatibleConversionError(
            f'{origin.__name__} has fixed key/value types '
            f'`{type_name(origin.key_type)}`/`{type_name(origin.value_type)}`, '
            f'cannot use `{type_name(key_type)}`/`{type_name(value_type)}`'
        )
    return origin


B = TypeVar('B', bound=AbstractDataBag)


def wrap(kind: type[B], data: Mapping[Any, Any]) -> B:
    """Wrap ``data`` in a data-bag of type ``kind`` sharing its contents.

    Unlike the constructors, no copy is made: changes made through the
    returned data-bag are visible through ``data`` and the other way around.
    A data-bag passed as ``data`` is unwrapped first, so the result shares the
    backing mapping of that data-bag.

    The key and value types of the result are those declared by ``data``.
    For a plain mapping, the key type is inferred from its keys and values
    are unconstrained. Key/value types fixed by ``kind`` must match the
    declared types of ``data``, or be satisfied by all entries of a plain
    mapping.

    Parameters
    ----------
    kind : type[B]
        The data-bag type, possibly parametrized (``Container[str]``).
    data : Mapping[Any, Any]
        The mapping to wrap.

    Returns
    -------
    B
        A data-bag whose backing mapping is ``data``.

    Raises
    ------
    IncompatibleConversionError
        When the key/value types of ``kind`` and ``data`` are incompatible.

    Examples
    --------
    >>> data = {'a': 1}
    >>> bag = wrap(Container, data)
    >>> bag.b = 33
    >>> data['b']
    33
    """
    if isinstance(data, AbstractDataBag):
        data = data.contents()

    origin = origin_of(kind)
    if origin._parametric:
        key_param, value_param = kind._key_param, kind._value_param
    else:
        key_param, value_param = origin.key_type, origin.value_type

    declared = declared_types(data)
    if declared is not None:
        key_type, value_type = declared
        for param, own in ((key_param, key_type), (value_param, value_type)):
            if param is not None and param != own:
                raise IncompatibleConversionError(
                    f'Cannot wrap a mapping with key/value types '
                    f'`{type_name(key_type)}`/`{type_name(value_type)}` in {kind.__name__}'
                )
    else:
        key_type = common_key_type(data) if key_param is None else key_param
        value_type = Any if value_param is None else value_param
        for key, value in data.items():
            if not (satisfies(key_type, key) and satisfies(value_type, value)):
                raise IncompatibleConversionError(
                    f'Entry {key!r}: {value!r} does not fit {kind.__name__} '
                    f'with key/value types `{type_name(key_type)}`/`{type_name(value_type)}`'
                )

    bag_type = bag_type_for(origin, key_type, value_type)
    _logger.debug('Wrapping %s in %s', type(data).__name__, bag_type.__name__)
    return bag_type._adopt(data, Ownership.SHARED)


def _coerce_entry(bag_type: type[AbstractDataBag], key: Any, value: Any) -> tuple[Any, Any]:
    return coerce(bag_type.key_type, key), coerce(bag_type.value_type, value)


def _restore(
    origin: type[AbstractDataBag], key_type: Any, value_type: Any, data: MutableMapping[Any, Any]
) -> AbstractDataBag:
    if key_type is None:
        return origin._adopt(data)
    return bag_type_for(origin, key_type, value_type)._adopt(data)
