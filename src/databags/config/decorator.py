from functools import wraps
from typing import Any, Callable, Generic, TypeVar, overload, get_type_hints
import warnings

from databags.config.registry import _NO_DEFAULT, ConfigProperty, register  # pyright: ignore[reportPrivateUsage]
from databags.config.validation import resolve_config_value


T = TypeVar('T')


class Setting(property, Generic[T]):
    """Read-only property whose value comes from the bound settings."""

    def __init__(self, fget: Callable[[Any], T], doc: str | None = None) -> None:
        super().__init__(fget, None, None, doc)

    @overload
    def __get__(self, instance: None, owner: type[Any]) -> 'Setting[T]': ...
    @overload
    def __get__(self, instance: Any, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: Any, owner: type[Any] | None = None) -> 'T | Setting[T]':
        if instance is None:
            return self
        return super().__get__(instance, owner)


@overload
def config_setting(
    name: str | None = None, *, default: Any = _NO_DEFAULT
) -> Callable[[Callable[..., T]], Setting[T]]: ...
@overload
def config_setting(name: Callable[..., T]) -> Setting[T]: ...


def config_setting(
    name: str | Callable[..., T] | None = None,
    *,
    default: Any = _NO_DEFAULT,
) -> Callable[[Callable[..., T]], Setting[T]] | Setting[T]:
    '''Decorator for settings-backed properties.

    The property value is resolved at each access with
    :func:`~databags.config.validation.resolve_config_value`, scoped by the
    name of the class of the instance.

    Parameters
    ----------
    name : str | None
        Explicit setting name to use instead of the property name, by
        default None
    default : Any
        Value returned when the setting is not bound. Settings without a
        default are required.

    Returns
    -------
    Callable[[Callable[..., T]], Setting[T]]
        A decorator which converts the given function into a settings-backed
        ``Setting``.

    Raises
    ------
    KeyError
        On access, when a required setting is not bound.
    '''

    explicit_name = None if callable(name) else name

    def decorator(func: Callable[..., T]) -> Setting[T]:
        qual_parts = func.__qualname__.split('.')
        if len(qual_parts) >= 2:
            class_name: str = qual_parts[-2]
        else:
            class_name: str = qual_parts[0]
        key: str = explicit_name or func.__name__

        type_hints = get_type_hints(func)
        expected_type: type[Any] | None = None
        if 'return' in type_hints:
            expected_type = type_hints['return']
        else:
            warnings.warn(
                f'Setting "{class_name}.{key}" cannot be type checked because it does not declare a return type',
                RuntimeWarning,
            )

        @wraps(func)
        def wrapper(self: Any) -> T:
            try:
                return resolve_config_value(key=key, collection_name=type(self).__name__)
            except KeyError:
                if default is _NO_DEFAULT:
                    raise
                return default

        # Registration occurs at decoration time
        register(
            ConfigProperty(
                key=key,
                collection_name=class_name,
                expected_type=expected_type,
                fget=func,
                default=default,
            )
        )

        return Setting(wrapper, func.__doc__)

    if callable(name):
        func = name
        return decorator(func)

    return decorator
