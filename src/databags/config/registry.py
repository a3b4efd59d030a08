from dataclasses import dataclass
from typing import Any, Callable, List

_NO_DEFAULT: Any = object()


@dataclass(frozen=True)
class ConfigProperty:
    """Metadata for a settings-backed property.

    The registry stores one entry per property declared with
    :func:`~databags.config.decorator.config_setting`, so settings can be
    validated without importing the classes declaring them.

    Attributes
    ----------
    key:
        The name used in the settings mapping.
    collection_name:
        The name of the class that declares the property. Settings may be
        scoped to it as ``{collection_name}.{key}``.
    expected_type:
        The type expected for the value, or ``None`` when no type checking
        should be performed.
    fget:
        The decorated function; kept for introspection.
    default:
        The value used when no setting is bound, or ``_NO_DEFAULT`` when the
        setting is required.
    """

    key: str
    collection_name: str
    expected_type: type[Any] | None
    fget: Callable[..., Any]
    default: Any = _NO_DEFAULT

    @property
    def required(self) -> bool:
        return self.default is _NO_DEFAULT


_REGISTRY: List[ConfigProperty] = []


def register(entry: ConfigProperty) -> None:
    """Register a ``ConfigProperty`` entry in the global registry.

    No uniqueness check is made; callers are expected to avoid duplicate
    registrations.
    """

    _REGISTRY.append(entry)


def all_registered() -> List[ConfigProperty]:
    """Return a shallow copy of all registered entries."""

    return list(_REGISTRY)
