from typing import Any


class DataBagError(Exception):
    """Base class of the errors raised by data-bags."""


class NotFoundError(DataBagError, KeyError, AttributeError):
    """Raised when a key is absent and no default was supplied.

    It is both a ``KeyError`` (item access) and an ``AttributeError``
    (attribute access), so ``hasattr`` and ``getattr(bag, name, default)``
    behave as they do for ordinary objects.
    """

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return repr(self.key)


class UnsupportedKeyConversionError(DataBagError, AttributeError):
    """Raised on attribute access when the key type of a data-bag has no
    conversion from attribute names."""

    def __init__(self, bag_type: type, name: str) -> None:
        from databags.kinds import type_name

        key_type = getattr(bag_type, 'key_type', Any)
        super().__init__(
            f'Converting attribute name "{name}" to key type `{type_name(key_type)}` is '
            f'not implemented. As a result, syntax `obj.{name}` is not supported for '
            f'objects of type `{bag_type.__name__}`.'
        )
        self.bag_type = bag_type
        self.attribute = name


class AmbiguousConstructionError(DataBagError, TypeError):
    """Raised when construction arguments mix incompatible styles."""


class IncompatibleConversionError(DataBagError, TypeError):
    """Raised when a key or value cannot satisfy a key/value type bound."""


class MissingExtensionPointError(DataBagError, NotImplementedError):
    """Raised when a data-bag type does not override ``contents()``."""

    def __init__(self, bag_type: type) -> None:
        super().__init__(f'method contents() has not been specialized for {bag_type.__name__}')
        self.bag_type = bag_type
