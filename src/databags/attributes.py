from typing import Any

from databags.errors import UnsupportedKeyConversionError
from databags.kinds import KeyKind, Symbol, key_kind


def property_key(bag_type: type, name: str) -> Any:
    """Convert the attribute ``name`` into a key of data-bags of type ``bag_type``.

    Symbol keys use the name as a symbol, string keys use it as a string.
    Any other key type has no conversion.

    Raises
    ------
    UnsupportedKeyConversionError
        When the key type of ``bag_type`` is neither ``Symbol`` nor ``str``.
    """
    match key_kind(getattr(bag_type, 'key_type', Any)):
        case KeyKind.SYMBOLIC:
            return Symbol(name)
        case KeyKind.TEXTUAL:
            return str(name)
        case KeyKind.OTHER:
            raise UnsupportedKeyConversionError(bag_type, name)


def supports_attributes(bag_type: type) -> bool:
    return key_kind(getattr(bag_type, 'key_type', Any)) is not KeyKind.OTHER


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith('__') and name.endswith('__')
