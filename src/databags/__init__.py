# pyright: reportUnusedImport=false
from databags.bag import AbstractDataBag, Ownership, wrap
from databags.builder import build_contents
from databags.container import Container
from databags.errors import (
    AmbiguousConstructionError,
    DataBagError,
    IncompatibleConversionError,
    MissingExtensionPointError,
    NotFoundError,
    UnsupportedKeyConversionError,
)
from databags.kinds import Symbol
from databags.mapping import TypedMapping
from databags.newtype import newtype
