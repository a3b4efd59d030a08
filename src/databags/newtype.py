import sys
from logging import getLogger
from typing import Any, MutableMapping

from databags.bag import AbstractDataBag, DataBagMeta
from databags.builder import build_contents
from databags.kinds import Symbol

_logger = getLogger(__name__)


def newtype(name: str, *, module: str | None = None, doc: str | None = None) -> type[AbstractDataBag]:
    """Create a new data-bag type with symbolic keys and unconstrained values.

    The generated type stores its entries in a private slot, has the same
    constructors as :class:`~databags.container.Container` and inherits
    every other operation from :class:`~databags.bag.AbstractDataBag`.

    Parameters
    ----------
    name : str
        Name of the new type.
    module : str | None, optional
        Value of ``__module__`` of the new type, by default the module of the
        caller. Types bound to a module level name of that module can be
        pickled.
    doc : str | None, optional
        Docstring of the new type, by default None

    Returns
    -------
    type[AbstractDataBag]
        The new data-bag type.

    Examples
    --------
    >>> Settings = newtype('Settings')
    >>> settings = Settings(verbose=True)
    >>> settings.verbose
    True
    """
    if not name.isidentifier():
        raise ValueError(f'Type name must be a valid identifier, got {name!r}')

    if module is None:
        module = sys._getframe(1).f_globals.get('__name__', '__main__')  # pyright: ignore[reportPrivateUsage]

    def __new__(cls: type[AbstractDataBag], *args: Any, **fields: Any) -> AbstractDataBag:
        return cls._adopt(build_contents(args, fields, key_type=Symbol, value_type=Any))  # pyright: ignore[reportPrivateUsage]

    def contents(self: AbstractDataBag) -> MutableMapping[Any, Any]:
        return object.__getattribute__(self, '_data')

    namespace: dict[str, Any] = {
        '__slots__': ('_data', '_ownership'),
        '__module__': module,
        '__qualname__': name,
        '__doc__': doc or f'{name}(*args, **fields): data-bag with symbolic keys.',
        '__new__': __new__,
        'contents': contents,
        'key_type': Symbol,
        'value_type': Any,
    }
    bag_type = DataBagMeta(name, (AbstractDataBag,), namespace)
    _logger.debug('Created data-bag type %s.%s', module, name)
    return bag_type
