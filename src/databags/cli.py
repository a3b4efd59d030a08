import argparse
import logging
import sys
from os import PathLike
from pathlib import Path
from typing import Any, TypeVar

from databags.bag import AbstractDataBag
from databags.config import bind_config_file, ensure_required_config_values, load_config_file
from databags.container import Container
from databags.display import render

_logger = logging.getLogger(__name__)


def default_argparser(description: str = 'Show the contents of a settings file as a data-bag') -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='databags', description=description)
    parser.add_argument(
        'file', type=Path, help='Path to a YAML, JSON or TOML file holding a mapping.'
    )
    parser.add_argument(
        '-s',
        '--settings',
        type=Path,
        default=None,
        help='Optional, path to a file with display settings (supported extensions: *.json, *.yaml/yml, *.toml)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug messages.')
    parser.epilog = 'Trailing `--key value`, `--key=value` and `--flag` arguments override entries of the file.'

    return parser


def cli_args_to_config(args: list[str]) -> dict[str, Any]:
    """Parse ``--key value``, ``--key=value`` and ``--flag`` arguments.

    Tokens which are neither an option nor the value of one are ignored.
    """
    parsed: dict[str, Any] = {}

    i = 0
    while i < len(args):
        token = args[i]
        if not token.startswith('--'):
            i += 1
            continue

        key_val = token[2:]
        if '=' in key_val:
            key, val_str = key_val.split('=', 1)
        else:
            # Look ahead for a separate value token.
            if i + 1 < len(args) and not args[i + 1].startswith('-'):
                val_str = args[i + 1]
                i += 1
            else:
                val_str = None
            key = key_val

        parsed[key] = _convert_value(val_str)
        i += 1

    return parsed


B = TypeVar('B', bound=AbstractDataBag)


def load_bag(path: str | PathLike[str] | Path, kind: type[B] = Container) -> B:
    """Build a data-bag of type ``kind`` out of a YAML, JSON or TOML file."""
    return kind(load_config_file(path))  # pyright: ignore[reportCallIssue]


def main(argv: list[str] | None = None) -> int:
    argparser = default_argparser()
    namespace, rest_args = argparser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if namespace.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if namespace.settings is not None:
        bind_config_file(namespace.settings)
        ensure_required_config_values()

    bag = load_bag(namespace.file)
    overrides = cli_args_to_config(rest_args)
    if overrides:
        _logger.debug('Overriding %d entries from the command line', len(overrides))
        bag.merge_into(overrides)

    sys.stdout.write(render(bag) + '\n')
    return 0


def _convert_value(val: str | None) -> Any:
    # Flag
    if val is None:
        return True

    low = val.lower()
    if low == 'true':
        return True
    if low == 'false':
        return False

    try:
        return int(val)
    except ValueError:
        pass

    try:
        return float(val)
    except ValueError:
        pass

    # Handle strings
    if len(val) >= 2 and ((val[0] == val[-1] == "'") or (val[0] == val[-1] == '"')):
        return val[1:-1]
    return val
