import json
import tomllib
from logging import getLogger
from os import PathLike
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

_logger = getLogger(__name__)


def load_config_file(path: str | PathLike[str] | Path) -> dict[str, Any]:
    """Read a mapping from a YAML, JSON or TOML file.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    RuntimeError
        If the file type is not supported or the file does not hold a
        mapping at the top level.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Config file not found: {path}')

    config = None
    text = path.read_text(encoding='utf-8')
    suffix = path.suffix.lower()
    match suffix:
        case '.yaml' | '.yml':
            config = yaml.safe_load(text)
        case '.json':
            config = json.loads(text)
        case '.toml':
            config = tomllib.loads(text)
        case _:
            raise RuntimeError(
                f'Unsupported config file type: {suffix}, supported extensions: .yaml, .yml, .json, .toml'
            )

    if not isinstance(config, Mapping):
        raise RuntimeError('Config file must contain a mapping at the top level')

    _logger.debug('Loaded %s', path)
    return dict(cast(Mapping[str, Any], config))
