from logging import getLogger
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from databags.config.loader import load_config_file
from databags.config.registry import all_registered

_logger = getLogger(__name__)

_CONFIG_CONTEXT: dict[str, Any] = {}


class ConfigValidationError(Exception):
    """Raised when settings validation fails.

    This exception is raised by :func:`ensure_required_config_values` when
    one or more registered settings are missing or have a value of the wrong
    type.
    """


def bind_config_values(**kwargs: Any) -> None:
    """Bind settings for later property resolution.

    The values are merged into the global settings context read by
    :func:`resolve_config_value` and by properties declared with
    ``config_setting``. Keys are plain strings, either flat
    (``'DisplaySettings.indent'``) or nested (``DisplaySettings={'indent': 4}``).
    """
    _CONFIG_CONTEXT.update(kwargs)  # pyright: ignore[reportConstantRedefinition]


def bind_config_file(path: str | PathLike[str] | Path) -> None:
    """Bind the settings stored in a YAML, JSON or TOML file."""
    values = load_config_file(path)
    _logger.debug('Binding %d settings from %s', len(values), path)
    bind_config_values(**values)


def reset_config() -> None:
    """Remove all bound settings."""
    _CONFIG_CONTEXT.clear()


def get_config() -> Mapping[str, Any]:
    """Return a read-only view of the currently bound settings."""
    return MappingProxyType(_CONFIG_CONTEXT)


def resolve_config_value(
    *, config: Mapping[str, Any] | None = None, key: str, collection_name: str | None = None
) -> Any:
    """Resolve a setting using string-based precedence.

    Candidate keys are tried in this order (first match wins):

    - ``{collection_name}.{key}``, flat or nested
    - ``{key}`` as a flat key
    - ``{key}`` as a dotted path into nested mappings

    Parameters
    ----------
    config:
        The mapping to search, by default the bound settings.
    key:
        The setting name.
    collection_name:
        The name of the class declaring the setting (used to build scoped
        keys).

    Returns
    -------
    Any
        The first matching value.

    Raises
    ------
    KeyError
        If none of the candidate keys is present.
    """
    if config is None:
        config = get_config()

    if collection_name:
        try:
            return resolve_config_value(config=config, key=f'{collection_name}.{key}')
        except KeyError:
            pass

    # Flat keys > nested keys
    if key in config:
        return config[key]

    collection, _, restkey = key.partition('.')
    if restkey and isinstance(config.get(collection), Mapping):
        return resolve_config_value(config=config[collection], key=restkey)

    raise KeyError(f'No config value for {key}')


def ensure_required_config_values(config: Mapping[str, Any] | None = None) -> None:
    """Validate settings against the registered properties.

    Required settings must resolve; every resolved setting must match its
    expected type. All problems are collected before raising.

    Raises
    ------
    ConfigValidationError
        When required settings are missing or values have the wrong type.
    """
    if config is None:
        config = get_config()

    errors: list[str] = []

    for entry in all_registered():
        try:
            value = resolve_config_value(
                config=config,
                key=entry.key,
                collection_name=entry.collection_name,
            )
        except KeyError as exc:
            if entry.required:
                errors.append(str(exc))
            continue

        if entry.expected_type and not isinstance(value, entry.expected_type):
            errors.append(
                f'Type mismatch for {entry.collection_name}.{entry.key}: '
                f'expected {entry.expected_type.__name__}, '
                f'got {type(value).__name__}'
            )

    if errors:
        raise ConfigValidationError('Configuration validation failed:\n' + '\n'.join(errors))
