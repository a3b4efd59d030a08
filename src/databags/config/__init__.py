# pyright: reportUnusedImport=false
from databags.config.decorator import config_setting
from databags.config.loader import load_config_file
from databags.config.validation import (
    ConfigValidationError,
    bind_config_file,
    bind_config_values,
    ensure_required_config_values,
    get_config,
    reset_config,
    resolve_config_value,
)
