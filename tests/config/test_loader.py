import json
from pathlib import Path

import pytest
import yaml

from databags.config.loader import load_config_file


def test_load_yaml_json_and_toml(tmp_path: Path):
    (tmp_path / 'a.yaml').write_text(yaml.safe_dump({'units': 'km', 'dx': 0.2}), encoding='utf-8')
    (tmp_path / 'b.json').write_text(json.dumps({'units': 'km', 'dx': 0.2}), encoding='utf-8')
    (tmp_path / 'c.toml').write_text('units = "km"\ndx = 0.2\n', encoding='utf-8')

    for name in ('a.yaml', 'b.json', 'c.toml'):
        assert load_config_file(tmp_path / name) == {'units': 'km', 'dx': 0.2}


def test_load_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / 'missing.yaml')

    unsupported = tmp_path / 'settings.ini'
    unsupported.write_text('[a]\n', encoding='utf-8')
    with pytest.raises(RuntimeError):
        load_config_file(unsupported)

    not_a_mapping = tmp_path / 'list.json'
    not_a_mapping.write_text('[1, 2]', encoding='utf-8')
    with pytest.raises(RuntimeError):
        load_config_file(not_a_mapping)
