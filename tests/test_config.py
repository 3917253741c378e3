import os

import pytest
from pydantic import ValidationError

from config import Config, DEFAULT_RANGES_FILE, BASE_DIR


def test_defaults():
    config = Config()
    assert config.ISBN_RANGES_FILE == DEFAULT_RANGES_FILE
    assert config.DEFAULT_FORMAT == 'ISBN-13'
    assert config.DEFAULT_GTIN14_PREFIX == 1
    assert config.LOG_LEVEL == 'INFO'


def test_relative_ranges_file_is_resolved():
    config = Config(ISBN_RANGES_FILE='data/ranges.xml')
    assert config.ISBN_RANGES_FILE == os.path.join(BASE_DIR, 'data/ranges.xml')


def test_values_are_normalized():
    config = Config(DEFAULT_FORMAT=' isbn-10 ', LOG_LEVEL='debug', DEFAULT_GTIN14_PREFIX='3  # cartons')
    assert config.DEFAULT_FORMAT == 'ISBN-10'
    assert config.LOG_LEVEL == 'DEBUG'
    assert config.DEFAULT_GTIN14_PREFIX == 3


@pytest.mark.parametrize("overrides", [
    {'DEFAULT_FORMAT': 'UPC'},
    {'DEFAULT_GTIN14_PREFIX': 10},
    {'DEFAULT_GTIN14_PREFIX': 'x'},
    {'LOG_LEVEL': 'LOUD'},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Config(**overrides)


def test_environment_variables(monkeypatch):
    monkeypatch.setenv('DEFAULT_FORMAT', 'GTIN-14')
    monkeypatch.setenv('LOG_JSON', 'false')
    config = Config()
    assert config.DEFAULT_FORMAT == 'GTIN-14'
    assert config.LOG_JSON is False


def test_create_app_fails_on_missing_dataset(tmp_path):
    from isbnkit import create_app
    from isbnkit.services.ranges import RangeTableError

    with pytest.raises(RangeTableError):
        create_app(ISBN_RANGES_FILE=str(tmp_path / 'missing.xml'))


def test_create_app_points_to_range_file_download(tmp_path):
    from isbnkit import create_app
    from isbnkit.services.ranges import RANGE_MESSAGE_URL, RangeTableError

    with pytest.raises(RangeTableError, match='not found') as excinfo:
        create_app(ISBN_RANGES_FILE=str(tmp_path / 'missing.xml'))
    assert RANGE_MESSAGE_URL in str(excinfo.value)
