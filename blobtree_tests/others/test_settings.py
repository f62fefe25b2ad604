from pathlib import Path

import pytest
from pydantic import ValidationError

from blobtree.conf import DEFAULT_SETTINGS_FILEPATH, UNITTESTS_SETTINGS_FILEPATH
from blobtree.conf.get_settings import (
    CONFIG_YAML_ENV_VAR,
    _load_settings_singleton,
    _reset_settings_singleton,
    get_global_settings,
)
from blobtree.conf.settings import CodecSettings


@pytest.fixture
def reset_settings():
    _reset_settings_singleton()
    yield
    _reset_settings_singleton()


def test_default_settings_from_yaml():
    settings = CodecSettings.from_yaml(filepath=DEFAULT_SETTINGS_FILEPATH)
    assert settings == CodecSettings()


def test_unittests_settings_extend_default():
    settings = CodecSettings.from_yaml(filepath=UNITTESTS_SETTINGS_FILEPATH)
    assert settings.HASH_NAME == 'sha224'
    assert settings.DECODE_EMPTY_CONTAINER_AS_NULL is True


def test_extends_with_override(tmp_path: Path):
    custom = tmp_path / 'custom.yml'
    custom.write_text(f'extends: {DEFAULT_SETTINGS_FILEPATH}\n\nESCAPE_HTML: true\nJSON_INDENT: "  "\n')
    settings = CodecSettings.from_yaml(filepath=custom)
    assert settings.ESCAPE_HTML is True
    assert settings.JSON_INDENT == '  '
    assert settings.HASH_NAME == 'sha224'


def test_invalid_hash_name():
    with pytest.raises(ValidationError):
        CodecSettings(HASH_NAME='md5')


def test_json_indent_cannot_hold_escaped_chars():
    for indent in ('<', ' & ', '\u2028'):
        with pytest.raises(ValidationError):
            CodecSettings(JSON_INDENT=indent)
    assert CodecSettings(JSON_INDENT='\t', JSON_PREFIX='>').JSON_PREFIX == '>'


def test_extra_fields_are_forbidden():
    with pytest.raises(ValidationError):
        CodecSettings.model_validate({'NOT_A_SETTING': 1})


def test_settings_are_frozen():
    settings = CodecSettings()
    with pytest.raises(ValidationError):
        settings.ESCAPE_HTML = True  # type: ignore[misc]


def test_global_settings_singleton(reset_settings, monkeypatch):
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, UNITTESTS_SETTINGS_FILEPATH)
    settings = get_global_settings()
    assert get_global_settings() is settings
    assert settings == CodecSettings.from_yaml(filepath=UNITTESTS_SETTINGS_FILEPATH)


def test_loading_from_another_source_fails(reset_settings):
    _load_settings_singleton(UNITTESTS_SETTINGS_FILEPATH)
    with pytest.raises(Exception, match='loading config twice'):
        _load_settings_singleton(DEFAULT_SETTINGS_FILEPATH)
