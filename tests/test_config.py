import json

import pytest
from rbxcss.core.config import (
    CSS_PATH_ENV,
    DEFAULT_CSS_FILE_PATH,
    ConfigError,
    TransformerConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(CSS_PATH_ENV, raising=False)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file():
    config = load_config()
    assert config.css_file_path == DEFAULT_CSS_FILE_PATH
    assert str(config.css_path).replace("\\", "/") == "src/roblox.css"


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.json") == TransformerConfig()


def test_bare_object(tmp_path):
    path = write_json(tmp_path / "rbxcss.json", {"cssFilePath": "styles/ui.css"})
    assert load_config(path).css_file_path == "styles/ui.css"


def test_python_field_name(tmp_path):
    path = write_json(tmp_path / "rbxcss.json", {"css_file_path": "a.css"})
    assert load_config(path).css_file_path == "a.css"


@pytest.mark.parametrize("section", ["rbxcss", "transformer"])
def test_nested_section(tmp_path, section):
    path = write_json(
        tmp_path / "tsconfig.json",
        {"compilerOptions": {}, section: {"cssFilePath": "nested.css"}},
    )
    assert load_config(path).css_file_path == "nested.css"


def test_unknown_keys_are_ignored(tmp_path):
    path = write_json(tmp_path / "rbxcss.json", {"somethingElse": 1})
    assert load_config(path).css_file_path == DEFAULT_CSS_FILE_PATH


def test_invalid_json(tmp_path):
    path = tmp_path / "rbxcss.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_object(tmp_path):
    path = write_json(tmp_path / "rbxcss.json", ["a.css"])
    with pytest.raises(ConfigError):
        load_config(path)


def test_schema_error(tmp_path):
    path = write_json(tmp_path / "rbxcss.json", {"cssFilePath": ["a.css"]})
    with pytest.raises(ConfigError):
        load_config(path)


def test_environment_override(tmp_path, monkeypatch):
    path = write_json(tmp_path / "rbxcss.json", {"cssFilePath": "from-file.css"})
    monkeypatch.setenv(CSS_PATH_ENV, "from-env.css")
    assert load_config(path).css_file_path == "from-env.css"
    assert load_config().css_file_path == "from-env.css"
