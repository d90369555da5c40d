import json

import pytest
from rbxcss.cli.main import EXIT_CONFIG_ERROR, build_parser, main
from rbxcss.core.config import CSS_PATH_ENV


CSS = """
.title { color: #ff0000; font-weight: 700; }
.row { display: flex; justify-content: center; }
"""


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(CSS_PATH_ENV, raising=False)


@pytest.fixture
def css_file(tmp_path):
    path = tmp_path / "roblox.css"
    path.write_text(CSS, encoding="utf-8")
    return path


def test_compile_text_node(css_file, capsys):
    assert main(["compile", "--css", str(css_file), "--text", "title"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["attributes"] == {
        "TextColor3": "Color3.fromRGB(255, 0, 0)",
        "FontFace": 'new Font("rbxasset://fonts/families/SourceSansPro.json", '
        "Enum.FontWeight.Bold, Enum.FontStyle.Normal)",
    }
    assert data["children"] == []
    assert data["layout"] is None


def test_compile_tag_decides_text_node(css_file, capsys):
    main(["compile", "--css", str(css_file), "--tag", "img", "title"])
    data = json.loads(capsys.readouterr().out)
    assert data["attributes"] == {"ImageColor3": "Color3.fromRGB(255, 0, 0)"}


def test_compile_layout(css_file, capsys):
    main(["compile", "--css", str(css_file), "row"])
    layout = json.loads(capsys.readouterr().out)["layout"]
    assert layout["tag"] == "uilistlayout"
    assert layout["attributes"]["HorizontalAlignment"] == "Enum.HorizontalAlignment.Center"


def test_compile_uses_config_file(css_file, tmp_path, capsys):
    config = tmp_path / "rbxcss.json"
    config.write_text(json.dumps({"cssFilePath": str(css_file)}), encoding="utf-8")
    assert main(["compile", "--config", str(config), "--text", "title"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert "TextColor3" in data["attributes"]


def test_compile_invalid_config(tmp_path, capsys):
    config = tmp_path / "rbxcss.json"
    config.write_text("{broken", encoding="utf-8")
    assert main(["compile", "--config", str(config), "title"]) == EXIT_CONFIG_ERROR
    assert capsys.readouterr().out == ""


def test_dump(css_file, capsys):
    assert main(["dump", "--css", str(css_file)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert list(data) == ["title", "row"]
    assert data["title"]["declarations"]["font-weight"] == "700"


def test_dump_missing_file(tmp_path, capsys):
    assert main(["dump", "--css", str(tmp_path / "missing.css")]) == 0
    assert json.loads(capsys.readouterr().out) == {}


def test_tag_and_text_are_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["compile", "--tag", "span", "--text", "a"])


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
