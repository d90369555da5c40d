"""Tests for the StyleService facade."""

import logging

import pytest
from rbxcss.core.config import CSS_PATH_ENV, TransformerConfig
from rbxcss.core.elements import Element, Expression, Fragment
from rbxcss.core.rbx_types import Color3, FontWeight, UDim
from rbxcss.core.services import StyleService


CSS = """
.panel { background-color: #102030; display: flex; gap: 0.5rem; }
.title { color: #ffffff; font-weight: 700; }
.rounded { border-radius: 6px; }
"""


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(CSS_PATH_ENV, raising=False)


@pytest.fixture
def service(tmp_path):
    css_file = tmp_path / "roblox.css"
    css_file.write_text(CSS, encoding="utf-8")
    return StyleService.for_stylesheet(css_file)


def test_style_class_list(service):
    result = service.style(["title"], is_text_node=True)
    assert result.attributes["TextColor3"] == Color3(255, 255, 255)
    assert result.attributes["FontFace"].weight == FontWeight.BOLD


def test_missing_stylesheet_gives_empty_result(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="rbxcss")
    config = TransformerConfig(css_file_path=str(tmp_path / "missing.css"))
    service = StyleService(config)
    service.load()
    result = service.style(["panel", "title"], is_text_node=True)
    assert result.is_empty
    assert result.nodes == []
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_from_config_file(tmp_path):
    css_file = tmp_path / "ui.css"
    css_file.write_text(CSS, encoding="utf-8")
    config_file = tmp_path / "rbxcss.json"
    config_file.write_text('{"cssFilePath": "%s"}' % css_file.as_posix(), encoding="utf-8")
    service = StyleService.from_config_file(config_file)
    assert "panel" in service.sheet


class TestStyleElement:
    def test_class_name_is_consumed(self, service):
        element = Element("span", {"className": "title", "defaultAnchorPoint": True})
        styled = service.style_element(element)
        assert styled is element
        assert element.tag == "textlabel"
        assert "className" not in element.attributes
        assert "defaultAnchorPoint" not in element.attributes
        assert element.attributes["TextColor3"] == Color3(255, 255, 255)

    def test_image_colour_for_non_text_tag(self, service):
        element = Element("img", {"className": "title"})
        service.style_element(element)
        assert element.attributes["ImageColor3"] == Color3(255, 255, 255)
        assert "FontFace" not in element.attributes

    def test_unaliased_text_kind_is_not_a_text_node(self, service):
        element = Element("textlabel", {"className": "title"})
        service.style_element(element)
        assert element.tag == "textlabel"
        assert element.attributes["ImageColor3"] == Color3(255, 255, 255)
        assert "TextColor3" not in element.attributes

    def test_unstyled_element_still_aliased_and_folded(self, service):
        element = Element("p", children=["Score: ", Expression("score")])
        service.style_element(element)
        assert element.tag == "textlabel"
        assert element.attributes == {"Text": "`Score: ${score}`"}

    def test_layout_without_parent(self, service):
        styled = service.style_element(Element("div", {"className": "panel rounded"}))
        assert isinstance(styled, Fragment)
        frame, layout = styled.children
        assert frame.attributes["BackgroundColor3"] == Color3(16, 32, 48)
        assert [child.tag for child in frame.element_children()] == ["uicorner"]
        assert layout.tag == "uilistlayout"
        assert layout.attributes["Padding"] == UDim(0, 8)

    def test_style_tree(self, service):
        child = Element("div", {"className": "panel"})
        root = Element("body", children=[child, Element("span", {"className": "title"}, ["Hi"])])
        styled = service.style_tree(root)
        assert styled is root
        assert root.tag == "screengui"
        assert [c.tag for c in root.element_children()] == [
            "frame",
            "textlabel",
            "uilistlayout",
        ]
        assert root.element_children()[1].attributes["Text"] == "`Hi`"
