"""Tests for stylesheet extraction."""

import logging

import pytest

from rbxcss.core.css_extractor import (
    CssExtractor,
    extract_stylesheet,
    load_stylesheet,
    read_stylesheet,
    opacity_property_for,
)
from rbxcss.core.models import ClassRule, StyleSheet


SAMPLE_CSS = """
/* Theme */
.card {
    --accent: #ff8800;
    --pad: 1rem;
    background-color: var(--accent);
    padding: var(--pad) 2px;
    border-radius: 8px;
}

.title {
    color: rgb(10, 20, 30 / 0.4);
    font-size: 1.5rem;
    font-weight: 700;
}

.row { display: flex; gap: 4px; }
"""


class TestDeclarationReconstruction:
    def test_dimensions_keep_unit_as_separate_token(self):
        sheet = extract_stylesheet(".a { padding: 1rem 2px; width: 50vw; }")
        declarations = sheet.get("a").declarations
        assert declarations["padding"] == "1 rem 2 px"
        assert declarations["width"] == "50 vw"

    def test_percentage_and_number(self):
        sheet = extract_stylesheet(".a { left: 25%; line-height: 1.5; }")
        declarations = sheet.get("a").declarations
        assert declarations["left"] == "25 %"
        assert declarations["line-height"] == "1.5"

    def test_hash_and_ident(self):
        sheet = extract_stylesheet(".a { color: #ff8800; text-align: center; }")
        declarations = sheet.get("a").declarations
        assert declarations["color"] == "#ff8800"
        assert declarations["text-align"] == "center"

    def test_ratio_operators(self):
        sheet = extract_stylesheet(".a { aspect-ratio: 16/9; }")
        assert sheet.get("a").declarations["aspect-ratio"] == "16 / 9"

    def test_property_names_are_lowercased(self):
        sheet = extract_stylesheet(".a { Background-Color: #000000; }")
        assert "background-color" in sheet.get("a").declarations

    def test_unsupported_function_contributes_nothing(self):
        sheet = extract_stylesheet(".a { width: calc(100% - 4px); height: 4px; }")
        declarations = sheet.get("a").declarations
        assert "width" not in declarations
        assert declarations["height"] == "4 px"


class TestRgbFunction:
    def test_alpha_goes_to_paired_opacity(self):
        sheet = extract_stylesheet(".a { background-color: rgb(10, 20, 30 / 0.4); }")
        declarations = sheet.get("a").declarations
        assert declarations["background-color"] == "10,20,30"
        assert declarations["background-opacity"] == "0.4"

    def test_text_colour_alpha(self):
        sheet = extract_stylesheet(".a { color: rgba(1, 2, 3, 0.5); }")
        declarations = sheet.get("a").declarations
        assert declarations["color"] == "1,2,3"
        assert declarations["text-opacity"] == "0.5"

    def test_percentage_alpha(self):
        sheet = extract_stylesheet(".a { border-color: rgb(1 2 3 / 50%); }")
        assert sheet.get("a").declarations["border-opacity"] == "0.5"

    def test_alpha_from_variable(self):
        sheet = extract_stylesheet(
            ".a { --alpha: 0.25; background-color: rgb(1, 2, 3, var(--alpha)); }"
        )
        assert sheet.get("a").declarations["background-opacity"] == "0.25"

    def test_without_alpha(self):
        sheet = extract_stylesheet(".a { background-color: rgb(1, 2, 3); }")
        declarations = sheet.get("a").declarations
        assert declarations == {"background-color": "1,2,3"}

    def test_opacity_property_mapping(self):
        assert opacity_property_for("background-color") == "background-opacity"
        assert opacity_property_for("color") == "text-opacity"
        assert opacity_property_for("border-color") == "border-opacity"
        assert opacity_property_for("fill") == "opacity"


class TestVariables:
    def test_variables_are_recorded(self):
        sheet = extract_stylesheet(".a { --g: 2rem; gap: var(--g); }")
        rule = sheet.get("a")
        assert rule.variables == {"--g": "2rem"}
        assert rule.declarations["gap"] == "2 rem"

    def test_variable_declared_after_use(self):
        sheet = extract_stylesheet(".a { gap: var(--g); --g: 3px; }")
        assert sheet.get("a").declarations["gap"] == "3 px"

    def test_fallback(self):
        sheet = extract_stylesheet(".a { gap: var(--missing, 4px); }")
        assert sheet.get("a").declarations["gap"] == "4 px"

    def test_unresolved_without_fallback(self):
        sheet = extract_stylesheet(".a { gap: var(--missing); height: 1px; }")
        assert "gap" not in sheet.get("a").declarations

    def test_variables_do_not_leak_between_rules(self):
        sheet = extract_stylesheet(".a { --g: 2rem; } .b { gap: var(--g); }")
        assert "gap" not in sheet.get("b").declarations

    def test_nested_variables(self):
        sheet = extract_stylesheet(".a { --base: 2px; --gap: var(--base); gap: var(--gap); }")
        assert sheet.get("a").declarations["gap"] == "2 px"

    def test_self_reference_is_bounded(self, caplog):
        caplog.set_level(logging.WARNING, logger="rbxcss")
        sheet = extract_stylesheet(".a { --loop: var(--loop); gap: var(--loop); }")
        assert "gap" not in sheet.get("a").declarations
        assert any("nesting" in r.message for r in caplog.records)


class TestSelectors:
    def test_only_single_class_selectors(self):
        css = """
        .ok { color: #000000; }
        div { color: #111111; }
        .a .b { color: #222222; }
        .c:hover { color: #333333; }
        #id { color: #444444; }
        @media (min-width: 10px) { .m { color: #555555; } }
        """
        sheet = extract_stylesheet(css)
        assert list(sheet) == ["ok"]

    def test_duplicate_selectors_are_merged(self):
        sheet = extract_stylesheet(
            ".a { color: #ffffff; gap: 1px; } .a { gap: 2px; }"
        )
        assert sheet.get("a").declarations == {"color": "#ffffff", "gap": "2 px"}

    def test_garbage_does_not_raise(self):
        sheet = extract_stylesheet("}}} .a { color: #000000; }")
        assert isinstance(sheet, StyleSheet)


class TestDeterminism:
    def test_parsing_twice_gives_identical_sheets(self):
        first = extract_stylesheet(SAMPLE_CSS)
        second = CssExtractor().extract(SAMPLE_CSS)
        assert first == second
        assert first.to_dict() == second.to_dict()
        assert list(first) == ["card", "title", "row"]

    def test_sample_contents(self):
        sheet = extract_stylesheet(SAMPLE_CSS)
        assert sheet.get("card") == ClassRule(
            variables={"--accent": "#ff8800", "--pad": "1rem"},
            declarations={
                "background-color": "#ff8800",
                "padding": "1 rem 2 px",
                "border-radius": "8 px",
            },
        )
        assert sheet.get("title").declarations["text-opacity"] == "0.4"


class TestLoadStylesheet:
    def test_directory_warns_and_returns_empty(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="rbxcss")
        assert len(load_stylesheet(tmp_path)) == 0
        assert any("Could not read CSS file" in r.message for r in caplog.records)

    def test_strict_reader_raises_for_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_stylesheet(tmp_path / "missing.css")

    def test_missing_file_warns_and_returns_empty(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="rbxcss")
        sheet = load_stylesheet(tmp_path / "missing.css")
        assert len(sheet) == 0
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "CSS file not found" in warnings[0].message

    def test_reads_file(self, tmp_path):
        css_file = tmp_path / "roblox.css"
        css_file.write_text(SAMPLE_CSS, encoding="utf-8")
        sheet = load_stylesheet(css_file)
        assert "title" in sheet
        assert len(sheet) == 3
