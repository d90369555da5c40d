"""
CSS extractor: stylesheet text -> :class:`StyleSheet`.

Only top-level rules whose prelude is a single class selector are read. Each
declaration value is rebuilt into a flat, space separated token string
(``padding: 1rem`` becomes ``"1 rem"``) which the synthesizer tokenizes again
later. Custom properties are kept per rule and substituted while that rule's
own declarations are rebuilt; they never leak into other rules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import tinycss2
from tinycss2 import ast as css_ast

from .logger import get_logger
from .models import ClassRule, StyleSheet
from .rbx_types import format_number

log = get_logger(__name__)

__all__ = [
    "CssExtractor",
    "OPACITY_PROPERTIES",
    "extract_stylesheet",
    "load_stylesheet",
    "read_stylesheet",
]

# Colour property -> property receiving the alpha channel of rgb()
OPACITY_PROPERTIES: Dict[str, str] = {
    "background-color": "background-opacity",
    "border-color": "border-opacity",
    "color": "text-opacity",
}
DEFAULT_OPACITY_PROPERTY = "opacity"

_RGB_FUNCTIONS = {"rgb", "rgba"}
_OPERATORS = {"/", ",", "+", "-", "*"}
_SKIPPED_TOKENS = (css_ast.WhitespaceToken, css_ast.Comment)

MAX_VAR_DEPTH = 10


def opacity_property_for(property_name: str) -> str:
    return OPACITY_PROPERTIES.get(property_name, DEFAULT_OPACITY_PROPERTY)


def _significant(tokens: Sequence[css_ast.Node]) -> List[css_ast.Node]:
    return [t for t in tokens if not isinstance(t, _SKIPPED_TOKENS)]


def _class_name_from_prelude(prelude: Sequence[css_ast.Node]) -> Optional[str]:
    tokens = _significant(prelude)
    if len(tokens) != 2:
        return None
    dot, ident = tokens
    if not (isinstance(dot, css_ast.LiteralToken) and dot.value == "."):
        return None
    if not isinstance(ident, css_ast.IdentToken):
        return None
    return ident.value


class CssExtractor:
    """Builds a :class:`StyleSheet` from CSS source text."""

    def __init__(self, max_var_depth: int = MAX_VAR_DEPTH):
        self.max_var_depth = max_var_depth

    def extract(self, css_text: str) -> StyleSheet:
        rules: Dict[str, ClassRule] = {}
        nodes = tinycss2.parse_stylesheet(
            css_text, skip_comments=True, skip_whitespace=True
        )
        for node in nodes:
            if not isinstance(node, css_ast.QualifiedRule):
                if isinstance(node, css_ast.ParseError):
                    log.debug(f"Skipping unparseable CSS at line {node.source_line}: {node.message}")
                continue
            extracted = self.extract_rule(node)
            if extracted is None:
                continue
            class_name, rule = extracted
            if class_name in rules:
                rule = rules[class_name].merged_with(rule)
            rules[class_name] = rule
        return StyleSheet(rules)

    def extract_rule(
        self, node: css_ast.QualifiedRule
    ) -> Optional[Tuple[str, ClassRule]]:
        class_name = _class_name_from_prelude(node.prelude)
        if class_name is None:
            log.debug(
                f"Skipping rule with unsupported selector '{tinycss2.serialize(node.prelude).strip()}'"
            )
            return None

        declarations = [
            item
            for item in tinycss2.parse_blocks_contents(
                node.content, skip_comments=True, skip_whitespace=True
            )
            if isinstance(item, css_ast.Declaration)
        ]

        # Custom properties apply to the whole rule, wherever they are declared.
        variables: Dict[str, str] = {}
        for declaration in declarations:
            if declaration.name.startswith("--"):
                variables[declaration.name] = tinycss2.serialize(
                    declaration.value
                ).strip()

        styles: Dict[str, str] = {}
        for declaration in declarations:
            if declaration.name.startswith("--"):
                continue
            self._extract_declaration(
                declaration.lower_name, declaration.value, variables, styles
            )

        return class_name, ClassRule(variables=variables, declarations=styles)

    def _extract_declaration(
        self,
        property_name: str,
        tokens: Sequence[css_ast.Node],
        variables: Dict[str, str],
        styles: Dict[str, str],
    ) -> None:
        extras: Dict[str, str] = {}
        parts = self.reconstruct(property_name, tokens, variables, extras)
        if parts:
            styles[property_name] = " ".join(parts)
        styles.update(extras)

    def reconstruct(
        self,
        property_name: str,
        tokens: Sequence[css_ast.Node],
        variables: Dict[str, str],
        extras: Dict[str, str],
        depth: int = 0,
    ) -> List[str]:
        """
        Rebuild a declaration value into its token parts.

        Args:
            property_name: Declared property (decides the rgb() alpha target)
            tokens: Component values of the declaration
            variables: Custom properties of the current rule
            extras: Receives derived declarations (rgb() alpha -> opacity)
            depth: var() nesting depth

        Returns:
            List of value parts, empty when nothing could be resolved
        """
        parts: List[str] = []
        for token in tokens:
            if isinstance(token, css_ast.FunctionBlock):
                if token.lower_name in _RGB_FUNCTIONS:
                    channels = self._rgb(property_name, token, variables, extras, depth)
                    if channels:
                        parts.append(channels)
                elif token.lower_name == "var":
                    resolved = self._resolve_var(token, variables, depth)
                    if resolved is not None:
                        parts.extend(
                            self.reconstruct(
                                property_name, resolved, variables, extras, depth + 1
                            )
                        )
                else:
                    log.debug(f"Ignoring unsupported function {token.name}() in '{property_name}'")
            elif isinstance(token, css_ast.DimensionToken):
                parts.append(f"{token.representation} {token.lower_unit}")
            elif isinstance(token, css_ast.PercentageToken):
                parts.append(f"{token.representation} %")
            elif isinstance(token, css_ast.IdentToken):
                parts.append(token.value)
            elif isinstance(token, css_ast.NumberToken):
                parts.append(token.representation)
            elif isinstance(token, css_ast.HashToken):
                parts.append(f"#{token.value}")
            elif isinstance(token, css_ast.LiteralToken) and token.value in _OPERATORS:
                parts.append(token.value)
        return parts

    def _resolve_var(
        self,
        function: css_ast.FunctionBlock,
        variables: Dict[str, str],
        depth: int,
    ) -> Optional[List[css_ast.Node]]:
        if depth >= self.max_var_depth:
            log.warning(f"var() nesting deeper than {self.max_var_depth}, ignoring")
            return None

        arguments = list(function.arguments)
        name: Optional[str] = None
        fallback: List[css_ast.Node] = []
        for index, token in enumerate(arguments):
            if isinstance(token, css_ast.LiteralToken) and token.value == ",":
                fallback = arguments[index + 1 :]
                break
            if name is None and isinstance(token, css_ast.IdentToken):
                name = token.value

        if name is not None and variables.get(name):
            return tinycss2.parse_component_value_list(
                variables[name], skip_comments=True
            )
        if _significant(fallback):
            return fallback
        log.debug(f"Unresolved variable {name} with no fallback")
        return None

    def _rgb(
        self,
        property_name: str,
        function: css_ast.FunctionBlock,
        variables: Dict[str, str],
        extras: Dict[str, str],
        depth: int,
    ) -> Optional[str]:
        channels: List[str] = []
        alpha: Optional[str] = None
        for token in _significant(function.arguments):
            if len(channels) < 3:
                if isinstance(token, css_ast.NumberToken):
                    channels.append(token.representation)
                continue
            if alpha is not None:
                break
            if isinstance(token, css_ast.NumberToken):
                alpha = token.representation
            elif isinstance(token, css_ast.PercentageToken):
                alpha = format_number(token.value / 100)
            elif (
                isinstance(token, css_ast.FunctionBlock)
                and token.lower_name == "var"
            ):
                resolved = self._resolve_var(token, variables, depth)
                if resolved is not None:
                    alpha_parts = self.reconstruct(
                        property_name, resolved, variables, extras, depth + 1
                    )
                    alpha = " ".join(alpha_parts) or None

        if alpha is not None:
            extras[opacity_property_for(property_name)] = alpha
        if len(channels) < 3:
            log.debug(f"rgb() in '{property_name}' has fewer than three channels")
            return None
        return ",".join(channels)


def extract_stylesheet(css_text: str) -> StyleSheet:
    """Parse stylesheet text into a :class:`StyleSheet`."""
    return CssExtractor().extract(css_text)


def read_stylesheet(path: Path) -> StyleSheet:
    """Read and extract a stylesheet file; read errors propagate."""
    sheet = extract_stylesheet(path.read_text(encoding="utf-8"))
    log.info(f"Loaded {len(sheet)} CSS classes from {path}")
    return sheet


def load_stylesheet(path: Path) -> StyleSheet:
    """
    Read and extract a stylesheet file.

    A missing or unreadable file is not an error: a warning is logged and an
    empty sheet is returned so every class resolves to no declarations.
    """
    if not path.exists():
        log.warning(f"CSS file not found: {path}")
        return StyleSheet.empty()
    try:
        return read_stylesheet(path)
    except (OSError, UnicodeDecodeError) as exc:
        log.warning(f"Could not read CSS file {path}: {exc}")
        return StyleSheet.empty()
