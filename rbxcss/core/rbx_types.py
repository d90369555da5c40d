"""
Roblox value types emitted by the synthesizer.

Every type renders to the roblox-ts expression that constructs it via
``str()``, e.g. ``str(UDim(0, 32)) == "new UDim(0, 32)"``. Size constraints
may hold a :class:`ViewportExpression`, which only has meaning at runtime, so
those values stay symbolic rather than numeric.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

__all__ = [
    "MATH_HUGE",
    "AttributeValue",
    "Color3",
    "EnumItem",
    "Font",
    "UDim",
    "UDim2",
    "Vector2",
    "ViewportExpression",
    "format_number",
    "render_value",
    "ApplyStrokeMode",
    "FillDirection",
    "FontStyle",
    "FontWeight",
    "HorizontalAlignment",
    "TextXAlignment",
    "TextYAlignment",
    "UIFlexAlignment",
    "VerticalAlignment",
]

MATH_HUGE = math.inf


def format_number(value: float) -> str:
    """Render a number the way it would be written in source."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if math.isinf(value):
        return "math.huge" if value > 0 else "-math.huge"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


@dataclass(frozen=True)
class ViewportExpression:
    """A fraction of the active camera's viewport size along one axis."""

    axis: str  # "X" or "Y"
    fraction: float

    def __str__(self) -> str:
        return f"workspace.CurrentCamera.ViewportSize.{self.axis} * {format_number(self.fraction)}"


Scalar = Union[float, ViewportExpression]


def _render_scalar(value: Scalar) -> str:
    if isinstance(value, ViewportExpression):
        return str(value)
    return format_number(value)


@dataclass(frozen=True)
class UDim:
    """Two-component length: a fraction of the parent plus a pixel offset."""

    scale: float = 0
    offset: float = 0

    def __str__(self) -> str:
        return f"new UDim({format_number(self.scale)}, {format_number(self.offset)})"

    @property
    def is_zero(self) -> bool:
        return self.scale == 0 and self.offset == 0


@dataclass(frozen=True)
class UDim2:
    x: UDim
    y: UDim

    def __str__(self) -> str:
        return f"new UDim2({self.x}, {self.y})"


@dataclass(frozen=True)
class Vector2:
    x: Scalar = 0
    y: Scalar = 0

    def __str__(self) -> str:
        return f"new Vector2({_render_scalar(self.x)}, {_render_scalar(self.y)})"


@dataclass(frozen=True)
class Color3:
    r: float
    g: float
    b: float

    def __str__(self) -> str:
        return (
            f"Color3.fromRGB({format_number(self.r)}, "
            f"{format_number(self.g)}, {format_number(self.b)})"
        )

    def as_tuple(self):
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class EnumItem:
    enum_type: str
    name: str

    def __str__(self) -> str:
        return f"Enum.{self.enum_type}.{self.name}"


@dataclass(frozen=True)
class Font:
    family: str
    weight: EnumItem
    style: EnumItem

    def __str__(self) -> str:
        return f'new Font("{self.family}", {self.weight}, {self.style})'


AttributeValue = Union[
    bool, int, float, str, None, UDim, UDim2, Vector2, Color3, EnumItem, Font
]


def render_value(value: AttributeValue) -> str:
    """Render any attribute value as a roblox-ts expression."""
    if value is None:
        return "undefined"
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    return str(value)


class FontWeight:
    THIN = EnumItem("FontWeight", "Thin")
    EXTRA_LIGHT = EnumItem("FontWeight", "ExtraLight")
    LIGHT = EnumItem("FontWeight", "Light")
    REGULAR = EnumItem("FontWeight", "Regular")
    MEDIUM = EnumItem("FontWeight", "Medium")
    SEMI_BOLD = EnumItem("FontWeight", "SemiBold")
    BOLD = EnumItem("FontWeight", "Bold")
    EXTRA_BOLD = EnumItem("FontWeight", "ExtraBold")
    HEAVY = EnumItem("FontWeight", "Heavy")


class FontStyle:
    NORMAL = EnumItem("FontStyle", "Normal")
    ITALIC = EnumItem("FontStyle", "Italic")


class FillDirection:
    HORIZONTAL = EnumItem("FillDirection", "Horizontal")
    VERTICAL = EnumItem("FillDirection", "Vertical")


class UIFlexAlignment:
    NONE = EnumItem("UIFlexAlignment", "None")
    FILL = EnumItem("UIFlexAlignment", "Fill")
    SPACE_AROUND = EnumItem("UIFlexAlignment", "SpaceAround")
    SPACE_BETWEEN = EnumItem("UIFlexAlignment", "SpaceBetween")
    SPACE_EVENLY = EnumItem("UIFlexAlignment", "SpaceEvenly")


class HorizontalAlignment:
    LEFT = EnumItem("HorizontalAlignment", "Left")
    CENTER = EnumItem("HorizontalAlignment", "Center")
    RIGHT = EnumItem("HorizontalAlignment", "Right")


class VerticalAlignment:
    TOP = EnumItem("VerticalAlignment", "Top")
    CENTER = EnumItem("VerticalAlignment", "Center")
    BOTTOM = EnumItem("VerticalAlignment", "Bottom")


class TextXAlignment:
    LEFT = EnumItem("TextXAlignment", "Left")
    CENTER = EnumItem("TextXAlignment", "Center")
    RIGHT = EnumItem("TextXAlignment", "Right")


class TextYAlignment:
    TOP = EnumItem("TextYAlignment", "Top")
    MIDDLE = EnumItem("TextYAlignment", "Middle")
    BOTTOM = EnumItem("TextYAlignment", "Bottom")


class ApplyStrokeMode:
    BORDER = EnumItem("ApplyStrokeMode", "Border")
