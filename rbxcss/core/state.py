"""Per-call synthesis state and auxiliary node descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .rbx_types import (
    MATH_HUGE,
    AttributeValue,
    Color3,
    EnumItem,
    FillDirection,
    FontStyle,
    FontWeight,
    HorizontalAlignment,
    UDim,
    UIFlexAlignment,
    VerticalAlignment,
    ViewportExpression,
    render_value,
)

__all__ = [
    "DEFAULT_FONT_FAMILY",
    "AuxiliaryKind",
    "AuxiliaryNode",
    "ResolvedStyleState",
]

DEFAULT_FONT_FAMILY = "rbxasset://fonts/families/SourceSansPro.json"

SizeBound = Union[float, ViewportExpression]


class AuxiliaryKind(str, Enum):
    """Synthetic child instances, valued by their Roblox class name."""

    CORNER_RADIUS = "uicorner"
    ASPECT_RATIO_CONSTRAINT = "uiaspectratioconstraint"
    PADDING = "uipadding"
    STROKE = "uistroke"
    SIZE_CONSTRAINT = "uisizeconstraint"
    LIST_LAYOUT = "uilistlayout"


@dataclass(frozen=True)
class AuxiliaryNode:
    kind: AuxiliaryKind
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, object]:
        return {
            "tag": self.tag,
            "attributes": {k: render_value(v) for k, v in self.attributes.items()},
        }


@dataclass
class FontState:
    family: str = DEFAULT_FONT_FAMILY
    weight: EnumItem = FontWeight.REGULAR
    style: EnumItem = FontStyle.NORMAL

    def is_default(self) -> bool:
        return self == FontState()


@dataclass
class PaddingState:
    left: UDim = UDim()
    right: UDim = UDim()
    top: UDim = UDim()
    bottom: UDim = UDim()

    def is_default(self) -> bool:
        return all(side.is_zero for side in (self.left, self.right, self.top, self.bottom))


@dataclass
class FlexState:
    enabled: bool = False
    direction: EnumItem = FillDirection.HORIZONTAL
    horizontal_flex: EnumItem = UIFlexAlignment.NONE
    vertical_flex: EnumItem = UIFlexAlignment.NONE
    horizontal_alignment: EnumItem = HorizontalAlignment.LEFT
    vertical_alignment: EnumItem = VerticalAlignment.TOP
    padding: UDim = UDim()
    wrap: bool = False

    @property
    def is_vertical(self) -> bool:
        return self.direction == FillDirection.VERTICAL


@dataclass
class BorderState:
    width: float = 0
    color: Optional[Color3] = None
    transparency: float = 0

    def is_default(self) -> bool:
        return self.width == 0 and self.color is None and self.transparency == 0


@dataclass
class SizeState:
    min_width: SizeBound = 0
    min_height: SizeBound = 0
    max_width: SizeBound = MATH_HUGE
    max_height: SizeBound = MATH_HUGE
    width: UDim = UDim(0, 100)
    height: UDim = UDim(0, 100)

    def constraints_default(self) -> bool:
        return (
            self.min_width == 0
            and self.min_height == 0
            and self.max_width == MATH_HUGE
            and self.max_height == MATH_HUGE
        )

    def dimensions_default(self) -> bool:
        return self.width == UDim(0, 100) and self.height == UDim(0, 100)


@dataclass
class PositionState:
    left: UDim = UDim()
    top: UDim = UDim()

    def is_default(self) -> bool:
        return self.left.is_zero and self.top.is_zero


@dataclass
class ResolvedStyleState:
    """
    Everything gathered while walking an element's classes.

    Allocated fresh for every synthesis call. ``attributes`` receives values
    written straight through (colours, text settings); ``decorations`` holds
    the nodes emitted per occurrence (corner radius, aspect ratio) in the
    order they were declared.
    """

    font: FontState = field(default_factory=FontState)
    padding: PaddingState = field(default_factory=PaddingState)
    flex: FlexState = field(default_factory=FlexState)
    anchor_point: List[float] = field(default_factory=lambda: [0.0, 0.0])
    border: BorderState = field(default_factory=BorderState)
    size: SizeState = field(default_factory=SizeState)
    position: PositionState = field(default_factory=PositionState)
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    decorations: List[AuxiliaryNode] = field(default_factory=list)
