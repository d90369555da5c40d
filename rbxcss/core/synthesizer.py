"""
Property synthesis: ordered class rules -> Roblox attributes and child nodes.

Classes are visited in order and each class's own declarations are applied as
a unit to one shared :class:`ResolvedStyleState`. Later classes therefore
override earlier ones field by field, while ``em`` lengths are still resolved
against the font size of the class that declared them.

After the last class, the accumulated state is finalized in a fixed order:
FontFace, uipadding, AnchorPoint, uistroke, uisizeconstraint, Size, Position
and finally the uilistlayout, which belongs on the element's parent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .css_resolver import StyleCascadeResolver
from .logger import get_logger
from .models import ClassRule, StyleRequest, StyleSheet
from .property_handlers import HandlerContext, apply_declaration
from .rbx_types import (
    ApplyStrokeMode,
    AttributeValue,
    Font,
    UDim2,
    Vector2,
    render_value,
)
from .state import AuxiliaryKind, AuxiliaryNode, ResolvedStyleState
from .units import UnitConverter

log = get_logger(__name__)

__all__ = [
    "AttachTarget",
    "PropertySynthesizer",
    "SynthesisResult",
    "synthesize",
]

NamedRule = Tuple[str, ClassRule]


class AttachTarget(str, Enum):
    """Where an auxiliary node should be inserted in the element tree."""

    SELF = "self"
    PARENT = "parent"


@dataclass
class SynthesisResult:
    """Attributes to merge into the element plus synthetic children."""

    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    nodes: List[AuxiliaryNode] = field(default_factory=list)
    layout: Optional[AuxiliaryNode] = None

    @property
    def layout_target(self) -> Optional[AttachTarget]:
        return AttachTarget.PARENT if self.layout is not None else None

    @property
    def is_empty(self) -> bool:
        return not self.attributes and not self.nodes and self.layout is None

    def all_nodes(self) -> List[AuxiliaryNode]:
        if self.layout is None:
            return list(self.nodes)
        return [*self.nodes, self.layout]

    def to_dict(self) -> Dict[str, object]:
        """JSON friendly view with values rendered as expressions."""
        return {
            "attributes": {k: render_value(v) for k, v in self.attributes.items()},
            "children": [node.to_dict() for node in self.nodes],
            "layout": self.layout.to_dict() if self.layout is not None else None,
        }


class PropertySynthesizer:
    """Turns class rules into a :class:`SynthesisResult`."""

    def __init__(self, converter: Optional[UnitConverter] = None):
        self.converter = converter or UnitConverter()

    def synthesize(
        self,
        rules: Iterable[Union[NamedRule, ClassRule]],
        is_text_node: bool = False,
    ) -> SynthesisResult:
        """
        Synthesize attributes for one element.

        Args:
            rules: Class rules in class-list order, either bare or as
                (class_name, rule) pairs
            is_text_node: Whether the element renders text (TextLabel etc.)

        Returns:
            The attributes, child nodes and optional parent layout node
        """
        state = ResolvedStyleState()
        class_names: List[str] = []

        for entry in rules:
            if isinstance(entry, ClassRule):
                class_name, rule = "", entry
            else:
                class_name, rule = entry
            class_names.append(class_name)
            context = HandlerContext(
                is_text_node=is_text_node,
                class_name=class_name,
                declarations=rule.declarations,
                converter=self.converter,
            )
            for property_name, value in rule.declarations.items():
                apply_declaration(state, property_name, value, context)

        return self.finalize(state, is_text_node, class_names)

    def finalize(
        self,
        state: ResolvedStyleState,
        is_text_node: bool,
        class_names: Sequence[str] = (),
    ) -> SynthesisResult:
        result = SynthesisResult(
            attributes=dict(state.attributes), nodes=list(state.decorations)
        )
        attributes = result.attributes

        if is_text_node and not state.font.is_default():
            attributes["FontFace"] = Font(
                state.font.family, state.font.weight, state.font.style
            )

        padding = state.padding
        if not padding.is_default():
            result.nodes.append(
                AuxiliaryNode(
                    AuxiliaryKind.PADDING,
                    {
                        "PaddingLeft": padding.left,
                        "PaddingRight": padding.right,
                        "PaddingTop": padding.top,
                        "PaddingBottom": padding.bottom,
                    },
                )
            )

        if state.anchor_point[0] != 0 or state.anchor_point[1] != 0:
            attributes["AnchorPoint"] = Vector2(*state.anchor_point)

        border = state.border
        if not border.is_default():
            if border.color is None:
                log.warning(
                    "Border set without border-color; uistroke Color left undefined"
                    f" (classes: {' '.join(n for n in class_names if n) or '?'})"
                )
            result.nodes.append(
                AuxiliaryNode(
                    AuxiliaryKind.STROKE,
                    {
                        "Thickness": border.width,
                        "Color": border.color,
                        "Transparency": border.transparency,
                        "ApplyStrokeMode": ApplyStrokeMode.BORDER,
                    },
                )
            )

        size = state.size
        if not size.constraints_default():
            result.nodes.append(
                AuxiliaryNode(
                    AuxiliaryKind.SIZE_CONSTRAINT,
                    {
                        "MinSize": Vector2(size.min_width, size.min_height),
                        "MaxSize": Vector2(size.max_width, size.max_height),
                    },
                )
            )

        if not size.dimensions_default():
            attributes["Size"] = UDim2(size.width, size.height)

        if not state.position.is_default():
            attributes["Position"] = UDim2(state.position.left, state.position.top)

        flex = state.flex
        if flex.enabled:
            result.layout = AuxiliaryNode(
                AuxiliaryKind.LIST_LAYOUT,
                {
                    "FillDirection": flex.direction,
                    "HorizontalFlex": flex.horizontal_flex,
                    "VerticalFlex": flex.vertical_flex,
                    "HorizontalAlignment": flex.horizontal_alignment,
                    "VerticalAlignment": flex.vertical_alignment,
                    "Padding": flex.padding,
                    "Wraps": flex.wrap,
                },
            )

        return result

    def synthesize_request(
        self, resolver: StyleCascadeResolver, request: StyleRequest
    ) -> SynthesisResult:
        return self.synthesize(resolver.rules_for(request.classes), request.is_text_node)


def synthesize(
    sheet: StyleSheet, classes: Iterable[str], is_text_node: bool = False
) -> SynthesisResult:
    """Resolve ``classes`` against ``sheet`` and synthesize the result."""
    resolver = StyleCascadeResolver(sheet)
    return PropertySynthesizer().synthesize(resolver.rules_for(classes), is_text_node)
