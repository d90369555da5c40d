"""
Property handlers for turning declarations into Roblox attributes.

Each handler owns a family of CSS properties and applies one declaration at a
time to the shared :class:`ResolvedStyleState`. Values that go straight onto
the element (colours, text settings) are written to ``state.attributes``;
everything that needs the whole cascade first (padding, border, size, flex)
is accumulated and emitted later by the synthesizer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional

from .logger import get_logger
from .rbx_types import (
    FillDirection,
    FontStyle,
    FontWeight,
    HorizontalAlignment,
    TextXAlignment,
    TextYAlignment,
    UDim,
    UIFlexAlignment,
    VerticalAlignment,
    ViewportExpression,
)
from .state import AuxiliaryKind, AuxiliaryNode, ResolvedStyleState, SizeBound
from .units import UnitConverter
from .value_parsers import (
    LengthValue,
    evaluate_ratio,
    expand_shorthand_box,
    parse_color_value,
    parse_integer,
    parse_length_list,
    parse_length_value,
    parse_number,
    parse_opacity_value,
)

log = get_logger(__name__)

__all__ = [
    "HandlerContext",
    "PropertyHandler",
    "get_property_handler",
    "apply_declaration",
]


FONT_WEIGHTS = {
    100: FontWeight.THIN,
    200: FontWeight.EXTRA_LIGHT,
    300: FontWeight.LIGHT,
    400: FontWeight.REGULAR,
    500: FontWeight.MEDIUM,
    600: FontWeight.SEMI_BOLD,
    700: FontWeight.BOLD,
    800: FontWeight.EXTRA_BOLD,
    900: FontWeight.HEAVY,
}

LINE_HEIGHT_MIN = 1
LINE_HEIGHT_MAX = 3


@dataclass
class HandlerContext:
    """What a handler may know about the declaration being applied."""

    is_text_node: bool = False
    class_name: str = ""
    # Declarations of the class rule being processed; em is resolved here.
    declarations: Mapping[str, str] = field(default_factory=dict)
    converter: UnitConverter = field(default_factory=UnitConverter)

    def offset(self, length: LengthValue) -> float:
        return self.converter.to_offset(length, self.declarations)


def _transparency(opacity: float) -> float:
    return round(1 - opacity, 10)


class PropertyHandler:
    """Base class for handling one family of properties."""

    properties: FrozenSet[str] = frozenset()

    def can_handle(self, property_name: str) -> bool:
        return property_name in self.properties

    def apply(
        self,
        state: ResolvedStyleState,
        property_name: str,
        value: str,
        context: HandlerContext,
    ) -> bool:
        """
        Apply a declaration to the synthesis state.

        Returns True if the state changed, False if the value was ignored.
        """
        raise NotImplementedError


class ColorPropertyHandler(PropertyHandler):
    properties = frozenset({"color", "background-color"})

    def apply(self, state, property_name, value, context) -> bool:
        color = parse_color_value(value)
        if color is None:
            log.debug(f"Could not parse colour '{value}' for '{property_name}'")
            return False
        if property_name == "background-color":
            target = "BackgroundColor3"
        else:
            target = "TextColor3" if context.is_text_node else "ImageColor3"
        state.attributes[target] = color
        return True


class OpacityPropertyHandler(PropertyHandler):
    TARGETS = {
        "background-opacity": "BackgroundTransparency",
        "text-opacity": "TextTransparency",
        "opacity": "Transparency",
    }
    properties = frozenset(TARGETS)

    def apply(self, state, property_name, value, context) -> bool:
        opacity = parse_opacity_value(value)
        if opacity is None:
            log.debug(f"Could not parse opacity '{value}' for '{property_name}'")
            return False
        state.attributes[self.TARGETS[property_name]] = _transparency(opacity)
        return True


class CornerRadiusHandler(PropertyHandler):
    """``border-radius`` adds a uicorner for every occurrence, not just the last."""

    properties = frozenset({"border-radius"})

    def apply(self, state, property_name, value, context) -> bool:
        length = parse_length_value(value)
        if length is None:
            return False
        state.decorations.append(
            AuxiliaryNode(
                AuxiliaryKind.CORNER_RADIUS,
                {"CornerRadius": UDim(0, context.offset(length))},
            )
        )
        return True


class FontPropertyHandler(PropertyHandler):
    properties = frozenset({"font-weight", "font-style", "font-size"})

    def apply(self, state, property_name, value, context) -> bool:
        if property_name == "font-weight":
            weight = parse_integer(value)
            if weight not in FONT_WEIGHTS:
                # TODO: emit rich text <font weight> tags for weights outside the enum
                log.debug(f"Font weight '{value}' has no FontWeight equivalent")
                return False
            state.font.weight = FONT_WEIGHTS[weight]
            return True

        if property_name == "font-style":
            state.font.style = FontStyle.NORMAL if value == "normal" else FontStyle.ITALIC
            return True

        length = parse_length_value(value)
        if length is None:
            return False
        if length.unit == "rem":
            size = context.converter.rem(length.amount)
        else:
            size = length.amount
        state.attributes["TextSize"] = size
        return True


class TextPropertyHandler(PropertyHandler):
    properties = frozenset({"line-height", "text-align", "vertical-align"})

    def apply(self, state, property_name, value, context) -> bool:
        if property_name == "line-height":
            height = parse_number(value)
            if height is None:
                return False
            state.attributes["LineHeight"] = max(
                LINE_HEIGHT_MIN, min(LINE_HEIGHT_MAX, height)
            )
            return True

        if property_name == "text-align":
            if value == "right":
                alignment = TextXAlignment.RIGHT
            elif value == "center":
                alignment = TextXAlignment.CENTER
            else:
                alignment = TextXAlignment.LEFT
            state.attributes["TextXAlignment"] = alignment
            return True

        if value == "middle":
            alignment = TextYAlignment.MIDDLE
        elif value in ("bottom", "text-bottom"):
            alignment = TextYAlignment.BOTTOM
        else:
            alignment = TextYAlignment.TOP
        state.attributes["TextYAlignment"] = alignment
        return True


class PaddingPropertyHandler(PropertyHandler):
    SIDES = {
        "padding-top": "top",
        "padding-right": "right",
        "padding-bottom": "bottom",
        "padding-left": "left",
    }
    properties = frozenset(set(SIDES) | {"padding"})

    def apply(self, state, property_name, value, context) -> bool:
        lengths = parse_length_list(value)
        if not lengths:
            log.debug(f"Could not parse padding '{value}' for '{property_name}'")
            return False

        if property_name == "padding":
            top, right, bottom, left = expand_shorthand_box(lengths)
            state.padding.top = UDim(0, context.offset(top))
            state.padding.right = UDim(0, context.offset(right))
            state.padding.bottom = UDim(0, context.offset(bottom))
            state.padding.left = UDim(0, context.offset(left))
            return True

        setattr(state.padding, self.SIDES[property_name], UDim(0, context.offset(lengths[0])))
        return True


class AspectRatioHandler(PropertyHandler):
    """Each valid ``aspect-ratio`` adds its own constraint node."""

    properties = frozenset({"aspect-ratio"})

    def apply(self, state, property_name, value, context) -> bool:
        ratio = evaluate_ratio(value)
        if ratio is None or ratio <= 0:
            log.debug(f"Discarding aspect-ratio '{value}'")
            return False
        state.decorations.append(
            AuxiliaryNode(AuxiliaryKind.ASPECT_RATIO_CONSTRAINT, {"AspectRatio": ratio})
        )
        return True


class FlexPropertyHandler(PropertyHandler):
    """
    Emulates flexbox with a UIListLayout.

    ``justify-content`` works on the main axis and ``align-items`` on the
    cross axis; which Roblox property that is depends on the fill direction
    at the time the declaration is read.
    """

    properties = frozenset(
        {"display", "flex-direction", "flex-wrap", "justify-content", "align-items", "gap"}
    )

    DISTRIBUTIONS = {
        "space-between": UIFlexAlignment.SPACE_BETWEEN,
        "space-around": UIFlexAlignment.SPACE_AROUND,
        "space-evenly": UIFlexAlignment.SPACE_EVENLY,
        "stretch": UIFlexAlignment.FILL,
    }
    HORIZONTAL = {
        "flex-start": HorizontalAlignment.LEFT,
        "flex-end": HorizontalAlignment.RIGHT,
        "center": HorizontalAlignment.CENTER,
    }
    VERTICAL = {
        "flex-start": VerticalAlignment.TOP,
        "flex-end": VerticalAlignment.BOTTOM,
        "center": VerticalAlignment.CENTER,
    }

    def apply(self, state, property_name, value, context) -> bool:
        flex = state.flex

        if property_name == "display":
            if value == "flex":
                flex.enabled = True
                return True
            return False

        if property_name == "flex-direction":
            flex.direction = (
                FillDirection.VERTICAL if "column" in value else FillDirection.HORIZONTAL
            )
            if "reverse" in value:
                log.warning(f"Flex reverse not supported! ({context.class_name}: {value})")
            return True

        if property_name == "flex-wrap":
            if value != "nowrap":
                log.warning(f"Flex wrap not supported! ({context.class_name}: {value})")
            return False

        if property_name == "gap":
            length = parse_length_value(value)
            if length is None:
                return False
            flex.padding = UDim(0, context.offset(length))
            return True

        if property_name == "justify-content":
            # Main axis
            horizontal_axis = not flex.is_vertical
        else:
            # Cross axis
            horizontal_axis = flex.is_vertical

        if value in self.HORIZONTAL:
            if horizontal_axis:
                flex.horizontal_alignment = self.HORIZONTAL[value]
            else:
                flex.vertical_alignment = self.VERTICAL[value]
            return True

        if property_name == "align-items":
            if value == "baseline":
                log.warning(f"Items baseline not supported! ({context.class_name})")
            distribution = UIFlexAlignment.FILL if value == "stretch" else UIFlexAlignment.NONE
        else:
            distribution = self.DISTRIBUTIONS.get(value, UIFlexAlignment.NONE)

        if horizontal_axis:
            flex.horizontal_flex = distribution
        else:
            flex.vertical_flex = distribution
        return True


class AnchorPointHandler(PropertyHandler):
    properties = frozenset({"anchor-point", "anchor-point-x", "anchor-point-y"})

    def apply(self, state, property_name, value, context) -> bool:
        numbers = [parse_number(part) for part in value.split()]
        if not numbers or numbers[0] is None:
            return False

        if property_name == "anchor-point-x":
            state.anchor_point[0] = numbers[0]
        elif property_name == "anchor-point-y":
            state.anchor_point[1] = numbers[0]
        else:
            y = numbers[1] if len(numbers) > 1 and numbers[1] is not None else numbers[0]
            state.anchor_point[0] = numbers[0]
            state.anchor_point[1] = y
        return True


class BorderPropertyHandler(PropertyHandler):
    SIDE_WIDTHS = frozenset(
        {
            "border-left-width",
            "border-right-width",
            "border-top-width",
            "border-bottom-width",
        }
    )
    properties = frozenset(
        {"border-width", "border-color", "border-opacity", "border-style"} | SIDE_WIDTHS
    )

    def apply(self, state, property_name, value, context) -> bool:
        if property_name in self.SIDE_WIDTHS:
            log.warning(
                "Individual border widths not supported! Use border-width instead."
                f" ({context.class_name}: {property_name})"
            )
            return False

        if property_name == "border-style":
            log.warning(f"Border style not supported! ({context.class_name}: {value})")
            return False

        if property_name == "border-width":
            length = parse_length_value(value)
            if length is None:
                return False
            state.border.width = context.offset(length)
            return True

        if property_name == "border-color":
            color = parse_color_value(value)
            if color is None:
                log.debug(f"Could not parse border colour '{value}'")
                return False
            state.border.color = color
            return True

        opacity = parse_opacity_value(value)
        if opacity is None:
            return False
        state.border.transparency = _transparency(opacity)
        return True


class SizeConstraintHandler(PropertyHandler):
    """min/max sizes: plain pixels, or a viewport expression for vw/vh."""

    FIELDS = {
        "min-width": ("min_width", "vw", "X"),
        "min-height": ("min_height", "vh", "Y"),
        "max-width": ("max_width", "vw", "X"),
        "max-height": ("max_height", "vh", "Y"),
    }
    properties = frozenset(FIELDS)

    def apply(self, state, property_name, value, context) -> bool:
        length = parse_length_value(value)
        if length is None:
            return False
        attr, viewport_unit, axis = self.FIELDS[property_name]
        bound: SizeBound
        if length.unit == viewport_unit:
            bound = ViewportExpression(axis, length.fraction)
        else:
            bound = context.offset(length)
        setattr(state.size, attr, bound)
        return True


class DimensionHandler(PropertyHandler):
    """width/height/left/top as UDim; viewport units (and % for left/top) become scale."""

    FIELDS = {
        "width": ("size", "width", {"vw"}),
        "height": ("size", "height", {"vh"}),
        "left": ("position", "left", {"vw", "%"}),
        "top": ("position", "top", {"vh", "%"}),
    }
    properties = frozenset(FIELDS)

    def apply(self, state, property_name, value, context) -> bool:
        length = parse_length_value(value)
        if length is None:
            return False
        group, attr, scale_units = self.FIELDS[property_name]
        if length.unit in scale_units:
            udim = UDim(length.fraction, 0)
        else:
            udim = UDim(0, context.offset(length))
        setattr(getattr(state, group), attr, udim)
        return True


# Registry of property handlers
_HANDLERS: List[PropertyHandler] = [
    ColorPropertyHandler(),
    OpacityPropertyHandler(),
    CornerRadiusHandler(),
    FontPropertyHandler(),
    TextPropertyHandler(),
    PaddingPropertyHandler(),
    AspectRatioHandler(),
    FlexPropertyHandler(),
    AnchorPointHandler(),
    BorderPropertyHandler(),
    SizeConstraintHandler(),
    DimensionHandler(),
]

_HANDLERS_BY_PROPERTY: Dict[str, PropertyHandler] = {
    name: handler for handler in _HANDLERS for name in handler.properties
}


def get_property_handler(property_name: str) -> Optional[PropertyHandler]:
    """Get the handler responsible for a property, if any."""
    return _HANDLERS_BY_PROPERTY.get(property_name)


def apply_declaration(
    state: ResolvedStyleState,
    property_name: str,
    value: str,
    context: HandlerContext,
) -> bool:
    """
    Apply one declaration, dispatching on the property name.

    Unknown properties are ignored.

    Returns:
        True if the state changed, False otherwise
    """
    handler = get_property_handler(property_name)
    if handler is None:
        log.debug(f"No handler found for property '{property_name}'")
        return False
    return handler.apply(state, property_name, value, context)
