"""
Unit conversion from CSS lengths to Roblox pixel offsets.

``em`` is resolved against the ``font-size`` declared by the *same class rule*
that uses it, never against the merged cascade: a class that declares
``padding: 2em`` without its own ``font-size`` always uses the 16px base, even
if another class on the element sets a font size.
"""

from __future__ import annotations

from typing import Mapping, Optional

from .value_parsers import LengthValue, parse_integer

__all__ = [
    "BASE_FONT_SIZE",
    "UnitConverter",
]

BASE_FONT_SIZE = 16


class UnitConverter:
    """Pure rem/em/px conversions."""

    def __init__(self, root_font_size: float = BASE_FONT_SIZE):
        self.root_font_size = root_font_size

    def rem(self, value: float) -> float:
        return value * self.root_font_size

    @staticmethod
    def em(value: float, font_size_px: float) -> float:
        return value * font_size_px

    def em_base(self, declarations: Optional[Mapping[str, str]]) -> int:
        """
        Font size used for ``em`` inside one class rule.

        Only the integer part of the rule's own ``font-size`` is used, whatever
        its unit, so ``"10 px"`` gives 10 and ``"1.5 rem"`` gives 1.

        Args:
            declarations: The declarations of the class currently processed

        Returns:
            The em base in pixels, 16 when the rule declares no usable font size
        """
        if not declarations or "font-size" not in declarations:
            return BASE_FONT_SIZE
        parsed = parse_integer(declarations["font-size"])
        if parsed is None:
            return BASE_FONT_SIZE
        return parsed

    def to_offset(
        self, length: LengthValue, declarations: Optional[Mapping[str, str]] = None
    ) -> float:
        """Convert a rem/em/px (or unitless) length to pixels."""
        if length.unit == "rem":
            return self.rem(length.amount)
        if length.unit == "em":
            return self.em(length.amount, self.em_base(declarations))
        return length.amount
