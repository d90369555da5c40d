"""
Value parsers for reconstructed declaration values.

The extractor stores every declaration as a space separated token string, so a
length arrives as ``"10 rem"``, a colour as ``"#ff8800"`` or ``"10,20,30"`` and
an aspect ratio as ``"16 / 9"``. The helpers below turn those strings back into
numbers the synthesizer can work with:

- Lengths: ``"<amount> <unit>"`` where unit is rem, em, px, %, vw or vh
- Colours: ``#RGB``/``#RRGGBB`` hex or a comma separated ``r,g,b`` triple
- Opacity: a plain number in the 0-1 range
- Ratios: a small arithmetic expression (numbers, + - * / and parentheses)

Numeric prefixes are read the lenient way browsers read them: ``"12px"`` is 12
and ``"abc"`` is not a number.
"""

from __future__ import annotations

import ast
import math
import operator
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .logger import get_logger
from .rbx_types import Color3

log = get_logger(__name__)

__all__ = [
    "LengthValue",
    "parse_number",
    "parse_integer",
    "parse_length_value",
    "parse_color_value",
    "parse_opacity_value",
    "evaluate_ratio",
    "split_pair",
    "parse_length_list",
    "expand_shorthand_box",
]


# Known CSS units
VALID_UNITS = {
    "px",  # Pixels
    "em",  # Relative to the rule's font size
    "rem",  # Relative to the root font size
    "%",  # Percentage
    "vw",  # Viewport width
    "vh",  # Viewport height
}

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INTEGER_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_HEX_PATTERN = re.compile(r"#([0-9a-fA-F]{3,8})")

# Longer aspect-ratio values are rejected before parsing
MAX_RATIO_LENGTH = 64


@dataclass(frozen=True)
class LengthValue:
    """A number with an optional unit, as stored by the extractor."""

    amount: float
    unit: Optional[str] = None

    def __str__(self) -> str:
        if self.unit:
            return f"{self.amount} {self.unit}"
        return str(self.amount)

    @property
    def fraction(self) -> float:
        """Amount as a 0-1 fraction (for %, vw and vh)."""
        return self.amount / 100


def parse_number(value_str: str) -> Optional[float]:
    """
    Read the leading number of a string.

    Examples:
        - "12" -> 12.0
        - "0.5 rem" -> 0.5
        - "-3px" -> -3.0
        - "bold" -> None

    Args:
        value_str: Any declaration value

    Returns:
        The number, or None when the string does not start with one
    """
    match = _NUMBER_PREFIX.match(value_str or "")
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def parse_integer(value_str: str) -> Optional[int]:
    """Read the leading integer of a string ("1.5 rem" -> 1)."""
    match = _INTEGER_PREFIX.match(value_str or "")
    if not match:
        return None
    return int(match.group(1))


def split_pair(value_str: str) -> Tuple[str, Optional[str]]:
    """Split ``"<first> <second> ..."`` into its first two tokens."""
    parts = (value_str or "").split()
    if not parts:
        return "", None
    if len(parts) == 1:
        return parts[0], None
    return parts[0], parts[1]


def parse_length_value(value_str: str) -> Optional[LengthValue]:
    """
    Parse a reconstructed length.

    Examples:
        - "10 rem" -> LengthValue(10.0, "rem")
        - "50 vw" -> LengthValue(50.0, "vw")
        - "4" -> LengthValue(4.0, None)
        - "auto" -> None

    Args:
        value_str: Declaration value in extractor form

    Returns:
        LengthValue if the value starts with a number, None otherwise
    """
    amount_str, unit = split_pair(value_str)
    amount = parse_number(amount_str)
    if amount is None:
        log.debug(f"Could not parse length value '{value_str}'")
        return None

    unit = unit.lower() if unit else None
    if unit and unit not in VALID_UNITS:
        log.debug(f"Unknown unit '{unit}' in value '{value_str}', treating as px")
    return LengthValue(amount=amount, unit=unit)


def _parse_hex(raw: str) -> Optional[Color3]:
    digits = raw
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits[:3])
    elif len(digits) in (6, 8):
        digits = digits[:6]
    else:
        return None
    return Color3(
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def parse_color_value(value_str: str) -> Optional[Color3]:
    """
    Parse a colour in extractor form.

    Examples:
        - "#ff8800" -> Color3(255, 136, 0)
        - "#f80" -> Color3(255, 136, 0)
        - "10,20,30" -> Color3(10, 20, 30)

    Args:
        value_str: Declaration value

    Returns:
        Color3 on success, None when neither a hex nor an r,g,b triple
    """
    value_str = (value_str or "").strip()
    if not value_str:
        return None

    if "#" in value_str:
        match = _HEX_PATTERN.search(value_str)
        if not match:
            return None
        return _parse_hex(match.group(1))

    channels = [part.strip() for part in value_str.split(",")]
    if len(channels) != 3:
        return None
    numbers = []
    for channel in channels:
        number = parse_number(channel)
        if number is None:
            return None
        numbers.append(int(number) if number.is_integer() else number)
    return Color3(numbers[0], numbers[1], numbers[2])


def parse_opacity_value(value_str: str) -> Optional[float]:
    """Parse an opacity; ``"40 %"`` is read as 0.4."""
    amount_str, unit = split_pair(value_str)
    amount = parse_number(amount_str)
    if amount is None:
        return None
    if unit == "%":
        return amount / 100
    return amount


_BINARY_OPS: Dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}

_UNARY_OPS: Dict[type, Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        if isinstance(node.value, bool):
            raise ValueError("booleans are not numbers")
        return float(node.value)
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f"unsupported expression element: {type(node).__name__}")


def evaluate_ratio(expression: str) -> Optional[float]:
    """
    Evaluate an ``aspect-ratio`` expression without executing code.

    Only numeric literals, ``+ - * /``, unary signs and parentheses are
    accepted; anything else (names, calls, attribute access) is rejected.

    Examples:
        - "16 / 9" -> 1.777...
        - "1.5" -> 1.5
        - "(4 + 4) / 2" -> 4.0
        - "auto" -> None

    Args:
        expression: The reconstructed declaration value

    Returns:
        The result, or None if the expression is not plain arithmetic
    """
    expression = (expression or "").strip()
    if not expression:
        return None
    if len(expression) > MAX_RATIO_LENGTH:
        log.debug(f"Ratio expression too long ({len(expression)} chars), ignoring")
        return None
    try:
        tree = ast.parse(expression, mode="eval")
        result = _eval_node(tree)
    except (
        SyntaxError,
        ValueError,
        ZeroDivisionError,
        OverflowError,
        RecursionError,
        MemoryError,
    ) as exc:
        log.debug(f"Could not evaluate ratio '{expression}': {exc}")
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def parse_length_list(value_str: str) -> List[LengthValue]:
    """
    Parse a run of lengths such as ``"1 rem 2 rem"`` or ``"4 8"``.

    A token is taken as the unit of the preceding number when it is a known
    unit; anything that is neither a number nor a unit ends the list.
    """
    tokens = (value_str or "").split()
    lengths: List[LengthValue] = []
    index = 0
    while index < len(tokens):
        amount = parse_number(tokens[index])
        if amount is None:
            break
        unit: Optional[str] = None
        if index + 1 < len(tokens) and tokens[index + 1].lower() in VALID_UNITS:
            unit = tokens[index + 1].lower()
            index += 1
        lengths.append(LengthValue(amount=amount, unit=unit))
        index += 1
    return lengths


def expand_shorthand_box(
    values: List[LengthValue],
) -> Tuple[LengthValue, LengthValue, LengthValue, LengthValue]:
    """
    Expand CSS box model shorthand (padding) to individual sides.

    CSS box model rules:
    - 1 value: all sides
    - 2 values: top/bottom, left/right
    - 3 values: top, left/right, bottom
    - 4 values: top, right, bottom, left (clockwise)

    Args:
        values: List of 1-4 LengthValue objects

    Returns:
        Tuple of (top, right, bottom, left)
    """
    count = len(values)

    if count == 1:
        return values[0], values[0], values[0], values[0]
    elif count == 2:
        return values[0], values[1], values[0], values[1]
    elif count == 3:
        return values[0], values[1], values[2], values[1]
    elif count >= 4:
        return values[0], values[1], values[2], values[3]
    else:
        raise ValueError(f"Cannot expand shorthand with {count} values")
