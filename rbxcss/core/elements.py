"""
Minimal UI element tree the synthesizer output is applied to.

Authors write HTML-like tags (``div``, ``span``, ``img`` ...). Each tag is
aliased to the Roblox instance kind it stands for, and whether that kind
renders text decides how colour and font declarations are mapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .logger import get_logger
from .rbx_types import render_value
from .state import AuxiliaryNode
from .synthesizer import SynthesisResult

log = get_logger(__name__)

__all__ = [
    "TAG_ALIASES",
    "alias_tag",
    "Expression",
    "Element",
    "Fragment",
    "apply_synthesis",
    "fold_text_children",
]

TAG_ALIASES: Dict[str, str] = {
    "body": "screengui",
    "div": "frame",
    "span": "textlabel",
    "p": "textlabel",
    "h1": "textlabel",
    "h2": "textlabel",
    "h3": "textlabel",
    "h4": "textlabel",
    "h5": "textlabel",
    "h6": "textlabel",
    "img": "imagelabel",
    "button": "textbutton",
    "input": "textbox",
    "video": "videoframe",
}


def alias_tag(tag: str) -> Tuple[str, bool]:
    """
    Map an authoring tag to its instance kind.

    Examples:
        - "div" -> ("frame", False)
        - "h2" -> ("textlabel", True)
        - "textbutton" -> ("textbutton", False)

    Tags without an alias are passed through unchanged and are never text
    nodes, whatever their name.

    Returns:
        (kind, is_text_node)
    """
    kind = TAG_ALIASES.get(tag.lower())
    if kind is None:
        return tag, False
    return kind, "text" in kind


@dataclass(frozen=True)
class Expression:
    """An embedded expression child, e.g. ``{player.Name}``."""

    source: str


Child = Union["Element", str, Expression]


@dataclass(eq=False)
class Element:
    tag: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List[Child] = field(default_factory=list)
    parent: Optional["Element"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for child in self.children:
            if isinstance(child, Element):
                child.parent = self

    @classmethod
    def from_node(cls, node: AuxiliaryNode) -> "Element":
        return cls(node.tag, dict(node.attributes))

    def append(self, child: Child) -> None:
        if isinstance(child, Element):
            child.parent = self
        self.children.append(child)

    def element_children(self) -> List["Element"]:
        return [child for child in self.children if isinstance(child, Element)]

    def find(self, tag: str) -> Optional["Element"]:
        """First direct child element with the given tag."""
        for child in self.element_children():
            if child.tag == tag:
                return child
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON friendly view with attribute values rendered as expressions."""
        children: List[Any] = []
        for child in self.children:
            if isinstance(child, Element):
                children.append(child.to_dict())
            elif isinstance(child, Expression):
                children.append({"expression": child.source})
            else:
                children.append(child)
        return {
            "tag": self.tag,
            "attributes": {
                name: render_value(value) for name, value in self.attributes.items()
            },
            "children": children,
        }


@dataclass(eq=False)
class Fragment:
    """Wrapper returned when a layout node has no parent to attach to."""

    children: List[Element] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"fragment": [child.to_dict() for child in self.children]}


def apply_synthesis(
    element: Element, result: SynthesisResult
) -> Union[Element, Fragment]:
    """
    Apply synthesized attributes and nodes to ``element``.

    Attributes replace existing ones of the same name. Auxiliary nodes are
    appended as children. The list layout controls how the element is laid
    out among its siblings, so it goes on the parent; an element without a
    parent is returned wrapped in a :class:`Fragment` next to the layout.
    """
    element.attributes.update(result.attributes)
    for node in result.nodes:
        element.append(Element.from_node(node))

    if result.layout is None:
        return element

    layout = Element.from_node(result.layout)
    if element.parent is not None:
        element.parent.append(layout)
        return element

    log.debug(f"No parent for <{element.tag}>, wrapping list layout in a fragment")
    return Fragment([element, layout])


def fold_text_children(element: Element) -> bool:
    """
    Move text and expression children into a ``Text`` template string.

    ``<span>Hello {name}</span>`` becomes ``Text`` = ``"`Hello ${name}`"``.
    The last newline of the combined text is dropped. Returns True when a
    ``Text`` attribute was written.
    """
    parts: List[str] = []
    kept: List[Child] = []
    for child in element.children:
        if isinstance(child, Expression):
            parts.append(f"${{{child.source}}}")
        elif isinstance(child, str):
            parts.append(child)
        else:
            kept.append(child)

    if not parts:
        return False

    text = "".join(parts)
    last_newline = text.rfind("\n")
    if last_newline != -1:
        text = text[:last_newline] + text[last_newline + 1 :]

    element.attributes["Text"] = f"`{text}`"
    element.children = kept
    return True
