"""
Stylesheet data model.

A ``StyleSheet`` maps class names to ``ClassRule`` objects. Sheets are built
fresh on every (re)load and never mutated afterwards, so a reference to one can
be shared freely between synthesis calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

__all__ = [
    "ClassRule",
    "StyleSheet",
    "StyleRequest",
]


def _freeze(values: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class ClassRule:
    """Declarations and rule-scoped custom properties for a single class."""

    variables: Mapping[str, str] = field(default_factory=dict)
    declarations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", _freeze(self.variables))
        object.__setattr__(self, "declarations", _freeze(self.declarations))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassRule):
            return NotImplemented
        return dict(self.variables) == dict(other.variables) and dict(
            self.declarations
        ) == dict(other.declarations)

    def __hash__(self) -> int:
        return hash(
            (
                tuple(sorted(self.variables.items())),
                tuple(sorted(self.declarations.items())),
            )
        )

    def merged_with(self, later: "ClassRule") -> "ClassRule":
        """Return a rule with ``later``'s entries layered over this one."""
        variables = dict(self.variables)
        variables.update(later.variables)
        declarations = dict(self.declarations)
        declarations.update(later.declarations)
        return ClassRule(variables=variables, declarations=declarations)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            "variables": dict(self.variables),
            "declarations": dict(self.declarations),
        }


@dataclass(frozen=True)
class StyleSheet:
    """Immutable mapping of class name to :class:`ClassRule`."""

    rules: Mapping[str, ClassRule] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleSheet):
            return NotImplemented
        return list(self.rules.items()) == list(other.rules.items())

    def __hash__(self) -> int:
        return hash(tuple(self.rules.items()))

    def __contains__(self, class_name: object) -> bool:
        return class_name in self.rules

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.rules)

    def get(self, class_name: str) -> Optional[ClassRule]:
        return self.rules.get(class_name)

    @classmethod
    def empty(cls) -> "StyleSheet":
        return cls()

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, str]]]:
        return {name: rule.to_dict() for name, rule in self.rules.items()}


@dataclass(frozen=True)
class StyleRequest:
    """Ordered class names for one element plus whether it renders text."""

    classes: Tuple[str, ...]
    is_text_node: bool = False

    @classmethod
    def from_class_name(
        cls, class_name: str, is_text_node: bool = False
    ) -> "StyleRequest":
        """Split a ``className`` attribute string on whitespace."""
        return cls(tuple(class_name.split()), is_text_node)

    @classmethod
    def of(cls, classes: Iterable[str], is_text_node: bool = False) -> "StyleRequest":
        return cls(tuple(classes), is_text_node)
