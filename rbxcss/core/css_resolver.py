"""
Style cascade resolution.

Merges the declarations of an element's classes in the order they are listed.
There is no specificity: a property belongs wholly to the last class that
declared it. Class names missing from the sheet are skipped silently.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple, Union

from .logger import get_logger
from .models import ClassRule, StyleSheet

if TYPE_CHECKING:  # pragma: no cover - circular import safe typing
    from .cache import StyleCache

log = get_logger(__name__)

__all__ = [
    "StyleCascadeResolver",
    "resolve_classes",
]


class StyleCascadeResolver:
    """
    Resolves an ordered class list against a stylesheet.

    The resolver either holds a fixed :class:`StyleSheet` or reads the
    currently published sheet from a :class:`StyleCache` once per call, so a
    reload happening mid-call is never observed half way.
    """

    def __init__(self, source: Union[StyleSheet, "StyleCache", None] = None):
        self._source = source if source is not None else StyleSheet.empty()

    @property
    def sheet(self) -> StyleSheet:
        source = self._source
        if isinstance(source, StyleSheet):
            return source
        return source.sheet

    def rules_for(
        self, classes: Iterable[str], sheet: Optional[StyleSheet] = None
    ) -> List[Tuple[str, ClassRule]]:
        """
        Look up the rules for known classes, keeping order and duplicates.

        Args:
            classes: Class names in the order they were written
            sheet: Sheet snapshot to use (defaults to the current one)

        Returns:
            List of (class_name, rule) pairs for classes present in the sheet
        """
        sheet = sheet if sheet is not None else self.sheet
        found: List[Tuple[str, ClassRule]] = []
        for class_name in classes:
            rule = sheet.get(class_name)
            if rule is None:
                log.debug(f"Class '{class_name}' not found in stylesheet")
                continue
            found.append((class_name, rule))
        return found

    def resolve(
        self, classes: Iterable[str], sheet: Optional[StyleSheet] = None
    ) -> Dict[str, str]:
        """Merge declarations in class order; later classes win per property."""
        canonical: Dict[str, str] = {}
        for _, rule in self.rules_for(classes, sheet):
            canonical.update(rule.declarations)
        return canonical


def resolve_classes(sheet: StyleSheet, classes: Iterable[str]) -> Dict[str, str]:
    """Canonical style map for ``classes`` in ``sheet``."""
    return StyleCascadeResolver(sheet).resolve(classes)
