from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from .cache import StyleCache
from .config import TransformerConfig, load_config
from .css_resolver import StyleCascadeResolver
from .elements import Element, Fragment, alias_tag, apply_synthesis, fold_text_children
from .logger import get_logger
from .models import StyleRequest, StyleSheet
from .synthesizer import PropertySynthesizer, SynthesisResult
from .units import UnitConverter

log = get_logger(__name__)

__all__ = ["StyleService"]

CLASS_NAME_ATTRIBUTE = "className"
# Authoring-only attribute with no runtime counterpart
DEFAULT_ANCHOR_POINT_ATTRIBUTE = "defaultAnchorPoint"


class StyleService:
    """Thin facade wiring config, stylesheet cache, resolver and synthesizer."""

    def __init__(
        self,
        config: Optional[TransformerConfig] = None,
        *,
        cache: Optional[StyleCache] = None,
        converter: Optional[UnitConverter] = None,
    ) -> None:
        self.config = config or TransformerConfig()
        self.cache = cache if cache is not None else StyleCache(self.config.css_path)
        self.resolver = StyleCascadeResolver(self.cache)
        self.synthesizer = PropertySynthesizer(converter)

    @classmethod
    def from_config_file(cls, path: Optional[Path] = None) -> "StyleService":
        service = cls(load_config(path))
        service.load()
        return service

    @classmethod
    def for_stylesheet(cls, css_path: Path) -> "StyleService":
        service = cls(TransformerConfig(css_file_path=str(css_path)))
        service.load()
        return service

    @property
    def sheet(self) -> StyleSheet:
        return self.cache.sheet

    def load(self) -> StyleSheet:
        return self.cache.load()

    def style(self, classes: Iterable[str], is_text_node: bool = False) -> SynthesisResult:
        return self.style_request(StyleRequest.of(classes, is_text_node))

    def style_request(self, request: StyleRequest) -> SynthesisResult:
        # One snapshot per request so a concurrent reload is never seen half way
        sheet = self.cache.sheet
        rules = self.resolver.rules_for(request.classes, sheet)
        return self.synthesizer.synthesize(rules, request.is_text_node)

    def style_element(self, element: Element) -> Union[Element, Fragment]:
        """
        Style one element in place.

        The ``className`` attribute is consumed, the tag is aliased to its
        instance kind and text children are folded into ``Text``. Returns the
        element, or a fragment when a list layout had no parent to go to.
        """
        class_name = element.attributes.pop(CLASS_NAME_ATTRIBUTE, None)
        element.attributes.pop(DEFAULT_ANCHOR_POINT_ATTRIBUTE, None)

        kind, is_text_node = alias_tag(element.tag)
        element.tag = kind

        styled: Union[Element, Fragment] = element
        if class_name:
            request = StyleRequest.from_class_name(str(class_name), is_text_node)
            styled = apply_synthesis(element, self.style_request(request))

        fold_text_children(element)
        return styled

    def style_tree(self, root: Element) -> Union[Element, Fragment]:
        """Style ``root`` and every element below it, children first."""
        for child in list(root.element_children()):
            self.style_tree(child)
        return self.style_element(root)

    def watch(self, interval: float = 0.5) -> None:
        log.info(f"Watching {self.cache.css_path} for changes")
        self.cache.watch(interval)

    def stop(self) -> None:
        self.cache.stop()
