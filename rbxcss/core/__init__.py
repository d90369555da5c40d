from .cache import StyleCache
from .css_extractor import extract_stylesheet, load_stylesheet
from .css_resolver import StyleCascadeResolver
from .models import ClassRule, StyleRequest, StyleSheet
from .services import StyleService
from .synthesizer import PropertySynthesizer, SynthesisResult, synthesize

__all__ = [
    "extract_stylesheet",
    "load_stylesheet",
    "StyleCache",
    "StyleCascadeResolver",
    "ClassRule",
    "StyleRequest",
    "StyleSheet",
    "StyleService",
    "PropertySynthesizer",
    "SynthesisResult",
    "synthesize",
]
