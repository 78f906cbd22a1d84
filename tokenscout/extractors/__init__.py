"""Per-ecosystem extraction functions."""

from typing import Dict

from ..models import CSS_VARIABLES, CUSTOM, FIGMA, MUI, RADIX, STYLE_DICTIONARY, TAILWIND
from . import css_variables, custom, figma, mui, radix, style_dictionary, tailwind
from .base import ExtractFn, ExtractionContext, PartialTree

EXTRACTORS: Dict[str, ExtractFn] = {
    RADIX: radix.extract,
    MUI: mui.extract,
    TAILWIND: tailwind.extract,
    CSS_VARIABLES: css_variables.extract,
    STYLE_DICTIONARY: style_dictionary.extract,
    CUSTOM: custom.extract,
    FIGMA: figma.extract,
}

__all__ = ["EXTRACTORS", "ExtractFn", "ExtractionContext", "PartialTree"]
