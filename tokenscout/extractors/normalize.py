"""Helpers that turn raw configuration values into canonical category buckets."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models import CATEGORIES
from .base import PartialTree

SCALAR_TYPES = (str, int, float)

CATEGORY_ALIASES: Dict[str, str] = {
    "colors": "colors",
    "color": "colors",
    "palette": "colors",
    "spacing": "spacing",
    "space": "spacing",
    "spacings": "spacing",
    "size": "spacing",
    "sizes": "spacing",
    "sizing": "spacing",
    "typography": "typography",
    "font": "typography",
    "fonts": "typography",
    "fontSizes": "typography",
    "fontFamilies": "typography",
    "fontWeights": "typography",
    "lineHeights": "typography",
    "borders": "borders",
    "border": "borders",
    "radii": "borders",
    "radius": "borders",
    "borderRadius": "borders",
    "shadows": "shadows",
    "shadow": "shadows",
    "boxShadow": "shadows",
    "elevation": "shadows",
    "animations": "animations",
    "animation": "animations",
    "motion": "animations",
    "transitions": "animations",
    "duration": "animations",
    "easing": "animations",
    "breakpoints": "breakpoints",
    "breakpoint": "breakpoints",
    "screens": "breakpoints",
    "zIndex": "zIndex",
    "zIndices": "zIndex",
    "z-index": "zIndex",
}

TYPE_CATEGORIES: Dict[str, str] = {
    "color": "colors",
    "dimension": "spacing",
    "spacing": "spacing",
    "sizing": "spacing",
    "size": "spacing",
    "fontfamily": "typography",
    "fontfamilies": "typography",
    "fontsize": "typography",
    "fontsizes": "typography",
    "fontweight": "typography",
    "fontweights": "typography",
    "lineheight": "typography",
    "lineheights": "typography",
    "letterspacing": "typography",
    "paragraphspacing": "typography",
    "typography": "typography",
    "textcase": "typography",
    "textdecoration": "typography",
    "borderradius": "borders",
    "borderwidth": "borders",
    "border": "borders",
    "stroke": "borders",
    "shadow": "shadows",
    "boxshadow": "shadows",
    "duration": "animations",
    "cubicbezier": "animations",
    "transition": "animations",
    "animation": "animations",
    "breakpoint": "breakpoints",
    "zindex": "zIndex",
}

_COLOR_VALUE_RE = re.compile(
    r"^\s*(#[0-9a-f]{3,8}\b|(rgb|rgba|hsl|hsla|hwb|lab|lch|oklab|oklch|color)\()",
    re.IGNORECASE,
)
_LENGTH_VALUE_RE = re.compile(r"^\s*-?\d*\.?\d+(px|rem|em|vh|vw|%)\s*$", re.IGNORECASE)
_TIME_VALUE_RE = re.compile(r"^\s*\d*\.?\d+m?s\s*$", re.IGNORECASE)

# keyword -> category; earlier entries win
_NAME_KEYWORDS = (
    (("shadow", "elevation"), "shadows"),
    (("z-index", "zindex", "z_index"), "zIndex"),
    (("breakpoint", "screen"), "breakpoints"),
    (("duration", "easing", "ease", "transition", "animation", "timing", "delay"), "animations"),
    (("color", "colour", "bg", "background", "fill", "stroke"), "colors"),
    (("radius", "border", "outline"), "borders"),
    (("font", "text", "typography", "line-height", "lineheight", "letter", "leading", "tracking", "weight"), "typography"),
    (("space", "spacing", "margin", "padding", "gap", "gutter", "inset"), "spacing"),
)


def empty_partial() -> PartialTree:
    return {category: {} for category in CATEGORIES}


def is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES) and not isinstance(value, bool)


def format_value(value: Any) -> Optional[Any]:
    """Return a canonical token value, or None when ``value`` is not token-like."""
    if is_scalar(value):
        return value
    if isinstance(value, (list, tuple)) and value:
        if isinstance(value[0], (list, tuple)):
            # tailwind fontFamily: [["Inter", "sans-serif"], {fontFeatureSettings}]
            return format_value(value[0])
        if all(is_scalar(item) for item in value):
            return ", ".join(str(item) for item in value)
    return None


def px(value: Any) -> Any:
    if is_scalar(value) and not isinstance(value, str):
        return f"{value:g}px"
    return value


def add_token(
    partial: PartialTree,
    category: Optional[str],
    name: str,
    value: Any,
    *,
    type: Optional[str] = None,
    description: Optional[str] = None,
) -> bool:
    """Store one token; values that are not scalars or scalar lists are dropped."""
    if category not in partial or not name:
        return False
    formatted = format_value(value)
    if formatted is None:
        return False
    entry: Dict[str, Any] = {"value": formatted}
    if type:
        entry["type"] = type
    if description:
        entry["description"] = description
    partial[category][name] = entry
    return True


def flatten_scale(scale: Any, prefix: str = "") -> Dict[str, Any]:
    """Flatten nested scales to ``name-shade`` keys; ``DEFAULT`` collapses to the parent name."""
    if not isinstance(scale, Mapping):
        return {prefix: scale} if prefix else {}

    flat: Dict[str, Any] = {}
    for key, value in scale.items():
        key = str(key)
        if key == "DEFAULT":
            name = prefix or key
        else:
            name = f"{prefix}-{key}" if prefix else key
        if isinstance(value, Mapping):
            flat.update(flatten_scale(value, name))
        else:
            flat[name] = value
    return flat


def expand_typography(name: str, value: Any) -> Dict[str, Any]:
    """Expand a typography variant into ``name-property`` entries."""
    if isinstance(value, Mapping):
        expanded: Dict[str, Any] = {}
        for prop, inner in value.items():
            if isinstance(inner, Mapping):
                # nested media queries and pseudo selectors are not tokens
                continue
            expanded[f"{name}-{prop}"] = inner
        return expanded
    if isinstance(value, (list, tuple)) and value and is_scalar(value[0]):
        # tailwind fontSize tuple: [size, {lineHeight}] or [size, lineHeight]
        expanded = {name: value[0]}
        if len(value) > 1:
            extra = value[1]
            if isinstance(extra, Mapping):
                expanded.update({f"{name}-{prop}": inner for prop, inner in extra.items()})
            elif is_scalar(extra):
                expanded[f"{name}-lineHeight"] = extra
        return expanded
    return {name: value}


def classify(name: str, value: Any) -> Optional[str]:
    """Guess the category of a loose name/value pair.

    A color value outranks the name, so ``text-primary: #111827`` is a color.
    """
    if isinstance(value, str) and _COLOR_VALUE_RE.match(value):
        return "colors"
    lowered = name.lower()
    for keywords, category in _NAME_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category

    if not isinstance(value, str):
        return None
    if _TIME_VALUE_RE.match(value) or value.strip().startswith("cubic-bezier("):
        return "animations"
    if _LENGTH_VALUE_RE.match(value):
        return "spacing"
    return None


def category_for_type(token_type: Any) -> Optional[str]:
    if not isinstance(token_type, str):
        return None
    return TYPE_CATEGORIES.get(token_type.replace("-", "").replace("_", "").lower())


def route_tree(partial: PartialTree, data: Any) -> None:
    """Route category-named subtrees wholesale and classify every other leaf."""
    if not isinstance(data, Mapping):
        return
    for key, value in data.items():
        key = str(key)
        category = CATEGORY_ALIASES.get(key)
        if category is not None:
            if isinstance(value, Mapping):
                for name, leaf in flatten_scale(value).items():
                    add_token(partial, category, name, leaf)
            else:
                add_token(partial, category, key, value)
            continue

        for name, leaf in flatten_scale(value, key).items():
            add_token(partial, classify(name, leaf), name, leaf)


def count_tokens(partial: PartialTree) -> int:
    return sum(len(bucket) for bucket in partial.values())


def populated_categories(partial: PartialTree) -> List[str]:
    return [category for category, bucket in partial.items() if bucket]


def strip_category_segment(segments: Iterable[str], category: str) -> List[str]:
    """Drop the first path segment that merely names ``category``."""
    parts = list(segments)
    for index, segment in enumerate(parts):
        if CATEGORY_ALIASES.get(segment) == category and len(parts) > 1:
            return parts[:index] + parts[index + 1 :]
    return parts


__all__ = [
    "CATEGORY_ALIASES",
    "TYPE_CATEGORIES",
    "add_token",
    "category_for_type",
    "classify",
    "count_tokens",
    "empty_partial",
    "expand_typography",
    "flatten_scale",
    "format_value",
    "is_scalar",
    "populated_categories",
    "px",
    "route_tree",
    "strip_category_segment",
]
