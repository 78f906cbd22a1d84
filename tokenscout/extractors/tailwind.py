"""Tailwind CSS theme extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..models import TAILWIND
from .base import ExtractionContext, PartialTree, unwrap_module
from .normalize import add_token, empty_partial, expand_typography, flatten_scale

# theme key -> (category, name prefix)
THEME_KEYS = {
    "colors": ("colors", ""),
    "spacing": ("spacing", ""),
    "fontFamily": ("typography", "fontFamily"),
    "fontWeight": ("typography", "fontWeight"),
    "lineHeight": ("typography", "lineHeight"),
    "letterSpacing": ("typography", "letterSpacing"),
    "borderRadius": ("borders", "borderRadius"),
    "borderWidth": ("borders", "borderWidth"),
    "boxShadow": ("shadows", ""),
    "screens": ("breakpoints", ""),
    "zIndex": ("zIndex", ""),
    "transitionDuration": ("animations", "duration"),
    "transitionTimingFunction": ("animations", "ease"),
    "animation": ("animations", "animation"),
}


def merged_theme(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``theme`` with ``theme.extend`` folded in (extend wins per key)."""
    theme = config.get("theme")
    theme = dict(theme) if isinstance(theme, dict) else {}
    extend = theme.pop("extend", None)
    if isinstance(extend, dict):
        for key, value in extend.items():
            base = theme.get(key)
            if isinstance(base, dict) and isinstance(value, dict):
                theme[key] = {**base, **value}
            else:
                theme[key] = value
    return theme


async def extract(ctx: ExtractionContext) -> PartialTree:
    value = await ctx.evaluate(Path(ctx.source.path), TAILWIND)
    theme = merged_theme(unwrap_module(value))
    partial = empty_partial()

    for key, (category, prefix) in THEME_KEYS.items():
        scale = theme.get(key)
        if not isinstance(scale, dict):
            continue
        for name, leaf in flatten_scale(scale, prefix).items():
            add_token(partial, category, name, leaf)

    font_size = theme.get("fontSize")
    if isinstance(font_size, dict):
        for size_name, entry in font_size.items():
            for name, leaf in expand_typography(f"fontSize-{size_name}", entry).items():
                add_token(partial, "typography", name, leaf)

    return partial
