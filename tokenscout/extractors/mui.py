"""Material UI theme extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..models import MUI
from .base import ExtractionContext, PartialTree, unwrap_module
from .normalize import add_token, classify, empty_partial, expand_typography, flatten_scale, is_scalar, px

DEFAULT_PALETTE = {
    "primary": {"50": "#e3f2fd", "100": "#bbdefb", "500": "#2196f3", "900": "#0d47a1"},
    "secondary": {"50": "#fce4ec", "100": "#f8bbd9", "500": "#e91e63", "900": "#880e4f"},
}
DEFAULT_SPACING = {"xs": "4px", "sm": "8px", "md": "16px", "lg": "24px", "xl": "32px"}
SPACING_STEPS = 10


def is_package_path(path: Path) -> bool:
    return "node_modules" in path.parts and "@mui" in path.parts


def spacing_scale(base: float) -> Dict[str, str]:
    return {str(step): px(base * step) for step in range(1, SPACING_STEPS + 1)}


def package_defaults() -> PartialTree:
    partial = empty_partial()
    for name, value in flatten_scale(DEFAULT_PALETTE).items():
        add_token(partial, "colors", name, value)
    for name, value in DEFAULT_SPACING.items():
        add_token(partial, "spacing", name, value)
    return partial


def theme_tokens(theme: Dict[str, Any]) -> PartialTree:
    partial = empty_partial()

    palette = theme.get("palette")
    if isinstance(palette, dict):
        for group, value in palette.items():
            if isinstance(value, dict):
                for name, leaf in flatten_scale(value, group).items():
                    # numeric entries such as action.hoverOpacity are not colors
                    if isinstance(leaf, str):
                        add_token(partial, "colors", name, leaf)
            elif classify(group, value) == "colors" or classify("", value) == "colors":
                add_token(partial, "colors", group, value)

    spacing = theme.get("spacing")
    if is_scalar(spacing) and not isinstance(spacing, str):
        for name, value in spacing_scale(spacing).items():
            add_token(partial, "spacing", name, value)
    elif isinstance(spacing, list):
        for index, value in enumerate(spacing):
            add_token(partial, "spacing", str(index), px(value))
    elif isinstance(spacing, dict):
        for name, value in flatten_scale(spacing).items():
            add_token(partial, "spacing", name, px(value))

    typography = theme.get("typography")
    if isinstance(typography, dict):
        for name, value in typography.items():
            for key, leaf in expand_typography(str(name), value).items():
                add_token(partial, "typography", key, leaf)

    breakpoints = theme.get("breakpoints")
    if isinstance(breakpoints, dict):
        values = breakpoints.get("values", breakpoints)
        if isinstance(values, dict):
            for name, value in values.items():
                add_token(partial, "breakpoints", str(name), px(value))

    shape = theme.get("shape")
    if isinstance(shape, dict) and "borderRadius" in shape:
        add_token(partial, "borders", "borderRadius", px(shape["borderRadius"]))

    shadows = theme.get("shadows")
    if isinstance(shadows, list):
        for index, value in enumerate(shadows):
            if value != "none":
                add_token(partial, "shadows", str(index), value)

    z_index = theme.get("zIndex")
    if isinstance(z_index, dict):
        for name, value in z_index.items():
            add_token(partial, "zIndex", str(name), value)

    transitions = theme.get("transitions")
    if isinstance(transitions, dict):
        for group in ("duration", "easing"):
            scale = transitions.get(group)
            if isinstance(scale, dict):
                for name, value in scale.items():
                    add_token(partial, "animations", f"{group}-{name}", value)

    return partial


async def extract(ctx: ExtractionContext) -> PartialTree:
    path = Path(ctx.source.path)
    if is_package_path(path):
        return package_defaults()
    value = await ctx.evaluate(path, MUI)
    return theme_tokens(unwrap_module(value, "theme"))
