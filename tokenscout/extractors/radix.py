"""Radix UI token extraction."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict

from ..models import RADIX
from .base import ExtractionContext, PartialTree, unwrap_module
from .normalize import add_token, empty_partial, route_tree

MAX_COLOR_SCALES = 5
SPACING_SCALE = {str(step): f"{step * 4}px" for step in range(1, 10)}

_COLOR_EXPORT_RE = re.compile(r"""export\s+const\s+(\w+?\d+)\s*=\s*['"`]([^'"`]+)['"`]""")
_SCALE_OBJECT_RE = re.compile(r"""['"]?([a-zA-Z]+\d+)['"]?\s*:\s*['"`]([^'"`]+)['"`]""")


def is_package_path(path: Path) -> bool:
    return "node_modules" in path.parts and "@radix-ui" in path.parts


def parse_color_module(content: str, scale: str) -> Dict[str, str]:
    """Return ``{step: value}`` for the ``<scale><step>`` entries of a colors module."""
    steps: Dict[str, str] = {}
    for pattern in (_COLOR_EXPORT_RE, _SCALE_OBJECT_RE):
        for name, value in pattern.findall(content):
            if not name.startswith(scale):
                continue
            step = name[len(scale) :]
            if step.isdigit():
                steps.setdefault(step, value)
    return steps


def package_tokens(ctx: ExtractionContext, package: Path) -> PartialTree:
    partial = empty_partial()
    colors_dir = package.parent / "colors"
    if colors_dir.is_dir():
        modules = sorted(item for item in colors_dir.iterdir() if item.suffix == ".js")
        for module in modules[:MAX_COLOR_SCALES]:
            scale = module.stem
            try:
                content = module.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                ctx.issue("warning", f"Could not read Radix color scale {scale}: {exc}", path=str(module))
                continue
            for step, value in parse_color_module(content, scale).items():
                add_token(partial, "colors", f"{scale}-{step}", value)

    for name, value in SPACING_SCALE.items():
        add_token(partial, "spacing", name, value)
    return partial


async def extract(ctx: ExtractionContext) -> PartialTree:
    path = Path(ctx.source.path)
    if is_package_path(path):
        return package_tokens(ctx, path)
    value = await ctx.evaluate(path, RADIX)
    partial = empty_partial()
    route_tree(partial, unwrap_module(value, "theme"))
    return partial
