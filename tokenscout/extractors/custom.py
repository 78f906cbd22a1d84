"""Ad-hoc token module extraction."""

from __future__ import annotations

from pathlib import Path

from ..models import CUSTOM
from .base import ExtractionContext, PartialTree, unwrap_module
from .normalize import empty_partial, route_tree


async def extract(ctx: ExtractionContext) -> PartialTree:
    value = await ctx.evaluate(Path(ctx.source.path), CUSTOM)
    partial = empty_partial()
    route_tree(partial, unwrap_module(value))
    return partial
