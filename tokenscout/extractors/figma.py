"""Figma (Tokens Studio) export extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .base import ExtractionContext, PartialTree
from .normalize import empty_partial
from .style_dictionary import walk_token_tree

GLOBAL_SET = "global"


def export_tokens(data: Any) -> PartialTree:
    """Flatten every token set; sets other than ``global`` are prefixed with their name."""
    partial = empty_partial()
    if not isinstance(data, dict):
        return partial
    for set_name, tokens in data.items():
        if set_name.startswith("$") or not isinstance(tokens, dict):
            continue
        prefix = () if set_name == GLOBAL_SET else (set_name,)
        walk_token_tree(partial, tokens, prefix)
    return partial


async def extract(ctx: ExtractionContext) -> PartialTree:
    return export_tokens(await ctx.evaluate(Path(ctx.source.path)))
