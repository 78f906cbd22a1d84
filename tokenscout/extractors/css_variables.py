"""CSS custom property extraction."""

from __future__ import annotations

import re
from pathlib import Path

from .base import ExtractionContext, PartialTree
from .normalize import add_token, classify, empty_partial

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_DECLARATION_RE = re.compile(r"--([\w-]+)\s*:\s*([^;}]+)")


def parse_custom_properties(content: str) -> PartialTree:
    partial = empty_partial()
    for name, raw in _DECLARATION_RE.findall(_COMMENT_RE.sub("", content)):
        value = raw.strip()
        if value:
            add_token(partial, classify(name, value), name, value)
    return partial


async def extract(ctx: ExtractionContext) -> PartialTree:
    content = Path(ctx.source.path).read_text(encoding="utf-8", errors="replace")
    return parse_custom_properties(content)
