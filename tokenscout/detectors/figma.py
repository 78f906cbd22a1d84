"""Figma token export detection."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from .base import Detector, read_text
from ..models import FIGMA, ProjectTree, TokenSource

EXPORT_FILES = (
    "figma-tokens.json",
    "tokens/figma.json",
    "design/tokens.json",
    "exports/figma-tokens.json",
)
EXPORT_MARKERS = ("$metadata", "global", "light", "dark")


def looks_like_figma_export(data: object) -> bool:
    return isinstance(data, dict) and any(marker in data for marker in EXPORT_MARKERS)


class FigmaDetector(Detector):
    """Accepts JSON exports whose top-level shape matches Figma token plugins."""

    ecosystem = FIGMA

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []
        for relative in EXPORT_FILES:
            path = root / relative
            if not path.is_file():
                continue
            content = read_text(path)
            if content is None:
                continue
            try:
                data = json.loads(content)
            except json.JSONDecodeError:
                continue
            if looks_like_figma_export(data):
                sources.append(
                    TokenSource(
                        type=FIGMA,
                        path=str(path),
                        confidence=0.8,
                        description="Figma token export",
                        metadata={"sets": sorted(key for key in data if not key.startswith("$"))},
                    )
                )
        return sources
