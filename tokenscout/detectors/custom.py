"""Ad-hoc token module detection."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .base import Detector, read_text
from ..models import CUSTOM, ProjectTree, TokenSource

CANDIDATE_FILES = (
    "tokens.js",
    "tokens.ts",
    "constants/colors.js",
    "constants/theme.js",
    "utils/theme.js",
    "config/design.js",
)


class CustomTokensDetector(Detector):
    """Sniffs well-known script locations for token-like vocabulary."""

    ecosystem = CUSTOM

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []
        for relative in CANDIDATE_FILES:
            path = root / relative
            if not path.is_file():
                continue
            content = read_text(path)
            if content is None:
                continue
            lowered = content.lower()
            has_colors = "color" in lowered
            has_spacing = any(word in lowered for word in ("spacing", "margin", "padding"))
            has_typography = "font" in lowered or "typography" in lowered
            if has_colors or has_spacing or has_typography:
                sources.append(
                    TokenSource(
                        type=CUSTOM,
                        path=str(path),
                        confidence=0.6,
                        description="Custom token definitions",
                        metadata={
                            "hasColors": has_colors,
                            "hasSpacing": has_spacing,
                            "hasTypography": has_typography,
                        },
                    )
                )
        return sources
