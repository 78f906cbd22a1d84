"""CSS custom property detection."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from .base import Detector, read_text
from ..models import CSS_VARIABLES, ProjectTree, TokenSource

CUSTOM_PROPERTY_RE = re.compile(r"--[\w-]+\s*:")
STYLESHEET_SUFFIXES = {".css", ".scss", ".pcss"}
MIN_PROPERTIES = 5
MAX_CONFIDENCE = 0.9
SATURATION_COUNT = 20


def css_variable_confidence(count: int) -> float:
    return min(MAX_CONFIDENCE, count / SATURATION_COUNT)


class CssVariablesDetector(Detector):
    """Accepts every stylesheet declaring more than five custom properties."""

    ecosystem = CSS_VARIABLES

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []
        for meta in tree.files:
            if meta.suffix not in STYLESHEET_SUFFIXES:
                continue
            path = root / meta.path
            content = read_text(path)
            if content is None:
                continue
            count = len(CUSTOM_PROPERTY_RE.findall(content))
            if count <= MIN_PROPERTIES:
                continue
            sources.append(
                TokenSource(
                    type=CSS_VARIABLES,
                    path=str(path),
                    confidence=css_variable_confidence(count),
                    description=f"CSS custom properties ({count} variables found)",
                    metadata={"variableCount": count},
                )
            )
        return sources
