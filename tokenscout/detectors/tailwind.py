"""Tailwind CSS configuration detection."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .base import Detector
from ..models import TAILWIND, ProjectTree, TokenSource


class TailwindDetector(Detector):
    """Finds the project's Tailwind configuration file."""

    ecosystem = TAILWIND

    CONFIG_FILES = (
        "tailwind.config.js",
        "tailwind.config.ts",
        "tailwind.config.mjs",
        "tailwind.config.cjs",
    )

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []
        for name in self.CONFIG_FILES:
            path = root / name
            if path.is_file():
                sources.append(
                    TokenSource(
                        type=TAILWIND,
                        path=str(path),
                        confidence=0.9,
                        description="Tailwind CSS configuration",
                    )
                )
                break
        return sources
