"""Radix UI theme detection."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .base import Detector
from ..models import RADIX, ProjectTree, TokenSource

_INDICATORS = (
    "node_modules/@radix-ui/themes",
    "node_modules/@radix-ui/colors",
    ".radixthemes.config.js",
    "radix.config.js",
)


class RadixDetector(Detector):
    """Flags the first Radix package or config file present."""

    ecosystem = RADIX

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        for indicator in _INDICATORS:
            path = root / indicator
            if path.exists():
                return [
                    TokenSource(
                        type=RADIX,
                        path=str(path),
                        confidence=0.9,
                        description="Radix UI theme tokens",
                    )
                ]
        return []
