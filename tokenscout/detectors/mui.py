"""Material UI theme detection."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .base import Detector, read_text
from ..models import MUI, ProjectTree, TokenSource

_PACKAGE_MARKER = "node_modules/@mui/material"
_THEME_FILES = (
    "src/theme.js",
    "src/theme.ts",
    "theme/index.js",
    "styles/theme.js",
)
_THEME_MARKERS = ("@mui/material", "createTheme")


class MuiDetector(Detector):
    """Detects the MUI package defaults and custom theme modules."""

    ecosystem = MUI

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []

        package = root / _PACKAGE_MARKER
        if package.exists():
            sources.append(
                TokenSource(
                    type=MUI,
                    path=str(package),
                    confidence=0.8,
                    description="Material-UI theme system",
                )
            )

        for relative in _THEME_FILES:
            path = root / relative
            if not path.is_file():
                continue
            content = read_text(path)
            if content is None:
                continue
            if any(marker in content for marker in _THEME_MARKERS):
                sources.append(
                    TokenSource(
                        type=MUI,
                        path=str(path),
                        confidence=0.7,
                        description="Custom MUI theme configuration",
                    )
                )
        return sources
