"""Style Dictionary and token file tree detection."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .base import Detector
from ..models import STYLE_DICTIONARY, ProjectTree, TokenSource

TOKEN_DIRECTORIES = ("tokens", "design-tokens")
TOKEN_FILES = (
    "style-dictionary.config.js",
    "style-dictionary.config.json",
    "tokens.json",
    "design-tokens.json",
)
TOKEN_FILE_SUFFIXES = (".json", ".yaml", ".yml")


class StyleDictionaryDetector(Detector):
    """Detects token directories and Style Dictionary config/token files."""

    ecosystem = STYLE_DICTIONARY

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        root = Path(tree.root)
        sources: List[TokenSource] = []

        for directory in TOKEN_DIRECTORIES:
            path = root / directory
            if not path.is_dir():
                continue
            prefix = f"{directory}/"
            token_files = [
                meta.path[len(prefix) :]
                for meta in tree.files
                if meta.path.startswith(prefix) and meta.path.endswith(TOKEN_FILE_SUFFIXES)
            ]
            if token_files:
                sources.append(
                    TokenSource(
                        type=STYLE_DICTIONARY,
                        path=str(path),
                        confidence=0.8,
                        description=f"Style Dictionary tokens ({len(token_files)} files)",
                        metadata={"tokenFiles": token_files},
                    )
                )

        for name in TOKEN_FILES:
            path = root / name
            if path.is_file():
                sources.append(
                    TokenSource(
                        type=STYLE_DICTIONARY,
                        path=str(path),
                        confidence=0.7,
                        description="Style Dictionary configuration or tokens",
                    )
                )
        return sources
