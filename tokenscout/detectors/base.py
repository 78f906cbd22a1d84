"""Base classes for detection heuristics."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from ..models import ProjectTree, TokenSource

MAX_SNIFF_BYTES = 2 * 1024 * 1024


class Detector(ABC):
    """Contract for heuristics that propose token sources for one ecosystem.

    Implementations inspect the filesystem only; they never mutate the tree or
    share state, so the detector can run them all concurrently.
    """

    ecosystem: str = ""

    @abstractmethod
    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        """Return the candidate sources this heuristic recognises."""


def read_text(path: Path, limit: int = MAX_SNIFF_BYTES) -> Optional[str]:
    """Return file contents for content sniffing, or None when unreadable or too large."""
    try:
        if path.stat().st_size > limit:
            return None
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
