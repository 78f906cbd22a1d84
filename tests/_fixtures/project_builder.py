"""Helper utilities for constructing temporary front-end projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Mapping

from tokenscout.models import ProjectTree
from tokenscout.scanner import ProjectScanner


class ProjectBuilder:
    """Utility for writing files into a throwaway project and rescanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = (tmp_path / "project").resolve()
        self.root.mkdir()
        self._scanner = ProjectScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_json(self, relative: str, data: Any) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    def mkdir(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path

    def scan(self) -> ProjectTree:
        """Return a fresh tree of the project contents."""
        return self._scanner.scan(self.root)

    def path(self, relative: str = "") -> Path:
        """Return the project root, or a path inside it."""
        return self.root / relative if relative else self.root


def css_with_variables(count: int, prefix: str = "color") -> str:
    lines = [":root {"]
    lines.extend(f"  --{prefix}-{index}: #00000{index % 10};" for index in range(count))
    lines.append("}")
    return "\n".join(lines) + "\n"


__all__ = ["ProjectBuilder", "css_with_variables"]
