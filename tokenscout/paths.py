"""Path and glob helpers shared by override rules and extractors."""

from __future__ import annotations

import glob as _glob
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List


def relative_to_root(path: str | Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` in POSIX form, or the absolute path."""
    candidate = Path(path)
    try:
        return candidate.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return candidate.as_posix()


def normalise_pattern(pattern: str) -> str:
    pattern = pattern.strip().replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def has_magic(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def matches_pattern(path: str | Path, pattern: str, root: Path) -> bool:
    """Return True when ``path`` matches an exact path or a root-relative glob."""
    if not isinstance(pattern, str) or not pattern.strip():
        return False

    absolute = Path(path).as_posix()
    relative = relative_to_root(path, root)
    raw = pattern.strip().replace("\\", "/")
    if raw in (absolute, relative):
        return True

    pattern = normalise_pattern(raw)
    if pattern in (relative, absolute):
        return True
    if pattern.endswith("/"):
        return relative.startswith(pattern)
    if pattern.endswith("/**") and not has_magic(pattern[:-3]):
        prefix = pattern[:-3]
        return relative == prefix or relative.startswith(f"{prefix}/")
    if not has_magic(pattern):
        return False

    target = absolute if Path(pattern).is_absolute() else relative
    return _match_segments(target.strip("/").split("/"), pattern.strip("/").split("/"))


def _match_segments(parts: List[str], pattern_parts: List[str]) -> bool:
    """Glob match one path segment at a time; only ``**`` spans directories."""
    if not pattern_parts:
        return not parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_match_segments(parts[index:], rest) for index in range(len(parts) + 1))
    if not parts or not fnmatchcase(parts[0], head):
        return False
    return _match_segments(parts[1:], rest)


def resolve_pattern(pattern: str, root: Path) -> List[Path]:
    """Resolve an explicit path or glob against ``root``; only existing paths are returned."""
    if not isinstance(pattern, str) or not pattern.strip():
        return []
    normalised = normalise_pattern(pattern)
    base = Path(normalised)
    if not base.is_absolute():
        base = root / normalised

    if not has_magic(normalised):
        return [base.resolve()] if base.exists() else []

    matches = sorted(_glob.glob(str(base), recursive=True))
    return [Path(match).resolve() for match in matches if Path(match).is_file()]


__all__ = [
    "has_magic",
    "matches_pattern",
    "normalise_pattern",
    "relative_to_root",
    "resolve_pattern",
]
