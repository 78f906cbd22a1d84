"""Static (non-executing) extraction of configuration values from source text."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging import get_logger
from ..models import MUI, TAILWIND
from .literals import BasicLiteralParser, LiteralParser, find_matching_brace, strip_comments

logger = get_logger("evaluator.static")

_TAILWIND_KEYS = (
    "colors",
    "spacing",
    "fontSize",
    "fontFamily",
    "fontWeight",
    "borderRadius",
    "boxShadow",
    "screens",
    "zIndex",
)
_MUI_OBJECT_KEYS = ("palette", "typography", "breakpoints", "shape", "zIndex")
_MUI_SPACING_RE = re.compile(r"\bspacing\s*:\s*(\d+(?:\.\d+)?)\b")
_RETURN_RE = re.compile(r"\breturn\s*\(?\s*\{")
_DEFAULT_EXPORT_RES = (
    re.compile(r"\bexport\s+default\s*\{"),
    re.compile(r"\bmodule\.exports\s*=\s*\{"),
    re.compile(r"\bexport\s+default\s+\w+\s*\(\s*\{"),
)
_NAMED_EXPORT_RE = re.compile(r"\bexport\s+const\s+(\w+)\s*(?::\s*[\w.<>\[\]]+\s*)?=\s*\{")
_CJS_NAMED_EXPORT_RE = re.compile(r"\b(?:module\.)?exports\.(\w+)\s*=\s*\{")


class StaticExtractor:
    """Pattern-based extraction used whenever dynamic evaluation is unavailable."""

    def __init__(self, parser: Optional[LiteralParser] = None) -> None:
        self.parser = parser or BasicLiteralParser()

    def extract_file(self, path: Path, ecosystem: Optional[str] = None) -> Dict[str, Any]:
        """Read ``path`` and run the strategy for ``ecosystem``; read errors propagate."""
        content = path.read_text(encoding="utf-8", errors="replace")
        return self.extract_text(content, ecosystem or infer_ecosystem(path))

    def extract_text(self, content: str, ecosystem: Optional[str] = None) -> Dict[str, Any]:
        try:
            source = strip_comments(content)
            if ecosystem == TAILWIND:
                return self.extract_tailwind(source)
            if ecosystem == MUI:
                return self.extract_mui(source)
            return self.extract_generic(source)
        except Exception as exc:  # pragma: no cover
            logger.debug("Static extraction failed: %s", exc)
            return {}

    def extract_tailwind(self, source: str) -> Dict[str, Any]:
        extend: Dict[str, Any] = {}
        for key in _TAILWIND_KEYS:
            block = self.find_object_block(source, key)
            if block is not None:
                extend[key] = self.parser.parse_object(block)
        return {"theme": {"extend": extend}}

    def extract_mui(self, source: str) -> Dict[str, Any]:
        theme: Dict[str, Any] = {}
        for key in _MUI_OBJECT_KEYS:
            block = self.find_object_block(source, key)
            if block is not None:
                theme[key] = self.parser.parse_object(block)
        spacing = _MUI_SPACING_RE.search(source)
        if spacing:
            raw = spacing.group(1)
            theme["spacing"] = float(raw) if "." in raw else int(raw)
        return theme

    def extract_generic(self, source: str) -> Dict[str, Any]:
        for pattern in _DEFAULT_EXPORT_RES:
            match = pattern.search(source)
            if match:
                body = _body_at(source, match.end() - 1)
                if body is not None:
                    return self.parser.parse_object(body)

        exports: Dict[str, Any] = {}
        for pattern in (_NAMED_EXPORT_RE, _CJS_NAMED_EXPORT_RE):
            for match in pattern.finditer(source):
                body = _body_at(source, match.end() - 1)
                if body is not None:
                    exports[match.group(1)] = self.parser.parse_object(body)
        return exports

    def extract_function_return(self, content: str) -> Dict[str, Any]:
        """Parse the first literal ``return { ... }`` block of a factory export."""
        try:
            source = strip_comments(content)
            match = _RETURN_RE.search(source)
            if not match:
                return {}
            body = _body_at(source, match.end() - 1)
            return self.parser.parse_object(body) if body is not None else {}
        except Exception as exc:  # pragma: no cover
            logger.debug("Static return-block extraction failed: %s", exc)
            return {}

    @staticmethod
    def find_object_block(source: str, key: str) -> Optional[str]:
        """Return the body of the first ``key: { ... }`` object in ``source``."""
        pattern = re.compile(rf"""(?<![\w$])['"]?{re.escape(key)}['"]?\s*:\s*\{{""")
        match = pattern.search(source)
        if not match:
            return None
        return _body_at(source, match.end() - 1)


def _body_at(source: str, open_index: int) -> Optional[str]:
    close = find_matching_brace(source, open_index)
    if close < 0:
        # unbalanced input: hand the remainder to the tolerant parser
        return source[open_index + 1 :]
    return source[open_index + 1 : close]


def infer_ecosystem(path: Path) -> Optional[str]:
    """Guess the static strategy from a file name."""
    name = path.name.lower()
    if "tailwind" in name:
        return TAILWIND
    if "mui" in name or "theme" in name:
        return MUI
    return None


__all__ = ["StaticExtractor", "infer_ecosystem"]
