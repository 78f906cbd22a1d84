"""Best-effort parsers for JavaScript object-literal bodies.

The grammar is deliberately narrow: keys are identifiers, quoted strings or
numbers; values are quoted strings, numbers, booleans or nested objects.
Anything else (identifiers, calls, arrays, spreads, interpolated templates,
arithmetic) is skipped. Parsers never raise; on malformed input they return
whatever entries they could read before the damage.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..logging import get_logger

try:  # pragma: no cover - optional dependency
    from tree_sitter import Parser
    from tree_sitter_languages import get_language

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    Parser = None  # type: ignore[assignment]
    get_language = None  # type: ignore[assignment]
    TREE_SITTER_AVAILABLE = False

_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_QUOTES = {'"', "'", "`"}
_OPENERS = {"{": "}", "[": "]", "(": ")"}
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_MAX_DEPTH = 32

logger = get_logger("evaluator.literals")


class _LiteralSyntaxError(ValueError):
    """Internal signal for input the scanner cannot continue through."""


def strip_comments(text: str) -> str:
    """Remove // and /* */ comments while leaving string contents untouched."""
    out: list[str] = []
    index = 0
    length = len(text)
    quote: Optional[str] = None
    while index < length:
        char = text[index]
        if quote is not None:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == quote:
                quote = None
            index += 1
            continue
        if char in _QUOTES:
            quote = char
            out.append(char)
            index += 1
            continue
        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if text.startswith("/*", index):
            close = text.find("*/", index + 2)
            index = length if close == -1 else close + 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def find_matching_brace(text: str, open_index: int) -> int:
    """Return the index of the bracket closing ``text[open_index]``, or -1."""
    if open_index >= len(text) or text[open_index] not in _OPENERS:
        return -1
    stack = [_OPENERS[text[open_index]]]
    index = open_index + 1
    length = len(text)
    while index < length:
        char = text[index]
        if char in _QUOTES:
            end = _skip_string(text, index)
            if end < 0:
                return -1
            index = end
            continue
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in ("}", "]", ")"):
            if not stack or stack[-1] != char:
                return -1
            stack.pop()
            if not stack:
                return index
        index += 1
    return -1


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal starting at ``start``, or -1."""
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n" and quote != "`":
            return -1
        index += 1
    return -1


class LiteralParser(ABC):
    """Contract for parsers turning an object-literal body into a dict."""

    name = "abstract"

    @abstractmethod
    def parse_object(self, body: str) -> Dict[str, Any]:
        """Parse the text between an object's braces; never raises."""


class BasicLiteralParser(LiteralParser):
    """Character scanner for the quoted-string | number | boolean | object grammar."""

    name = "basic"

    def parse_object(self, body: str) -> Dict[str, Any]:
        try:
            return self._parse_body(strip_comments(body), 0)
        except RecursionError:  # pragma: no cover - bounded by _MAX_DEPTH
            return {}

    def _parse_body(self, body: str, depth: int) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if depth > _MAX_DEPTH:
            return result
        index = 0
        length = len(body)
        while index < length:
            index = _skip_ws(body, index)
            if index >= length:
                break
            if body[index] == ",":
                index += 1
                continue
            try:
                key, index = self._read_key(body, index)
                if key is None:
                    index = _skip_entry(body, index)
                    continue
                index = _skip_ws(body, index)
                if index >= length or body[index] != ":":
                    index = _skip_entry(body, index)
                    continue
                index = _skip_ws(body, index + 1)
                ok, value, index = self._read_value(body, index, depth)
            except _LiteralSyntaxError:
                break
            index = _skip_ws(body, index)
            complete = index >= length or body[index] == ","
            if ok and complete:
                result[key] = value
            index = _skip_entry(body, index)
        return result

    def _read_key(self, body: str, index: int) -> Tuple[Optional[str], int]:
        char = body[index]
        if char in ('"', "'"):
            return _read_string(body, index)
        if char == "`":
            text, end = _read_string(body, index)
            return (None if "${" in text else text), end
        match = _NUMBER_RE.match(body, index)
        if match and match.group(0)[0] not in "+-":
            return match.group(0), match.end()
        match = _IDENT_RE.match(body, index)
        if match:
            return match.group(0), match.end()
        return None, index

    def _read_value(self, body: str, index: int, depth: int) -> Tuple[bool, Any, int]:
        if index >= len(body):
            return False, None, index
        char = body[index]
        if char in ('"', "'"):
            text, end = _read_string(body, index)
            return True, text, end
        if char == "`":
            text, end = _read_string(body, index)
            return "${" not in text, text, end
        if char == "{":
            close = find_matching_brace(body, index)
            if close < 0:
                raise _LiteralSyntaxError("unterminated object")
            return True, self._parse_body(body[index + 1 : close], depth + 1), close + 1
        match = _NUMBER_RE.match(body, index)
        if match:
            end = match.end()
            # 12px, 1.5rem and friends are expressions here, not numbers
            if end < len(body) and (body[end].isalnum() or body[end] in "_$."):
                return False, None, end
            return True, _coerce_number(match.group(0)), end
        match = _IDENT_RE.match(body, index)
        if match:
            word = match.group(0)
            if word in ("true", "false"):
                return True, word == "true", match.end()
            return False, None, match.end()
        return False, None, index


class TreeSitterLiteralParser(LiteralParser):
    """Object-literal parser backed by the tree-sitter JavaScript grammar."""

    name = "tree-sitter"
    _PREFIX = "const __literal = {"

    def __init__(self) -> None:
        if not TREE_SITTER_AVAILABLE:
            raise RuntimeError(
                "tree-sitter is required for this parser. Install it with `pip install tokenscout[ast]`."
            )
        self._parser = Parser()
        self._parser.set_language(get_language("javascript"))

    def parse_object(self, body: str) -> Dict[str, Any]:
        source = f"{self._PREFIX}{body}}};".encode("utf-8")
        try:
            tree = self._parser.parse(source)
        except Exception as exc:  # pragma: no cover - parser internals
            logger.debug("tree-sitter failed to parse literal: %s", exc)
            return {}
        node = _find_first(tree.root_node, "object")
        if node is None:
            return {}
        return self._object(node, source, 0)

    def _object(self, node, source: bytes, depth: int) -> Dict[str, Any]:  # type: ignore[no-untyped-def]
        result: Dict[str, Any] = {}
        if depth > _MAX_DEPTH:
            return result
        for child in node.named_children:
            if child.type != "pair":
                continue
            key_node = child.child_by_field_name("key")
            value_node = child.child_by_field_name("value")
            if key_node is None or value_node is None:
                continue
            key = self._key(key_node, source)
            if key is None:
                continue
            ok, value = self._value(value_node, source, depth)
            if ok:
                result[key] = value
        return result

    @staticmethod
    def _text(node, source: bytes) -> str:  # type: ignore[no-untyped-def]
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def _key(self, node, source: bytes) -> Optional[str]:  # type: ignore[no-untyped-def]
        text = self._text(node, source)
        if node.type in ("property_identifier", "number"):
            return text
        if node.type == "string":
            return text[1:-1]
        return None

    def _value(self, node, source: bytes, depth: int) -> Tuple[bool, Any]:  # type: ignore[no-untyped-def]
        text = self._text(node, source)
        if node.type == "string":
            return True, text[1:-1]
        if node.type == "template_string":
            if any(child.type == "template_substitution" for child in node.named_children):
                return False, None
            return True, text[1:-1]
        if node.type == "number":
            return True, _coerce_number(text)
        if node.type in ("true", "false"):
            return True, node.type == "true"
        if node.type == "object":
            return True, self._object(node, source, depth + 1)
        return False, None


def _find_first(node, node_type: str):  # type: ignore[no-untyped-def]
    if node.type == node_type:
        return node
    for child in node.children:
        found = _find_first(child, node_type)
        if found is not None:
            return found
    return None


def _skip_ws(text: str, index: int) -> int:
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _skip_entry(text: str, index: int) -> int:
    """Advance past the next top-level comma, skipping nested brackets and strings."""
    length = len(text)
    while index < length:
        char = text[index]
        if char == ",":
            return index + 1
        if char in _QUOTES:
            end = _skip_string(text, index)
            index = length if end < 0 else end
            continue
        if char in _OPENERS:
            close = find_matching_brace(text, index)
            index = length if close < 0 else close + 1
            continue
        index += 1
    return length


def _read_string(text: str, start: int) -> Tuple[str, int]:
    quote = text[start]
    out: list[str] = []
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            nxt = text[index + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            index += 2
            continue
        if char == quote:
            return "".join(out), index + 1
        if char == "\n" and quote != "`":
            break
        out.append(char)
        index += 1
    raise _LiteralSyntaxError("unterminated string")


def _coerce_number(text: str) -> int | float:
    if re.fullmatch(r"[-+]?\d+", text):
        return int(text)
    return float(text)


def get_literal_parser(name: str | None = None) -> LiteralParser:
    """Return the parser registered under ``name`` (``basic`` by default)."""
    key = (name or "basic").lower()
    if key in ("tree-sitter", "tree_sitter", "treesitter"):
        if TREE_SITTER_AVAILABLE:
            return TreeSitterLiteralParser()
        logger.warning("tree-sitter parser requested but not installed; using basic parser")
        return BasicLiteralParser()
    if key != "basic":
        logger.warning("Unknown literal parser '%s'; using basic parser", name)
    return BasicLiteralParser()


__all__ = [
    "BasicLiteralParser",
    "LiteralParser",
    "TREE_SITTER_AVAILABLE",
    "TreeSitterLiteralParser",
    "find_matching_brace",
    "get_literal_parser",
    "strip_comments",
]
