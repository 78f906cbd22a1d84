"""Style Dictionary / DTCG token file extraction."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from ..errors import EvaluationError
from ..models import STYLE_DICTIONARY
from ..paths import resolve_pattern
from .base import ExtractionContext, PartialTree, unwrap_module
from .normalize import (
    CATEGORY_ALIASES,
    add_token,
    category_for_type,
    classify,
    empty_partial,
    strip_category_segment,
)

MAX_TOKEN_FILES = 10
TOKEN_SUFFIXES = {".json", ".yaml", ".yml"}


def _token_value(node: Mapping[str, Any]) -> Any:
    return node["$value"] if "$value" in node else node.get("value")


def _is_token(node: Any) -> bool:
    return isinstance(node, Mapping) and ("$value" in node or "value" in node)


def _category(token_type: Any, segments: Sequence[str], value: Any) -> Optional[str]:
    category = category_for_type(token_type)
    if category is not None:
        return category
    for segment in segments:
        category = CATEGORY_ALIASES.get(segment)
        if category is not None:
            return category
    return classify("-".join(segments), value)


def _format_shadow(value: Mapping[str, Any]) -> Optional[str]:
    parts = [value.get(key) for key in ("x", "y", "blur", "spread", "color")]
    if not any(part is not None for part in parts):
        parts = [value.get(key) for key in ("offsetX", "offsetY", "blur", "spread", "color")]
    rendered = [str(part) for part in parts if part is not None]
    return " ".join(rendered) or None


def walk_token_tree(
    partial: PartialTree,
    data: Any,
    segments: Sequence[str] = (),
    inherited_type: Optional[str] = None,
) -> None:
    """Collect every ``value``/``$value`` leaf of a token tree into ``partial``."""
    if not isinstance(data, Mapping):
        return
    group_type = data.get("$type", inherited_type)

    for key, node in data.items():
        key = str(key)
        if key.startswith("$"):
            continue
        path: List[str] = [*segments, key]
        if not _is_token(node):
            if isinstance(node, Mapping):
                walk_token_tree(partial, node, path, group_type)
            continue

        value = _token_value(node)
        token_type = node.get("$type", node.get("type", group_type))
        description = node.get("$description", node.get("description"))
        category = _category(token_type, path, value)
        if category is None:
            continue
        name = "-".join(strip_category_segment(path, category))
        type_name = token_type if isinstance(token_type, str) else None
        text = description if isinstance(description, str) else None

        if isinstance(value, Mapping):
            if category == "shadows":
                add_token(partial, category, name, _format_shadow(value), type=type_name, description=text)
                continue
            # composite typography and border tokens
            for prop, inner in value.items():
                add_token(partial, category, f"{name}-{prop}", inner, type=type_name, description=text)
            continue
        add_token(partial, category, name, value, type=type_name, description=text)


def _token_files(directory: Path) -> List[Path]:
    files = sorted(
        item for item in directory.rglob("*") if item.is_file() and item.suffix.lower() in TOKEN_SUFFIXES
    )
    return files[:MAX_TOKEN_FILES]


async def _collect(ctx: ExtractionContext, files: Sequence[Path], partial: PartialTree) -> None:
    for path in files:
        try:
            data = await ctx.evaluate(path)
        except (EvaluationError, OSError) as exc:
            ctx.issue("warning", f"Skipping token file {path.name}: {exc}", path=str(path))
            continue
        walk_token_tree(partial, data)


async def extract(ctx: ExtractionContext) -> PartialTree:
    path = Path(ctx.source.path)
    partial = empty_partial()

    if path.is_dir():
        await _collect(ctx, _token_files(path), partial)
        return partial

    if path.name.startswith("style-dictionary.config"):
        config = unwrap_module(await ctx.evaluate(path, STYLE_DICTIONARY))
        patterns = config.get("source")
        if isinstance(patterns, str):
            patterns = [patterns]
        files: List[Path] = []
        for pattern in patterns if isinstance(patterns, list) else []:
            files.extend(
                match for match in resolve_pattern(str(pattern), path.parent) if match.suffix.lower() in TOKEN_SUFFIXES
            )
        await _collect(ctx, files[:MAX_TOKEN_FILES], partial)
        return partial

    walk_token_tree(partial, await ctx.evaluate(path))
    return partial
