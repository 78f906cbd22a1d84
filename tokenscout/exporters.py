"""Output formats for an extracted token tree."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping

from .models import CATEGORIES

FORMAT_DCP = "dcp"
FORMAT_STYLE_DICTIONARY = "style-dictionary"
FORMAT_CSS = "css"
FORMATS = (FORMAT_DCP, FORMAT_STYLE_DICTIONARY, FORMAT_CSS)

OUTPUT_FILES = {
    FORMAT_DCP: "tokens.json",
    FORMAT_STYLE_DICTIONARY: "tokens.style-dictionary.json",
    FORMAT_CSS: "tokens.css",
}

_CSS_NAME_RE = re.compile(r"[^a-zA-Z0-9_-]+")


def to_style_dictionary(tree: Mapping[str, Any]) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Return ``{category: {name: {value, type?, description?}}}`` without provenance."""
    output: Dict[str, Dict[str, Dict[str, Any]]] = {}
    for category in CATEGORIES:
        tokens = tree.get(category) or {}
        if not tokens:
            continue
        bucket: Dict[str, Dict[str, Any]] = {}
        for name, entry in tokens.items():
            token = {"value": entry.get("value")}
            for key in ("type", "description"):
                if entry.get(key):
                    token[key] = entry[key]
            bucket[name] = token
        output[category] = bucket
    return output


def css_variable_name(name: str) -> str:
    return "--" + _CSS_NAME_RE.sub("-", name).strip("-")


def to_css(tree: Mapping[str, Any]) -> str:
    """Render every token as a custom property on ``:root``."""
    lines = [":root {"]
    for category in CATEGORIES:
        tokens = tree.get(category) or {}
        if not tokens:
            continue
        lines.append(f"  /* {category} */")
        for name, entry in tokens.items():
            lines.append(f"  {css_variable_name(name)}: {entry.get('value')};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_tokens(tree: Mapping[str, Any], output_dir: str | Path, fmt: str = FORMAT_DCP) -> Path:
    """Write ``tree`` in ``fmt`` under ``output_dir`` and return the file path."""
    if fmt not in OUTPUT_FILES:
        raise ValueError(f"Unknown output format: {fmt} (expected one of {', '.join(FORMATS)})")
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / OUTPUT_FILES[fmt]

    if fmt == FORMAT_CSS:
        target.write_text(to_css(tree), encoding="utf-8")
    elif fmt == FORMAT_STYLE_DICTIONARY:
        target.write_text(json.dumps(to_style_dictionary(tree), indent=2) + "\n", encoding="utf-8")
    else:
        target.write_text(json.dumps(tree, indent=2, default=str) + "\n", encoding="utf-8")
    return target


__all__ = [
    "FORMATS",
    "OUTPUT_FILES",
    "css_variable_name",
    "to_css",
    "to_style_dictionary",
    "write_tokens",
]
