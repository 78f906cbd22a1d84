from __future__ import annotations

import json
from pathlib import Path

import pytest

from tokenscout.exporters import css_variable_name, to_css, to_style_dictionary, write_tokens
from tokenscout.extractor import empty_tree


def _tree() -> dict:
    tree = empty_tree()
    tree["colors"]["tailwind-primary"] = {
        "value": "#3b82f6",
        "type": "color",
        "source": "tailwind",
        "path": "/p/tailwind.config.js",
    }
    tree["spacing"]["mui-1"] = {"value": "4px", "source": "mui", "path": "/p/src/theme.js"}
    tree["typography"]["figma-heading.large"] = {"value": "2rem", "description": "Hero"}
    return tree


def test_style_dictionary_format_drops_provenance() -> None:
    assert to_style_dictionary(_tree()) == {
        "colors": {"tailwind-primary": {"value": "#3b82f6", "type": "color"}},
        "spacing": {"mui-1": {"value": "4px"}},
        "typography": {"figma-heading.large": {"value": "2rem", "description": "Hero"}},
    }


def test_css_format_declares_root_properties() -> None:
    css = to_css(_tree())

    assert css.startswith(":root {\n  /* colors */\n")
    assert "  --tailwind-primary: #3b82f6;" in css
    assert "  --figma-heading-large: 2rem;" in css
    assert "/* shadows */" not in css
    assert css.endswith("}\n")


def test_css_variable_name_sanitises() -> None:
    assert css_variable_name("radix-blue/1 ") == "--radix-blue-1"


@pytest.mark.parametrize(
    ("fmt", "filename"),
    [("dcp", "tokens.json"), ("style-dictionary", "tokens.style-dictionary.json"), ("css", "tokens.css")],
)
def test_write_tokens_uses_format_file_name(tmp_path: Path, fmt: str, filename: str) -> None:
    target = write_tokens(_tree(), tmp_path / "out", fmt)

    assert target == tmp_path / "out" / filename
    assert target.read_text(encoding="utf-8")


def test_dcp_output_keeps_meta(tmp_path: Path) -> None:
    target = write_tokens(_tree(), tmp_path)

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["meta"]["version"] == "1.0.0"
    assert data["colors"]["tailwind-primary"]["source"] == "tailwind"


def test_unknown_format_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unknown output format"):
        write_tokens(_tree(), tmp_path, "scss")
