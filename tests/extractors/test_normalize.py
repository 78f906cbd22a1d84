from __future__ import annotations

import pytest

from tokenscout.extractors.normalize import (
    add_token,
    category_for_type,
    classify,
    empty_partial,
    expand_typography,
    flatten_scale,
    format_value,
    px,
    route_tree,
    strip_category_segment,
)


@pytest.mark.parametrize(
    ("name", "value", "expected"),
    [
        ("color-primary", "#3b82f6", "colors"),
        ("space-4", "1rem", "spacing"),
        ("font-body", "Inter, sans-serif", "typography"),
        ("radius-md", "6px", "borders"),
        ("shadow-sm", "0 1px 2px #0003", "shadows"),
        ("duration-fast", "150ms", "animations"),
        ("z-index-modal", "1000", "zIndex"),
        ("breakpoint-md", "768px", "breakpoints"),
        ("brand", "rgb(0, 0, 0)", "colors"),
        ("gap-lg", "24px", "spacing"),
        ("curve", "cubic-bezier(0.4, 0, 0.2, 1)", "animations"),
        ("text-primary", "#111827", "colors"),
        ("border-subtle", "hsl(220 13% 91%)", "colors"),
        ("font-size-sm", "0.875rem", "typography"),
        ("unknown", "solid", None),
    ],
)
def test_classify(name: str, value: str, expected: str | None) -> None:
    assert classify(name, value) == expected


def test_flatten_scale_collapses_default_and_joins_shades() -> None:
    scale = {"gray": {"DEFAULT": "#888", "100": "#eee"}, "white": "#fff"}

    assert flatten_scale(scale) == {"gray": "#888", "gray-100": "#eee", "white": "#fff"}
    assert flatten_scale("#000", "ink") == {"ink": "#000"}


def test_expand_typography_handles_variants_and_tuples() -> None:
    assert expand_typography("h1", {"fontSize": "2rem", "@media": {"fontSize": "3rem"}}) == {
        "h1-fontSize": "2rem"
    }
    assert expand_typography("fontSize-sm", ["0.875rem", {"lineHeight": "1.25rem"}]) == {
        "fontSize-sm": "0.875rem",
        "fontSize-sm-lineHeight": "1.25rem",
    }
    assert expand_typography("fontSize-xs", ["0.75rem", "1rem"]) == {
        "fontSize-xs": "0.75rem",
        "fontSize-xs-lineHeight": "1rem",
    }


def test_format_value_and_add_token_drop_non_tokens() -> None:
    partial = empty_partial()

    assert format_value(["Inter", "sans-serif"]) == "Inter, sans-serif"
    assert format_value([["Inter", "sans-serif"], {"fontFeatureSettings": "cv11"}]) == "Inter, sans-serif"
    assert format_value(True) is None
    assert not add_token(partial, "colors", "nested", {"a": 1})
    assert not add_token(partial, None, "lost", "#000")
    assert add_token(partial, "colors", "ink", "#111", type="color", description="Body text")
    assert partial["colors"] == {"ink": {"value": "#111", "type": "color", "description": "Body text"}}


def test_px_only_touches_numbers() -> None:
    assert px(8) == "8px"
    assert px(0.5) == "0.5px"
    assert px("1rem") == "1rem"


def test_route_tree_routes_category_subtrees_and_classifies_the_rest() -> None:
    partial = empty_partial()

    route_tree(
        partial,
        {
            "colors": {"brand": {"500": "#f00"}},
            "radii": {"md": "6px"},
            "misc": {"headingFont": "Inter", "cardShadow": "0 1px 2px #000"},
            "accent": "#0f0",
            "label": "not a token",
        },
    )

    assert partial["colors"] == {"brand-500": {"value": "#f00"}, "accent": {"value": "#0f0"}}
    assert partial["borders"] == {"md": {"value": "6px"}}
    assert partial["typography"] == {"misc-headingFont": {"value": "Inter"}}
    assert partial["shadows"] == {"misc-cardShadow": {"value": "0 1px 2px #000"}}
    assert "label" not in str(partial)


def test_category_for_type_normalises_spelling() -> None:
    assert category_for_type("color") == "colors"
    assert category_for_type("font-size") == "typography"
    assert category_for_type("boxShadow") == "shadows"
    assert category_for_type("z_index") == "zIndex"
    assert category_for_type("other") is None
    assert category_for_type(None) is None


def test_strip_category_segment() -> None:
    assert strip_category_segment(["color", "base", "red"], "colors") == ["base", "red"]
    assert strip_category_segment(["light", "bg"], "colors") == ["light", "bg"]
    assert strip_category_segment(["color"], "colors") == ["color"]
