from __future__ import annotations

import pytest

from tests._fixtures.project_builder import ProjectBuilder, css_with_variables
from tokenscout.detectors import (
    CssVariablesDetector,
    CustomTokensDetector,
    FigmaDetector,
    MuiDetector,
    RadixDetector,
    StyleDictionaryDetector,
    TailwindDetector,
    discover_detectors,
)
from tokenscout.detectors.css_variables import css_variable_confidence


def test_tailwind_config_is_detected_once(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "tailwind.config.ts": "export default { theme: {} }\n",
            "tailwind.config.js": "module.exports = { theme: {} }\n",
        }
    )

    sources = list(TailwindDetector().detect(project_builder.scan()))

    assert len(sources) == 1
    assert sources[0].path == str(project_builder.path("tailwind.config.js"))
    assert sources[0].confidence == 0.9
    assert sources[0].type == "tailwind"


def test_mui_package_and_theme_files(project_builder: ProjectBuilder) -> None:
    project_builder.mkdir("node_modules/@mui/material")
    project_builder.write(
        {
            "src/theme.js": "import { createTheme } from '@mui/material/styles';\n",
            "styles/theme.js": "export const theme = { colors: {} };\n",
        }
    )

    sources = list(MuiDetector().detect(project_builder.scan()))

    assert [(source.confidence, source.path) for source in sources] == [
        (0.8, str(project_builder.path("node_modules/@mui/material"))),
        (0.7, str(project_builder.path("src/theme.js"))),
    ]


def test_radix_reports_first_indicator(project_builder: ProjectBuilder) -> None:
    project_builder.mkdir("node_modules/@radix-ui/colors")
    project_builder.write({"radix.config.js": "module.exports = {}\n"})

    sources = list(RadixDetector().detect(project_builder.scan()))

    assert len(sources) == 1
    assert sources[0].path == str(project_builder.path("node_modules/@radix-ui/colors"))
    assert sources[0].confidence == 0.9


@pytest.mark.parametrize(
    ("count", "expected"),
    [(6, 0.3), (10, 0.5), (30, 0.9)],
)
def test_css_variables_confidence_scales_with_count(
    project_builder: ProjectBuilder, count: int, expected: float
) -> None:
    project_builder.write({"src/styles/vars.css": css_with_variables(count)})

    sources = list(CssVariablesDetector().detect(project_builder.scan()))

    assert len(sources) == 1
    assert sources[0].confidence == pytest.approx(expected)
    assert sources[0].metadata == {"variableCount": count}
    assert sources[0].description == f"CSS custom properties ({count} variables found)"


def test_css_variables_requires_more_than_five(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "few.css": css_with_variables(5),
            "one.scss": css_with_variables(1),
            "notes.txt": css_with_variables(12),
        }
    )

    assert list(CssVariablesDetector().detect(project_builder.scan())) == []
    assert css_variable_confidence(100) == 0.9


def test_css_variables_skips_excluded_directories(project_builder: ProjectBuilder) -> None:
    project_builder.write({"node_modules/lib/vars.css": css_with_variables(12)})

    assert list(CssVariablesDetector().detect(project_builder.scan())) == []


def test_style_dictionary_directories_and_files(project_builder: ProjectBuilder) -> None:
    project_builder.write_json("tokens/color/base.json", {"color": {}})
    project_builder.write({"tokens/size.yml": "size: {}\n", "tokens/README.md": "# tokens\n"})
    project_builder.mkdir("design-tokens")
    project_builder.write_json("tokens.json", {})

    sources = list(StyleDictionaryDetector().detect(project_builder.scan()))

    assert [(source.path, source.confidence) for source in sources] == [
        (str(project_builder.path("tokens")), 0.8),
        (str(project_builder.path("tokens.json")), 0.7),
    ]
    assert sorted(sources[0].metadata["tokenFiles"]) == ["color/base.json", "size.yml"]


def test_custom_tokens_need_token_vocabulary(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "tokens.js": "export const Colors = { brand: '#f00' };\nexport const Font = 'Inter';\n",
            "constants/theme.js": "export const API_URL = 'https://example.com';\n",
        }
    )

    sources = list(CustomTokensDetector().detect(project_builder.scan()))

    assert len(sources) == 1
    assert sources[0].path == str(project_builder.path("tokens.js"))
    assert sources[0].confidence == 0.6
    assert sources[0].metadata == {"hasColors": True, "hasSpacing": False, "hasTypography": True}


def test_figma_export_requires_known_sets(project_builder: ProjectBuilder) -> None:
    project_builder.write_json(
        "figma-tokens.json", {"$metadata": {}, "global": {}, "light": {}}
    )
    project_builder.write_json("design/tokens.json", {"colors": {}})
    project_builder.write({"tokens/figma.json": "{ broken"})

    sources = list(FigmaDetector().detect(project_builder.scan()))

    assert len(sources) == 1
    assert sources[0].path == str(project_builder.path("figma-tokens.json"))
    assert sources[0].metadata == {"sets": ["global", "light"]}


def test_discover_detectors_default_order() -> None:
    names = [detector.ecosystem for detector in discover_detectors()]

    assert names[:7] == [
        "radix",
        "mui",
        "tailwind",
        "css-variables",
        "style-dictionary",
        "custom",
        "figma",
    ]


def test_discover_detectors_subset_and_unknown() -> None:
    subset = discover_detectors(["Tailwind", "figma"])

    assert [detector.ecosystem for detector in subset] == ["tailwind", "figma"]
    with pytest.raises(ValueError, match="Unknown detectors requested: bootstrap"):
        discover_detectors(["tailwind", "bootstrap"])


class _PluginDetector(CustomTokensDetector):
    ecosystem = "bootstrap"


class _FakeEntryPoint:
    def __init__(self, name: str, target: object) -> None:
        self.name = name
        self._target = target

    def load(self) -> object:
        return self._target


def test_discover_detectors_appends_entry_point_plugins(monkeypatch: pytest.MonkeyPatch) -> None:
    from tokenscout import detectors as registry

    plugins = [_FakeEntryPoint("bootstrap", _PluginDetector), _FakeEntryPoint("tailwind", MuiDetector)]
    monkeypatch.setattr(registry.metadata, "entry_points", lambda group: plugins)

    everything = discover_detectors()
    chosen = discover_detectors(["bootstrap", "tailwind"])

    assert [detector.ecosystem for detector in everything][-1] == "bootstrap"
    assert [type(detector) for detector in chosen] == [TailwindDetector, _PluginDetector]
