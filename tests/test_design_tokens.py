"""
DesignTokenExtractor 測試：色階、間距、字級、陰影與圓角。
"""
import pytest

from figcode.color_utils import hex_to_hsl
from figcode.design_tokens import (
    DEFAULT_PRIMARY,
    DEFAULT_SECONDARY,
    SCALE_STEPS,
    DesignTokenExtractor,
    extract_design_tokens,
    font_size_key,
    font_weight_key,
    generate_color_scale,
    letter_spacing_key,
    line_height_key,
)
from figcode.document import parse_node


# ─── 色階 ────────────────────────────────────────────────────────────────────

def test_color_scale_has_all_steps():
    scale = generate_color_scale("#10b981")
    assert list(scale) == [str(step) for step in SCALE_STEPS]
    assert scale["500"] == "#10b981"


def test_color_scale_lightness_is_monotonic():
    scale = generate_color_scale("#3b82f6")
    lightness = [hex_to_hsl(scale[str(step)])[2] for step in SCALE_STEPS]
    assert lightness == sorted(lightness, reverse=True)


# ─── 擷取 ────────────────────────────────────────────────────────────────────

def test_primary_and_secondary_from_first_colours(sample_document):
    tokens = extract_design_tokens(sample_document)
    assert tokens.colors.primary["500"] == "#3b82f6"
    assert tokens.colors.secondary["500"] == "#ffffff"
    assert tokens.colors.custom["custom-1"] == "#3b82f6"


def test_defaults_without_colours():
    tokens = extract_design_tokens(parse_node({"id": "1", "name": "Empty"}))
    assert tokens.colors.primary["500"] == DEFAULT_PRIMARY
    assert tokens.colors.secondary["500"] == DEFAULT_SECONDARY
    assert tokens.colors.custom == {}
    assert tokens.spacing.scale == {}


def test_translucent_colours_are_not_bases():
    node = parse_node({
        "id": "1",
        "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 0.5}}],
    })
    tokens = extract_design_tokens(node)
    assert tokens.colors.custom["custom-1"] == "rgba(0, 0, 0, 0.5)"
    assert tokens.colors.primary["500"] == DEFAULT_PRIMARY


def test_spacing_scale_sorted_and_unique(sample_document):
    tokens = extract_design_tokens(sample_document)
    assert tokens.spacing.scale == {"0": "12px", "1": "16px", "2": "24px"}
    assert tokens.spacing.semantic["md"] == "16px"


def test_shadow_elevation(sample_document):
    tokens = extract_design_tokens(sample_document)
    assert tokens.shadows.elevation == {"level-1": "0px 4px 6px 0px rgba(0, 0, 0, 0.1)"}


def test_border_radius(sample_document):
    radius = extract_design_tokens(sample_document).border_radius
    assert radius["none"] == "0px"
    assert radius["sm"] == "8px"
    assert radius["md"] == "12px"
    assert radius["lg"] == "8px"
    assert radius["full"] == "9999px"


def test_typography(sample_document):
    typography = extract_design_tokens(sample_document).typography
    assert typography.font_families == {"inter": '"Inter", sans-serif'}
    assert set(typography.font_sizes) == {"base", "2xl", "sm"}
    assert typography.font_weights == {"semibold": 600, "bold": 700, "normal": 400}
    style = typography.text_styles["Inter-24-700"]
    assert style.font_size == "24px"
    assert style.line_height == "1.5"
    assert style.letter_spacing == "normal"


def test_to_dict_sections(sample_document):
    data = extract_design_tokens(sample_document).to_dict()
    assert list(data) == [
        "colors", "typography", "spacing", "shadows", "borderRadius", "breakpoints", "animations",
    ]
    assert data["breakpoints"]["md"] == "768px"
    assert data["animations"]["duration"]["normal"] == "300ms"


def solid_frame(node_id, r, g, b):
    return parse_node({
        "id": node_id,
        "name": "Swatch",
        "fills": [{"type": "SOLID", "color": {"r": r, "g": g, "b": b}}],
    })


def test_extractor_reuse_does_not_merge_documents():
    extractor = DesignTokenExtractor()
    first = extractor.extract(solid_frame("r", 1, 0, 0))
    second = extractor.extract(solid_frame("b", 0, 0, 1))
    assert first.colors.primary["500"] == "#ff0000"
    assert second.colors.primary["500"] == "#0000ff"
    assert second.colors.custom == {"custom-1": "#0000ff"}


class TestTokensAreReadOnly:
    def setup_method(self):
        self.tokens = extract_design_tokens(solid_frame("r", 1, 0, 0))

    def test_colour_scale_rejects_assignment(self):
        with pytest.raises(TypeError):
            self.tokens.colors.primary["500"] = "#000000"
        assert self.tokens.colors.primary["500"] == "#ff0000"

    def test_nested_sections_reject_assignment(self):
        with pytest.raises(TypeError):
            self.tokens.colors.semantic.error["500"] = "#000000"
        with pytest.raises(TypeError):
            self.tokens.border_radius["full"] = "0px"
        with pytest.raises(TypeError):
            self.tokens.animations.duration["fast"] = "1ms"

    def test_to_dict_returns_editable_copies(self):
        data = self.tokens.to_dict()
        data["colors"]["primary"]["500"] = "#000000"
        assert self.tokens.colors.primary["500"] == "#ff0000"


# ─── 分級鍵 ──────────────────────────────────────────────────────────────────

def test_font_size_key():
    assert font_size_key(12) == "xs"
    assert font_size_key(16) == "base"
    assert font_size_key(30) == "3xl"
    assert font_size_key(72) == "6xl"


def test_font_weight_key():
    assert font_weight_key(100) == "thin"
    assert font_weight_key(400) == "normal"
    assert font_weight_key(900) == "black"


def test_line_height_and_letter_spacing_keys():
    assert line_height_key(24, 16) == "normal"
    assert line_height_key(16, 16) == "tight"
    assert line_height_key(40, 16) == "loose"
    assert letter_spacing_key(-1) == "tighter"
    assert letter_spacing_key(0) == "normal"
    assert letter_spacing_key(2) == "wider"
