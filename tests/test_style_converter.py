"""
StyleConverter 單元測試
涵蓋節點 → CSS 屬性與 Tailwind class 的各類樣式轉換。
"""
import pytest

from figcode.color_utils import Color
from figcode.document import parse_node
from figcode.style_converter import StyleConverter, collapse_padding


# ─── to_css ─────────────────────────────────────────────────────────────────

def test_button_css(button_node):
    css = StyleConverter.to_css(button_node)
    assert css["width"] == "120px"
    assert css["height"] == "44px"
    assert css["display"] == "flex"
    assert css["flex-direction"] == "row"
    assert css["justify-content"] == "center"
    assert css["align-items"] == "center"
    assert css["padding"] == "12px 24px"
    assert css["background-color"] == "rgb(59, 130, 246)"
    assert css["border-radius"] == "8px"
    assert "gap" not in css


def test_card_css(card_node):
    css = StyleConverter.to_css(card_node)
    assert css["flex-direction"] == "column"
    assert css["gap"] == "16px"
    assert css["padding"] == "24px"
    assert css["background-color"] == "rgb(255, 255, 255)"
    assert css["box-shadow"] == "0px 4px 6px 0px rgba(0, 0, 0, 0.1)"
    assert css["border-radius"] == "12px"


def test_text_css(card_node):
    css = StyleConverter.to_css(card_node.children[1])
    assert css["font-family"] == '"Inter", sans-serif'
    assert css["font-size"] == "24px"
    assert css["font-weight"] == "700"
    assert "background-color" not in css
    assert css["color"].startswith("rgb(")


def test_gradient_background():
    node = parse_node({
        "id": "g",
        "fills": [{
            "type": "GRADIENT_LINEAR",
            "gradientStops": [
                {"position": 0, "color": {"r": 1, "g": 0, "b": 0, "a": 1}},
                {"position": 1, "color": {"r": 0, "g": 0, "b": 1, "a": 1}},
            ],
        }],
    })
    css = StyleConverter.to_css(node)
    assert css["background"].startswith("linear-gradient(")
    assert "background-color" not in css


def test_border_opacity_and_clip():
    node = parse_node({
        "id": "b",
        "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 1}}],
        "strokeWeight": 2,
        "opacity": 0.5,
        "clipsContent": True,
    })
    css = StyleConverter.to_css(node)
    assert css["border"] == "2px solid rgb(0, 0, 0)"
    assert css["opacity"] == "0.5"
    assert css["overflow"] == "hidden"


def test_stroke_without_weight_is_ignored():
    node = parse_node({"id": "b", "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}]})
    assert "border" not in StyleConverter.to_css(node)


@pytest.mark.parametrize("values, expected", [
    ((8, 8, 8, 8), "8px"),
    ((4, 12, 4, 12), "4px 12px"),
    ((1, 2, 3, 4), "1px 2px 3px 4px"),
])
def test_collapse_padding(values, expected):
    assert collapse_padding(*values) == expected


def test_css_block_and_responsive():
    assert StyleConverter.css_block(".a", {}) == ".a {}"
    out = StyleConverter.responsive_css(
        ".a", {"color": "red"}, {"(max-width: 768px)": {"color": "blue"}, "(min-width: 1024px)": {}}
    )
    assert ".a {\n  color: red;\n}" in out
    assert "@media (max-width: 768px) {\n  .a {\n    color: blue;\n  }\n}" in out
    assert "min-width" not in out


# ─── Tailwind ───────────────────────────────────────────────────────────────

def test_color_class():
    assert StyleConverter.color_class("bg", Color(1, 1, 1)) == "bg-white"
    assert StyleConverter.color_class("text", Color(0, 0, 0)) == "text-black"
    assert StyleConverter.color_class("bg", Color(0.5, 0, 0.5)) == "bg-[#800080]"
    assert StyleConverter.color_class("bg", Color(0.23, 0.58, 0.91)) == "bg-blue-500"


@pytest.mark.parametrize("value, expected", [(16, "p-4"), (17, "p-4"), (100, "p-[100px]")])
def test_spacing_class(value, expected):
    assert StyleConverter.spacing_class("p", value) == expected


def test_font_classes():
    assert StyleConverter.font_size_class(16) == "text-base"
    assert StyleConverter.font_size_class(40) == "text-[40px]"
    assert StyleConverter.font_weight_class(700) == "font-bold"
    assert StyleConverter.font_weight_class(650) == "font-[650]"


@pytest.mark.parametrize("radius, expected", [
    (4, "rounded"),
    (8, "rounded-lg"),
    (100, "rounded-[100px]"),
])
def test_radius_class(radius, expected):
    assert StyleConverter.radius_class(radius) == expected


def test_border_width_class():
    assert StyleConverter.border_width_class(1) == "border"
    assert StyleConverter.border_width_class(2) == "border-2"
    assert StyleConverter.border_width_class(3) == "border-[3px]"


def test_shadow_class():
    assert StyleConverter.shadow_class(6) == "shadow-md"
    assert StyleConverter.shadow_class(24) == "shadow-xl"


def test_padding_classes():
    assert StyleConverter.padding_classes(12, 24, 12, 24) == ["py-3", "px-6"]
    assert StyleConverter.padding_classes(8, 8, 8, 8) == ["p-2"]
    assert StyleConverter.padding_classes(0, 0, 0, 0) == []
    assert StyleConverter.padding_classes(4, 0, 8, 0) == ["pt-1", "pb-2"]


def test_button_tailwind(button_node):
    classes = StyleConverter.to_tailwind(button_node)
    assert classes[:4] == ["flex", "flex-row", "justify-center", "items-center"]
    assert "w-[120px]" in classes
    assert "py-3" in classes and "px-6" in classes
    assert "rounded-lg" in classes
    assert any(c.startswith("bg-") for c in classes)


def test_card_tailwind(card_node):
    classes = StyleConverter.to_tailwind(card_node)
    assert "flex-col" in classes
    assert "gap-4" in classes
    assert "p-6" in classes
    assert "bg-white" in classes
    assert "shadow-md" in classes


def test_gradient_tailwind_uses_arbitrary_value():
    node = parse_node({
        "id": "g",
        "fills": [{
            "type": "GRADIENT_RADIAL",
            "gradientStops": [{"position": 0, "color": {"r": 1, "g": 1, "b": 1, "a": 1}}],
        }],
    })
    classes = StyleConverter.to_tailwind(node)
    assert classes == ["bg-[radial-gradient(circle,_rgb(255,_255,_255)_0%)]"]


def test_opacity_classes():
    assert "opacity-50" in StyleConverter.to_tailwind(parse_node({"id": "o", "opacity": 0.5}))
    assert "opacity-[0.33]" in StyleConverter.to_tailwind(parse_node({"id": "o", "opacity": 0.33}))
