"""
節點樣式 → CSS 屬性 / Tailwind class 轉換

每條規則各自對應不相交的 CSS 屬性，套用順序不影響結果。
Tailwind 輸出會把數值吸附到最近的色盤 / 尺寸刻度，距離過遠則改用 arbitrary value。
"""

from typing import Dict, List, Optional, Tuple

from .color_utils import Color, color_distance, color_to_css, color_to_hex, gradient_to_css, nearest_palette_color
from .constants import (
    BORDER_RADIUS,
    BORDER_WIDTHS,
    COLOR_PALETTE,
    COLOR_SNAP_DISTANCE,
    FONT_SIZES,
    FONT_WEIGHTS,
    PURE_COLORS,
    SHADOW_BLURS,
    SIZE_SNAP_PX,
    SPACING_SCALE,
)
from .document import DocumentNode, Paint
from .design_tokens import effect_to_css

ALIGN_KEYWORDS = {
    "MIN": "start",
    "CENTER": "center",
    "MAX": "end",
    "SPACE_BETWEEN": "space-between",
    "BASELINE": "baseline",
}

JUSTIFY_CLASSES = {
    "MIN": "justify-start",
    "CENTER": "justify-center",
    "MAX": "justify-end",
    "SPACE_BETWEEN": "justify-between",
}

ITEMS_CLASSES = {
    "MIN": "items-start",
    "CENTER": "items-center",
    "MAX": "items-end",
    "BASELINE": "items-baseline",
}

TEXT_ALIGN = {"LEFT": "left", "CENTER": "center", "RIGHT": "right", "JUSTIFIED": "justify"}


def _px(value: float) -> str:
    return f"{value:g}px"


def collapse_padding(top: float, right: float, bottom: float, left: float) -> str:
    """依對稱性收斂成 1 / 2 / 4 個值."""
    if top == right == bottom == left:
        return _px(top)
    if top == bottom and left == right:
        return f"{_px(top)} {_px(right)}"
    return f"{_px(top)} {_px(right)} {_px(bottom)} {_px(left)}"


def _nearest(value: float, scale: Dict[str, float]) -> Tuple[str, float]:
    best_key, best_diff = "", float("inf")
    for key, size in scale.items():
        diff = abs(value - size)
        if diff < best_diff:
            best_key, best_diff = key, diff
    return best_key, best_diff


def _text_paint(node: DocumentNode) -> Optional[Paint]:
    if node.style:
        for paint in node.style.fills:
            if paint.is_solid:
                return paint
    return node.first_solid_fill()


def _background_paint(node: DocumentNode) -> Optional[Paint]:
    """第一個可見實色填色優先；沒有時取第一個可見漸層."""
    solid = node.first_solid_fill()
    if solid:
        return solid
    for fill in node.fills:
        if fill.is_gradient:
            return fill
    return None


def _visible_stroke(node: DocumentNode) -> Optional[Paint]:
    for stroke in node.strokes:
        if stroke.is_solid:
            return stroke
    return None


class StyleConverter:
    """DocumentNode → CSS / Tailwind."""

    # ─── CSS ────────────────────────────────────────────────

    @staticmethod
    def to_css(node: DocumentNode) -> Dict[str, str]:
        css: Dict[str, str] = {}

        box = node.bounding_box
        if box and box.width:
            css["width"] = _px(box.width)
        if box and box.height:
            css["height"] = _px(box.height)

        if node.has_auto_layout:
            css["display"] = "flex"
            css["flex-direction"] = "row" if node.layout_mode == "HORIZONTAL" else "column"
            if node.primary_axis_align in ALIGN_KEYWORDS:
                css["justify-content"] = ALIGN_KEYWORDS[node.primary_axis_align]
            if node.counter_axis_align in ALIGN_KEYWORDS:
                css["align-items"] = ALIGN_KEYWORDS[node.counter_axis_align]
            if node.item_spacing:
                css["gap"] = _px(node.item_spacing)

        if any(node.paddings()):
            css["padding"] = collapse_padding(*node.paddings())

        if node.is_text:
            paint = _text_paint(node)
            if paint:
                css["color"] = color_to_css(paint.color, paint.opacity)
        else:
            paint = _background_paint(node)
            if paint and paint.is_solid:
                css["background-color"] = color_to_css(paint.color, paint.opacity)
            elif paint:
                css["background"] = gradient_to_css(paint)
            elif node.background_color is not None:
                css["background-color"] = color_to_css(node.background_color)

        if node.is_text and node.style:
            style = node.style
            css["font-family"] = f'"{style.font_family}", sans-serif'
            css["font-size"] = _px(style.font_size)
            css["font-weight"] = f"{style.font_weight:g}"
            if style.line_height_px:
                css["line-height"] = _px(style.line_height_px)
            if style.letter_spacing:
                css["letter-spacing"] = _px(style.letter_spacing)
            if style.text_align_horizontal in TEXT_ALIGN:
                css["text-align"] = TEXT_ALIGN[style.text_align_horizontal]

        if node.corner_radius:
            css["border-radius"] = _px(node.corner_radius)

        stroke = _visible_stroke(node)
        if stroke and node.stroke_weight:
            css["border"] = f"{_px(node.stroke_weight)} solid {color_to_css(stroke.color, stroke.opacity)}"

        shadows = [effect_to_css(effect) for effect in node.drop_shadows()]
        if shadows:
            css["box-shadow"] = ", ".join(shadows)

        if node.opacity is not None and node.opacity < 1:
            css["opacity"] = f"{node.opacity:g}"

        if node.clips_content:
            css["overflow"] = "hidden"

        return css

    @staticmethod
    def css_block(selector: str, props: Dict[str, str], indent: int = 0) -> str:
        pad = "  " * indent
        if not props:
            return f"{pad}{selector} {{}}"
        body = "\n".join(f"{pad}  {prop}: {value};" for prop, value in props.items())
        return f"{pad}{selector} {{\n{body}\n{pad}}}"

    @staticmethod
    def responsive_css(selector: str, base: Dict[str, str], overrides: Dict[str, Dict[str, str]]) -> str:
        """基礎規則加上每個 media query 的覆寫區塊；空覆寫略過."""
        blocks = [StyleConverter.css_block(selector, base)]
        for query, props in overrides.items():
            if not props:
                continue
            inner = StyleConverter.css_block(selector, props, indent=1)
            blocks.append(f"@media {query} {{\n{inner}\n}}")
        return "\n\n".join(blocks) + "\n"

    # ─── Tailwind ───────────────────────────────────────────

    @staticmethod
    def color_class(prefix: str, color: Color) -> str:
        candidates = [(name, color_distance(color, Color(*rgb))) for name, rgb in PURE_COLORS.items()]
        pure_name, pure_dist = min(candidates, key=lambda c: c[1])
        name, shade, distance = nearest_palette_color(color, COLOR_PALETTE)
        if pure_dist <= COLOR_SNAP_DISTANCE and pure_dist <= distance:
            return f"{prefix}-{pure_name}"
        if distance <= COLOR_SNAP_DISTANCE:
            return f"{prefix}-{name}-{shade}"
        return f"{prefix}-[{color_to_hex(color)}]"

    @staticmethod
    def spacing_class(prefix: str, value: float) -> str:
        key, diff = _nearest(value, SPACING_SCALE)
        if diff <= SIZE_SNAP_PX:
            return f"{prefix}-{key}"
        return f"{prefix}-[{_px(value)}]"

    @staticmethod
    def font_size_class(size: float) -> str:
        key, diff = _nearest(size, FONT_SIZES)
        if diff <= SIZE_SNAP_PX:
            return f"text-{key}"
        return f"text-[{_px(size)}]"

    @staticmethod
    def font_weight_class(weight: float) -> str:
        for name, value in FONT_WEIGHTS.items():
            if value == weight:
                return f"font-{name}"
        return f"font-[{weight:g}]"

    @staticmethod
    def radius_class(radius: float) -> str:
        key, diff = _nearest(radius, BORDER_RADIUS)
        if diff > SIZE_SNAP_PX:
            return f"rounded-[{_px(radius)}]"
        return "rounded" if key == "base" else f"rounded-{key}"

    @staticmethod
    def border_width_class(width: float) -> str:
        for suffix, value in BORDER_WIDTHS.items():
            if value == width:
                return f"border-{suffix}" if suffix else "border"
        return f"border-[{_px(width)}]"

    @staticmethod
    def shadow_class(blur: float) -> str:
        key, _ = _nearest(blur, SHADOW_BLURS)
        return key

    @staticmethod
    def padding_classes(top: float, right: float, bottom: float, left: float) -> List[str]:
        if top == right == bottom == left:
            return [StyleConverter.spacing_class("p", top)] if top else []
        if top == bottom and left == right:
            classes = []
            if top:
                classes.append(StyleConverter.spacing_class("py", top))
            if left:
                classes.append(StyleConverter.spacing_class("px", left))
            return classes
        return [
            StyleConverter.spacing_class(prefix, value)
            for prefix, value in (("pt", top), ("pr", right), ("pb", bottom), ("pl", left))
            if value
        ]

    @staticmethod
    def to_tailwind(node: DocumentNode) -> List[str]:
        sc = StyleConverter
        classes: List[str] = []

        if node.has_auto_layout:
            classes.extend(["flex", "flex-row" if node.layout_mode == "HORIZONTAL" else "flex-col"])
            if node.primary_axis_align in JUSTIFY_CLASSES:
                classes.append(JUSTIFY_CLASSES[node.primary_axis_align])
            if node.counter_axis_align in ITEMS_CLASSES:
                classes.append(ITEMS_CLASSES[node.counter_axis_align])
            if node.item_spacing:
                classes.append(sc.spacing_class("gap", node.item_spacing))

        box = node.bounding_box
        if box and box.width:
            classes.append(f"w-[{_px(box.width)}]")
        if box and box.height:
            classes.append(f"h-[{_px(box.height)}]")

        classes.extend(sc.padding_classes(*node.paddings()))

        if node.is_text:
            paint = _text_paint(node)
            if paint:
                classes.append(sc.color_class("text", paint.color))
            if node.style:
                classes.append(sc.font_size_class(node.style.font_size))
                classes.append(sc.font_weight_class(node.style.font_weight))
                if node.style.line_height_px:
                    classes.append(f"leading-[{_px(node.style.line_height_px)}]")
                if node.style.letter_spacing:
                    classes.append(f"tracking-[{_px(node.style.letter_spacing)}]")
                if node.style.text_align_horizontal in TEXT_ALIGN:
                    classes.append(f"text-{TEXT_ALIGN[node.style.text_align_horizontal]}")
        else:
            paint = _background_paint(node)
            if paint and paint.is_solid:
                classes.append(sc.color_class("bg", paint.color))
            elif paint:
                classes.append(f"bg-[{gradient_to_css(paint).replace(' ', '_')}]")
            elif node.background_color is not None:
                classes.append(sc.color_class("bg", node.background_color))

        if node.corner_radius:
            classes.append(sc.radius_class(node.corner_radius))

        stroke = _visible_stroke(node)
        if stroke and node.stroke_weight:
            classes.append(sc.border_width_class(node.stroke_weight))
            classes.append(sc.color_class("border", stroke.color))

        shadows = node.drop_shadows()
        if shadows:
            classes.append(sc.shadow_class(max(effect.radius for effect in shadows)))

        if node.opacity is not None and node.opacity < 1:
            pct = round(node.opacity * 100)
            classes.append(f"opacity-{pct}" if pct % 5 == 0 else f"opacity-[{node.opacity:g}]")

        if node.clips_content:
            classes.append("overflow-hidden")

        return classes
