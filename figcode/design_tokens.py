"""
Design token extraction.

Walks the document once and collects raw colours, spacing, text styles,
shadows and radii, then derives the named scales. The resulting
``DesignTokens`` bundle is immutable; exporters read it through
``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Dict, List, Optional, Union

from .color_utils import Color, color_to_css, color_to_hex, hex_to_hsl, hsl_to_hex
from .document import Document, DocumentNode, Effect, Paint, TypeStyle
from .node_finder import walk

SCALE_STEPS = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 950)

# step -> (saturation delta, lightness delta); 500 keeps the base colour verbatim
SCALE_OFFSETS = {
    50: (-20, 45),
    100: (-15, 35),
    200: (-10, 25),
    300: (-5, 15),
    400: (0, 5),
    600: (5, -5),
    700: (10, -15),
    800: (15, -25),
    900: (20, -35),
    950: (25, -45),
}

DEFAULT_PRIMARY = "#3b82f6"
DEFAULT_SECONDARY = "#6366f1"
NEUTRAL_BASE = "#6b7280"
SEMANTIC_BASES = {
    "success": "#10b981",
    "warning": "#f59e0b",
    "error": "#ef4444",
    "info": "#3b82f6",
}

SEMANTIC_SPACING = {
    "xs": "4px",
    "sm": "8px",
    "md": "16px",
    "lg": "24px",
    "xl": "32px",
    "2xl": "48px",
    "3xl": "64px",
}

RADIUS_STEPS = (("sm", 2), ("md", 4), ("lg", 8), ("xl", 12), ("2xl", 16), ("3xl", 24))

BREAKPOINT_TOKENS = {
    "xs": "475px",
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}

ANIMATION_DURATIONS = {"fast": "150ms", "normal": "300ms", "slow": "500ms", "slower": "750ms"}
ANIMATION_EASINGS = {
    "linear": "linear",
    "ease": "ease",
    "ease-in": "ease-in",
    "ease-out": "ease-out",
    "ease-in-out": "ease-in-out",
    "bounce": "cubic-bezier(0.68, -0.55, 0.265, 1.55)",
}
ANIMATION_KEYFRAMES = {
    "fadeIn": "fadeIn 0.3s ease-in-out",
    "slideUp": "slideUp 0.3s ease-out",
    "scaleIn": "scaleIn 0.2s ease-out",
}


# ─── token records ───────────────────────────────────────────

class _TokenRecord:
    """dict 欄位在建構後包成唯讀 MappingProxyType."""

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, dict):
                object.__setattr__(self, f.name, MappingProxyType(dict(value)))


@dataclass(frozen=True)
class SemanticColors(_TokenRecord):
    success: Dict[str, str]
    warning: Dict[str, str]
    error: Dict[str, str]
    info: Dict[str, str]

    def to_dict(self) -> dict:
        return {
            "success": dict(self.success),
            "warning": dict(self.warning),
            "error": dict(self.error),
            "info": dict(self.info),
        }


@dataclass(frozen=True)
class ColorTokens(_TokenRecord):
    primary: Dict[str, str]
    secondary: Dict[str, str]
    neutral: Dict[str, str]
    semantic: SemanticColors
    custom: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "primary": dict(self.primary),
            "secondary": dict(self.secondary),
            "neutral": dict(self.neutral),
            "semantic": self.semantic.to_dict(),
            "custom": dict(self.custom),
        }


@dataclass(frozen=True)
class TextStyleToken(_TokenRecord):
    font_family: str
    font_size: str
    font_weight: int
    line_height: str
    letter_spacing: str

    def to_dict(self) -> dict:
        return {
            "fontFamily": self.font_family,
            "fontSize": self.font_size,
            "fontWeight": self.font_weight,
            "lineHeight": self.line_height,
            "letterSpacing": self.letter_spacing,
        }


@dataclass(frozen=True)
class TypographyTokens(_TokenRecord):
    font_families: Dict[str, str] = field(default_factory=dict)
    font_sizes: Dict[str, str] = field(default_factory=dict)
    font_weights: Dict[str, int] = field(default_factory=dict)
    line_heights: Dict[str, str] = field(default_factory=dict)
    letter_spacing: Dict[str, str] = field(default_factory=dict)
    text_styles: Dict[str, TextStyleToken] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "fontFamilies": dict(self.font_families),
            "fontSizes": dict(self.font_sizes),
            "fontWeights": dict(self.font_weights),
            "lineHeights": dict(self.line_heights),
            "letterSpacing": dict(self.letter_spacing),
            "textStyles": {k: v.to_dict() for k, v in self.text_styles.items()},
        }


@dataclass(frozen=True)
class SpacingTokens(_TokenRecord):
    scale: Dict[str, str] = field(default_factory=dict)
    semantic: Dict[str, str] = field(default_factory=lambda: dict(SEMANTIC_SPACING))

    def to_dict(self) -> dict:
        return {"scale": dict(self.scale), "semantic": dict(self.semantic)}


@dataclass(frozen=True)
class ShadowTokens(_TokenRecord):
    elevation: Dict[str, str] = field(default_factory=dict)
    colored: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"elevation": dict(self.elevation), "colored": dict(self.colored)}


@dataclass(frozen=True)
class AnimationTokens(_TokenRecord):
    duration: Dict[str, str] = field(default_factory=lambda: dict(ANIMATION_DURATIONS))
    easing: Dict[str, str] = field(default_factory=lambda: dict(ANIMATION_EASINGS))
    keyframes: Dict[str, str] = field(default_factory=lambda: dict(ANIMATION_KEYFRAMES))

    def to_dict(self) -> dict:
        return {
            "duration": dict(self.duration),
            "easing": dict(self.easing),
            "keyframes": dict(self.keyframes),
        }


@dataclass(frozen=True)
class DesignTokens(_TokenRecord):
    colors: ColorTokens
    typography: TypographyTokens
    spacing: SpacingTokens
    shadows: ShadowTokens
    border_radius: Dict[str, str]
    breakpoints: Dict[str, str]
    animations: AnimationTokens

    def to_dict(self) -> dict:
        return {
            "colors": self.colors.to_dict(),
            "typography": self.typography.to_dict(),
            "spacing": self.spacing.to_dict(),
            "shadows": self.shadows.to_dict(),
            "borderRadius": dict(self.border_radius),
            "breakpoints": dict(self.breakpoints),
            "animations": self.animations.to_dict(),
        }


# ─── scale helpers ───────────────────────────────────────────

def generate_color_scale(base_hex: str) -> Dict[str, str]:
    """以 HSL 推導 11 階色階；500 固定為輸入色字串本身."""
    h, s, l = hex_to_hsl(base_hex)
    scale = {}
    for step in SCALE_STEPS:
        if step == 500:
            scale["500"] = base_hex
            continue
        ds, dl = SCALE_OFFSETS[step]
        scale[str(step)] = hsl_to_hex(h, s + ds, l + dl)
    return scale


def font_size_key(size: float) -> str:
    for limit, key in ((12, "xs"), (14, "sm"), (16, "base"), (18, "lg"), (20, "xl"),
                       (24, "2xl"), (30, "3xl"), (36, "4xl"), (48, "5xl")):
        if size <= limit:
            return key
    return "6xl"


def font_weight_key(weight: float) -> str:
    for limit, key in ((200, "thin"), (300, "light"), (400, "normal"), (500, "medium"),
                       (600, "semibold"), (700, "bold"), (800, "extrabold")):
        if weight <= limit:
            return key
    return "black"


def line_height_key(line_height: float, font_size: float) -> str:
    ratio = line_height / font_size if font_size else 1.5
    for limit, key in ((1.2, "tight"), (1.4, "snug"), (1.6, "normal"), (1.8, "relaxed")):
        if ratio <= limit:
            return key
    return "loose"


def letter_spacing_key(spacing: float) -> str:
    for limit, key in ((-0.5, "tighter"), (-0.25, "tight"), (0.25, "normal"), (0.5, "wide")):
        if spacing <= limit:
            return key
    return "wider"


def _px(value: float) -> str:
    return f"{value:g}px"


def _token_color(color: Color, opacity: Optional[float] = None) -> str:
    alpha = opacity if opacity is not None else color.a
    if alpha < 1:
        return color_to_css(color, alpha)
    return color_to_hex(color)


def effect_to_css(effect: Effect) -> str:
    x, y = effect.offset
    color = _token_color(effect.color) if effect.color else "rgba(0, 0, 0, 0.25)"
    return f"{_px(x)} {_px(y)} {_px(effect.radius)} {_px(effect.spread)} {color}"


def _is_opaque_hex(value: str) -> bool:
    return value.startswith("#") and len(value) == 7


# ─── extractor ───────────────────────────────────────────────

class DesignTokenExtractor:
    """單次走訪收集原始值，再推導出 DesignTokens."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._colors: Dict[str, None] = {}
        self._spacing: Dict[float, None] = {}
        self._typography: Dict[str, TypeStyle] = {}
        self._shadows: Dict[str, None] = {}
        self._radii: Dict[float, None] = {}

    def extract(self, source: Union[Document, DocumentNode]) -> DesignTokens:
        self._reset()
        root = source.root if isinstance(source, Document) else source
        for node in walk(root):
            self._collect(node)
        return DesignTokens(
            colors=self._color_tokens(),
            typography=self._typography_tokens(),
            spacing=self._spacing_tokens(),
            shadows=ShadowTokens(
                elevation={f"level-{i + 1}": s for i, s in enumerate(self._shadows)},
            ),
            border_radius=self._radius_tokens(),
            breakpoints=dict(BREAKPOINT_TOKENS),
            animations=AnimationTokens(),
        )

    def _add_paints(self, paints) -> None:
        for paint in paints:
            if isinstance(paint, Paint) and paint.is_solid:
                self._colors[_token_color(paint.color, paint.opacity)] = None

    def _collect(self, node: DocumentNode) -> None:
        if node.background_color is not None:
            self._colors[_token_color(node.background_color)] = None
        self._add_paints(node.fills)
        self._add_paints(node.strokes)
        if node.is_text and node.style:
            self._add_paints(node.style.fills)

        for value in (*node.paddings(), node.item_spacing or 0):
            if value:
                self._spacing[value] = None

        if node.is_text and node.style:
            style = node.style
            key = f"{style.font_family}-{style.font_size:g}-{style.font_weight:g}"
            self._typography[key] = style

        for effect in node.drop_shadows():
            self._shadows[effect_to_css(effect)] = None

        if node.corner_radius:
            self._radii[node.corner_radius] = None

    def _color_tokens(self) -> ColorTokens:
        colors = list(self._colors)
        bases = [c for c in colors if _is_opaque_hex(c)]
        primary = bases[0] if bases else DEFAULT_PRIMARY
        secondary = bases[1] if len(bases) > 1 else DEFAULT_SECONDARY
        return ColorTokens(
            primary=generate_color_scale(primary),
            secondary=generate_color_scale(secondary),
            neutral=generate_color_scale(NEUTRAL_BASE),
            semantic=SemanticColors(
                **{name: generate_color_scale(base) for name, base in SEMANTIC_BASES.items()}
            ),
            custom={f"custom-{i + 1}": c for i, c in enumerate(colors)},
        )

    def _typography_tokens(self) -> TypographyTokens:
        families: Dict[str, str] = {}
        sizes: Dict[str, str] = {}
        weights: Dict[str, int] = {}
        line_heights: Dict[str, str] = {}
        spacing: Dict[str, str] = {}
        styles: Dict[str, TextStyleToken] = {}

        for key, style in self._typography.items():
            family_key = "-".join(style.font_family.lower().split())
            families[family_key] = f'"{style.font_family}", sans-serif'
            size_key = font_size_key(style.font_size)
            sizes[size_key] = _px(style.font_size)
            weight = int(style.font_weight)
            weights[font_weight_key(weight)] = weight
            if style.line_height_px:
                line_heights[line_height_key(style.line_height_px, style.font_size)] = _px(style.line_height_px)
            if style.letter_spacing:
                spacing[letter_spacing_key(style.letter_spacing)] = _px(style.letter_spacing)
            styles[key] = TextStyleToken(
                font_family=families[family_key],
                font_size=sizes[size_key],
                font_weight=weight,
                line_height=_px(style.line_height_px) if style.line_height_px else "1.5",
                letter_spacing=_px(style.letter_spacing) if style.letter_spacing else "normal",
            )

        return TypographyTokens(
            font_families=families,
            font_sizes=sizes,
            font_weights=weights,
            line_heights=line_heights,
            letter_spacing=spacing,
            text_styles=styles,
        )

    def _spacing_tokens(self) -> SpacingTokens:
        values = sorted(self._spacing)
        return SpacingTokens(scale={str(i): _px(v) for i, v in enumerate(values)})

    def _radius_tokens(self) -> Dict[str, str]:
        radii: List[float] = sorted(self._radii)
        tokens = {"none": "0px"}
        for index, (name, default) in enumerate(RADIUS_STEPS):
            tokens[name] = _px(radii[index] if index < len(radii) else default)
        tokens["full"] = "9999px"
        return tokens


def extract_design_tokens(source: Union[Document, DocumentNode]) -> DesignTokens:
    return DesignTokenExtractor().extract(source)
