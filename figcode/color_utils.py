"""
色彩與對比度運算

Figma 色值（0~1 浮點）↔ hex / CSS、WCAG 相對亮度與對比度、HSL 互轉、最近色盤搜尋。
"""

import colorsys
import math
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .constants import WCAG_CONTRAST_RATIOS


@dataclass(frozen=True)
class Color:
    """Figma 色值，各通道皆為 0~1."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Color"]:
        if not data:
            return None
        return cls(
            r=float(data.get("r", 0)),
            g=float(data.get("g", 0)),
            b=float(data.get("b", 0)),
            a=float(data.get("a", 1)),
        )


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value * 255))))


def color_to_css(color: Color, opacity: Optional[float] = None) -> str:
    """轉成 rgb()；透明度 < 1 時輸出 rgba()."""
    r, g, b = _channel(color.r), _channel(color.g), _channel(color.b)
    a = opacity if opacity is not None else color.a
    if a < 1:
        return f"rgba({r}, {g}, {b}, {round(a, 3)})"
    return f"rgb({r}, {g}, {b})"


def color_to_hex(color: Color) -> str:
    return f"#{_channel(color.r):02x}{_channel(color.g):02x}{_channel(color.b):02x}"


def parse_color(css_color: str) -> Optional[Color]:
    """解析 #rgb / #rrggbb / rgb() / rgba()，無法解析回傳 None."""
    if not css_color:
        return None
    value = css_color.strip()
    if value.startswith("#"):
        hex_part = value[1:]
        if len(hex_part) == 3:
            hex_part = "".join(ch * 2 for ch in hex_part)
        if len(hex_part) != 6 or not re.fullmatch(r"[0-9a-fA-F]{6}", hex_part):
            return None
        return Color(
            r=int(hex_part[0:2], 16) / 255,
            g=int(hex_part[2:4], 16) / 255,
            b=int(hex_part[4:6], 16) / 255,
        )
    match = re.match(r"rgba?\(([^)]+)\)", value)
    if match:
        parts = [p.strip() for p in match.group(1).split(",")]
        if len(parts) < 3:
            return None
        try:
            nums = [float(p) for p in parts]
        except ValueError:
            return None
        alpha = nums[3] if len(nums) > 3 else 1.0
        return Color(r=nums[0] / 255, g=nums[1] / 255, b=nums[2] / 255, a=alpha)
    return None


def relative_luminance(color: Color) -> float:
    """WCAG 2.1 相對亮度."""
    def linearize(c: float) -> float:
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return (
        0.2126 * linearize(color.r)
        + 0.7152 * linearize(color.g)
        + 0.0722 * linearize(color.b)
    )


def contrast_ratio(first: Color, second: Color) -> float:
    lum1 = relative_luminance(first)
    lum2 = relative_luminance(second)
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def meets_contrast(ratio: float, large_text: bool = False) -> Tuple[bool, bool]:
    """回傳 (符合 AA, 符合 AAA)."""
    if large_text:
        aa, aaa = WCAG_CONTRAST_RATIOS["AA_LARGE"], WCAG_CONTRAST_RATIOS["AAA_LARGE"]
    else:
        aa, aaa = WCAG_CONTRAST_RATIOS["AA_NORMAL"], WCAG_CONTRAST_RATIOS["AAA_NORMAL"]
    return ratio >= aa, ratio >= aaa


def hex_to_hsl(hex_color: str) -> Tuple[float, float, float]:
    """#rrggbb → (h 度, s %, l %)."""
    color = parse_color(hex_color)
    if color is None:
        raise ValueError(f"Not a hex color: {hex_color!r}")
    h, l, s = colorsys.rgb_to_hls(color.r, color.g, color.b)
    return h * 360, s * 100, l * 100


def hsl_to_hex(h: float, s: float, l: float) -> str:
    s = max(0.0, min(100.0, s))
    l = max(0.0, min(100.0, l))
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360, l / 100, s / 100)
    return color_to_hex(Color(r, g, b))


def color_distance(first: Color, second: Color) -> float:
    """0~1 RGB 空間的歐氏距離."""
    return math.sqrt(
        (first.r - second.r) ** 2
        + (first.g - second.g) ** 2
        + (first.b - second.b) ** 2
    )


def nearest_palette_color(
    color: Color, palette: Dict[str, Dict[int, Tuple[float, float, float]]]
) -> Tuple[str, int, float]:
    """在色盤中找最接近的色階，回傳 (色名, 色階, 距離)."""
    best = ("gray", 500, math.inf)
    for name, shades in palette.items():
        for shade, rgb in shades.items():
            distance = color_distance(color, Color(*rgb))
            if distance < best[2]:
                best = (name, shade, distance)
    return best


def gradient_to_css(paint) -> str:
    """將漸層 Paint 轉成 CSS；角度由 handle 向量推算，缺值時由上到下."""
    stops = paint.gradient_stops or []
    if not stops:
        return "transparent"
    stop_str = ", ".join(
        f"{color_to_css(color)} {round(position * 100)}%" for position, color in stops
    )
    if paint.type == "GRADIENT_LINEAR":
        angle = 180.0
        handles = paint.gradient_handle_positions or []
        if len(handles) >= 2:
            (x0, y0), (x1, y1) = handles[0], handles[1]
            angle = math.degrees(math.atan2(y1 - y0, x1 - x0)) + 90
        return f"linear-gradient({round(angle % 360, 2):g}deg, {stop_str})"
    if paint.type == "GRADIENT_RADIAL":
        return f"radial-gradient(circle, {stop_str})"
    return f"linear-gradient(to bottom, {stop_str})"
