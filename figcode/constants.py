"""設計 token 常數、WCAG 門檻與 Tailwind 對照表."""

WCAG_CONTRAST_RATIOS = {
    "AA_NORMAL": 4.5,
    "AA_LARGE": 3.0,
    "AAA_NORMAL": 7.0,
    "AAA_LARGE": 4.5,
}

MIN_TOUCH_TARGET = 44

# 響應式斷點（px）
BREAKPOINTS = {
    "mobile": 768,
    "tablet": 1024,
    "desktop": 1440,
    "xl": 1920,
}

FONT_SIZES = {
    "xs": 12,
    "sm": 14,
    "base": 16,
    "lg": 18,
    "xl": 20,
    "2xl": 24,
    "3xl": 30,
    "4xl": 36,
    "5xl": 48,
    "6xl": 60,
    "7xl": 72,
    "8xl": 96,
    "9xl": 128,
}

FONT_WEIGHTS = {
    "thin": 100,
    "extralight": 200,
    "light": 300,
    "normal": 400,
    "medium": 500,
    "semibold": 600,
    "bold": 700,
    "extrabold": 800,
    "black": 900,
}

BORDER_RADIUS = {
    "none": 0,
    "sm": 2,
    "base": 4,
    "md": 6,
    "lg": 8,
    "xl": 12,
    "2xl": 16,
    "3xl": 24,
    "full": 9999,
}

# Tailwind spacing key → px
SPACING_SCALE = {
    "0": 0,
    "0.5": 2,
    "1": 4,
    "1.5": 6,
    "2": 8,
    "2.5": 10,
    "3": 12,
    "3.5": 14,
    "4": 16,
    "5": 20,
    "6": 24,
    "7": 28,
    "8": 32,
    "9": 36,
    "10": 40,
    "11": 44,
    "12": 48,
    "14": 56,
    "16": 64,
    "20": 80,
    "24": 96,
}

BORDER_WIDTHS = {"": 1, "2": 2, "4": 4, "8": 8}

# 依 blur 半徑對應 shadow class
SHADOW_BLURS = {
    "shadow-sm": 2,
    "shadow": 3,
    "shadow-md": 6,
    "shadow-lg": 15,
    "shadow-xl": 25,
    "shadow-2xl": 50,
}

# 色盤（0~1 RGB），供 utility class 最近色搜尋
COLOR_PALETTE = {
    "gray": {
        50: (0.98, 0.98, 0.98),
        100: (0.96, 0.96, 0.97),
        200: (0.93, 0.94, 0.95),
        300: (0.83, 0.84, 0.86),
        400: (0.64, 0.65, 0.67),
        500: (0.42, 0.45, 0.48),
        600: (0.32, 0.35, 0.37),
        700: (0.25, 0.28, 0.31),
        800: (0.16, 0.18, 0.20),
        900: (0.09, 0.11, 0.13),
    },
    "blue": {
        50: (0.94, 0.97, 1.00),
        100: (0.86, 0.93, 0.99),
        200: (0.73, 0.87, 0.98),
        300: (0.58, 0.79, 0.96),
        400: (0.38, 0.68, 0.93),
        500: (0.23, 0.58, 0.91),
        600: (0.15, 0.48, 0.82),
        700: (0.11, 0.40, 0.72),
        800: (0.12, 0.32, 0.61),
        900: (0.12, 0.27, 0.49),
    },
    "red": {
        50: (0.99, 0.95, 0.95),
        100: (0.99, 0.89, 0.89),
        200: (0.98, 0.80, 0.80),
        300: (0.96, 0.66, 0.66),
        400: (0.94, 0.45, 0.45),
        500: (0.91, 0.27, 0.27),
        600: (0.82, 0.18, 0.18),
        700: (0.69, 0.15, 0.15),
        800: (0.58, 0.15, 0.15),
        900: (0.48, 0.16, 0.16),
    },
    "green": {
        50: (0.94, 0.99, 0.95),
        100: (0.86, 0.99, 0.89),
        200: (0.73, 0.97, 0.79),
        300: (0.55, 0.93, 0.64),
        400: (0.31, 0.85, 0.42),
        500: (0.13, 0.73, 0.25),
        600: (0.09, 0.60, 0.19),
        700: (0.08, 0.47, 0.15),
        800: (0.11, 0.38, 0.15),
        900: (0.09, 0.31, 0.13),
    },
    "yellow": {
        50: (0.99, 0.99, 0.94),
        100: (0.99, 0.98, 0.82),
        200: (0.99, 0.95, 0.63),
        300: (0.99, 0.91, 0.41),
        400: (0.98, 0.84, 0.20),
        500: (0.92, 0.76, 0.07),
        600: (0.79, 0.63, 0.03),
        700: (0.64, 0.46, 0.03),
        800: (0.53, 0.38, 0.06),
        900: (0.45, 0.32, 0.08),
    },
}

# 純黑白不屬任何色盤，直接對應
PURE_COLORS = {
    "black": (0.0, 0.0, 0.0),
    "white": (1.0, 1.0, 1.0),
}

# Utility class 吸附門檻
COLOR_SNAP_DISTANCE = 0.1
SIZE_SNAP_PX = 2
