"""
Design token 匯出

把 DesignTokens 序列化成 css / scss / js / json / tailwind / figma-tokens，
回傳 (檔名, 內容) 清單，可直接寫檔或交給前端下載。
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from .design_tokens import DesignTokens
from .errors import ValidationError

EXPORT_FORMATS = ("css", "scss", "js", "json", "tailwind", "figma-tokens")


@dataclass(frozen=True)
class ExportOptions:
    format: str = "css"
    include_comments: bool = True
    prefix: str = ""


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    content: str


COMPONENTS_CSS = """/* Component Base Styles */

.btn {
  display: inline-flex;
  align-items: center;
  justify-content: center;
  padding: var(--{p}spacing-sm) var(--{p}spacing-md);
  border-radius: var(--{p}border-radius-md);
  transition: all var(--{p}duration-normal) var(--{p}easing-ease-in-out);
  cursor: pointer;
  border: none;
}

.btn-primary {
  background-color: var(--{p}color-primary-500);
  color: white;
}

.btn-primary:hover {
  background-color: var(--{p}color-primary-600);
}

.card {
  background-color: white;
  border-radius: var(--{p}border-radius-lg);
  box-shadow: var(--{p}shadow-level-1);
  padding: var(--{p}spacing-lg);
}

.input {
  width: 100%;
  padding: var(--{p}spacing-sm) var(--{p}spacing-md);
  border: 1px solid var(--{p}color-neutral-300);
  border-radius: var(--{p}border-radius-md);
}

.input:focus {
  outline: none;
  border-color: var(--{p}color-primary-500);
  box-shadow: 0 0 0 3px var(--{p}color-primary-100);
}
"""

SCSS_MIXINS = """// Mixins

@function color($palette, $shade: 500) {
  @return map-get(map-get($colors, $palette), $shade);
}

@function spacing($key) {
  @return map-get($spacing, $key);
}

@mixin button-variant($bg-color, $text-color: white) {
  background-color: $bg-color;
  color: $text-color;

  &:hover {
    background-color: darken($bg-color, 10%);
  }

  &:active {
    background-color: darken($bg-color, 15%);
  }
}

@mixin card-shadow($level: 1) {
  box-shadow: map-get($shadows, level-#{$level});
}
"""

SCSS_UTILITIES = """// Utility Classes

@each $palette, $shades in $colors {
  @each $shade, $color in $shades {
    .text-#{$palette}-#{$shade} { color: $color; }
    .bg-#{$palette}-#{$shade} { background-color: $color; }
  }
}

@each $key, $value in $spacing {
  .p-#{$key} { padding: $value; }
  .m-#{$key} { margin: $value; }
  .pt-#{$key} { padding-top: $value; }
  .pb-#{$key} { padding-bottom: $value; }
  .pl-#{$key} { padding-left: $value; }
  .pr-#{$key} { padding-right: $value; }
}
"""

JS_HELPERS = """
export const { colors, typography, spacing, shadows, borderRadius, breakpoints, animations } = designTokens;

export const getColor = (path) => path.split('.').reduce((value, key) => value[key], colors);
export const getSpacing = (key) => spacing.semantic[key] || spacing.scale[key];
export const getTypography = (key) => typography.textStyles[key];
export const getShadow = (key) => shadows.elevation[key];
export const getBorderRadius = (key) => borderRadius[key];
export const getBreakpoint = (key) => breakpoints[key];
"""


def _scss_value(value: object) -> str:
    """頂層含逗號的值（如 font stack）須加括號，否則會拆散 Sass map."""
    text = str(value)
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            return f"({text})"
    return text


class TokenExporter:
    def __init__(self, tokens: DesignTokens, options: ExportOptions = ExportOptions()):
        if options.format not in EXPORT_FORMATS:
            valid = ", ".join(EXPORT_FORMATS)
            raise ValidationError(
                f"Unsupported export format '{options.format}' (valid: {valid})", field="format"
            )
        self.tokens = tokens
        self.options = options
        self.data = tokens.to_dict()

    def export(self) -> List[ExportedFile]:
        handler = {
            "css": self._css,
            "scss": self._scss,
            "js": self._js,
            "json": self._json,
            "tailwind": self._tailwind,
            "figma-tokens": self._figma_tokens,
        }[self.options.format]
        return handler()

    # ─── css ──────────────────────────────────────────────────

    def _comment(self, text: str, style: str = "css") -> str:
        if not self.options.include_comments:
            return ""
        return f"/* {text} */\n" if style == "css" else f"// {text}\n"

    def _css_variables(self) -> str:
        p = self.options.prefix
        colors = self.data["colors"]
        typography = self.data["typography"]
        lines: List[str] = []

        def section(title: str) -> None:
            if self.options.include_comments:
                lines.append(f"  /* {title} */")

        def emit(name: str, values: Dict[str, object]) -> None:
            for key, value in values.items():
                lines.append(f"  --{p}{name}-{key}: {value};")

        section("Colors")
        for palette in ("primary", "secondary", "neutral"):
            emit(f"color-{palette}", colors[palette])
        for name, scale in colors["semantic"].items():
            emit(f"color-{name}", scale)
        emit("color", colors["custom"])
        section("Typography")
        emit("font-family", typography["fontFamilies"])
        emit("font-size", typography["fontSizes"])
        emit("font-weight", typography["fontWeights"])
        emit("line-height", typography["lineHeights"])
        emit("letter-spacing", typography["letterSpacing"])
        section("Spacing")
        emit("spacing", self.data["spacing"]["semantic"])
        section("Shadows")
        emit("shadow", self.data["shadows"]["elevation"])
        section("Border Radius")
        emit("border-radius", self.data["borderRadius"])
        section("Breakpoints")
        emit("breakpoint", self.data["breakpoints"])
        section("Animations")
        emit("duration", self.data["animations"]["duration"])
        emit("easing", self.data["animations"]["easing"])

        header = self._comment("Design Tokens - Generated from Figma")
        return header + ":root {\n" + "\n".join(lines) + "\n}\n"

    def _css_utilities(self) -> str:
        p = self.options.prefix
        out = [self._comment("Utility Classes").rstrip("\n")] if self.options.include_comments else []
        for key in self.data["colors"]["primary"]:
            out.append(f".text-primary-{key} {{ color: var(--{p}color-primary-{key}); }}")
            out.append(f".bg-primary-{key} {{ background-color: var(--{p}color-primary-{key}); }}")
        for key in self.data["typography"]["fontSizes"]:
            out.append(f".text-{key} {{ font-size: var(--{p}font-size-{key}); }}")
        for key in self.data["spacing"]["semantic"]:
            out.append(f".p-{key} {{ padding: var(--{p}spacing-{key}); }}")
            out.append(f".m-{key} {{ margin: var(--{p}spacing-{key}); }}")
        return "\n".join(out) + "\n"

    def _css(self) -> List[ExportedFile]:
        return [
            ExportedFile("tokens.css", self._css_variables()),
            ExportedFile("utilities.css", self._css_utilities()),
            ExportedFile("components.css", COMPONENTS_CSS.replace("{p}", self.options.prefix)),
        ]

    # ─── scss ─────────────────────────────────────────────────

    @staticmethod
    def _scss_map(name: str, values: Dict[str, object], nested: bool = False) -> str:
        lines = [f"${name}: ("]
        for key, value in values.items():
            if nested:
                lines.append(f"  {key}: (")
                lines.extend(f"    {k}: {_scss_value(v)}," for k, v in value.items())
                lines.append("  ),")
            else:
                lines.append(f"  {key}: {_scss_value(value)},")
        lines.append(");")
        return "\n".join(lines)

    def _scss(self) -> List[ExportedFile]:
        colors = self.data["colors"]
        palettes = {
            "primary": colors["primary"],
            "secondary": colors["secondary"],
            "neutral": colors["neutral"],
            **colors["semantic"],
        }
        typography = {
            "font-families": self.data["typography"]["fontFamilies"],
            "font-sizes": self.data["typography"]["fontSizes"],
            "font-weights": self.data["typography"]["fontWeights"],
        }
        blocks = [
            self._comment("Design Tokens - Generated from Figma", "scss").rstrip("\n"),
            self._scss_map("colors", palettes, nested=True),
            self._scss_map("typography", typography, nested=True),
            self._scss_map("spacing", self.data["spacing"]["semantic"]),
            self._scss_map("shadows", self.data["shadows"]["elevation"]),
            self._scss_map("radii", self.data["borderRadius"]),
            self._scss_map("breakpoints", self.data["breakpoints"]),
        ]
        tokens_scss = "\n\n".join(b for b in blocks if b) + "\n"
        return [
            ExportedFile("_tokens.scss", tokens_scss),
            ExportedFile("_mixins.scss", SCSS_MIXINS),
            ExportedFile("_utilities.scss", SCSS_UTILITIES),
            ExportedFile("index.scss", "@import 'tokens';\n@import 'mixins';\n@import 'utilities';\n"),
        ]

    # ─── js / json ────────────────────────────────────────────

    def _js(self) -> List[ExportedFile]:
        body = json.dumps(self.data, indent=2, ensure_ascii=False)
        header = self._comment("Design Tokens - Generated from Figma", "js")
        return [ExportedFile("tokens.js", f"{header}export const designTokens = {body};\n{JS_HELPERS}")]

    def _json(self) -> List[ExportedFile]:
        return [ExportedFile("design-tokens.json", json.dumps(self.data, indent=2, ensure_ascii=False))]

    def _tailwind(self) -> List[ExportedFile]:
        colors = self.data["colors"]
        extend = {
            "colors": {
                "primary": colors["primary"],
                "secondary": colors["secondary"],
                "neutral": colors["neutral"],
                **colors["semantic"],
            },
            "fontFamily": self.data["typography"]["fontFamilies"],
            "fontSize": self.data["typography"]["fontSizes"],
            "fontWeight": self.data["typography"]["fontWeights"],
            "spacing": self.data["spacing"]["semantic"],
            "boxShadow": self.data["shadows"]["elevation"],
            "borderRadius": self.data["borderRadius"],
            "screens": self.data["breakpoints"],
            "transitionDuration": self.data["animations"]["duration"],
            "transitionTimingFunction": self.data["animations"]["easing"],
        }
        extend_js = json.dumps(extend, indent=2, ensure_ascii=False).replace("\n", "\n    ")
        content = (
            "/** @type {import('tailwindcss').Config} */\n"
            "module.exports = {\n"
            "  content: [\n"
            "    './src/**/*.{js,ts,jsx,tsx,vue,html}',\n"
            "    './components/**/*.{js,ts,jsx,tsx,vue}',\n"
            "  ],\n"
            "  theme: {\n"
            f"    extend: {extend_js},\n"
            "  },\n"
            "  plugins: [],\n"
            "};\n"
        )
        return [ExportedFile("tailwind.config.js", content)]

    def _figma_tokens(self) -> List[ExportedFile]:
        def values(obj: Dict[str, object], token_type: str = "") -> Dict[str, dict]:
            if token_type:
                return {k: {"value": v, "type": token_type} for k, v in obj.items()}
            return {k: {"value": v} for k, v in obj.items()}

        colors = self.data["colors"]
        payload = {
            "global": {
                "colors": {
                    "primary": values(colors["primary"], "color"),
                    "secondary": values(colors["secondary"], "color"),
                    "neutral": values(colors["neutral"], "color"),
                },
                "typography": {
                    "fontFamilies": values(self.data["typography"]["fontFamilies"]),
                    "fontSizes": values(self.data["typography"]["fontSizes"]),
                    "fontWeights": values(self.data["typography"]["fontWeights"]),
                },
                "spacing": values(self.data["spacing"]["semantic"]),
                "borderRadius": values(self.data["borderRadius"]),
                "boxShadow": values(self.data["shadows"]["elevation"]),
            }
        }
        return [ExportedFile("figma-tokens.json", json.dumps(payload, indent=2, ensure_ascii=False))]


def export_tokens(
    tokens: DesignTokens,
    format: str = "css",
    include_comments: bool = True,
    prefix: str = "",
) -> List[ExportedFile]:
    options = ExportOptions(format=format, include_comments=include_comments, prefix=prefix)
    return TokenExporter(tokens, options).export()


def write_exported_files(files: List[ExportedFile], output_dir: str) -> List[Path]:
    base = Path(output_dir)
    base.mkdir(parents=True, exist_ok=True)
    written = []
    for item in files:
        path = base / item.filename
        path.write_text(item.content, encoding="utf-8")
        written.append(path)
    return written
