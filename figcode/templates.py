"""
Component templates and archetype dispatch.

Every archetype has one template in the ``TEMPLATES`` table; anything not in
the table, or a template whose ``validate`` hook declines the input, falls
through to ``DefaultTemplate``, which accepts everything.

A template builds a small element tree from the design node. The same tree
is then serialized for the target framework (react / vue / html) and styling
system (tailwind / css-modules / styled-components / plain-css), so
per-archetype templates never deal with framework syntax themselves.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .accessibility import AccessibilityReport, infer_heading_level, is_heading
from .detector import Archetype
from .document import DocumentNode
from .errors import TemplateError
from .naming import kebab
from .options import GenerationOptions
from .style_converter import StyleConverter

SLOT = object()  # children placeholder: {children} / <slot /> / nothing

MARKERS = {
    "imports": "CUSTOM IMPORTS",
    "markup": "CUSTOM MARKUP",
    "stylesheet": "CUSTOM CSS",
    "advanced_stylesheet": "ADVANCED CSS",
}

_REACT_ATTRS = {"class": "className", "for": "htmlFor", "tabindex": "tabIndex"}
_VOID_TAGS = {"img", "input", "br", "hr", "Image"}


# ─── data ────────────────────────────────────────────────────

@dataclass(frozen=True)
class PropSpec:
    name: str
    type: str
    required: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "required": self.required}


@dataclass
class RenderContext:
    node: DocumentNode
    archetype: Archetype
    component_name: str
    options: GenerationOptions
    accessibility: Optional[AccessibilityReport] = None

    @property
    def class_name(self) -> str:
        return kebab(self.component_name)

    @property
    def framework(self) -> str:
        return self.options.framework

    @property
    def styling(self) -> str:
        styling = self.options.styling
        if styling == "styled-components" and self.framework != "react":
            return "plain-css"
        if styling == "css-modules" and self.framework == "html":
            return "plain-css"
        return styling


@dataclass(frozen=True)
class RenderedTemplate:
    markup: str
    stylesheet: str
    type_declarations: Optional[str] = None


@dataclass
class Element:
    tag: str
    class_name: str = ""
    css: Dict[str, str] = field(default_factory=dict)
    utilities: List[str] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)
    # attr -> (prop name, static fallback for html)
    bound: Dict[str, Tuple[str, Optional[str]]] = field(default_factory=dict)
    # DOM event -> prop name
    events: Dict[str, str] = field(default_factory=dict)
    children: List[Union["Element", str, object]] = field(default_factory=list)


class StyleSheet:
    """每個元素一條 class 規則；根元素使用元件 class，本身不加序號."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.counter = 0
        self.rules: Dict[str, Dict[str, str]] = {}
        self.extra: List[str] = []

    def add_node(self, node: DocumentNode, root: bool = False) -> str:
        if root:
            class_name = self.prefix
        else:
            self.counter += 1
            class_name = f"{self.prefix}__{kebab(node.name)}-{self.counter}"
        self.rules[class_name] = StyleConverter.to_css(node)
        return class_name

    def add_rule(self, selector: str, props: Dict[str, str]) -> None:
        self.extra.append(StyleConverter.css_block(selector, props))

    def to_css(self, include_classes: bool = True) -> str:
        blocks = []
        if include_classes:
            blocks.extend(
                StyleConverter.css_block(f".{name}", props)
                for name, props in self.rules.items()
                if props
            )
        blocks.extend(self.extra)
        return "\n\n".join(blocks) + "\n" if blocks else ""


# ─── helpers ─────────────────────────────────────────────────

def _text_of(node: DocumentNode) -> str:
    if node.characters:
        return node.characters
    for child in node.children:
        text = _text_of(child)
        if text:
            return text
    return ""


def _escape(text: str, framework: str) -> str:
    escaped = html.escape(text, quote=False)
    if framework == "react":
        escaped = escaped.replace("{", "&#123;").replace("}", "&#125;")
    return escaped


def _comment(text: str, kind: str) -> str:
    if kind == "jsx":
        return f"{{/* {text} */}}"
    if kind == "html":
        return f"<!-- {text} -->"
    if kind == "css":
        return f"/* {text} */"
    return f"// {text}"


def _wrap_custom(code: str, key: str, kind: str) -> str:
    label = MARKERS[key]
    return f"{_comment(f'=== {label} ===', kind)}\n{code.strip()}\n{_comment(f'=== END {label} ===', kind)}"


def element_for(node: DocumentNode, sheet: StyleSheet, root: bool = False, tag: str = "div") -> Element:
    """Render a design subtree into elements, one stylesheet rule per node."""
    class_name = sheet.add_node(node, root=root)
    utilities = StyleConverter.to_tailwind(node)
    if node.is_text:
        tag = "p" if root else "span"
        return Element(tag=tag, class_name=class_name, css=sheet.rules[class_name],
                       utilities=utilities, children=[node.characters or ""])
    if node.type in ("RECTANGLE", "ELLIPSE") and any(f.is_image for f in node.fills):
        return Element(tag="img", class_name=class_name, css=sheet.rules[class_name],
                       utilities=utilities, attrs={"alt": node.name, "loading": "lazy"})
    return Element(
        tag=tag,
        class_name=class_name,
        css=sheet.rules[class_name],
        utilities=utilities,
        children=[element_for(child, sheet) for child in node.children],
    )


# ─── serializers ─────────────────────────────────────────────

class _MarkupWriter:
    def __init__(self, ctx: RenderContext):
        self.ctx = ctx
        self.framework = ctx.framework
        self.styling = ctx.styling

    def class_attr(self, element: Element, root: bool) -> str:
        names = [element.class_name] if element.class_name else []
        if self.styling == "tailwind":
            names.extend(element.utilities)
        joined = " ".join(names)
        if not joined and not root:
            return ""

        if self.framework == "react":
            if self.styling == "css-modules":
                expr = f"styles['{element.class_name}']"
                if root:
                    return f"className={{[{expr}, className].filter(Boolean).join(' ')}}"
                return f"className={{{expr}}}"
            if root:
                return f"className={{['{joined}', className].filter(Boolean).join(' ')}}"
            return f'className="{joined}"'
        if self.framework == "vue" and self.styling == "css-modules":
            return f":class=\"$style['{element.class_name}']\""
        return f'class="{joined}"' if joined else ""

    def attributes(self, element: Element, root: bool) -> List[str]:
        parts = []
        if not (root and self.framework == "react" and self.styling == "styled-components"):
            class_attr = self.class_attr(element, root)
            if class_attr:
                parts.append(class_attr)
        elif root:
            parts.append("className={className}")
        for key, value in element.attrs.items():
            name = _REACT_ATTRS.get(key, key) if self.framework == "react" else key
            parts.append(f'{name}="{html.escape(value)}"')
        for attr, (prop, fallback) in element.bound.items():
            if self.framework == "react":
                parts.append(f"{attr}={{{prop}}}")
            elif self.framework == "vue":
                parts.append(f':{attr}="{prop}"')
            elif fallback is not None:
                parts.append(f'{attr}="{html.escape(fallback)}"')
        for event, prop in element.events.items():
            if self.framework == "react":
                parts.append(f"{prop}={{{prop}}}")
            elif self.framework == "vue":
                parts.append(f"@{event}=\"emit('{event}', $event)\"")
        if root and self.framework == "react":
            parts.append("{...props}")
        return parts

    def write(self, element: Element, indent: int, root: bool = False, custom_markup: str = "") -> str:
        pad = "  " * indent
        tag = element.tag
        if root and self.framework == "react" and self.styling == "styled-components":
            tag = "Root"
        attrs = " ".join(self.attributes(element, root))
        opening = f"<{tag} {attrs}".rstrip()

        if element.tag in _VOID_TAGS and not element.children and not custom_markup:
            close = ">" if self.framework == "html" else " />"
            return f"{pad}{opening}{close}"

        lines = []
        for child in element.children:
            if child is SLOT:
                if self.framework == "react":
                    lines.append(f"{pad}  {{children}}")
                elif self.framework == "vue":
                    lines.append(f"{pad}  <slot />")
            elif isinstance(child, Element):
                lines.append(self.write(child, indent + 1))
            elif child:
                lines.append(f"{pad}  {_escape(str(child), self.framework)}")
        if custom_markup:
            kind = "jsx" if self.framework == "react" else "html"
            block = _wrap_custom(custom_markup, "markup", kind)
            lines.extend(f"{pad}  {line}" for line in block.splitlines())
        if not lines:
            return f"{pad}{opening}></{tag}>"
        inner = "\n".join(lines)
        return f"{pad}{opening}>\n{inner}\n{pad}</{tag}>"


def _declarations(name: str, props: List[PropSpec]) -> str:
    lines = [f"export interface {name}Props {{"]
    for prop in props:
        optional = "" if prop.required else "?"
        lines.append(f"  {prop.name}{optional}: {prop.type};")
    lines.append("}")
    return "\n".join(lines) + "\n"


# ─── templates ───────────────────────────────────────────────

class ComponentTemplate:
    """Base template: root element is the node's subtree wrapped in ``tag``."""

    name = "default"
    tag = "div"

    def validate(self, ctx: RenderContext) -> bool:
        return True

    def props(self, ctx: RenderContext) -> List[PropSpec]:
        return [
            PropSpec("className", "string"),
            PropSpec("children", "React.ReactNode" if ctx.framework == "react" else "unknown"),
        ]

    def root_tag(self, ctx: RenderContext) -> str:
        return self.tag

    def build(self, ctx: RenderContext, sheet: StyleSheet) -> Element:
        root = element_for(ctx.node, sheet, root=True, tag=self.root_tag(ctx))
        if not ctx.node.is_text:
            root.children.append(SLOT)
        return root

    def extra_rules(self, ctx: RenderContext, sheet: StyleSheet) -> None:
        pass

    # ── rendering ──

    def render(self, ctx: RenderContext) -> RenderedTemplate:
        sheet = StyleSheet(prefix=ctx.class_name)
        root = self.build(ctx, sheet)
        self.extra_rules(ctx, sheet)
        props = self.props(ctx)

        declarations = None
        if ctx.options.typescript and ctx.framework != "html":
            declarations = _declarations(ctx.component_name, props)

        stylesheet = self._stylesheet(ctx, sheet)
        writer = _MarkupWriter(ctx)
        custom_markup = ctx.options.custom_code.markup
        if ctx.framework == "react":
            markup = self._react(ctx, writer, root, props, custom_markup)
        elif ctx.framework == "vue":
            markup = self._vue(ctx, writer, root, props, custom_markup, stylesheet)
        else:
            markup = self._html(ctx, writer, root, custom_markup)

        if ctx.framework == "react" and ctx.styling == "styled-components":
            stylesheet = self._styled_module(ctx, root, sheet)
        return RenderedTemplate(markup=markup, stylesheet=stylesheet, type_declarations=declarations)

    def _custom_css(self, ctx: RenderContext) -> List[str]:
        custom = ctx.options.custom_code
        blocks = []
        if custom.stylesheet:
            blocks.append(_wrap_custom(custom.stylesheet, "stylesheet", "css"))
        if custom.advanced_stylesheet:
            blocks.append(_wrap_custom(custom.advanced_stylesheet, "advanced_stylesheet", "css"))
        return blocks

    def _stylesheet(self, ctx: RenderContext, sheet: StyleSheet) -> str:
        parts = []
        if ctx.options.include_comments:
            parts.append(f"/* {ctx.component_name} ({ctx.archetype.value}) */")
        body = sheet.to_css(include_classes=ctx.styling != "tailwind").rstrip("\n")
        if body:
            parts.append(body)
        parts.extend(self._custom_css(ctx))
        return "\n\n".join(parts) + "\n" if parts else ""

    def _styled_module(self, ctx: RenderContext, root: Element, sheet: StyleSheet) -> str:
        lines = [f"  {prop}: {value};" for prop, value in root.css.items()]
        for class_name, props in sheet.rules.items():
            if class_name == root.class_name or not props:
                continue
            lines.append(f"\n  & .{class_name} {{")
            lines.extend(f"    {prop}: {value};" for prop, value in props.items())
            lines.append("  }")
        for block in sheet.extra:
            lines.append("")
            lines.extend(f"  {line}" for line in block.replace(f".{ctx.class_name}", "&").splitlines())
        for block in self._custom_css(ctx):
            lines.append("")
            lines.extend(f"  {line}" for line in block.splitlines())
        body = "\n".join(lines)
        tag = root.tag if root.tag != "Image" else "div"
        return (
            "import styled from 'styled-components';\n\n"
            f"export const Root = styled.{tag}`\n{body}\n`;\n"
        )

    def _react(self, ctx, writer, root, props, custom_markup) -> str:
        name = ctx.component_name
        imports = ["import React from 'react';"]
        if root.tag == "Image":
            imports.append("import Image from 'next/image';")
        if ctx.styling == "css-modules":
            imports.append(f"import styles from './{name}.module.css';")
        elif ctx.styling == "styled-components":
            imports.append(f"import {{ Root }} from './{name}.styles';")
        else:
            imports.append(f"import './{name}.css';")
        if ctx.options.typescript:
            imports.append(f"import type {{ {name}Props }} from './{name}.types';")
        if ctx.options.custom_code.imports:
            imports.append(_wrap_custom(ctx.options.custom_code.imports, "imports", "js"))

        names = [p.name for p in props if p.name in _bound_props(root)]
        signature = "{ " + ", ".join(names + ["className", "...props"]) + " }"
        if ctx.options.typescript:
            signature += f": {name}Props"
        body = writer.write(root, 2, root=True, custom_markup=custom_markup)
        return (
            "\n".join(imports)
            + f"\n\nexport const {name} = ({signature}) => {{\n"
            + "  return (\n"
            + body
            + "\n  );\n};\n\n"
            + f"export default {name};\n"
        )

    def _vue(self, ctx, writer, root, props, custom_markup, stylesheet) -> str:
        name = ctx.component_name
        body = writer.write(root, 1, root=True, custom_markup=custom_markup)
        script = []
        if ctx.options.custom_code.imports:
            script.append(_wrap_custom(ctx.options.custom_code.imports, "imports", "js"))
        events = sorted({event for el in _iter_elements(root) for event in el.events})
        if ctx.options.typescript:
            script.append(f"import type {{ {name}Props }} from './{name}.types';")
            script.append(f"const props = defineProps<{name}Props>();")
        else:
            names = ", ".join(f"'{p.name}'" for p in props if p.name != "children")
            script.append(f"const props = defineProps([{names}]);")
        if events:
            script.append(f"const emit = defineEmits([{', '.join(repr(e) for e in events)}]);")
        lang = ' lang="ts"' if ctx.options.typescript else ""
        style_attr = " module" if ctx.styling == "css-modules" else " scoped"
        return (
            f"<template>\n{body}\n</template>\n\n"
            f"<script setup{lang}>\n" + "\n".join(script) + "\n</script>\n\n"
            f"<style{style_attr}>\n{stylesheet}</style>\n"
        )

    def _html(self, ctx, writer, root, custom_markup) -> str:
        parts = []
        if ctx.options.include_comments:
            parts.append(f"<!-- {ctx.component_name} -->")
        parts.append(writer.write(root, 0, root=True, custom_markup=custom_markup))
        if ctx.options.custom_code.imports:
            parts.append(
                '<script type="module">\n'
                + _wrap_custom(ctx.options.custom_code.imports, "imports", "js")
                + "\n</script>"
            )
        return "\n".join(parts) + "\n"


def _iter_elements(element: Element):
    yield element
    for child in element.children:
        if isinstance(child, Element):
            yield from _iter_elements(child)


def _bound_props(root: Element) -> set:
    """markup 內實際引用到的 prop；其餘 prop 經 ...props 轉交根元素."""
    used = set()
    for element in _iter_elements(root):
        used.update(prop for prop, _ in element.bound.values())
        used.update(element.events.values())
        if SLOT in element.children:
            used.add("children")
    used.discard("className")
    return used


class DefaultTemplate(ComponentTemplate):
    name = "default"


class ButtonTemplate(ComponentTemplate):
    name = "button"
    tag = "button"

    def props(self, ctx):
        handler = "(event: MouseEvent) => void"
        if ctx.framework == "react":
            handler = "(event: React.MouseEvent<HTMLButtonElement>) => void"
        return [
            PropSpec("children", "React.ReactNode" if ctx.framework == "react" else "unknown"),
            PropSpec("variant", "'primary' | 'secondary' | 'outline' | 'ghost'"),
            PropSpec("size", "'sm' | 'md' | 'lg'"),
            PropSpec("disabled", "boolean"),
            PropSpec("onClick", handler),
            PropSpec("className", "string"),
            PropSpec("type", "'button' | 'submit' | 'reset'"),
        ]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        label = _text_of(ctx.node)
        root = Element(
            tag="button",
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node) + [
                "inline-flex", "items-center", "justify-center", "cursor-pointer",
                "focus-visible:outline-none", "focus-visible:ring-2", "disabled:opacity-50",
            ],
            attrs={"type": "button"},
            bound={
                "disabled": ("disabled", None),
                "data-variant": ("variant", "primary"),
                "data-size": ("size", "md"),
            },
            events={"click": "onClick"},
            children=[label] if label else [SLOT],
        )
        if not label and ctx.options.accessibility:
            root.attrs["aria-label"] = ctx.node.name
        return root

    def extra_rules(self, ctx, sheet):
        root = f".{ctx.class_name}"
        sheet.add_rule(root, {"cursor": "pointer", "display": "inline-flex",
                              "align-items": "center", "justify-content": "center"})
        sheet.add_rule(f"{root}:focus-visible", {"outline": "2px solid currentColor", "outline-offset": "2px"})
        sheet.add_rule(f"{root}:disabled", {"opacity": "0.5", "pointer-events": "none"})


class CardTemplate(ComponentTemplate):
    name = "card"

    def validate(self, ctx):
        return not ctx.node.is_text

    def root_tag(self, ctx):
        return "article" if ctx.options.accessibility else "div"

    def props(self, ctx):
        return super().props(ctx) + [PropSpec("title", "string")]


class TextTemplate(ComponentTemplate):
    name = "text"

    def validate(self, ctx):
        return bool(_text_of(ctx.node))

    def props(self, ctx):
        return [PropSpec("className", "string")]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        tag = "p"
        if ctx.node.is_text and is_heading(ctx.node):
            tag = f"h{infer_heading_level(ctx.node)}"
        return Element(
            tag=tag,
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node),
            children=[_text_of(ctx.node)],
        )


class LayoutTemplate(ComponentTemplate):
    name = "layout"

    def root_tag(self, ctx):
        return "section" if ctx.options.accessibility else "div"


class ImageTemplate(ComponentTemplate):
    name = "image"

    def props(self, ctx):
        return [
            PropSpec("src", "string", required=True),
            PropSpec("alt", "string", required=True),
            PropSpec("className", "string"),
        ]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        optimized = ctx.framework == "react" and ctx.options.optimize_images
        attrs = {}
        box = ctx.node.bounding_box
        if box and box.width and box.height:
            attrs["width"] = f"{box.width:g}"
            attrs["height"] = f"{box.height:g}"
        if not optimized:
            attrs["loading"] = "lazy"
        image_ref = next((f.image_ref for f in ctx.node.fills if f.is_image and f.image_ref), None)
        return Element(
            tag="Image" if optimized else "img",
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node),
            attrs=attrs,
            bound={
                "src": ("src", f"{image_ref or kebab(ctx.node.name)}.png"),
                "alt": ("alt", ctx.node.name),
            },
        )


class IconTemplate(ComponentTemplate):
    name = "icon"

    def props(self, ctx):
        return [
            PropSpec("title", "string"),
            PropSpec("className", "string"),
        ]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        box = ctx.node.bounding_box
        width = f"{box.width:g}" if box and box.width else "24"
        height = f"{box.height:g}" if box and box.height else "24"
        svg = Element(
            tag="svg",
            attrs={
                "viewBox": f"0 0 {width} {height}",
                "width": width,
                "height": height,
                "fill": "currentColor",
                "aria-hidden": "true",
            },
        )
        attrs = {"role": "img", "aria-label": ctx.node.name} if ctx.options.accessibility else {}
        return Element(
            tag="span",
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node) + ["inline-flex", "items-center", "justify-center"],
            attrs=attrs,
            children=[svg],
        )


class InputTemplate(ComponentTemplate):
    name = "input"

    def props(self, ctx):
        handler = "(event: Event) => void"
        if ctx.framework == "react":
            handler = "(event: React.ChangeEvent<HTMLInputElement>) => void"
        return [
            PropSpec("label", "string"),
            PropSpec("name", "string"),
            PropSpec("value", "string"),
            PropSpec("placeholder", "string"),
            PropSpec("type", "string"),
            PropSpec("onChange", handler),
            PropSpec("className", "string"),
        ]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        input_id = f"{ctx.class_name}-input"
        placeholder = _text_of(ctx.node) or ctx.node.name
        children = []
        if ctx.options.accessibility:
            children.append(Element(
                tag="label",
                class_name=f"{ctx.class_name}__label",
                attrs={"for": input_id},
                children=[ctx.node.name],
            ))
        children.append(Element(
            tag="input",
            class_name=f"{ctx.class_name}__control",
            utilities=["w-full", "bg-transparent", "outline-none"],
            attrs={"id": input_id, "type": "text", "placeholder": placeholder},
            bound={"value": ("value", None), "name": ("name", None)},
            events={"change": "onChange"},
        ))
        return Element(
            tag="div",
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node),
            children=children,
        )

    def extra_rules(self, ctx, sheet):
        sheet.add_rule(f".{ctx.class_name}__control", {
            "width": "100%",
            "border": "none",
            "background": "transparent",
            "outline": "none",
        })
        sheet.add_rule(f".{ctx.class_name}:focus-within", {"outline": "2px solid currentColor"})


class NavigationTemplate(ComponentTemplate):
    name = "navigation"

    def validate(self, ctx):
        return bool(ctx.node.children)

    def props(self, ctx):
        return [PropSpec("className", "string")]

    def build(self, ctx, sheet):
        class_name = sheet.add_node(ctx.node, root=True)
        items = [
            Element(tag="li", children=[element_for(child, sheet)])
            for child in ctx.node.children
        ]
        list_utilities = ["flex", "list-none", "m-0", "p-0"]
        if ctx.node.layout_mode == "VERTICAL":
            list_utilities.insert(1, "flex-col")
        nav_list = Element(
            tag="ul",
            class_name=f"{ctx.class_name}__list",
            utilities=list_utilities,
            children=items,
        )
        attrs = {"aria-label": ctx.node.name} if ctx.options.accessibility else {}
        return Element(
            tag="nav",
            class_name=class_name,
            css=sheet.rules[class_name],
            utilities=StyleConverter.to_tailwind(ctx.node),
            attrs=attrs,
            children=[nav_list],
        )

    def extra_rules(self, ctx, sheet):
        direction = "column" if ctx.node.layout_mode == "VERTICAL" else "row"
        props = {"display": "flex", "flex-direction": direction, "list-style": "none",
                 "margin": "0", "padding": "0"}
        if ctx.node.item_spacing:
            props["gap"] = f"{ctx.node.item_spacing:g}px"
        sheet.add_rule(f".{ctx.class_name}__list", props)


TEMPLATES: Dict[Archetype, ComponentTemplate] = {
    Archetype.BUTTON: ButtonTemplate(),
    Archetype.CARD: CardTemplate(),
    Archetype.TEXT: TextTemplate(),
    Archetype.LAYOUT: LayoutTemplate(),
    Archetype.IMAGE: ImageTemplate(),
    Archetype.ICON: IconTemplate(),
    Archetype.INPUT: InputTemplate(),
    Archetype.NAVIGATION: NavigationTemplate(),
}


class TemplateRegistry:
    """exact archetype → 預設樣板 的兩段式分派."""

    def __init__(self, templates: Optional[Dict[Archetype, ComponentTemplate]] = None):
        self.templates = dict(TEMPLATES if templates is None else templates)
        self.default = DefaultTemplate()

    def select(self, ctx: RenderContext) -> ComponentTemplate:
        template = self.templates.get(ctx.archetype)
        if template is not None and template.validate(ctx):
            return template
        return self.default

    def render(self, ctx: RenderContext) -> Tuple[ComponentTemplate, RenderedTemplate]:
        template = self.select(ctx)
        try:
            return template, template.render(ctx)
        except Exception as exc:
            raise TemplateError(
                f"Failed to render template '{template.name}' for node {ctx.node.id}: {exc}",
                template_name=template.name,
                node_id=ctx.node.id,
                cause=exc,
            ) from exc
