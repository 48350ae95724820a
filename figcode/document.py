"""
設計文件節點模型

將 Figma REST API 的節點 JSON（camelCase）轉成型別化的 DocumentNode 樹，
供偵測、無障礙分析、token 擷取與程式碼產生共用。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .color_utils import Color


class NodeKind(str, Enum):
    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    VECTOR = "VECTOR"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    STAR = "STAR"
    LINE = "LINE"
    ELLIPSE = "ELLIPSE"
    REGULAR_POLYGON = "REGULAR_POLYGON"
    RECTANGLE = "RECTANGLE"
    TEXT = "TEXT"
    SLICE = "SLICE"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    SECTION = "SECTION"


@dataclass(frozen=True)
class BoundingBox:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Paint:
    type: str
    visible: bool = True
    opacity: Optional[float] = None
    color: Optional[Color] = None
    gradient_stops: Tuple[Tuple[float, Color], ...] = ()
    gradient_handle_positions: Tuple[Tuple[float, float], ...] = ()
    image_ref: Optional[str] = None

    @property
    def is_solid(self) -> bool:
        return self.visible and self.type == "SOLID" and self.color is not None

    @property
    def is_gradient(self) -> bool:
        return self.visible and self.type.startswith("GRADIENT")

    @property
    def is_image(self) -> bool:
        return self.visible and self.type == "IMAGE"


@dataclass(frozen=True)
class Effect:
    type: str
    visible: bool = True
    radius: float = 0.0
    color: Optional[Color] = None
    offset: Tuple[float, float] = (0.0, 0.0)
    spread: float = 0.0

    @property
    def is_drop_shadow(self) -> bool:
        return self.visible and self.type == "DROP_SHADOW"


@dataclass(frozen=True)
class TypeStyle:
    font_family: str = "Inter"
    font_size: float = 16.0
    font_weight: float = 400.0
    line_height_px: Optional[float] = None
    letter_spacing: float = 0.0
    text_align_horizontal: Optional[str] = None
    fills: Tuple[Paint, ...] = ()


@dataclass
class DocumentNode:
    """設計樹中的單一節點；id 在整份文件內唯一."""
    id: str
    name: str
    type: str
    children: List["DocumentNode"] = field(default_factory=list)
    fills: List[Paint] = field(default_factory=list)
    strokes: List[Paint] = field(default_factory=list)
    stroke_weight: Optional[float] = None
    effects: List[Effect] = field(default_factory=list)
    corner_radius: Optional[float] = None
    bounding_box: Optional[BoundingBox] = None
    layout_mode: Optional[str] = None
    primary_axis_align: Optional[str] = None
    counter_axis_align: Optional[str] = None
    item_spacing: Optional[float] = None
    padding_top: Optional[float] = None
    padding_right: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None
    style: Optional[TypeStyle] = None
    characters: Optional[str] = None
    opacity: Optional[float] = None
    background_color: Optional[Color] = None
    clips_content: bool = False
    visible: bool = True

    @property
    def is_text(self) -> bool:
        return self.type == NodeKind.TEXT.value

    @property
    def has_auto_layout(self) -> bool:
        return self.layout_mode in ("HORIZONTAL", "VERTICAL")

    def first_solid_fill(self) -> Optional[Paint]:
        for fill in self.fills:
            if fill.is_solid:
                return fill
        return None

    def drop_shadows(self) -> List[Effect]:
        return [effect for effect in self.effects if effect.is_drop_shadow]

    def paddings(self) -> Tuple[float, float, float, float]:
        return (
            self.padding_top or 0,
            self.padding_right or 0,
            self.padding_bottom or 0,
            self.padding_left or 0,
        )


@dataclass
class Document:
    """整份設計檔：根節點與以 id 為鍵的 components / styles 字典."""
    root: DocumentNode
    name: str = "Untitled"
    components: Dict[str, dict] = field(default_factory=dict)
    styles: Dict[str, dict] = field(default_factory=dict)


# ════════════════════════════════════════════════════════════
# Parsing
# ════════════════════════════════════════════════════════════

def _parse_paint(data: dict) -> Paint:
    stops = tuple(
        (float(stop.get("position", 0)), Color.from_dict(stop.get("color")) or Color(0, 0, 0))
        for stop in data.get("gradientStops", []) or []
    )
    handles = tuple(
        (float(h.get("x", 0)), float(h.get("y", 0)))
        for h in data.get("gradientHandlePositions", []) or []
    )
    return Paint(
        type=data.get("type", "SOLID"),
        visible=data.get("visible", True) is not False,
        opacity=data.get("opacity"),
        color=Color.from_dict(data.get("color")),
        gradient_stops=stops,
        gradient_handle_positions=handles,
        image_ref=data.get("imageRef"),
    )


def _parse_effect(data: dict) -> Effect:
    offset = data.get("offset") or {}
    return Effect(
        type=data.get("type", "DROP_SHADOW"),
        visible=data.get("visible", True) is not False,
        radius=float(data.get("radius", 0) or 0),
        color=Color.from_dict(data.get("color")),
        offset=(float(offset.get("x", 0)), float(offset.get("y", 0))),
        spread=float(data.get("spread", 0) or 0),
    )


def _parse_style(data: Optional[dict]) -> Optional[TypeStyle]:
    if not data:
        return None
    return TypeStyle(
        font_family=data.get("fontFamily", "Inter"),
        font_size=float(data.get("fontSize", 16) or 16),
        font_weight=float(data.get("fontWeight", 400) or 400),
        line_height_px=data.get("lineHeightPx"),
        letter_spacing=float(data.get("letterSpacing", 0) or 0),
        text_align_horizontal=data.get("textAlignHorizontal"),
        fills=tuple(_parse_paint(p) for p in data.get("fills", []) or []),
    )


def _parse_bbox(data: Optional[dict]) -> Optional[BoundingBox]:
    if not data:
        return None
    return BoundingBox(
        x=float(data.get("x", 0) or 0),
        y=float(data.get("y", 0) or 0),
        width=float(data.get("width", 0) or 0),
        height=float(data.get("height", 0) or 0),
    )


def parse_node(data: dict, fallback_id: str = "0", skip_hidden: bool = True) -> DocumentNode:
    """Figma 節點 JSON → DocumentNode（遞迴）。隱藏的子節點預設略過."""
    node_id = str(data.get("id") or fallback_id)
    children = []
    for index, child in enumerate(data.get("children", []) or []):
        if skip_hidden and child.get("visible", True) is False:
            continue
        children.append(parse_node(child, f"{node_id}:{index}", skip_hidden))

    layout_mode = data.get("layoutMode")
    if layout_mode == "NONE":
        layout_mode = None

    return DocumentNode(
        id=node_id,
        name=data.get("name", "Unnamed"),
        type=data.get("type", "FRAME"),
        children=children,
        fills=[_parse_paint(p) for p in data.get("fills", []) or []],
        strokes=[_parse_paint(p) for p in data.get("strokes", []) or []],
        stroke_weight=data.get("strokeWeight"),
        effects=[_parse_effect(e) for e in data.get("effects", []) or []],
        corner_radius=data.get("cornerRadius"),
        bounding_box=_parse_bbox(data.get("absoluteBoundingBox")),
        layout_mode=layout_mode,
        primary_axis_align=data.get("primaryAxisAlignItems"),
        counter_axis_align=data.get("counterAxisAlignItems"),
        item_spacing=data.get("itemSpacing"),
        padding_top=data.get("paddingTop"),
        padding_right=data.get("paddingRight"),
        padding_bottom=data.get("paddingBottom"),
        padding_left=data.get("paddingLeft"),
        style=_parse_style(data.get("style")),
        characters=data.get("characters"),
        opacity=data.get("opacity"),
        background_color=Color.from_dict(data.get("backgroundColor")),
        clips_content=bool(data.get("clipsContent", False)),
        visible=data.get("visible", True) is not False,
    )


def parse_document(payload: dict) -> Document:
    """接受完整檔案 payload（含 document 欄位）或單一節點."""
    if "document" in payload:
        root_data = payload.get("document") or {}
        return Document(
            root=parse_node(root_data),
            name=payload.get("name", root_data.get("name", "Untitled")),
            components=dict(payload.get("components") or {}),
            styles=dict(payload.get("styles") or {}),
        )
    return Document(root=parse_node(payload), name=payload.get("name", "Untitled"))
