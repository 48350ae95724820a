"""
Component archetype detection.

Three independent passes score every archetype and are blended
``0.4 * pattern + 0.3 * semantic + 0.3 * structural``:

* pattern:    display name against per-archetype word-boundary regexes
* semantic:   weighted predicates over the node's own attributes
* structural: child-count heuristics, independent of naming

All three are plain data tables so each archetype can be tuned and tested
on its own.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from .document import DocumentNode


class Archetype(str, Enum):
    BUTTON = "button"
    CARD = "card"
    INPUT = "input"
    NAVIGATION = "navigation"
    IMAGE = "image"
    ICON = "icon"
    TEXT = "text"
    LAYOUT = "layout"
    OTHER = "other"


# Equal scores resolve to whichever archetype comes first here.
ARCHETYPE_PRIORITY: Tuple[Archetype, ...] = (
    Archetype.BUTTON,
    Archetype.INPUT,
    Archetype.CARD,
    Archetype.NAVIGATION,
    Archetype.IMAGE,
    Archetype.ICON,
    Archetype.TEXT,
    Archetype.LAYOUT,
)

PATTERN_WEIGHT = 0.4
SEMANTIC_WEIGHT = 0.3
STRUCTURAL_WEIGHT = 0.3
PATTERN_INCREMENT = 0.5


def _groups(*words: str) -> List["re.Pattern"]:
    return [re.compile(rf"\b({w})\b", re.IGNORECASE) for w in words]


PATTERNS: Dict[Archetype, List["re.Pattern"]] = {
    Archetype.BUTTON: _groups("button|btn|click|action", "submit|cancel|confirm|save", "primary|secondary|cta"),
    Archetype.CARD: _groups("card|panel|tile|item", "content|article|post", "product|feature|service"),
    Archetype.INPUT: _groups("input|field|form|text", "email|password|search|name", "placeholder|label|value"),
    Archetype.NAVIGATION: _groups("nav|menu|header|navigation", "link|item|tab|breadcrumb", "dropdown|sidebar|topbar"),
    Archetype.IMAGE: _groups("image|img|photo|picture", "video|audio|media|gallery", "avatar|logo|thumbnail"),
    Archetype.ICON: _groups("icon|glyph|symbol"),
    Archetype.TEXT: _groups("heading|title|subtitle|headline", "paragraph|body|caption|description"),
    Archetype.LAYOUT: _groups("container|wrapper|layout|section", "grid|row|column|stack"),
}


# ─── semantic predicates ─────────────────────────────────────

_CONTAINERS = {"FRAME", "COMPONENT", "INSTANCE"}


def _is_container(node: DocumentNode) -> bool:
    return node.type in _CONTAINERS


def _single_child_container(node: DocumentNode) -> bool:
    return _is_container(node) and len(node.children) == 1


def _has_solid_fill(node: DocumentNode) -> bool:
    return any(f.type == "SOLID" and f.visible for f in node.fills)


def _has_light_fill(node: DocumentNode) -> bool:
    for fill in node.fills:
        if fill.is_solid and (fill.color.r + fill.color.g + fill.color.b) / 3 > 0.7:
            return True
    return False


def _has_drop_shadow(node: DocumentNode) -> bool:
    return bool(node.drop_shadows())


def _has_strokes(node: DocumentNode) -> bool:
    return bool(node.strokes)


def _has_radius(node: DocumentNode) -> bool:
    return bool(node.corner_radius)


def _has_image_fill(node: DocumentNode) -> bool:
    return any(f.is_image for f in node.fills)


def _is_small(node: DocumentNode) -> bool:
    box = node.bounding_box
    return box is not None and 0 < box.width <= 48 and 0 < box.height <= 48


SEMANTIC_RULES: Dict[Archetype, List[Tuple[Callable[[DocumentNode], bool], float]]] = {
    Archetype.BUTTON: [
        (_single_child_container, 0.3),
        (_has_solid_fill, 0.2),
        (_has_drop_shadow, 0.1),
        (_has_strokes, 0.1),
        (_has_radius, 0.1),
    ],
    Archetype.INPUT: [
        (_is_container, 0.2),
        (_has_strokes, 0.3),
        (_has_light_fill, 0.2),
    ],
    Archetype.CARD: [
        (lambda n: len(n.children) >= 2, 0.4),
        (_has_drop_shadow, 0.2),
        (_has_solid_fill, 0.1),
        (_has_radius, 0.1),
    ],
    Archetype.TEXT: [
        (lambda n: n.type == "TEXT", 0.9),
        (lambda n: bool(n.characters), 0.1),
    ],
    Archetype.IMAGE: [
        (lambda n: n.type in ("RECTANGLE", "ELLIPSE") and _has_image_fill(n), 0.8),
    ],
    Archetype.ICON: [
        (lambda n: n.type in ("VECTOR", "BOOLEAN_OPERATION"), 0.5),
        (_is_small, 0.3),
    ],
    Archetype.LAYOUT: [
        (lambda n: n.has_auto_layout, 0.4),
        (lambda n: len(n.children) > 2, 0.3),
    ],
    Archetype.NAVIGATION: [
        (lambda n: n.layout_mode == "HORIZONTAL" and len(n.children) >= 3, 0.4),
    ],
}

# (predicate on child count, {archetype: score}); first matching row wins
STRUCTURAL_RULES: List[Tuple[Callable[[int], bool], Dict[Archetype, float]]] = [
    (lambda count: count == 0, {Archetype.TEXT: 0.8, Archetype.IMAGE: 0.6}),
    (lambda count: count == 1, {Archetype.BUTTON: 0.7, Archetype.ICON: 0.5}),
    (lambda count: count > 3, {Archetype.CARD: 0.8, Archetype.NAVIGATION: 0.6}),
]


@dataclass(frozen=True)
class DetectionResult:
    archetype: Archetype
    confidence: float
    reasoning: Tuple[str, ...] = ()
    suggested_name: str = "Component"
    scores: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "reasoning", tuple(self.reasoning))
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))

    def to_dict(self) -> dict:
        return {
            "type": self.archetype.value,
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "suggestedName": self.suggested_name,
        }


# ─── passes ──────────────────────────────────────────────────

def pattern_scores(node: DocumentNode) -> Dict[Archetype, float]:
    name = node.name or ""
    scores = {}
    for archetype, patterns in PATTERNS.items():
        hits = sum(1 for pattern in patterns if pattern.search(name))
        if hits:
            scores[archetype] = min(hits * PATTERN_INCREMENT, 1.0)
    return scores


def semantic_scores(node: DocumentNode) -> Dict[Archetype, float]:
    scores = {}
    for archetype, rules in SEMANTIC_RULES.items():
        score = sum(weight for predicate, weight in rules if predicate(node))
        if score > 0:
            scores[archetype] = min(round(score, 4), 1.0)
    return scores


def structural_scores(node: DocumentNode) -> Dict[Archetype, float]:
    count = len(node.children)
    for predicate, scores in STRUCTURAL_RULES:
        if predicate(count):
            return dict(scores)
    return {}


def suggest_name(display_name: str, archetype: Archetype) -> str:
    """移除非英數字元、首字大寫、數字開頭補前綴，並在缺少時補上類型後綴."""
    base = re.sub(r"[^a-zA-Z0-9]", "", display_name or "")
    if base and base[0].isdigit():
        base = f"Component{base}"
    base = base[:1].upper() + base[1:] if base else "Component"
    suffix = "Component" if archetype is Archetype.OTHER else archetype.value.capitalize()
    if suffix.lower() in base.lower():
        return base
    return f"{base}{suffix}"


def _band(score: float) -> str:
    if score > 0.7:
        return f"High confidence match ({round(score * 100)}%)"
    if score > 0.4:
        return f"Moderate confidence match ({round(score * 100)}%)"
    return "Low confidence, using default component"


class ComponentDetector:
    """對單一節點回傳一個 DetectionResult."""

    def detect(self, node: DocumentNode) -> DetectionResult:
        patterns = pattern_scores(node)
        semantics = semantic_scores(node)
        structure = structural_scores(node)

        combined: Dict[Archetype, float] = {}
        for archetype in ARCHETYPE_PRIORITY:
            if archetype not in patterns and archetype not in semantics and archetype not in structure:
                continue
            combined[archetype] = round(
                PATTERN_WEIGHT * patterns.get(archetype, 0.0)
                + SEMANTIC_WEIGHT * semantics.get(archetype, 0.0)
                + STRUCTURAL_WEIGHT * structure.get(archetype, 0.0),
                4,
            )

        best, best_score = Archetype.OTHER, 0.0
        for archetype, score in combined.items():
            if score > best_score:
                best, best_score = archetype, score

        reasoning = [_band(best_score)]
        if best is not Archetype.OTHER:
            if best in patterns:
                reasoning.append(f"Name matches {best.value} naming patterns")
            if best in semantics:
                reasoning.append(f"Node attributes are typical of a {best.value}")
            if best in structure:
                reasoning.append(f"Child count ({len(node.children)}) fits a {best.value}")

        return DetectionResult(
            archetype=best,
            confidence=best_score,
            reasoning=reasoning,
            suggested_name=suggest_name(node.name, best),
            scores={a.value: s for a, s in combined.items()},
        )


def detect_component(node: DocumentNode) -> DetectionResult:
    return ComponentDetector().detect(node)
