"""
無障礙分析

從 100 分開始依發現扣分：文字對比度、標題層級、互動元件觸控尺寸、圖片替代文字。
分數下限 0；有 error 或低於 60 為 Non-compliant，<80 為 A，<95 為 AA，其餘 AAA。
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .color_utils import Color, contrast_ratio, meets_contrast
from .constants import MIN_TOUCH_TARGET
from .document import DocumentNode
from .errors import AnalysisError
from .node_finder import walk, walk_with_parents

WHITE = Color(1.0, 1.0, 1.0)

INTERACTIVE_KEYWORDS = ("button", "link", "input", "select", "checkbox", "radio", "switch", "tab")
HEADING_KEYWORDS = ("title", "heading", "header", "h1", "h2", "h3", "h4", "h5", "h6")
IMAGE_KEYWORDS = ("image", "img", "photo", "picture", "icon", "logo", "avatar")
IMAGE_NODE_TYPES = ("RECTANGLE", "ELLIPSE", "VECTOR")

# 扣分
PENALTY_CONTRAST_ERROR = 15
PENALTY_CONTRAST_WARNING = 10
PENALTY_CONTRAST_INFO = 2
PENALTY_HEADING_ORDER = 8
PENALTY_TOUCH_TARGET = 5
PENALTY_IMAGE_ALT = 5

GENERAL_SUGGESTIONS = (
    "Ensure keyboard navigation is supported for all interactive elements",
    "Test with screen readers and keyboard-only navigation",
    "Verify focus indicators are visible and clear",
    "Consider users with motion sensitivity - provide reduced motion options",
)

ARCHETYPE_SUGGESTIONS = {
    "button": (
        "Use semantic <button> element instead of div",
        "Implement proper focus states",
        "Support Enter and Space key activation",
    ),
    "input": (
        "Associate input with descriptive label using htmlFor/id",
        "Implement proper error messaging",
        "Support autocomplete attributes",
    ),
    "card": (
        "Consider using semantic HTML elements or ARIA landmarks for card content",
    ),
    "navigation": (
        "Use nav element and proper list structure",
        "Implement skip links for keyboard users",
        "Use aria-current for active states",
    ),
    "image": (
        "Provide descriptive alt text for informative images",
        "Use empty alt=\"\" for decorative images",
    ),
}


@dataclass(frozen=True)
class AccessibilityIssue:
    severity: str  # info / warning / error
    message: str
    element: str
    fix: str
    guideline: str

    def to_dict(self) -> dict:
        return {
            "type": self.severity,
            "message": self.message,
            "element": self.element,
            "fix": self.fix,
            "wcagCriterion": self.guideline,
        }


@dataclass(frozen=True)
class ContrastRecord:
    element: str
    ratio: float
    passes: bool


@dataclass(frozen=True)
class AccessibilityReport:
    score: int
    issues: Tuple[AccessibilityIssue, ...] = ()
    suggestions: Tuple[str, ...] = ()
    compliance: str = "AAA"
    contrast_ratios: Tuple[ContrastRecord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "suggestions", tuple(self.suggestions))
        object.__setattr__(self, "contrast_ratios", tuple(self.contrast_ratios))

    def issues_of(self, severity: str) -> List[AccessibilityIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "issues": [issue.to_dict() for issue in self.issues],
            "suggestions": list(self.suggestions),
            "wcagCompliance": self.compliance,
            "contrastRatios": [
                {"element": r.element, "ratio": r.ratio, "passes": r.passes}
                for r in self.contrast_ratios
            ],
        }


# ─── helpers ─────────────────────────────────────────────────

def text_color(node: DocumentNode) -> Optional[Color]:
    if node.style:
        for paint in node.style.fills:
            if paint.is_solid:
                return paint.color
    fill = node.first_solid_fill()
    return fill.color if fill else None


def background_color(ancestors: Tuple[DocumentNode, ...]) -> Color:
    """最近一層有背景色或實色填色的祖先；都沒有則視為白底."""
    for ancestor in reversed(ancestors):
        if ancestor.background_color is not None:
            return ancestor.background_color
        fill = ancestor.first_solid_fill()
        if fill:
            return fill.color
    return WHITE


def is_large_text(node: DocumentNode) -> bool:
    if not node.style:
        return False
    size, weight = node.style.font_size, node.style.font_weight
    return size >= 24 or (size >= 19 and weight >= 700)


def is_heading(node: DocumentNode) -> bool:
    if not node.is_text:
        return False
    name = node.name.lower()
    if any(keyword in name for keyword in HEADING_KEYWORDS):
        return True
    return bool(node.style and node.style.font_size > 20 and node.style.font_weight >= 600)


def infer_heading_level(node: DocumentNode) -> int:
    name = node.name.lower()
    for level in range(1, 7):
        if f"h{level}" in name:
            return level
    size = node.style.font_size if node.style else 16
    if size >= 32:
        return 1
    if size >= 24:
        return 2
    if size >= 20:
        return 3
    if size >= 18:
        return 4
    if size >= 16:
        return 5
    return 6


def heading_order_ok(levels: List[int]) -> bool:
    """相鄰標題層級不可往下跳超過一級."""
    return all(current - previous <= 1 for previous, current in zip(levels, levels[1:]))


def is_interactive(node: DocumentNode) -> bool:
    name = node.name.lower()
    return any(keyword in name for keyword in INTERACTIVE_KEYWORDS)


def is_image_like(node: DocumentNode) -> bool:
    if node.type not in IMAGE_NODE_TYPES:
        return False
    name = node.name.lower()
    if any(keyword in name for keyword in IMAGE_KEYWORDS):
        return True
    return bool(node.fills) and node.fills[0].type == "IMAGE"


def compliance_tier(score: int, issues: List[AccessibilityIssue]) -> str:
    if any(issue.severity == "error" for issue in issues) or score < 60:
        return "Non-compliant"
    if score < 80:
        return "A"
    if score < 95:
        return "AA"
    return "AAA"


# ─── analyzer ────────────────────────────────────────────────

class AccessibilityAnalyzer:
    def __init__(self, check_contrast: bool = True, check_semantics: bool = True):
        self.check_contrast = check_contrast
        self.check_semantics = check_semantics

    def analyze(self, node: DocumentNode, archetype: Optional[str] = None) -> AccessibilityReport:
        """分析節點子樹；內部失敗一律包成 AnalysisError 往上拋."""
        try:
            return self._analyze(node, archetype)
        except AnalysisError:
            raise
        except Exception as exc:
            raise AnalysisError(f"Accessibility analysis failed: {exc}", node_id=node.id) from exc

    def _analyze(self, node: DocumentNode, archetype: Optional[str]) -> AccessibilityReport:
        issues: List[AccessibilityIssue] = []
        suggestions: List[str] = []
        penalty = 0

        ratios = self._contrast_ratios(node)
        if self.check_contrast:
            found, cost = self._check_contrast(node)
            issues.extend(found)
            penalty += cost

        if self.check_semantics:
            found, hints, cost = self._check_headings(node)
            issues.extend(found)
            suggestions.extend(hints)
            penalty += cost

        found, hints, cost = self._check_interactive(node)
        issues.extend(found)
        suggestions.extend(hints)
        penalty += cost

        found, hints, cost = self._check_images(node)
        issues.extend(found)
        suggestions.extend(hints)
        penalty += cost

        if archetype:
            key = getattr(archetype, "value", archetype)
            suggestions.extend(ARCHETYPE_SUGGESTIONS.get(key, ()))
        suggestions.extend(GENERAL_SUGGESTIONS)

        score = max(0, 100 - penalty)
        return AccessibilityReport(
            score=score,
            issues=issues,
            suggestions=_dedupe(suggestions),
            compliance=compliance_tier(score, issues),
            contrast_ratios=ratios,
        )

    def _text_pairs(self, node: DocumentNode):
        for current, ancestors in walk_with_parents(node):
            if not current.is_text:
                continue
            fg = text_color(current)
            if fg is None:
                continue
            yield current, contrast_ratio(fg, background_color(ancestors))

    def _check_contrast(self, node: DocumentNode) -> Tuple[List[AccessibilityIssue], int]:
        issues = []
        cost = 0
        for text_node, ratio in self._text_pairs(node):
            large = is_large_text(text_node)
            aa, aaa = meets_contrast(ratio, large)
            if not aa:
                severity = "error" if ratio < 3.0 else "warning"
                required = "3.0" if large else "4.5"
                issues.append(AccessibilityIssue(
                    severity=severity,
                    message=(
                        f"Text contrast ratio {ratio:.2f}:1 does not meet WCAG AA "
                        f"standards ({required}:1 required)"
                    ),
                    element=text_node.name,
                    fix="Increase contrast between text and background colors",
                    guideline="1.4.3 Contrast (Minimum)",
                ))
                cost += PENALTY_CONTRAST_ERROR if severity == "error" else PENALTY_CONTRAST_WARNING
            elif not aaa:
                issues.append(AccessibilityIssue(
                    severity="info",
                    message=f"Text contrast ratio {ratio:.2f}:1 meets AA but not AAA standards",
                    element=text_node.name,
                    fix="Consider increasing contrast for better accessibility",
                    guideline="1.4.6 Contrast (Enhanced)",
                ))
                cost += PENALTY_CONTRAST_INFO
        return issues, cost

    def _contrast_ratios(self, node: DocumentNode) -> List[ContrastRecord]:
        return [
            ContrastRecord(
                element=text_node.name,
                ratio=round(ratio, 2),
                passes=meets_contrast(ratio, is_large_text(text_node))[0],
            )
            for text_node, ratio in self._text_pairs(node)
        ]

    def _check_headings(self, node: DocumentNode):
        headings = [n for n in walk(node) if is_heading(n)]
        if not headings:
            return [], [], 0
        issues = []
        cost = 0
        levels = [infer_heading_level(h) for h in headings]
        if not heading_order_ok(levels):
            issues.append(AccessibilityIssue(
                severity="warning",
                message="Heading hierarchy may not be logical",
                element="Multiple headings",
                fix="Ensure headings follow a logical order (h1, h2, h3, etc.)",
                guideline="1.3.1 Info and Relationships",
            ))
            cost += PENALTY_HEADING_ORDER
        return issues, ["Review heading hierarchy for logical structure"], cost

    def _check_interactive(self, node: DocumentNode):
        issues = []
        suggestions = []
        cost = 0
        elements = [n for n in walk(node) if is_interactive(n)]
        for element in elements:
            name = element.name.lower()
            if not element.is_text and any(k in name for k in ("button", "btn", "submit")):
                suggestions.append(f'Consider using a <button> element for "{element.name}"')
            elif any(k in name for k in ("link", "anchor", "href")):
                suggestions.append(f'Consider using an <a> element for "{element.name}"')

            box = element.bounding_box
            if box is None:
                continue
            if box.width < MIN_TOUCH_TARGET or box.height < MIN_TOUCH_TARGET:
                issues.append(AccessibilityIssue(
                    severity="warning",
                    message=(
                        f'Touch target "{element.name}" is smaller than recommended '
                        f"({box.width:g}x{box.height:g}px)"
                    ),
                    element=element.name,
                    fix=f"Increase touch target size to at least {MIN_TOUCH_TARGET}x{MIN_TOUCH_TARGET} pixels",
                    guideline="2.5.5 Target Size",
                ))
                cost += PENALTY_TOUCH_TARGET
        if elements:
            suggestions.extend([
                "Ensure all interactive elements are keyboard accessible",
                "Provide clear focus indicators",
                "Add appropriate ARIA labels where needed",
            ])
        return issues, suggestions, cost

    def _check_images(self, node: DocumentNode):
        issues = []
        cost = 0
        images = [n for n in walk(node) if is_image_like(n)]
        for image in images:
            issues.append(AccessibilityIssue(
                severity="warning",
                message=f'Image "{image.name}" needs alt text',
                element=image.name,
                fix="Add descriptive alt text or mark as decorative if appropriate",
                guideline="1.1.1 Non-text Content",
            ))
            cost += PENALTY_IMAGE_ALT
        suggestions = []
        if images:
            suggestions = [
                "Provide descriptive alt text for informative images",
                "Use empty alt=\"\" for decorative images",
                "Consider using figure and figcaption for complex images",
            ]
        return issues, suggestions, cost


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def analyze_accessibility(node: DocumentNode, archetype: Optional[str] = None) -> AccessibilityReport:
    return AccessibilityAnalyzer().analyze(node, archetype)


def fallback_report(node: DocumentNode) -> AccessibilityReport:
    """分析失敗時的降級報告."""
    return AccessibilityReport(
        score=0,
        issues=[AccessibilityIssue(
            severity="error",
            message="Failed to analyze accessibility",
            element=node.name,
            fix="Check if the component structure is valid",
            guideline="General",
        )],
        suggestions=["Review component structure and try again"],
        compliance="Non-compliant",
    )
