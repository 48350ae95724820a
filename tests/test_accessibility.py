"""
AccessibilityAnalyzer 測試：對比度、標題層級、觸控尺寸、替代文字與合規等級。
"""
import pytest

from figcode.accessibility import (
    AccessibilityAnalyzer,
    analyze_accessibility,
    compliance_tier,
    fallback_report,
    heading_order_ok,
    infer_heading_level,
)
from figcode.document import parse_node
from figcode.errors import AnalysisError

from conftest import WHITE, bbox, solid, text_node


def panel(*children, fill=WHITE, name="Panel", **extra):
    return parse_node({
        "id": "p",
        "name": name,
        "type": "FRAME",
        "fills": [solid(fill)],
        "children": list(children),
        **extra,
    })


# ─── 對比度 ──────────────────────────────────────────────────────────────────

def test_black_on_white_is_clean():
    report = analyze_accessibility(panel(text_node("t", "Body", "Hello")))
    assert report.issues == ()
    assert report.score == 100
    assert report.compliance == "AAA"
    assert report.contrast_ratios[0].ratio == 21.0
    assert report.contrast_ratios[0].passes


def test_light_gray_text_is_error():
    gray = {"r": 0.8, "g": 0.8, "b": 0.8, "a": 1}
    report = analyze_accessibility(panel(text_node("t", "Body", "Faint", color=gray)))
    errors = report.issues_of("error")
    assert len(errors) == 1
    assert errors[0].guideline == "1.4.3 Contrast (Minimum)"
    assert report.compliance == "Non-compliant"


def test_button_label_contrast_warning(button_node):
    report = analyze_accessibility(button_node, "button")
    warnings = report.issues_of("warning")
    assert [w.element for w in warnings] == ["Label"]
    assert "4.5:1 required" in warnings[0].message
    assert report.score == 90
    assert report.compliance == "AA"
    assert "Use semantic <button> element instead of div" in report.suggestions


def test_text_without_background_assumes_white():
    node = parse_node({"id": "g", "name": "Group", "type": "GROUP",
                       "children": [text_node("t", "Body", "Hi")]})
    assert analyze_accessibility(node).contrast_ratios[0].ratio == 21.0


def test_skip_contrast():
    gray = {"r": 0.8, "g": 0.8, "b": 0.8, "a": 1}
    report = AccessibilityAnalyzer(check_contrast=False).analyze(
        panel(text_node("t", "Body", "Faint", color=gray))
    )
    assert report.issues == ()
    # 比值仍會記錄
    assert len(report.contrast_ratios) == 1


# ─── 標題 ────────────────────────────────────────────────────────────────────

def test_heading_skip_warns():
    report = analyze_accessibility(panel(
        text_node("a", "h1 Title", "Main"),
        text_node("b", "h3 Subtitle", "Sub"),
    ))
    assert any(i.message == "Heading hierarchy may not be logical" for i in report.issues)
    assert report.score == 92


def test_heading_order_ok():
    assert heading_order_ok([1, 2, 3, 2, 1])
    assert heading_order_ok([2, 2])
    assert not heading_order_ok([1, 3])


def test_infer_heading_level():
    assert infer_heading_level(parse_node({"name": "Section h4", "type": "TEXT"})) == 4
    big = parse_node({"name": "Hero", "type": "TEXT", "style": {"fontSize": 40}})
    assert infer_heading_level(big) == 1
    small = parse_node({"name": "Fine", "type": "TEXT", "style": {"fontSize": 12}})
    assert infer_heading_level(small) == 6


# ─── 觸控尺寸 / 圖片 ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("size, expected", [(20, 1), (44, 0)])
def test_touch_target(size, expected):
    node = parse_node({
        "id": "b",
        "name": "Close button",
        "type": "FRAME",
        "absoluteBoundingBox": bbox(size, size),
    })
    report = analyze_accessibility(node)
    targets = [i for i in report.issues if i.guideline == "2.5.5 Target Size"]
    assert len(targets) == expected
    assert 'Consider using a <button> element for "Close button"' in report.suggestions


def test_image_needs_alt(card_node):
    report = analyze_accessibility(card_node)
    alt = [i for i in report.issues if i.guideline == "1.1.1 Non-text Content"]
    assert [i.element for i in alt] == ["Photo"]
    assert report.score < 100


def test_suggestions_deduplicated(card_node):
    report = analyze_accessibility(card_node, "image")
    assert len(report.suggestions) == len(set(report.suggestions))


# ─── 合規等級 / 失敗 ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("score, expected", [
    (59, "Non-compliant"),
    (60, "A"),
    (79, "A"),
    (80, "AA"),
    (94, "AA"),
    (95, "AAA"),
])
def test_compliance_tier(score, expected):
    assert compliance_tier(score, []) == expected


def test_analyzer_wraps_internal_failure(button_node, monkeypatch):
    analyzer = AccessibilityAnalyzer()

    def boom(node):
        raise RuntimeError("bad tree")

    monkeypatch.setattr(analyzer, "_check_images", boom)
    with pytest.raises(AnalysisError) as exc_info:
        analyzer.analyze(button_node)
    assert exc_info.value.node_id == "1:1"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_fallback_report(button_node):
    report = fallback_report(button_node)
    assert report.score == 0
    assert report.compliance == "Non-compliant"
    assert report.to_dict()["issues"][0]["type"] == "error"


def test_report_to_dict_keys(button_node):
    data = analyze_accessibility(button_node).to_dict()
    assert set(data) == {"score", "issues", "suggestions", "wcagCompliance", "contrastRatios"}
    assert data["issues"][0]["wcagCriterion"] == "1.4.3 Contrast (Minimum)"
