"""
共用測試資料：最小 Figma 檔案 JSON（一頁、按鈕 + 卡片 + 隱藏 frame）。
"""
import copy
import json

import pytest

from figcode.document import parse_document, parse_node

BLUE = {"r": 0.231, "g": 0.51, "b": 0.965, "a": 1}  # #3b82f6
WHITE = {"r": 1, "g": 1, "b": 1, "a": 1}
BLACK = {"r": 0, "g": 0, "b": 0, "a": 1}
NEAR_BLACK = {"r": 0.07, "g": 0.07, "b": 0.07, "a": 1}
GRAY = {"r": 0.42, "g": 0.45, "b": 0.48, "a": 1}


def solid(color, **extra):
    return {"type": "SOLID", "color": color, **extra}


def bbox(width, height, x=0, y=0):
    return {"x": x, "y": y, "width": width, "height": height}


def text_node(node_id, name, characters, size=16, weight=400, color=BLACK, **extra):
    return {
        "id": node_id,
        "name": name,
        "type": "TEXT",
        "characters": characters,
        "style": {"fontFamily": "Inter", "fontSize": size, "fontWeight": weight},
        "fills": [solid(color)],
        **extra,
    }


BUTTON = {
    "id": "1:1",
    "name": "Submit Button",
    "type": "FRAME",
    "fills": [solid(BLUE)],
    "cornerRadius": 8,
    "absoluteBoundingBox": bbox(120, 44),
    "layoutMode": "HORIZONTAL",
    "primaryAxisAlignItems": "CENTER",
    "counterAxisAlignItems": "CENTER",
    "paddingTop": 12,
    "paddingBottom": 12,
    "paddingLeft": 24,
    "paddingRight": 24,
    "children": [text_node("1:2", "Label", "Submit", weight=600, color=WHITE)],
}

CARD = {
    "id": "1:3",
    "name": "Product Card",
    "type": "FRAME",
    "fills": [solid(WHITE)],
    "cornerRadius": 12,
    "absoluteBoundingBox": bbox(320, 400, x=200),
    "layoutMode": "VERTICAL",
    "itemSpacing": 16,
    "paddingTop": 24,
    "paddingBottom": 24,
    "paddingLeft": 24,
    "paddingRight": 24,
    "effects": [{
        "type": "DROP_SHADOW",
        "visible": True,
        "radius": 6,
        "color": {"r": 0, "g": 0, "b": 0, "a": 0.1},
        "offset": {"x": 0, "y": 4},
    }],
    "children": [
        {
            "id": "1:4",
            "name": "Photo",
            "type": "RECTANGLE",
            "fills": [{"type": "IMAGE", "imageRef": "abc123"}],
            "absoluteBoundingBox": bbox(320, 200),
        },
        text_node("1:5", "Title", "Wireless Headphones", size=24, weight=700, color=NEAR_BLACK),
        text_node("1:6", "Description", "Noise cancelling", size=14, color=GRAY),
    ],
}

HIDDEN = {"id": "1:7", "name": "Draft", "type": "FRAME", "visible": False, "children": []}

SAMPLE_FILE = {
    "name": "Landing",
    "document": {
        "id": "0:0",
        "name": "Document",
        "type": "DOCUMENT",
        "children": [{
            "id": "0:1",
            "name": "Page 1",
            "type": "CANVAS",
            "children": [BUTTON, CARD, HIDDEN],
        }],
    },
}


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_FILE)


@pytest.fixture
def sample_document(sample_payload):
    return parse_document(sample_payload)


@pytest.fixture
def button_node():
    return parse_node(copy.deepcopy(BUTTON))


@pytest.fixture
def card_node():
    return parse_node(copy.deepcopy(CARD))


@pytest.fixture
def sample_file(tmp_path, sample_payload):
    path = tmp_path / "design.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path
