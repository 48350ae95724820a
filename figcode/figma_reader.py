"""
Figma 文件來源

REST API 唯讀封裝，以及本機 JSON 匯出檔載入；兩者都回傳 Document。
"""

import json
from pathlib import Path
from typing import Optional

import requests

from .document import Document, parse_document


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = 30.0):
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_file(self, file_key: str, node_ids: Optional[list] = None) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}"
        params = {}
        if node_ids:
            params["ids"] = ",".join(node_ids)
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_file_nodes(self, file_key: str, node_ids: list) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}/nodes"
        params = {"ids": ",".join(node_ids)}
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_images(self, file_key: str, node_ids: list, format: str = "png", scale: int = 2) -> dict:
        url = f"{self.BASE_URL}/images/{file_key}"
        params = {"ids": ",".join(node_ids), "format": format, "scale": scale}
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def fetch_document(self, file_key: str) -> Document:
        return parse_document(self.get_file(file_key))

    def fetch_node(self, file_key: str, node_id: str) -> Document:
        """只抓單一節點子樹；回應格式為 {"nodes": {id: {"document": ...}}}."""
        payload = self.get_file_nodes(file_key, [node_id])
        entry = (payload.get("nodes") or {}).get(node_id)
        if not entry or not entry.get("document"):
            raise KeyError(f"Node '{node_id}' not found in file '{file_key}'")
        document = parse_document(entry)
        document.name = payload.get("name", document.name)
        return document


def load_document(path) -> Document:
    """讀取本機 Figma JSON 匯出（完整檔案回應或單一節點）."""
    with open(Path(path), "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"'{path}' is not a Figma JSON object")
    return parse_document(payload)
