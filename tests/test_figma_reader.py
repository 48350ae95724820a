"""
FigmaAPIClient / load_document 測試（以 mock session 取代網路）。
"""
import json
from unittest.mock import MagicMock

import pytest
import requests

from figcode.figma_reader import FigmaAPIClient, load_document


def make_client(payload):
    client = FigmaAPIClient("tok", timeout=5)
    response = MagicMock()
    response.json.return_value = payload
    client.session = MagicMock()
    client.session.get.return_value = response
    return client, response


def test_session_headers():
    client = FigmaAPIClient("secret")
    assert client.session.headers["X-Figma-Token"] == "secret"
    assert client.timeout == 30.0


def test_get_file(sample_payload):
    client, response = make_client(sample_payload)
    assert client.get_file("KEY", ["1:1", "1:3"]) == sample_payload
    client.session.get.assert_called_once_with(
        "https://api.figma.com/v1/files/KEY", params={"ids": "1:1,1:3"}, timeout=5
    )
    response.raise_for_status.assert_called_once()


def test_get_images_params():
    client, _ = make_client({"images": {}})
    client.get_images("KEY", ["1:1"], format="svg", scale=1)
    client.session.get.assert_called_once_with(
        "https://api.figma.com/v1/images/KEY",
        params={"ids": "1:1", "format": "svg", "scale": 1},
        timeout=5,
    )


def test_fetch_document(sample_payload):
    client, _ = make_client(sample_payload)
    document = client.fetch_document("KEY")
    assert document.name == "Landing"
    assert document.root.type == "DOCUMENT"


def test_fetch_node(sample_payload):
    card = sample_payload["document"]["children"][0]["children"][1]
    client, _ = make_client({"name": "Landing", "nodes": {"1:3": {"document": card}}})
    document = client.fetch_node("KEY", "1:3")
    assert document.root.id == "1:3"
    assert document.name == "Landing"


def test_fetch_node_missing():
    client, _ = make_client({"nodes": {"1:3": None}})
    with pytest.raises(KeyError):
        client.fetch_node("KEY", "1:3")


def test_http_error_propagates():
    client, response = make_client({})
    response.raise_for_status.side_effect = requests.HTTPError("404")
    with pytest.raises(requests.HTTPError):
        client.get_file("KEY")


# ─── 本機檔案 ────────────────────────────────────────────────────────────────

def test_load_document(sample_file):
    document = load_document(sample_file)
    assert document.name == "Landing"
    assert [c.id for c in document.root.children[0].children] == ["1:1", "1:3"]


def test_load_document_rejects_non_object(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_document(path)
