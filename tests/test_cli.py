"""
CLI 測試：各子命令以 main([...]) 執行，來源為本機 JSON 匯出檔或 mock Figma API。
"""
import json
from unittest.mock import MagicMock

import pytest
import requests

from figcode import cli


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """每個測試在空目錄執行，避免讀到真實 figcode.config.json 或 FIGMA_TOKEN."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FIGMA_TOKEN", raising=False)


def json_after_banner(out):
    return json.loads(out[out.index("{"):])


# ─── classify ────────────────────────────────────────────────────────────────

def test_classify_json(sample_file, capsys):
    assert cli.main(["classify", str(sample_file), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [(d["nodeId"], d["type"]) for d in data] == [("1:1", "button"), ("1:3", "card")]


def test_classify_all_nodes(sample_file, capsys):
    assert cli.main(["classify", str(sample_file), "--all", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [d["nodeId"] for d in data] == ["1:1", "1:2", "1:3", "1:4", "1:5", "1:6"]


def test_classify_text_output(sample_file, capsys):
    cli.main(["classify", str(sample_file)])
    out = capsys.readouterr().out
    assert "🔍 Classifying 2 nodes in 'Landing'" in out
    assert "Submit Button [1:1] → button" in out


def test_classify_single_node(sample_file, capsys):
    cli.main(["classify", str(sample_file), "--node", "1:4", "--json"])
    assert json.loads(capsys.readouterr().out)[0]["type"] == "image"


# ─── source errors ───────────────────────────────────────────────────────────

def test_missing_file(tmp_path, capsys):
    assert cli.main(["classify", str(tmp_path / "missing.json")]) == 1
    assert "找不到檔案" in capsys.readouterr().out


def test_no_source(capsys):
    assert cli.main(["audit"]) == 1
    assert "--file-key" in capsys.readouterr().out


def test_file_key_without_token(capsys):
    assert cli.main(["tokens", "--file-key", "KEY"]) == 1
    assert "FIGMA_TOKEN" in capsys.readouterr().out


def _fake_client(monkeypatch, fetch):
    client = MagicMock()
    client.fetch_document.side_effect = fetch
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(cli, "FigmaAPIClient", factory)
    return factory


@pytest.mark.parametrize("status, message", [(403, "403"), (404, "找不到檔案 'KEY'")])
def test_api_http_errors(monkeypatch, capsys, status, message):
    monkeypatch.setenv("FIGMA_TOKEN", "tok")
    error = requests.HTTPError("boom", response=MagicMock(status_code=status))
    _fake_client(monkeypatch, error)
    assert cli.main(["classify", "--file-key", "KEY"]) == 1
    assert message in capsys.readouterr().out


def test_api_connection_error(monkeypatch, capsys):
    monkeypatch.setenv("FIGMA_TOKEN", "tok")
    _fake_client(monkeypatch, requests.ConnectionError("offline"))
    assert cli.main(["classify", "--file-key", "KEY"]) == 1
    assert "無法連線 Figma API" in capsys.readouterr().out


def test_api_source_uses_config_file_key(monkeypatch, tmp_path, sample_document, capsys):
    (tmp_path / "figcode.config.json").write_text(
        json.dumps({"figma": {"fileKey": "FROMCFG", "personalAccessToken": "cfg-token"}}),
        encoding="utf-8",
    )
    factory = _fake_client(monkeypatch, lambda key: sample_document)
    assert cli.main(["classify", "--json"]) == 0
    factory.assert_called_once_with("cfg-token")
    factory.return_value.fetch_document.assert_called_once_with("FROMCFG")


# ─── audit ───────────────────────────────────────────────────────────────────

def test_audit_json(sample_file, capsys):
    assert cli.main(["audit", str(sample_file), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data[0]["score"] == 90
    assert data[0]["wcagCompliance"] == "AA"


def test_audit_strict_fails_on_non_compliant(tmp_path, capsys):
    faint = {
        "id": "9",
        "name": "Faint",
        "type": "FRAME",
        "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1}}],
        "children": [{
            "id": "9:1",
            "name": "Body",
            "type": "TEXT",
            "characters": "hi",
            "fills": [{"type": "SOLID", "color": {"r": 0.9, "g": 0.9, "b": 0.9}}],
        }],
    }
    path = tmp_path / "faint.json"
    path.write_text(json.dumps(faint), encoding="utf-8")
    assert cli.main(["audit", str(path)]) == 0
    assert cli.main(["audit", str(path), "--strict"]) == 1
    assert cli.main(["audit", str(path), "--strict", "--skip-contrast"]) == 0
    assert "Non-compliant" in capsys.readouterr().out


# ─── tokens ──────────────────────────────────────────────────────────────────

def test_tokens_export(sample_file, tmp_path, capsys):
    out_dir = tmp_path / "styles"
    assert cli.main(["tokens", str(sample_file), "--format", "css", "--prefix", "ds-", "-o", str(out_dir)]) == 0
    tokens_css = (out_dir / "tokens.css").read_text(encoding="utf-8")
    assert "--ds-color-primary-500: #3b82f6;" in tokens_css
    assert "✅ Exported css tokens" in capsys.readouterr().out


def test_tokens_format_from_config(sample_file, tmp_path):
    (tmp_path / "figcode.config.json").write_text(
        json.dumps({"export": {"format": "tailwind", "outputDir": "theme"}}), encoding="utf-8"
    )
    assert cli.main(["tokens", str(sample_file)]) == 0
    assert (tmp_path / "theme" / "tailwind.config.js").exists()


# ─── generate ────────────────────────────────────────────────────────────────

def test_generate_writes_components(sample_file, tmp_path, capsys):
    out_dir = tmp_path / "out"
    assert cli.main(["generate", str(sample_file), "-o", str(out_dir)]) == 0
    assert (out_dir / "SubmitButton" / "SubmitButton.tsx").exists()
    assert (out_dir / "ProductCard" / "ProductCard.types.ts").exists()
    assert (out_dir / "manifest.json").exists()
    assert "✅ Generated 2 components" in capsys.readouterr().out


def test_generate_vue_from_flags(sample_file, tmp_path):
    out_dir = tmp_path / "out"
    args = ["generate", str(sample_file), "--framework", "vue", "--styling", "plain-css",
            "--no-typescript", "--no-responsive", "-o", str(out_dir)]
    assert cli.main(args) == 0
    assert sorted(p.name for p in (out_dir / "SubmitButton").iterdir()) == ["SubmitButton.vue"]


def test_generate_options_from_config(sample_file, tmp_path):
    (tmp_path / "figcode.config.json").write_text(
        json.dumps({"generation": {"framework": "html", "styling": "plain-css", "outputDir": "site"}}),
        encoding="utf-8",
    )
    assert cli.main(["generate", str(sample_file)]) == 0
    assert (tmp_path / "site" / "SubmitButton" / "submit-button.html").exists()


def test_generate_json(sample_file, capsys):
    assert cli.main(["generate", str(sample_file), "--json"]) == 0
    data = json_after_banner(capsys.readouterr().out)
    assert data["summary"]["component_count"] == 2


def test_generate_unknown_node(sample_file, capsys):
    assert cli.main(["generate", str(sample_file), "--node", "9:9"]) == 1
    assert "Invalid input (node_id)" in capsys.readouterr().out


def test_generate_invalid_config_framework(sample_file, tmp_path, capsys):
    (tmp_path / "figcode.config.json").write_text(
        json.dumps({"generation": {"framework": "svelte"}}), encoding="utf-8"
    )
    assert cli.main(["generate", str(sample_file)]) == 1
    out = capsys.readouterr().out
    assert "generation.framework 'svelte'" in out
    assert "Invalid input (framework)" in out


# ─── misc ────────────────────────────────────────────────────────────────────

def test_watch_requires_local_file(capsys):
    assert cli.main(["watch"]) == 1
    assert "watch 需要本機 JSON 匯出檔路徑" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage: figcode" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--version"])
    assert "figcode 0.1.0" in capsys.readouterr().out
