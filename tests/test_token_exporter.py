"""
TokenExporter 測試：六種輸出格式與 prefix / 註解選項。
"""
import json

import pytest

from figcode.design_tokens import extract_design_tokens
from figcode.errors import ValidationError
from figcode.token_exporter import (
    EXPORT_FORMATS,
    ExportOptions,
    TokenExporter,
    export_tokens,
    write_exported_files,
)


@pytest.fixture
def tokens(sample_document):
    return extract_design_tokens(sample_document)


def by_name(files):
    return {f.filename: f.content for f in files}


# ─── css ─────────────────────────────────────────────────────────────────────

def test_css_files(tokens):
    files = by_name(export_tokens(tokens, "css"))
    assert list(files) == ["tokens.css", "utilities.css", "components.css"]
    assert ":root {" in files["tokens.css"]
    assert "  --color-primary-500: #3b82f6;" in files["tokens.css"]
    assert "  --spacing-md: 16px;" in files["tokens.css"]
    assert files["tokens.css"].startswith("/* Design Tokens - Generated from Figma */")
    assert ".bg-primary-500 { background-color: var(--color-primary-500); }" in files["utilities.css"]


def test_css_prefix(tokens):
    files = by_name(export_tokens(tokens, "css", prefix="ds-"))
    assert "--ds-color-primary-500: #3b82f6;" in files["tokens.css"]
    assert "var(--ds-spacing-sm)" in files["components.css"]
    assert "{p}" not in files["components.css"]


def test_css_without_comments(tokens):
    files = by_name(export_tokens(tokens, "css", include_comments=False))
    assert "/*" not in files["tokens.css"]
    assert files["tokens.css"].startswith(":root {")


# ─── 其他格式 ────────────────────────────────────────────────────────────────

def test_scss_files(tokens):
    files = by_name(export_tokens(tokens, "scss"))
    assert list(files) == ["_tokens.scss", "_mixins.scss", "_utilities.scss", "index.scss"]
    assert "$colors: (" in files["_tokens.scss"]
    assert "  primary: (" in files["_tokens.scss"]
    assert "    inter: (\"Inter\", sans-serif)," in files["_tokens.scss"]
    assert "  level-1: 0px 4px 6px 0px rgba(0, 0, 0, 0.1)," in files["_tokens.scss"]
    assert "@import 'tokens';" in files["index.scss"]


def test_js(tokens):
    content = export_tokens(tokens, "js")[0].content
    assert "export const designTokens = {" in content
    assert "export const getColor" in content


def test_json_round_trip(tokens):
    (exported,) = export_tokens(tokens, "json")
    assert exported.filename == "design-tokens.json"
    assert json.loads(exported.content) == tokens.to_dict()


def test_tailwind(tokens):
    (exported,) = export_tokens(tokens, "tailwind")
    assert exported.filename == "tailwind.config.js"
    assert "module.exports = {" in exported.content
    assert '"500": "#3b82f6"' in exported.content


def test_figma_tokens(tokens):
    data = json.loads(export_tokens(tokens, "figma-tokens")[0].content)
    assert data["global"]["colors"]["primary"]["500"] == {"value": "#3b82f6", "type": "color"}
    assert data["global"]["spacing"]["md"] == {"value": "16px"}


def test_every_format_produces_files(tokens):
    for fmt in EXPORT_FORMATS:
        assert export_tokens(tokens, fmt)


def test_invalid_format(tokens):
    with pytest.raises(ValidationError) as exc_info:
        TokenExporter(tokens, ExportOptions(format="yaml"))
    assert exc_info.value.field == "format"


def test_write_exported_files(tokens, tmp_path):
    written = write_exported_files(export_tokens(tokens, "scss"), str(tmp_path / "out"))
    assert [p.name for p in written] == ["_tokens.scss", "_mixins.scss", "_utilities.scss", "index.scss"]
    assert all(p.exists() for p in written)
