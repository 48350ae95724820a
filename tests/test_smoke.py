"""
Smoke tests：驗證套件可匯入、版本與公開 API 存在。
"""


def test_import_package():
    """套件可正常匯入"""
    import figcode
    assert figcode.__version__ == "0.1.0"


def test_public_api():
    """公開 API 可從 figcode 取得"""
    from figcode import (
        __version__,
        CodeGenerator,
        ComponentCache,
        GenerationOptions,
        TemplateRegistry,
        analyze_accessibility,
        detect_component,
        export_tokens,
        extract_design_tokens,
        load_config,
        load_document,
    )
    assert __version__ == "0.1.0"
    assert callable(detect_component)
    assert callable(analyze_accessibility)
    assert callable(extract_design_tokens)
    assert callable(export_tokens)
    assert callable(load_config)
    assert callable(load_document)
    assert GenerationOptions().framework == "react"
    assert CodeGenerator and ComponentCache and TemplateRegistry


def test_end_to_end_minimal_node():
    """單一節點 JSON → 元件程式碼"""
    from figcode import CodeGenerator, parse_node

    node = parse_node({"id": "1", "name": "Hero Section", "type": "FRAME", "children": []})
    component = CodeGenerator().generate_component(node)
    assert component.name
    assert f"export const {component.name}" in component.markup
