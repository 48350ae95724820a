#!/usr/bin/env python3
"""
figcode CLI: Figma 設計 → 元件程式碼

  figcode classify design.json             # 元件類型判斷
  figcode audit design.json                # 無障礙檢查
  figcode tokens design.json --format scss # 匯出 design tokens
  figcode generate design.json --framework vue --styling plain-css
  figcode generate --file-key KEY          # 直接從 Figma API 讀取
  figcode watch design.json                # 匯出檔變更時自動重新產生
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Optional

import requests
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from figcode import __version__

from .accessibility import AccessibilityAnalyzer
from .config import DEFAULT_CONFIG_PATH, cache_from_config, figma_token, load_config, options_from_config
from .design_tokens import extract_design_tokens
from .detector import ComponentDetector
from .document import Document
from .errors import CodeGenerationError, ValidationError
from .figma_reader import FigmaAPIClient, load_document
from .generator import CodeGenerator, write_components
from .node_finder import NodeFinder, walk
from .options import FRAMEWORKS, STYLINGS
from .token_exporter import EXPORT_FORMATS, export_tokens, write_exported_files

_WATCHED_EXTENSIONS = (".json",)


# ─── source ──────────────────────────────────────────────────

def load_source(args, config: dict) -> Optional[Document]:
    """本機 JSON 匯出優先；否則用 --file-key / figma.fileKey 走 Figma API."""
    if getattr(args, "source", None):
        path = Path(args.source)
        if not path.exists():
            print(f"❌ 找不到檔案 '{path}'")
            return None
        try:
            return load_document(path)
        except ValueError as e:
            print(f"❌ 無法解析 '{path}'：{e}")
            return None

    figma_cfg = config.get("figma", {}) if isinstance(config.get("figma"), dict) else {}
    file_key = getattr(args, "file_key", None) or figma_cfg.get("fileKey")
    token = figma_token(config)
    if not file_key:
        print("❌ 請指定本機 JSON 檔，或使用 --file-key / config 的 figma.fileKey 設定 Figma 檔案 key。")
        return None
    if not token:
        print(f"❌ 請設定 FIGMA_TOKEN 環境變數，或在 {DEFAULT_CONFIG_PATH} 的 figma.personalAccessToken 設定。")
        print("   取得方式：Figma → Settings → Personal access tokens → 新增")
        return None

    print(f"📥 Fetching from Figma: {file_key}")
    client = FigmaAPIClient(token)
    try:
        return client.fetch_document(file_key)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        if status == 403:
            print("❌ Figma API 403：Token 無效或已過期，請重新產生 FIGMA_TOKEN。")
        elif status == 404:
            print(f"❌ Figma API 404：找不到檔案 '{file_key}'，請確認 file key 是否正確。")
        else:
            print(f"❌ Figma API 錯誤：{e}")
    except requests.RequestException as e:
        print(f"❌ 無法連線 Figma API：{e}")
    return None


def _targets(document: Document, node_id: Optional[str], every: bool = False):
    finder = NodeFinder(document)
    if node_id:
        node = finder.find_node_by_id(node_id)
        if node is None:
            print(f"❌ 找不到節點 '{node_id}'")
            return []
        return [node]
    if every:
        frames = finder.top_level_frames()
        return [node for frame in frames for node in walk(frame)]
    return finder.top_level_frames()


def _dump(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


# ─── commands ────────────────────────────────────────────────

def cmd_classify(args, config: dict) -> int:
    document = load_source(args, config)
    if document is None:
        return 1
    detector = ComponentDetector()
    results = [(node, detector.detect(node)) for node in _targets(document, args.node, args.all)]
    if args.json:
        _dump([{"nodeId": node.id, "name": node.name, **result.to_dict()} for node, result in results])
        return 0
    print(f"🔍 Classifying {len(results)} nodes in '{document.name}'")
    for node, result in results:
        print(f"   {node.name} [{node.id}] → {result.archetype.value} "
              f"({round(result.confidence * 100)}%) as {result.suggested_name}")
        for line in result.reasoning:
            print(f"      - {line}")
    return 0


def cmd_audit(args, config: dict) -> int:
    document = load_source(args, config)
    if document is None:
        return 1
    detector = ComponentDetector()
    analyzer = AccessibilityAnalyzer(check_contrast=not args.skip_contrast)
    reports = []
    for node in _targets(document, args.node):
        archetype = detector.detect(node).archetype.value
        reports.append((node, analyzer.analyze(node, archetype)))

    if args.json:
        _dump([{"nodeId": node.id, "name": node.name, **report.to_dict()} for node, report in reports])
        return 0
    print(f"♿ Accessibility audit for '{document.name}'")
    for node, report in reports:
        status = "✅" if report.compliance in ("AA", "AAA") else "⚠️ "
        print(f"   {status} {node.name}: score {report.score} ({report.compliance})")
        for issue in report.issues:
            print(f"      [{issue.severity}] {issue.message} → {issue.fix}")
    failing = [node for node, report in reports if report.compliance == "Non-compliant"]
    return 1 if failing and args.strict else 0


def cmd_tokens(args, config: dict) -> int:
    document = load_source(args, config)
    if document is None:
        return 1
    export_cfg = config.get("export", {}) if isinstance(config.get("export"), dict) else {}
    fmt = args.format or export_cfg.get("format") or "css"
    output_dir = args.output or export_cfg.get("outputDir") or "./tokens"
    prefix = args.prefix if args.prefix is not None else export_cfg.get("prefix", "")

    tokens = extract_design_tokens(document)
    try:
        files = export_tokens(tokens, format=fmt, include_comments=not args.no_comments, prefix=prefix or "")
    except ValidationError as e:
        print(f"❌ {e.message}")
        return 1
    for path in write_exported_files(files, output_dir):
        print(f"   📄 {path}")
    print(f"✅ Exported {fmt} tokens to {output_dir}")
    return 0


def _options_from_args(args, config: dict):
    return options_from_config(
        config,
        framework=args.framework,
        styling=args.styling,
        typescript=False if args.no_typescript else None,
        accessibility=False if args.no_accessibility else None,
        responsive=False if args.no_responsive else None,
        optimize_images=True if args.optimize_images else None,
    )


def run_generate(args, config: dict, generator: Optional[CodeGenerator] = None) -> int:
    document = load_source(args, config)
    if document is None:
        return 1
    generation_cfg = config.get("generation", {}) if isinstance(config.get("generation"), dict) else {}
    output_dir = args.output or generation_cfg.get("outputDir") or "./generated"
    generator = generator or CodeGenerator()
    options = _options_from_args(args, config)

    print(f"🚀 Generating {options.framework} / {options.styling} components from '{document.name}'")
    try:
        result = generator.generate(document, options, node_id=args.node)
    except ValidationError as e:
        print(f"❌ Invalid input ({e.field}): {e.message}")
        return 1
    except CodeGenerationError as e:
        print(f"❌ Generate failed for node {e.node_id} ({e.archetype}): {e.message}")
        return 1

    if args.json:
        _dump(result.to_dict())
        return 0
    for component in result.components:
        print(f"   ✅ {component.name} ({component.archetype.value}, template {component.template}, "
              f"accuracy {component.metadata.estimated_accuracy}%)")
    for warning in result.warnings:
        print(f"   ⚠️  {warning}")
    written = write_components(result, output_dir)
    summary = result.summary
    print(f"✅ Generated {summary['component_count']} components ({len(written)} files) to {output_dir} "
          f"in {result.total_time}ms")
    return 0


def cmd_generate(args, config: dict) -> int:
    cache = cache_from_config(config)
    try:
        return run_generate(args, config, CodeGenerator(cache=cache))
    finally:
        if cache is not None:
            cache.close()


class ChangeHandler(FileSystemEventHandler):
    """設計匯出檔變更事件處理器，帶 debounce 防抖。"""

    def __init__(self, callback, target: Optional[str] = None, debounce: float = 1.0):
        self.callback = callback
        self.target = str(Path(target).resolve()) if target else None
        self.last_trigger = 0.0
        self.debounce_seconds = debounce

    def on_modified(self, event):
        if event.is_directory:
            return
        if not event.src_path.endswith(_WATCHED_EXTENSIONS):
            return
        if self.target and str(Path(event.src_path).resolve()) != self.target:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 File changed: {event.src_path}")
        self.callback()


def cmd_watch(args, config: dict) -> int:
    """Watch: 監聽本機設計匯出檔並自動重新產生."""
    if not args.source:
        print("❌ watch 需要本機 JSON 匯出檔路徑。")
        return 1
    source = Path(args.source)
    cache = cache_from_config(config)
    generator = CodeGenerator(cache=cache)
    print(f"👀 Watching '{source}' for changes...")
    print("   Press Ctrl+C to stop.")

    def regenerate():
        if cache is not None:
            cache.clear()
        run_generate(args, config, generator)

    regenerate()

    event_handler = ChangeHandler(regenerate, target=str(source), debounce=args.debounce)
    observer = Observer()
    observer.schedule(event_handler, path=str(source.resolve().parent), recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
        observer.stop()
    finally:
        observer.join()
        if cache is not None:
            cache.close()
    return 0


# ─── argparse ────────────────────────────────────────────────

def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("source", nargs="?", help="Local Figma JSON export")
    p.add_argument("--file-key", help="Figma file key (uses FIGMA_TOKEN)")
    p.add_argument("--node", help="Only process this node id")


def _add_generation_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--framework", choices=FRAMEWORKS, help="Output framework")
    p.add_argument("--styling", choices=STYLINGS, help="Styling system")
    p.add_argument("--no-typescript", action="store_true", help="Emit plain JavaScript")
    p.add_argument("--no-accessibility", action="store_true", help="Skip accessibility analysis")
    p.add_argument("--no-responsive", action="store_true", help="Skip responsive media queries")
    p.add_argument("--optimize-images", action="store_true", help="Use next/image for React images")
    p.add_argument("--output", "-o", help="Output directory")
    p.add_argument("--json", action="store_true", help="Print the generation result as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figcode",
        description="figcode: Figma design → component code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    classify_p = sub.add_parser("classify", help="Detect component archetypes",
        epilog="Examples:\n  figcode classify design.json\n  figcode classify design.json --all --json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(classify_p)
    classify_p.add_argument("--all", action="store_true", help="Classify every node, not only top-level frames")
    classify_p.add_argument("--json", action="store_true", help="Print results as JSON")

    audit_p = sub.add_parser("audit", help="Accessibility audit",
        epilog="Examples:\n  figcode audit design.json\n  figcode audit --file-key ABC123 --strict",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(audit_p)
    audit_p.add_argument("--skip-contrast", action="store_true", help="Skip colour contrast checks")
    audit_p.add_argument("--strict", action="store_true", help="Exit 1 when any frame is non-compliant")
    audit_p.add_argument("--json", action="store_true", help="Print reports as JSON")

    tokens_p = sub.add_parser("tokens", help="Extract and export design tokens",
        epilog="Examples:\n  figcode tokens design.json --format scss -o ./styles\n  figcode tokens design.json --format tailwind",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(tokens_p)
    tokens_p.add_argument("--format", choices=EXPORT_FORMATS, help="Export format")
    tokens_p.add_argument("--prefix", help="Variable name prefix")
    tokens_p.add_argument("--no-comments", action="store_true", help="Omit section comments")
    tokens_p.add_argument("--output", "-o", help="Output directory")

    gen_p = sub.add_parser("generate", help="Figma → components",
        epilog="Examples:\n  figcode generate design.json -o ./out\n  figcode generate --file-key ABC123 --framework vue --styling css-modules",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(gen_p)
    _add_generation_args(gen_p)

    watch_p = sub.add_parser("watch", help="Regenerate when the JSON export changes",
        epilog="Examples:\n  figcode watch design.json -o ./out",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(watch_p)
    _add_generation_args(watch_p)
    watch_p.add_argument("--debounce", type=float, default=1.0, help="Seconds between regenerations")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "classify":
        return cmd_classify(args, config)
    if args.command == "audit":
        return cmd_audit(args, config)
    if args.command == "tokens":
        return cmd_tokens(args, config)
    if args.command == "generate":
        return cmd_generate(args, config)
    if args.command == "watch":
        return cmd_watch(args, config)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
