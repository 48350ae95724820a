"""
Generator: design node → framework component.

Pipeline per node: validate options → cache lookup → classify + accessibility
(degrading locally on failure) → template dispatch → metadata → responsive
blocks → cache write. ``generate`` batches over the top-level frames of the
first page, or a single node when ``node_id`` is given.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .accessibility import AccessibilityAnalyzer, AccessibilityReport, fallback_report
from .cache import ComponentCache, make_key
from .detector import Archetype, ComponentDetector, DetectionResult, suggest_name
from .document import Document, DocumentNode
from .errors import CodeGenerationError, TemplateError, ValidationError
from .naming import kebab, sanitize_name
from .node_finder import NodeFinder, count_nodes
from .options import GenerationOptions, ensure_valid_document, ensure_valid_options
from .style_converter import StyleConverter
from .templates import RenderContext, TemplateRegistry

COMPLEXITY = {
    Archetype.BUTTON: "simple",
    Archetype.TEXT: "simple",
    Archetype.ICON: "simple",
    Archetype.INPUT: "simple",
    Archetype.CARD: "medium",
    Archetype.LAYOUT: "medium",
    Archetype.NAVIGATION: "medium",
    Archetype.OTHER: "medium",
    Archetype.IMAGE: "complex",
}
COMPLEXITY_RANK = {"simple": 1, "medium": 2, "complex": 3}

INTERACTIVE_ARCHETYPES = (Archetype.BUTTON, Archetype.INPUT)

BASE_ACCURACY = 85
FALLBACK_ACCURACY = 50
FALLBACK_WARNING = "Analysis failed - using default metadata"

MEDIA_QUERIES = {
    "mobile": "(max-width: 768px)",
    "tablet": "(min-width: 769px) and (max-width: 1024px)",
    "desktop": "(min-width: 1025px)",
}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [generator] {msg}")


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ─── results ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ComponentMetadata:
    node_id: str
    component_type: str
    complexity: str
    estimated_accuracy: int
    generation_time: float
    dependencies: Tuple[str, ...] = ()
    suggested_props: Tuple[Mapping[str, object], ...] = ()
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # 集合欄位存成 tuple 與唯讀 mapping
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(
            self, "suggested_props", tuple(MappingProxyType(dict(p)) for p in self.suggested_props)
        )
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def to_dict(self) -> dict:
        return {
            "figmaNodeId": self.node_id,
            "componentType": self.component_type,
            "complexity": self.complexity,
            "estimatedAccuracy": self.estimated_accuracy,
            "generationTime": self.generation_time,
            "dependencies": list(self.dependencies),
            "suggestedProps": [dict(p) for p in self.suggested_props],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ResponsiveBundle:
    mobile: str = ""
    tablet: str = ""
    desktop: str = ""
    has_responsive_design: bool = False

    def to_css(self) -> str:
        blocks = [block for block in (self.mobile, self.tablet, self.desktop) if block]
        return "\n\n".join(blocks) + "\n" if blocks else ""


@dataclass(frozen=True)
class GeneratedComponent:
    name: str
    node_id: str
    archetype: Archetype
    template: str
    markup: str
    stylesheet: str
    type_declarations: Optional[str]
    detection: DetectionResult
    accessibility: Optional[AccessibilityReport]
    metadata: ComponentMetadata
    responsive: ResponsiveBundle
    options: GenerationOptions

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "nodeId": self.node_id,
            "type": self.archetype.value,
            "template": self.template,
            "code": self.markup,
            "styles": self.stylesheet,
            "typeDeclarations": self.type_declarations,
            "detection": self.detection.to_dict(),
            "accessibility": self.accessibility.to_dict() if self.accessibility else None,
            "metadata": self.metadata.to_dict(),
            "responsive": asdict(self.responsive),
        }


@dataclass
class GenerationResult:
    components: List[GeneratedComponent]
    total_time: float
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "components": [component.to_dict() for component in self.components],
            "totalTime": self.total_time,
            "warnings": list(self.warnings),
            "summary": dict(self.summary),
        }


# ─── metadata helpers ────────────────────────────────────────

def component_type(archetype: Archetype, node: DocumentNode) -> str:
    if archetype in INTERACTIVE_ARCHETYPES:
        return "interactive"
    if archetype is Archetype.LAYOUT:
        return "layout"
    if len(node.children) > 3:
        return "complex"
    return "simple"


def estimate_accuracy(node: Optional[DocumentNode], options: GenerationOptions) -> int:
    accuracy = BASE_ACCURACY
    if node is not None:
        accuracy += 5
    if options.typescript:
        accuracy += 3
    if options.accessibility:
        accuracy += 5
    if options.has_custom_code:
        accuracy += 2
    return min(100, accuracy)


def dependencies_for(archetype: Archetype, options: GenerationOptions) -> List[str]:
    deps: List[str] = []
    if options.framework in ("react", "vue"):
        deps.append(options.framework)
    if options.framework == "react" and options.typescript:
        deps.append("@types/react")
    if options.framework == "vue" and options.typescript:
        deps.append("typescript")
    if options.styling == "styled-components" and options.framework == "react":
        deps.append("styled-components")
    if options.styling == "tailwind":
        deps.append("tailwindcss")
    if archetype is Archetype.IMAGE and options.framework == "react" and options.optimize_images:
        deps.append("next/image")
    return deps


def _scaled_px(value: str, factor: float, floor: float = 0) -> Optional[str]:
    if not value.endswith("px"):
        return None
    try:
        number = float(value[:-2])
    except ValueError:
        return None
    return f"{max(floor, round(number * factor, 2)):g}px"


def responsive_bundle(node: DocumentNode, class_name: str, options: GenerationOptions) -> ResponsiveBundle:
    """三段 media query；手機縮字與收窄內距，平板微調，桌機沿用原值."""
    if not options.responsive:
        return ResponsiveBundle()

    base = StyleConverter.to_css(node)
    box = node.bounding_box
    width = box.width if box else 0

    mobile: Dict[str, str] = {}
    tablet: Dict[str, str] = {}
    desktop: Dict[str, str] = {}
    if "font-size" in base:
        mobile["font-size"] = _scaled_px(base["font-size"], 0.8, floor=14) or base["font-size"]
        tablet["font-size"] = _scaled_px(base["font-size"], 0.9, floor=14) or base["font-size"]
        desktop["font-size"] = base["font-size"]
    if "padding" in base:
        mobile["padding"] = "8px"
        desktop["padding"] = base["padding"]
    if width > 768:
        mobile["width"] = "100%"
    if width > 1024:
        tablet["width"] = "100%"
    if "width" in base and width <= 1024:
        desktop["width"] = base["width"]
    if "flex-direction" in base and base["flex-direction"] == "row" and width > 768:
        mobile["flex-direction"] = "column"

    def block(label: str, props: Dict[str, str]) -> str:
        inner = StyleConverter.css_block(f".{class_name}", props, indent=1)
        css = f"@media {MEDIA_QUERIES[label]} {{\n{inner}\n}}"
        if options.include_comments:
            css = f"/* {label.capitalize()} styles for {class_name} */\n{css}"
        return css

    return ResponsiveBundle(
        mobile=block("mobile", mobile),
        tablet=block("tablet", tablet),
        desktop=block("desktop", desktop),
        has_responsive_design=True,
    )


# ─── generator ───────────────────────────────────────────────

class CodeGenerator:
    def __init__(
        self,
        cache: Optional[ComponentCache] = None,
        detector: Optional[ComponentDetector] = None,
        analyzer: Optional[AccessibilityAnalyzer] = None,
        registry: Optional[TemplateRegistry] = None,
    ):
        self.cache = cache
        self.detector = detector or ComponentDetector()
        self.analyzer = analyzer or AccessibilityAnalyzer()
        self.registry = registry or TemplateRegistry()

    def _analyze(self, node: DocumentNode, options: GenerationOptions):
        """分類 + 無障礙分析；任一失敗即整體降級，不中斷批次."""
        try:
            detection = self.detector.detect(node)
            report = self.analyzer.analyze(node, detection.archetype.value) if options.accessibility else None
            return detection, report, False
        except Exception as exc:
            _warn(f"analysis failed for node {node.id} ({node.name}): {exc}")
            detection = DetectionResult(
                archetype=Archetype.OTHER,
                confidence=0.0,
                reasoning=[FALLBACK_WARNING],
                suggested_name=suggest_name(node.name, Archetype.OTHER),
            )
            report = fallback_report(node) if options.accessibility else None
            return detection, report, True

    def generate_component(self, node: Optional[DocumentNode], options: Optional[GenerationOptions] = None) -> GeneratedComponent:
        options = options or GenerationOptions()
        if node is None:
            raise ValidationError("Node is required", field="node")
        if not node.id:
            raise ValidationError("Node must have an ID", field="node")
        checked = ensure_valid_options(options)

        key = make_key(node.id, options.to_dict())
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        started = time.perf_counter()
        detection, report, degraded = self._analyze(node, options)
        archetype = detection.archetype
        name = sanitize_name(detection.suggested_name)

        ctx = RenderContext(
            node=node,
            archetype=archetype,
            component_name=name,
            options=options,
            accessibility=report,
        )
        try:
            template, rendered = self.registry.render(ctx)
        except TemplateError as exc:
            raise CodeGenerationError(
                f"Failed to generate component '{name}': {exc.message}",
                node_id=node.id,
                archetype=archetype.value,
                cause=exc,
            ) from exc

        warnings = list(checked.warnings)
        if degraded:
            warnings.append(FALLBACK_WARNING)
            complexity, accuracy = "medium", FALLBACK_ACCURACY
        else:
            complexity = COMPLEXITY[archetype]
            accuracy = estimate_accuracy(node, options)
        if component_type(archetype, node) == "complex":
            warnings.append("Complex component may require manual adjustments")
        if report is not None:
            warnings.extend(
                f"Accessibility: {issue.message}" for issue in report.issues_of("error")
            )

        metadata = ComponentMetadata(
            node_id=node.id,
            component_type=component_type(archetype, node),
            complexity=complexity,
            estimated_accuracy=accuracy,
            generation_time=round((time.perf_counter() - started) * 1000, 2),
            dependencies=dependencies_for(archetype, options),
            suggested_props=[prop.to_dict() for prop in template.props(ctx)],
            warnings=warnings,
        )
        component = GeneratedComponent(
            name=name,
            node_id=node.id,
            archetype=archetype,
            template=template.name,
            markup=rendered.markup,
            stylesheet=rendered.stylesheet,
            type_declarations=rendered.type_declarations,
            detection=detection,
            accessibility=report,
            metadata=metadata,
            responsive=responsive_bundle(node, ctx.class_name, options),
            options=options,
        )
        if self.cache is not None:
            self.cache.set(key, component)
        return component

    def generate(
        self,
        document: Document,
        options: Optional[GenerationOptions] = None,
        node_id: Optional[str] = None,
    ) -> GenerationResult:
        options = options or GenerationOptions()
        ensure_valid_document(document)
        ensure_valid_options(options)

        finder = NodeFinder(document)
        if node_id:
            target = finder.find_node_by_id(node_id)
            if target is None:
                raise ValidationError(f"Node not found: {node_id}", field="node_id")
            targets = [target]
        else:
            targets = finder.top_level_frames()

        started = time.perf_counter()
        components: List[GeneratedComponent] = []
        warnings: List[str] = []
        for node in targets:
            component = self.generate_component(node, options)
            components.append(component)
            warnings.extend(f"{component.name}: {w}" for w in component.metadata.warnings)

        summary: Dict[str, object] = {
            "component_count": len(components),
            "average_complexity": _average_complexity(components),
            "average_accuracy": (
                round(sum(c.metadata.estimated_accuracy for c in components) / len(components), 1)
                if components else 0
            ),
            "total_nodes": count_nodes(document.root),
        }
        return GenerationResult(
            components=components,
            total_time=round((time.perf_counter() - started) * 1000, 2),
            warnings=warnings,
            summary=summary,
        )


def _average_complexity(components: List[GeneratedComponent]) -> str:
    if not components:
        return "simple"
    mean = sum(COMPLEXITY_RANK[c.metadata.complexity] for c in components) / len(components)
    rounded = int(mean + 0.5)
    return next(label for label, rank in COMPLEXITY_RANK.items() if rank == rounded)


# ─── output ──────────────────────────────────────────────────

def component_files(component: GeneratedComponent) -> Dict[str, str]:
    """檔名 → 內容；依框架與樣式系統決定副檔名."""
    options = component.options
    name = component.name
    files: Dict[str, str] = {}
    script_ext = "ts" if options.typescript else "js"

    if options.framework == "react":
        files[f"{name}.{'tsx' if options.typescript else 'jsx'}"] = component.markup
        if options.styling == "css-modules":
            files[f"{name}.module.css"] = component.stylesheet
        elif options.styling == "styled-components":
            files[f"{name}.styles.{script_ext}"] = component.stylesheet
        else:
            files[f"{name}.css"] = component.stylesheet
    elif options.framework == "vue":
        files[f"{name}.vue"] = component.markup
    else:
        files[f"{kebab(name)}.html"] = component.markup
        files[f"{kebab(name)}.css"] = component.stylesheet

    if component.type_declarations:
        files[f"{name}.types.ts"] = component.type_declarations
    if component.responsive.has_responsive_design:
        files[f"{kebab(name)}.responsive.css"] = component.responsive.to_css()
    return files


def write_components(result: GenerationResult, output_dir) -> List[Path]:
    base = Path(output_dir)
    written: List[Path] = []
    entries = []
    for component in result.components:
        folder = base / component.name
        files = component_files(component)
        for filename, content in files.items():
            path = folder / filename
            _write(path, content)
            written.append(path)
        entries.append({
            "name": component.name,
            "nodeId": component.node_id,
            "type": component.archetype.value,
            "template": component.template,
            "files": sorted(files),
            "accessibilityScore": component.accessibility.score if component.accessibility else None,
            "metadata": component.metadata.to_dict(),
        })

    manifest = {
        "source": "figcode",
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "summary": result.summary,
        "warnings": result.warnings,
        "components": entries,
    }
    manifest_path = base / "manifest.json"
    _write(manifest_path, json.dumps(manifest, indent=2, ensure_ascii=False) + "\n")
    written.append(manifest_path)
    return written
