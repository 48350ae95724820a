"""
figcode: Figma 設計 → 元件程式碼（Python 管線）

元件類型判斷、無障礙分析、design token 擷取與匯出，以及 React / Vue / HTML 元件產生。
"""

__version__ = "0.1.0"

from .document import Document, DocumentNode, parse_document, parse_node
from .node_finder import NodeFinder, find_node_by_id, count_nodes, get_all_nodes
from .detector import Archetype, ComponentDetector, DetectionResult, detect_component
from .accessibility import AccessibilityAnalyzer, AccessibilityReport, analyze_accessibility
from .design_tokens import DesignTokenExtractor, DesignTokens, extract_design_tokens, generate_color_scale
from .token_exporter import TokenExporter, export_tokens
from .style_converter import StyleConverter
from .options import CustomCode, GenerationOptions, validate_options
from .templates import TEMPLATES, TemplateRegistry
from .cache import ComponentCache
from .generator import CodeGenerator, GeneratedComponent, GenerationResult, write_components
from .figma_reader import FigmaAPIClient, load_document
from .config import load_config, validate_config
from .errors import AnalysisError, CodeGenerationError, FigcodeError, TemplateError, ValidationError

__all__ = [
    "__version__",
    "Document",
    "DocumentNode",
    "parse_document",
    "parse_node",
    "NodeFinder",
    "find_node_by_id",
    "count_nodes",
    "get_all_nodes",
    "Archetype",
    "ComponentDetector",
    "DetectionResult",
    "detect_component",
    "AccessibilityAnalyzer",
    "AccessibilityReport",
    "analyze_accessibility",
    "DesignTokenExtractor",
    "DesignTokens",
    "extract_design_tokens",
    "generate_color_scale",
    "TokenExporter",
    "export_tokens",
    "StyleConverter",
    "CustomCode",
    "GenerationOptions",
    "validate_options",
    "TEMPLATES",
    "TemplateRegistry",
    "ComponentCache",
    "CodeGenerator",
    "GeneratedComponent",
    "GenerationResult",
    "write_components",
    "FigmaAPIClient",
    "load_document",
    "load_config",
    "validate_config",
    "AnalysisError",
    "CodeGenerationError",
    "FigcodeError",
    "TemplateError",
    "ValidationError",
]
