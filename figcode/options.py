"""產生選項、自訂程式碼片段與輸入驗證."""

import re
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from .document import Document
from .errors import ValidationError
from .node_finder import walk

FRAMEWORKS = ("react", "vue", "html")
STYLINGS = ("tailwind", "css-modules", "styled-components", "plain-css")


@dataclass(frozen=True)
class CustomCode:
    """使用者提供的原始片段；每個欄位對應一個固定插入點."""
    markup: str = ""
    stylesheet: str = ""
    advanced_stylesheet: str = ""
    imports: str = ""

    def is_empty(self) -> bool:
        return not any((self.markup, self.stylesheet, self.advanced_stylesheet, self.imports))


@dataclass(frozen=True)
class GenerationOptions:
    framework: str = "react"
    styling: str = "tailwind"
    typescript: bool = True
    accessibility: bool = True
    responsive: bool = True
    optimize_images: bool = False
    include_comments: bool = True
    custom_code: CustomCode = field(default_factory=CustomCode)

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def has_custom_code(self) -> bool:
        return not self.custom_code.is_empty()


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def tags_balanced(markup: str) -> bool:
    """開標籤數（含自閉合）= 閉標籤數 + 自閉合數."""
    opening = re.findall(r"<[^/!][^>]*>", markup)
    closing = re.findall(r"</[^>]+>", markup)
    self_closing = re.findall(r"<[^>]*/>", markup)
    return len(opening) == len(closing) + len(self_closing)


def braces_balanced(css: str) -> bool:
    return css.count("{") == css.count("}")


def validate_options(options: GenerationOptions) -> ValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    if options.framework not in FRAMEWORKS:
        errors.append(f"Invalid framework: {options.framework}. Supported: {', '.join(FRAMEWORKS)}")
    if options.styling not in STYLINGS:
        errors.append(f"Invalid styling option: {options.styling}. Supported: {', '.join(STYLINGS)}")

    if options.framework == "vue" and options.styling == "styled-components":
        warnings.append("Styled-components with Vue may have limited support")
    if options.framework == "html" and options.styling == "styled-components":
        warnings.append("Styled-components requires a JavaScript framework; falling back to plain CSS")
    if options.framework == "html" and options.typescript:
        warnings.append("TypeScript has no effect on plain HTML output")

    custom = options.custom_code
    if custom.markup and not tags_balanced(custom.markup):
        errors.append("Invalid markup in custom code (unbalanced tags)")
    if custom.stylesheet and not braces_balanced(custom.stylesheet):
        errors.append("Invalid CSS in custom code (unbalanced braces)")
    if custom.advanced_stylesheet and not braces_balanced(custom.advanced_stylesheet):
        errors.append("Invalid advanced CSS in custom code (unbalanced braces)")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def ensure_valid_options(options: GenerationOptions) -> ValidationResult:
    """驗證失敗直接拋 ValidationError；成功時回傳結果（含警告）."""
    result = validate_options(options)
    if not result.is_valid:
        field_name = "framework" if options.framework not in FRAMEWORKS else (
            "styling" if options.styling not in STYLINGS else "custom_code"
        )
        raise ValidationError("; ".join(result.errors), field=field_name)
    return result


def validate_document(document: Optional[Document]) -> ValidationResult:
    errors: List[str] = []
    if document is None or document.root is None:
        return ValidationResult(is_valid=False, errors=["Document is required"])

    root = document.root
    if not root.id:
        errors.append("Document root must have an ID")
    if not root.children:
        errors.append("Document appears to be empty")

    seen = set()
    duplicates = []
    for node in walk(root):
        if node.id in seen and node.id not in duplicates:
            duplicates.append(node.id)
        seen.add(node.id)
    if duplicates:
        errors.append(f"Duplicate node ids: {', '.join(duplicates)}")

    return ValidationResult(is_valid=not errors, errors=errors)


def ensure_valid_document(document: Optional[Document]) -> None:
    result = validate_document(document)
    if not result.is_valid:
        raise ValidationError("; ".join(result.errors), field="document")
