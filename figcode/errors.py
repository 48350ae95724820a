"""產生流程的錯誤型別."""

from typing import Optional


class FigcodeError(Exception):
    """所有 figcode 例外的基底."""


class ValidationError(FigcodeError):
    """文件或產生選項不合法，在任何產生工作開始前拋出."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class CodeGenerationError(FigcodeError):
    """樣板或分派步驟失敗，帶節點 id 與元件類型供重試或回報."""

    def __init__(
        self,
        message: str,
        node_id: Optional[str] = None,
        archetype: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.node_id = node_id
        self.archetype = archetype
        self.cause = cause

    def to_dict(self) -> dict:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "node_id": self.node_id,
            "archetype": self.archetype,
            "cause": str(self.cause) if self.cause else None,
        }


class TemplateError(CodeGenerationError):
    """指定樣板無法渲染輸入."""

    def __init__(
        self,
        message: str,
        template_name: str,
        node_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, node_id=node_id, archetype=template_name, cause=cause)
        self.template_name = template_name


class AnalysisError(FigcodeError):
    """分類或無障礙分析內部失敗；呼叫端應降級為保守預設值."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.node_id = node_id
