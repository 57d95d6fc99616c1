"""例外類別 — 管線各階段的錯誤分類."""

from typing import Optional


class DesignToCodeError(Exception):
    """所有 design_to_code 錯誤的基底類別."""


class ConfigError(DesignToCodeError):
    """設定值無法解析（例如 temperature 不是數字、缺少 API key）。"""


class DocumentFetchError(DesignToCodeError):
    """無法取得設計文件（網路錯誤、token 無效、檔案不存在）。"""


class StyleFetchError(DesignToCodeError):
    """無法取得節點的樣式資訊。"""


class InvalidDocumentError(DesignToCodeError):
    """文件樹格式錯誤（根節點不存在、缺少 type、children 不是 list 等）。"""


class ArtifactWriteError(DesignToCodeError):
    """寫出產生的檔案失敗。"""


class ComponentError(DesignToCodeError):
    """處理單一組件時失敗；保留組件資訊與原始例外。"""

    def __init__(self, component, cause: Optional[BaseException] = None, step: str = "process"):
        self.component = component
        self.cause = cause
        self.step = step
        super().__init__(self._format())

    def _format(self) -> str:
        ident = f"{self.component.name} ({self.component.id})"
        msg = f"Failed to {self.step} component {ident}"
        if self.cause is not None:
            msg += f": {self.cause}"
        return msg


class GenerationBackendError(ComponentError):
    """文字生成後端呼叫失敗；`cause` 為後端拋出的原始例外，未經改寫。"""

    def __init__(self, component, cause: Optional[BaseException] = None):
        super().__init__(component, cause, step="generate")
