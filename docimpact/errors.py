"""
文档影响分析的错误分类。

约定：
- 除 `InvalidEnumValue` 外，其余错误都会在 `DocumentationAnalyzer.analyze` 顶层被捕获，
  统一转换为 safe default（不会抛给 webhook 调用方）
- “空 diff” 不是错误：analyzer 直接返回 none 级别结果
"""

from __future__ import annotations

from collections.abc import Sequence


class DocImpactError(Exception):
    """本项目所有领域错误的基类。"""


class ModelInvocationError(DocImpactError):
    """调用模型失败（网络/超时/API 状态码）。"""


class MalformedModelResponse(DocImpactError):
    """模型响应结构不对：缺少 content，或 content 不是合法 JSON 对象。"""


class MissingField(DocImpactError):
    """模型返回了 JSON，但缺少必填字段。"""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Missing required fields in AI response: {', '.join(self.fields)}")


class InvalidEnumValue(DocImpactError, ValueError):
    """impact_level 不在枚举范围内（validator 会就地修正为 medium）。"""

    def __init__(self, value: object, allowed: Sequence[str]) -> None:
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(f"Invalid value {value!r}, expected one of: {', '.join(self.allowed)}")
