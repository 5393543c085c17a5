"""
文档影响分析的领域模型（Pydantic）。

用途：
- `ImpactLevel`：有序的严重程度枚举，展示名/emoji/数值集中在一张表里
- `MergeRequest`：从 webhook payload 归一化而来的 MR（平台无关，不可变）
- `DocumentationImpact`：一次分析的结果（不可变），以及“是否要评论”的判定
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from docimpact.errors import InvalidEnumValue

MergeRequestStatus = Literal["opened", "draft", "closed", "merged", "unknown"]

# 按整词匹配：避免 "swipe" 之类的标题被误判为 WIP
_DRAFT_TITLE_PATTERN = re.compile(r"\b(?:draft|wip|work in progress)\b", re.IGNORECASE)

SAFE_DEFAULT_REASON = "AI analysis failed - manual review recommended"
SAFE_DEFAULT_SUGGESTION = "Please review this change manually to determine documentation requirements."
NO_CHANGES_REASON = "No meaningful changes detected"


class _LevelInfo(NamedTuple):
    numeric_value: int
    display_name: str
    emoji: str


class ImpactLevel(str, Enum):
    """文档影响级别，按 numeric_value 全序（不是按字符串字典序）。"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def numeric_value(self) -> int:
        return _LEVEL_INFO[self].numeric_value

    @property
    def display_name(self) -> str:
        return _LEVEL_INFO[self].display_name

    @property
    def emoji(self) -> str:
        return _LEVEL_INFO[self].emoji

    @classmethod
    def parse(cls, value: object) -> ImpactLevel:
        """把模型输出的字符串解析为枚举；不认识的值抛 `InvalidEnumValue`。"""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for level in cls:
                if level.value == normalized:
                    return level
        raise InvalidEnumValue(value=value, allowed=[level.value for level in cls])

    # str 混入会带来字典序比较，这里统一改为按数值比较
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ImpactLevel):
            return NotImplemented
        return self.numeric_value < other.numeric_value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ImpactLevel):
            return NotImplemented
        return self.numeric_value <= other.numeric_value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ImpactLevel):
            return NotImplemented
        return self.numeric_value > other.numeric_value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ImpactLevel):
            return NotImplemented
        return self.numeric_value >= other.numeric_value


_LEVEL_INFO: dict[ImpactLevel, _LevelInfo] = {
    ImpactLevel.NONE: _LevelInfo(0, "No Impact", "✅"),
    ImpactLevel.LOW: _LevelInfo(1, "Low Impact", "🟡"),
    ImpactLevel.MEDIUM: _LevelInfo(2, "Medium Impact", "🟠"),
    ImpactLevel.HIGH: _LevelInfo(3, "High Impact", "🔴"),
    ImpactLevel.CRITICAL: _LevelInfo(4, "Critical Impact", "🚨"),
}


class MergeRequest(BaseModel):
    """一次 MR/PR（由各平台 adapter 从 webhook 构造，处理完即丢弃）。"""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    source_branch: str = ""
    target_branch: str = ""
    author: str = "Unknown"
    url: str = ""
    changed_files: tuple[str, ...] = ()
    status: MergeRequestStatus = "unknown"
    diff_url: str | None = None
    # GitLab project id / GitHub owner/repo，用于回调平台 API
    repository: str = ""

    def is_draft_or_wip(self) -> bool:
        return self.status == "draft" or _DRAFT_TITLE_PATTERN.search(self.title) is not None

    def is_closed(self) -> bool:
        return self.status in ("closed", "merged")

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json")


class DocumentationImpact(BaseModel):
    """
    一次分析的结论。

    - impacted_areas：语义上是集合，这里用去重后的 tuple 保持渲染顺序稳定
    - should_comment：派生判定，不存储
    """

    model_config = ConfigDict(frozen=True)

    level: ImpactLevel
    required: bool
    impacted_areas: tuple[str, ...] = Field(default_factory=tuple)
    reasons: tuple[str, ...] = Field(default_factory=tuple)
    suggestions: tuple[str, ...] = Field(default_factory=tuple)

    def should_comment(self) -> bool:
        """required 为真，或级别 >= medium，二者任一成立就评论（刻意取并集）。"""
        return self.required or self.level.numeric_value >= ImpactLevel.MEDIUM.numeric_value

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level.value,
            "required": self.required,
            "impacted_areas": list(self.impacted_areas),
            "reasons": list(self.reasons),
            "suggestions": list(self.suggestions),
            "display_name": self.level.display_name,
            "emoji": self.level.emoji,
        }

    @classmethod
    def create_safe_default(cls, reason: str = SAFE_DEFAULT_REASON) -> DocumentationImpact:
        """分析失败时唯一的兜底结果：保守地要求人工复核。"""
        return cls(
            level=ImpactLevel.MEDIUM,
            required=True,
            impacted_areas=("unknown",),
            reasons=(reason,),
            suggestions=(SAFE_DEFAULT_SUGGESTION,),
        )

    @classmethod
    def no_meaningful_changes(cls) -> DocumentationImpact:
        """sanitize 之后 diff 为空：不调用模型，直接给 none。"""
        return cls(level=ImpactLevel.NONE, required=False, reasons=(NO_CHANGES_REASON,))
