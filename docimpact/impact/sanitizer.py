"""
Diff 清洗（非 AI）。

- 去掉 HTML/markup 标签：diff 之后会被拼进 prompt，也可能出现在评论里
- 超长截断：控制 token 用量与成本，并追加可见的截断标记
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIFF_SIZE = 50000
TRUNCATION_MARKER = "\n... [truncated due to size]"

# 只匹配“像标签”的片段（<tag ...>、</tag>、<!-- -->、<?...?>、<!DOCTYPE>），
# 不会误伤 `a < b and c > d` 这类比较表达式
_TAG_PATTERN = re.compile(r"<!--.*?-->|<[?!/]?[A-Za-z][^<>\n]*>|<\?.*?\?>", re.DOTALL)


def strip_tags(text: str) -> str:
    return _TAG_PATTERN.sub("", text)


class DiffSanitizer:
    """清洗 + 截断；结果为空字符串表示“没有可分析的内容”。"""

    def __init__(self, max_size: int = DEFAULT_MAX_DIFF_SIZE) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be > 0")
        self._max_size = max_size

    @property
    def max_size(self) -> int:
        return self._max_size

    def sanitize(self, diff: str) -> str:
        # 先 trim 再截断：截断结果长度恒为 max_size + len(TRUNCATION_MARKER)
        cleaned = strip_tags(diff).strip()
        if len(cleaned) > self._max_size:
            logger.info(f"Truncating large diff: original_size={len(cleaned)}, max_size={self._max_size}")
            return cleaned[: self._max_size] + TRUNCATION_MARKER
        return cleaned
