"""
建议文本的 markdown 后处理（词法级，尽力而为，不是解析器）。

顺序有意义：
1. `GET /path` -> **GET** `/path`
2. 含代码特征时，把函数调用 / `$var` 包成 inline code
3. `KEY=value` 环境变量 -> inline code
4. `a.b.c` 配置键 -> inline code

每一步只改写 inline code / fenced block 之外的文本，避免重复包裹。
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

_CODE_SPAN = re.compile(r"(```.*?```|`[^`\n]+`)", re.DOTALL)

_ENDPOINT = re.compile(r"\b(GET|POST|PUT|DELETE|PATCH)\s+(/(?:[^\s`]*[^\s`.,;:!?)])?)")
_CODE_LIKE = re.compile(r"\$\w+|\w+\([^)]*\)|\bclass\s+\w+|\bfunction\s+\w+")
_FUNCTION_CALL = re.compile(r"\b(\w+\([^)`]*\))")
_VARIABLE = re.compile(r"(\$\w+)")
_ENV_ASSIGNMENT = re.compile(r"\b([A-Z][A-Z0-9_]*=(?:[^\s`]*[^\s`.,;:!?)]))")
_DOTTED_KEY = re.compile(r"(?<![\w./@:-])(\w+(?:\.\w+)+)(?![\w/@-]|\.\w)")


def _outside_code(text: str, transform: Callable[[str], str]) -> str:
    # split 带捕获组：奇数下标是代码片段
    parts = _CODE_SPAN.split(text)
    return "".join(part if i % 2 else transform(part) for i, part in enumerate(parts))


def _sub_outside_code(pattern: re.Pattern[str], repl: str, text: str) -> str:
    return _outside_code(text, lambda part: pattern.sub(repl, part))


def _has_code_like_token(text: str) -> bool:
    plain = _CODE_SPAN.sub(" ", text)
    return _CODE_LIKE.search(plain) is not None


def format_api_references(text: str) -> str:
    return _sub_outside_code(_ENDPOINT, r"**\1** `\2`", text)


def format_code_examples(text: str) -> str:
    if not _has_code_like_token(text):
        return text
    text = _sub_outside_code(_FUNCTION_CALL, r"`\1`", text)
    return _sub_outside_code(_VARIABLE, r"`\1`", text)


def format_config_examples(text: str) -> str:
    text = _sub_outside_code(_ENV_ASSIGNMENT, r"`\1`", text)
    return _sub_outside_code(_DOTTED_KEY, r"`\1`", text)


def format_suggestion(suggestion: str) -> str:
    suggestion = format_api_references(suggestion)
    suggestion = format_code_examples(suggestion)
    return format_config_examples(suggestion)


def format_suggestions(suggestions: Sequence[str]) -> list[str]:
    return [format_suggestion(s) for s in suggestions]
