"""
变更文件分类（非 AI，必须确定性）。

按路径规则把文件归到 controllers/models/config/... 等类别，用于给 prompt 提供上下文。
规则按顺序匹配、首个命中即返回（例如先判 controller 再判更宽泛的 model）。
"""

from __future__ import annotations

import re
from collections.abc import Sequence

# 顺序即优先级
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("controllers", ("controller", "/controllers/")),
    ("models", ("model", "/models/", "entity", "/entities/")),
    ("config", ("config", ".yaml", ".yml", ".json", ".env")),
    ("templates", ("template", ".twig", ".html")),
    ("migrations", ("migration", "/migrations/")),
    ("api", ("/api/", "apicontroller")),
    ("cli", ("command", "/commands/", "console")),
    ("tests", ("test", "/tests/")),
)
OTHER_CATEGORY = "other"
CATEGORIES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (OTHER_CATEGORY,)

_DIFF_HEADER_PATTERN = re.compile(r"^(?:\+\+\+|---) [ab]/(.+)$")


def categorize_file(path: str) -> str:
    lowered = path.lower()
    for category, markers in CATEGORY_RULES:
        if any(marker in lowered for marker in markers):
            return category
    return OTHER_CATEGORY


def extract_files_from_diff(diff: str) -> list[str]:
    """从 `+++ b/<path>` / `--- a/<path>` 头里提取文件路径（去重，保持首次出现顺序）。"""
    files: list[str] = []
    seen: set[str] = set()
    for line in diff.splitlines():
        match = _DIFF_HEADER_PATTERN.match(line.rstrip("\r"))
        if match is None:
            continue
        path = match.group(1).strip()
        if path and path not in seen:
            seen.add(path)
            files.append(path)
    return files


def classify_files(paths: Sequence[str], diff: str = "") -> dict[str, list[str]]:
    """
    返回 category -> paths（所有类别都在，按固定顺序；空类别为空列表）。

    - paths 为空时从 diff 头里推断文件列表
    """
    if not paths:
        paths = extract_files_from_diff(diff)

    categories: dict[str, list[str]] = {name: [] for name in CATEGORIES}
    for path in paths:
        categories[categorize_file(path)].append(path)
    return categories
