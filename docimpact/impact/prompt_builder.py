"""
分析 prompt 拼装（纯函数，无 I/O）。

顺序固定：
1. MR 元信息
2. 文件类型分析（来自 classifier）
3. diff 原文（fenced）
4. 按非空类别挑选的示例
5. 分析清单
6. 分级标准
7. 严格的 JSON 输出约定
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from docimpact.impact import prompts
from docimpact.impact.classifier import classify_files
from docimpact.impact.models import MergeRequest


def format_changed_files(changed_files: Sequence[str]) -> str:
    if not changed_files:
        return prompts.NO_CHANGED_FILES
    return ", ".join(changed_files)


def format_file_type_analysis(categories: Mapping[str, Sequence[str]]) -> str:
    """每个非空类别一行：`- Controllers: a.py, b.py`。"""
    lines = ["**File Type Analysis:**"]
    for category, files in categories.items():
        if files:
            lines.append(f"- {category.capitalize()}: {', '.join(files)}")
    return "\n".join(lines)


def select_examples(categories: Mapping[str, Sequence[str]]) -> str:
    """只为出现过的类别附上示例；一个都没有时返回空字符串。"""
    blocks = [
        example
        for category, example in prompts.CATEGORY_EXAMPLES.items()
        if categories.get(category)
    ]
    if not blocks:
        return ""
    return prompts.EXAMPLES_HEADER + "\n\n" + "\n".join(blocks)


def format_checklist() -> str:
    questions = "\n".join(f"{i}. {q}" for i, q in enumerate(prompts.ANALYSIS_CHECKLIST, start=1))
    return f"Determine if this change requires documentation updates by analyzing:\n{questions}"


def build_analysis_prompt(mr: MergeRequest, diff: str) -> str:
    categories = classify_files(paths=mr.changed_files, diff=diff)
    sections: list[str] = [
        prompts.INTRO,
        (
            "Analyze the following merge request:\n"
            f"- Title: {mr.title}\n"
            f"- Description: {mr.description}\n"
            f"- Source Branch: {mr.source_branch}\n"
            f"- Target Branch: {mr.target_branch}\n"
            f"- Author: {mr.author}\n"
            f"- Changed Files: {format_changed_files(mr.changed_files)}"
        ),
        format_file_type_analysis(categories),
        f"Diff content:\n```\n{diff}\n```",
    ]
    examples = select_examples(categories)
    if examples:
        sections.append(examples.rstrip("\n"))
    sections.extend(
        [
            format_checklist(),
            prompts.IMPACT_RUBRIC,
            prompts.OUTPUT_FORMAT,
        ]
    )
    return "\n\n".join(sections) + "\n"
