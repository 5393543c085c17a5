"""
评论渲染（确定性输出，不依赖 LLM）。

把 `DocumentationImpact` 拼成一段 markdown，直接作为 MR note / PR comment 的正文。
"""

from __future__ import annotations

import re

from docimpact.impact.models import DocumentationImpact
from docimpact.impact.models import ImpactLevel
from docimpact.impact.models import MergeRequest

_FENCED_BLOCK = re.compile(r"```(\w+)?\n(.*?)\n```", re.DOTALL)

ACTION_REQUIRED_LEVELS = (ImpactLevel.HIGH, ImpactLevel.CRITICAL)

FOOTER = (
    "*🤖 This analysis was generated automatically by the Documentation Impact Analyzer.*  \n"
    "*Questions about this analysis? Check the [documentation guidelines]({url}) "
    "or contact the documentation team.*"
)


def humanize_area(area: str) -> str:
    """`api_docs` -> `Api Docs`"""
    return area.replace("_", " ").title()


def normalize_code_fences(text: str) -> str:
    """fenced block 统一为独立成段，缺省语言标记为 `text`。"""

    def _replace(match: re.Match[str]) -> str:
        language = match.group(1) or "text"
        code = match.group(2).strip()
        return f"\n```{language}\n{code}\n```\n"

    return _FENCED_BLOCK.sub(_replace, text)


def render_code_example(language: str, code: str, description: str | None = None) -> str:
    block = f"```{language}\n{code}\n```"
    if description:
        return f"{description}\n\n{block}"
    return block


def _render_suggestion(suggestion: str) -> str:
    # 带代码块的建议原样输出（不加列表符号，否则 fenced block 会被缩进破坏）
    if "```" in suggestion:
        return normalize_code_fences(suggestion).strip("\n")
    return f"- {suggestion}"


def _render_merge_request_line(mr: MergeRequest) -> str:
    title = mr.title or f"#{mr.id}"
    if mr.url:
        return f"**Merge Request:** [{title}]({mr.url})"
    return f"**Merge Request:** {title}"


def render_documentation_impact(
    impact: DocumentationImpact,
    mr: MergeRequest,
    documentation_guidelines_url: str | None = None,
) -> str:
    level = impact.level
    lines: list[str] = []
    lines.append(f"## {level.emoji} Documentation Impact Analysis")
    lines.append("")
    lines.append(_render_merge_request_line(mr))
    lines.append("")
    lines.append(f"**Impact Level:** {level.display_name}  ")
    lines.append(f"**Documentation Required:** {'Yes' if impact.required else 'No'}")
    lines.append("")

    if impact.impacted_areas:
        lines.append("### 📋 Impacted Areas")
        lines.extend(f"- {humanize_area(area)}" for area in impact.impacted_areas)
        lines.append("")

    if impact.reasons:
        lines.append("### 🔍 Analysis Results")
        lines.extend(f"- {reason}" for reason in impact.reasons)
        lines.append("")

    if impact.suggestions:
        lines.append("### 💡 Documentation Suggestions")
        lines.extend(_render_suggestion(s) for s in impact.suggestions)
        lines.append("")

    if level in ACTION_REQUIRED_LEVELS:
        lines.append("### ⚠️ Action Required")
        lines.append(
            f"This change has **{level.value}** documentation impact. "
            "Please prioritize updating the documentation before merging."
        )
        lines.append("")

    lines.append("---")
    lines.append(FOOTER.format(url=documentation_guidelines_url or "#"))
    return "\n".join(lines)
