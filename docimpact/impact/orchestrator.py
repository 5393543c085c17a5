"""
Webhook 事件编排（流程由工程代码控制，LLM 只负责分析）。

单次事件的流程：
skip(draft/WIP/closed) -> details -> fetch diff -> analyze -> should_comment? -> render -> post

约定：
- 每个请求独立、无共享可变状态
- 拉 diff 失败按“空 diff”处理（跳过）
- 发评论失败只记日志：webhook 的契约是“收到并处理了事件”，而不是“通知成功”
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import BaseModel

from docimpact.impact.analyzer import DocumentationAnalyzer
from docimpact.impact.models import MergeRequest
from docimpact.impact.renderer import render_documentation_impact
from docimpact.scm.provider import GitProvider

logger = logging.getLogger(__name__)


class WebhookOutcome(BaseModel):
    """返回给 webhook 调用方的处理结果。"""

    status: str
    reason: str | None = None
    impact_level: str | None = None
    commented: bool = False


MergeRequestHandler = Callable[[GitProvider, MergeRequest], Awaitable[WebhookOutcome]]


@dataclass(frozen=True)
class ImpactOrchestrator:
    """Orchestrator 运行时依赖集合。"""

    analyzer: DocumentationAnalyzer
    documentation_guidelines_url: str | None = None


def build_impact_orchestrator(
    analyzer: DocumentationAnalyzer,
    documentation_guidelines_url: str | None = None,
) -> ImpactOrchestrator:
    return ImpactOrchestrator(analyzer=analyzer, documentation_guidelines_url=documentation_guidelines_url)


def should_analyze(mr: MergeRequest) -> bool:
    return not (mr.is_draft_or_wip() or mr.is_closed())


async def handle_merge_request(
    orchestrator: ImpactOrchestrator,
    provider: GitProvider,
    mr: MergeRequest,
) -> WebhookOutcome:
    if not should_analyze(mr):
        logger.info(f"Skipping analysis: provider={provider.name}, mr_id={mr.id}, reason=draft, WIP, or closed")
        return WebhookOutcome(status="skipped", reason="Draft, WIP, or closed")

    try:
        mr = await provider.get_merge_request_details(mr)
        diff = await provider.fetch_diff(mr)
    except Exception as exc:
        logger.error(f"Failed to fetch merge request diff: provider={provider.name}, mr_id={mr.id}, error={exc}")
        diff = ""

    if not diff.strip():
        logger.warning(f"Empty diff received: provider={provider.name}, mr_id={mr.id}")
        return WebhookOutcome(status="skipped", reason="Empty diff")

    impact = await orchestrator.analyzer.analyze(mr=mr, diff=diff)
    should_comment = impact.should_comment()
    logger.info(
        f"Analysis result: provider={provider.name}, mr_id={mr.id}, impact_level={impact.level.value}, "
        f"required={impact.required}, should_comment={should_comment}"
    )
    if not should_comment:
        return WebhookOutcome(status="processed", impact_level=impact.level.value)

    body = render_documentation_impact(
        impact=impact,
        mr=mr,
        documentation_guidelines_url=orchestrator.documentation_guidelines_url,
    )
    try:
        await provider.post_comment(mr, body)
    except Exception as exc:
        logger.error(f"Failed to post comment: provider={provider.name}, mr_id={mr.id}, error={exc}")
        return WebhookOutcome(status="processed", impact_level=impact.level.value, commented=False)

    logger.info(f"Comment posted: provider={provider.name}, mr_id={mr.id}")
    return WebhookOutcome(status="processed", impact_level=impact.level.value, commented=True)


def build_merge_request_handler(orchestrator: ImpactOrchestrator) -> MergeRequestHandler:
    """把 orchestrator 绑定成 webhook 路由可直接调用的 handler。"""

    async def handle(provider: GitProvider, mr: MergeRequest) -> WebhookOutcome:
        return await handle_merge_request(orchestrator=orchestrator, provider=provider, mr=mr)

    return handle
