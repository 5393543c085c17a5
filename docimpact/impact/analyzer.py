"""
文档影响分析（核心流程）。

sanitize -> build prompt -> invoke model -> validate -> format suggestions

关键约定：
- `analyze` 是唯一的错误边界：任何异常都会转成 `DocumentationImpact.create_safe_default`，
  绝不把异常抛给 webhook 调用方
- sanitize 后 diff 为空时直接返回 none（不调用模型）
"""

from __future__ import annotations

import logging
from typing import Protocol

from docimpact.impact.formatter import format_suggestions
from docimpact.impact.models import DocumentationImpact
from docimpact.impact.models import MergeRequest
from docimpact.impact.prompt_builder import build_analysis_prompt
from docimpact.impact.sanitizer import DiffSanitizer
from docimpact.impact.validator import validate_impact_response

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    async def invoke(self, prompt: str) -> dict[str, object]: ...


class DocumentationAnalyzer:
    def __init__(self, model_client: ModelClient, sanitizer: DiffSanitizer | None = None) -> None:
        self._model_client = model_client
        self._sanitizer = sanitizer or DiffSanitizer()

    async def analyze(self, mr: MergeRequest, diff: str) -> DocumentationImpact:
        logger.info(f"Starting documentation analysis: mr_id={mr.id}, diff_size={len(diff)}")
        try:
            impact = await self._analyze(mr=mr, diff=diff)
        except Exception as exc:
            logger.exception(f"Analysis failed: mr_id={mr.id}, error={exc}")
            return DocumentationImpact.create_safe_default(f"AI analysis failed: {exc}")

        logger.info(
            f"Analysis completed: mr_id={mr.id}, impact_level={impact.level.value}, required={impact.required}"
        )
        return impact

    async def _analyze(self, mr: MergeRequest, diff: str) -> DocumentationImpact:
        sanitized = self._sanitizer.sanitize(diff)
        if not sanitized:
            logger.warning(f"Empty diff after sanitization: mr_id={mr.id}")
            return DocumentationImpact.no_meaningful_changes()

        prompt = build_analysis_prompt(mr=mr, diff=sanitized)
        raw = await self._model_client.invoke(prompt)
        impact = validate_impact_response(raw)
        return impact.model_copy(update={"suggestions": tuple(format_suggestions(impact.suggestions))})
