"""
Webhook 接入层（所有平台共用）。

职责：
- 调用 provider 校验来源（token / 签名）
- 解析 payload -> `MergeRequest`（类型安全）
- 过滤掉不关心的事件
- 调用业务 handler（真正的分析流程在 orchestrator 里）
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Request

from docimpact.impact.orchestrator import MergeRequestHandler
from docimpact.scm.provider import GitProvider

logger = logging.getLogger(__name__)


def build_webhook_router(provider: GitProvider, handler: MergeRequestHandler) -> APIRouter:
    """创建 `POST /{provider}/webhook` 路由。"""
    router = APIRouter()

    @router.post(f"/{provider.name}/webhook")
    async def webhook(request: Request) -> dict[str, object]:
        logger.info(f"Received webhook: provider={provider.name}, user_agent={request.headers.get('User-Agent')}")

        # 1) 来源校验
        body = await request.body()
        if not provider.validate_auth(headers=request.headers, body=body):
            raise HTTPException(status_code=401, detail="Invalid webhook signature")

        # 2) 解析 payload（不合法直接 400，便于发现问题）
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc
        try:
            mr = provider.parse_event(headers=request.headers, payload=payload)
        except ValueError as exc:
            logger.error(f"Bad webhook payload: provider={provider.name}, error={exc}")
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        # 3) 只处理我们关心的事件
        if mr is None:
            logger.info(f"Ignored webhook event: provider={provider.name}")
            return {"status": "ignored"}

        logger.info(f"Parsed merge request: provider={provider.name}, mr_id={mr.id}, status={mr.status}")

        # 4) 交给业务 handler（由 orchestrator 装配）
        outcome = await handler(provider, mr)
        return outcome.model_dump(exclude_none=True)

    return router
