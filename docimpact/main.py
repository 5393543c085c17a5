"""
FastAPI 服务入口。

这里做三件事：
- 加载配置（严格校验环境变量）
- 组装外部依赖（HTTP Client / LLM Client / 各平台 provider）
- 装配路由（health + 各平台 webhook）

注意：
- 业务流程不写在这里（由 `impact/orchestrator.py` 负责）
- `httpx.AsyncClient` 会被复用（避免每个请求新建连接）
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from docimpact.config import AppConfig
from docimpact.config import load_config_from_env
from docimpact.github.client import GitHubClient
from docimpact.github.provider import GitHubProvider
from docimpact.gitlab.client import GitLabClient
from docimpact.gitlab.provider import GitLabProvider
from docimpact.impact.analyzer import DocumentationAnalyzer
from docimpact.impact.model_client import ImpactModelClient
from docimpact.impact.orchestrator import build_impact_orchestrator
from docimpact.impact.orchestrator import build_merge_request_handler
from docimpact.impact.sanitizer import DiffSanitizer
from docimpact.llm.client import OpenAICompatLLMClient
from docimpact.scm.provider import GitProvider
from docimpact.webhook import build_webhook_router


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_providers(config: AppConfig, http_client: httpx.AsyncClient) -> list[GitProvider]:
    providers: list[GitProvider] = []
    if config.gitlab is not None:
        gitlab_client = GitLabClient(
            base_url=str(config.gitlab.base_url),
            private_token=config.gitlab.token,
            http_client=http_client,
        )
        providers.append(GitLabProvider(client=gitlab_client, webhook_secret=config.gitlab.webhook_secret))
    if config.github is not None:
        github_client = GitHubClient(
            api_base_url=str(config.github.api_base_url),
            token=config.github.token,
            http_client=http_client,
        )
        providers.append(GitHubProvider(client=github_client, webhook_secret=config.github.webhook_secret))
    return providers


def build_app(environ: Mapping[str, str] | None = None) -> FastAPI:
    """创建并返回 FastAPI app（便于测试/复用）。"""

    # 1) 配置：缺失会直接抛错，启动失败（这是期望行为）
    config = load_config_from_env(os.environ if environ is None else environ)
    _configure_logging(config.log_level)

    # 2) 可复用的 HTTP client：供平台 API 调用使用（评论/拉 diff 的超时上限）
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))

    # 3) LLM client：OpenAI-compatible；单次调用超时由 ImpactModelClient 控制
    llm_client = OpenAICompatLLMClient(
        api_key=config.llm.api_key,
        base_url=str(config.llm.base_url),
        http_client=http_client,
        model=config.llm.model,
    )
    analyzer = DocumentationAnalyzer(
        model_client=ImpactModelClient(
            llm_client=llm_client,
            temperature=config.llm.temperature,
            timeout=config.llm.timeout_seconds,
        ),
        sanitizer=DiffSanitizer(max_size=config.analysis.max_diff_size),
    )
    guidelines_url = config.analysis.documentation_guidelines_url
    orchestrator = build_impact_orchestrator(
        analyzer=analyzer,
        documentation_guidelines_url=str(guidelines_url) if guidelines_url is not None else None,
    )
    handler = build_merge_request_handler(orchestrator)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await http_client.aclose()

    app = FastAPI(title="Documentation Impact Analyzer", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """健康检查：用于 k8s / LB 探活。"""
        return {"status": "ok"}

    for provider in build_providers(config=config, http_client=http_client):
        app.include_router(build_webhook_router(provider=provider, handler=handler))

    return app


def create_app() -> FastAPI:
    """uvicorn factory 入口：`uvicorn docimpact.main:create_app --factory`。"""
    return build_app()
