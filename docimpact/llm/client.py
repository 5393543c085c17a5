"""
LLM Client（基于 OpenAI SDK，对接 OpenAI-compatible 网关）。

目标：
- **尽量薄**：只做协议适配与错误归类
- **统一接口**：通过 OpenAI-compatible API 访问任意模型网关
- **JSON object**：使用 response_format 约束输出，解析成 dict 交给上游校验
- **不重试**：`max_retries=0`，超时/失败直接抛给上游的兜底逻辑
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

import httpx
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from docimpact.errors import MalformedModelResponse
from docimpact.errors import ModelInvocationError

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    """OpenAI chat message 的最小结构。"""

    role: str
    content: str


def _normalize_base_url(base_url: str) -> str:
    normalized = base_url.rstrip("/")
    if normalized.endswith("/v1"):
        return normalized
    return f"{normalized}/v1"


class OpenAICompatLLMClient:
    """通过 OpenAI-compatible API 调用 LLM。"""

    def __init__(self, api_key: str, base_url: str, http_client: httpx.AsyncClient, model: str) -> None:
        """
        - api_key: LLM API key
        - base_url: OpenAI-compatible base URL（会补齐 `/v1`）
        - http_client: 复用 httpx.AsyncClient 连接池
        - model: 模型名（例如 `gpt-4o-mini`）
        """
        self._base_url = _normalize_base_url(base_url=base_url)
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=self._base_url,
            http_client=http_client,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete_json_object(
        self,
        messages: Sequence[ChatMessage],
        temperature: float,
        timeout: float,
    ) -> dict[str, object]:
        """
        请求 JSON object 输出并解析为 dict。

        失败策略：
        - 传输/超时/状态码错误 -> `ModelInvocationError`
        - 没有 choices / content 为空 / 不是合法 JSON 对象 -> `MalformedModelResponse`
        """
        try:
            logger.info(f"LLM JSON request: model={self._model}, messages={len(messages)} msg(s)")
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[m.model_dump() for m in messages],
                temperature=temperature,
                response_format={"type": "json_object"},
                timeout=timeout,
            )
        except OpenAIError as exc:
            logger.error(f"LLM API error: {exc}")
            raise ModelInvocationError(f"LLM request failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"LLM HTTP error: {exc}")
            raise ModelInvocationError(f"LLM request failed: {exc}") from exc

        choices = getattr(response, "choices", None)
        if not choices:
            logger.error("LLM response has no choices")
            raise MalformedModelResponse("Invalid LLM response structure: no choices")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not content:
            logger.error("LLM returned empty content")
            raise MalformedModelResponse("Invalid LLM response structure: missing content")

        logger.info(f"LLM JSON response: {len(content)} chars")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.error(f"Invalid JSON from LLM. Raw content: {content}")
            raise MalformedModelResponse(f"LLM did not return valid JSON: {exc}") from exc

        if not isinstance(parsed, dict):
            logger.error(f"LLM JSON is not an object: {type(parsed).__name__}")
            raise MalformedModelResponse("LLM JSON response is not an object")
        return parsed
