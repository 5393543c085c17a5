"""
文档影响分析的模型调用：固定 system prompt、低温度、JSON object、超时。
"""

from __future__ import annotations

from typing import Protocol

from docimpact.impact.prompts import SYSTEM_PROMPT
from docimpact.llm.client import ChatMessage

DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT_SECONDS = 60.0


class JSONCompletionClient(Protocol):
    async def complete_json_object(
        self,
        messages: list[ChatMessage],
        temperature: float,
        timeout: float,
    ) -> dict[str, object]: ...


class ImpactModelClient:
    def __init__(
        self,
        llm_client: JSONCompletionClient,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._llm_client = llm_client
        self._temperature = temperature
        self._timeout = timeout

    async def invoke(self, prompt: str) -> dict[str, object]:
        """返回模型的原始 JSON 对象；错误（`ModelInvocationError` / `MalformedModelResponse`）直接上抛。"""
        messages = [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        return await self._llm_client.complete_json_object(
            messages=messages,
            temperature=self._temperature,
            timeout=self._timeout,
        )
