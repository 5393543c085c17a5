"""
本地 Mock OpenAI-compatible LLM server。

用途：
- 在没有真实 LLM 网关的情况下，本地跑通闭环（webhook -> 分析 -> 评论）
- 用几条粗糙的启发式规则模拟模型的 JSON 输出

启动：
  python -m docimpact.dev.mock_openai_server
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel, Field

from docimpact.llm.client import ChatMessage

_DIFF_SECTION = re.compile(r"Diff content:\n```\n(.*?)\n```", re.DOTALL)
_ROUTE_LINE = re.compile(r"^\+.*(#\[Route\(|@app\.(get|post|put|delete|patch)\(|@router\.|\.route\()", re.MULTILINE)
_ENV_LINE = re.compile(r"^\+\s*([A-Z][A-Z0-9_]*)=(\S*)", re.MULTILINE)


class ChatCompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage] = Field(default_factory=list)


def _extract_diff_from_prompt(prompt: str) -> str:
    match = _DIFF_SECTION.search(prompt)
    if match is None:
        raise ValueError("Cannot find `Diff content:` section in prompt")
    return match.group(1)


def _build_mock_impact(diff: str) -> dict[str, object]:
    if _ROUTE_LINE.search(diff):
        return {
            "requires_documentation": True,
            "impact_level": "high",
            "impacted_areas": ["api_docs"],
            "reasons": ["[MOCK] New API endpoint added"],
            "suggestions": ["Document the new endpoint in the API reference"],
        }

    env = _ENV_LINE.search(diff)
    if env is not None:
        assignment = f"{env.group(1)}={env.group(2)}"
        return {
            "requires_documentation": True,
            "impact_level": "medium",
            "impacted_areas": ["configuration"],
            "reasons": ["[MOCK] New environment variable added"],
            "suggestions": [f"Document {assignment} environment variable"],
        }

    return {
        "requires_documentation": False,
        "impact_level": "none",
        "impacted_areas": [],
        "reasons": ["[MOCK] Internal change with no user impact"],
        "suggestions": [],
    }


def _decide_mock_response(messages: Sequence[ChatMessage]) -> str:
    user_texts = [m.content for m in messages if m.role == "user"]
    if not user_texts:
        raise ValueError("Mock server expects at least one user message")
    diff = _extract_diff_from_prompt("\n".join(user_texts))
    return json.dumps(_build_mock_impact(diff))


app = FastAPI(title="Mock OpenAI-compatible LLM", version="0.1.0")


@app.post("/v1/chat/completions")
async def chat_completions(req: ChatCompletionRequest) -> dict[str, object]:
    content = _decide_mock_response(messages=req.messages)
    return {
        "id": "chatcmpl-mock",
        "object": "chat.completion",
        "created": 0,
        "model": req.model,
        "choices": [{"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": content}}],
    }


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9001)


if __name__ == "__main__":
    main()
