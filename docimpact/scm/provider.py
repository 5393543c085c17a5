"""
代码托管平台能力接口。

核心流程只依赖这个接口；每个平台（GitLab / GitHub）各自实现一份。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from docimpact.impact.models import MergeRequest


class GitProvider(Protocol):
    name: str

    def validate_auth(self, headers: Mapping[str, str], body: bytes) -> bool:
        """校验 webhook 来源（token / 签名）。"""
        ...

    def parse_event(self, headers: Mapping[str, str], payload: object) -> MergeRequest | None:
        """解析 webhook payload；不关心的事件返回 None，payload 不合法抛 ValueError。"""
        ...

    async def get_merge_request_details(self, mr: MergeRequest) -> MergeRequest:
        ...

    async def fetch_diff(self, mr: MergeRequest) -> str:
        ...

    async def post_comment(self, mr: MergeRequest, body: str) -> None:
        ...
