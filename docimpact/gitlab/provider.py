"""
GitLab 平台实现（`GitProvider`）。

- 鉴权：`X-Gitlab-Token` 与配置的 webhook secret 常量时间比较
- 事件：只处理 merge_request 的 open/update/reopen/merge/close
- 变更文件：webhook 里没有；changes API 只调一次（在 fetch_diff 里），classifier 从 diff 头推断路径
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from docimpact.gitlab.adapter import build_merge_request_from_gitlab_event
from docimpact.gitlab.adapter import format_diff_from_changes
from docimpact.gitlab.client import GitLabClient
from docimpact.gitlab.schemas import GitLabMergeRequestWebhookEvent
from docimpact.impact.models import MergeRequest

logger = logging.getLogger(__name__)

HANDLED_ACTIONS = frozenset({"open", "update", "reopen", "merge", "close"})


class GitLabProvider:
    name = "gitlab"

    def __init__(self, client: GitLabClient, webhook_secret: str) -> None:
        self._client = client
        self._webhook_secret = webhook_secret

    def validate_auth(self, headers: Mapping[str, str], body: bytes) -> bool:
        token = headers.get("X-Gitlab-Token") or headers.get("x-gitlab-token")
        if not token:
            logger.warning("Missing GitLab webhook token")
            return False
        if not hmac.compare_digest(token.encode("utf-8"), self._webhook_secret.encode("utf-8")):
            logger.warning("Invalid GitLab webhook token")
            return False
        return True

    def parse_event(self, headers: Mapping[str, str], payload: object) -> MergeRequest | None:
        if not isinstance(payload, dict) or payload.get("object_kind") != "merge_request":
            return None
        try:
            event = GitLabMergeRequestWebhookEvent.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(f"Invalid GitLab merge request payload: {exc}") from exc

        action = event.object_attributes.action
        if action is not None and action not in HANDLED_ACTIONS:
            return None

        diff_url = self._client.merge_request_changes_url(
            project_id=str(event.project.id),
            mr_iid=str(event.object_attributes.iid),
        )
        return build_merge_request_from_gitlab_event(event=event, diff_url=diff_url)

    async def get_merge_request_details(self, mr: MergeRequest) -> MergeRequest:
        # 文件列表和 diff 来自同一次 changes 调用：路径由 classifier 从 `--- a/` / `+++ b/` 头读出
        return mr

    async def fetch_diff(self, mr: MergeRequest) -> str:
        changes = await self._client.get_merge_request_changes(project_id=mr.repository, mr_iid=mr.id)
        return format_diff_from_changes(changes)

    async def post_comment(self, mr: MergeRequest, body: str) -> None:
        note = await self._client.post_merge_request_note(project_id=mr.repository, mr_iid=mr.id, body=body)
        logger.info(f"Posted GitLab note: mr_id={mr.id}, note_id={note.id}")
