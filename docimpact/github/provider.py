"""
GitHub 平台实现（`GitProvider`）。

- 鉴权：`X-Hub-Signature-256`（HMAC SHA256）
- 事件：只处理 `pull_request`，且 action 在白名单内
- 变更文件：webhook 里没有，额外调用 files API；失败只记 warning，交给 classifier 从 diff 推断
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from docimpact.github.adapter import build_merge_request_from_github_event
from docimpact.github.adapter import split_repository
from docimpact.github.client import GitHubClient
from docimpact.github.schemas import GitHubPullRequestWebhookEvent
from docimpact.impact.models import MergeRequest

logger = logging.getLogger(__name__)

HANDLED_ACTIONS = frozenset({"opened", "reopened", "synchronize", "ready_for_review", "edited", "closed"})


def _header(headers: Mapping[str, str], name: str) -> str | None:
    return headers.get(name) or headers.get(name.lower())


def verify_github_signature(body: bytes, signature_header: str, secret: str) -> bool:
    if not signature_header.startswith("sha256="):
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature_header)


class GitHubProvider:
    name = "github"

    def __init__(self, client: GitHubClient, webhook_secret: str) -> None:
        self._client = client
        self._webhook_secret = webhook_secret

    def validate_auth(self, headers: Mapping[str, str], body: bytes) -> bool:
        signature = _header(headers, "X-Hub-Signature-256")
        if not signature:
            logger.warning("Missing GitHub webhook signature")
            return False
        if not verify_github_signature(body=body, signature_header=signature, secret=self._webhook_secret):
            logger.warning("Invalid GitHub webhook signature")
            return False
        return True

    def parse_event(self, headers: Mapping[str, str], payload: object) -> MergeRequest | None:
        if _header(headers, "X-GitHub-Event") != "pull_request":
            return None
        try:
            event = GitHubPullRequestWebhookEvent.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(f"Invalid GitHub pull request payload: {exc}") from exc

        if event.action not in HANDLED_ACTIONS:
            return None

        owner, repo = split_repository(event.repository.full_name)
        diff_url = self._client.pull_request_url(owner, repo, event.pull_request.number)
        return build_merge_request_from_github_event(event=event, diff_url=diff_url)

    async def get_merge_request_details(self, mr: MergeRequest) -> MergeRequest:
        owner, repo = split_repository(mr.repository)
        try:
            files = await self._client.list_pull_request_files(owner, repo, int(mr.id))
        except Exception as exc:
            logger.warning(f"Failed to fetch changed files from GitHub API: pr_number={mr.id}, error={exc}")
            return mr
        return mr.model_copy(update={"changed_files": tuple(f.filename for f in files)})

    async def fetch_diff(self, mr: MergeRequest) -> str:
        owner, repo = split_repository(mr.repository)
        return await self._client.get_pull_request_diff(owner, repo, int(mr.id))

    async def post_comment(self, mr: MergeRequest, body: str) -> None:
        owner, repo = split_repository(mr.repository)
        comment = await self._client.create_issue_comment(owner, repo, int(mr.id), body)
        logger.info(f"Posted GitHub comment: pr_number={mr.id}, comment_id={comment.id}")
