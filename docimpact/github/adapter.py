"""
GitHub -> 领域模型 adapter。

职责：
- 将 GitHub PR webhook 转为平台无关的 `MergeRequest`
"""

from __future__ import annotations

from docimpact.github.schemas import GitHubPullRequest
from docimpact.github.schemas import GitHubPullRequestWebhookEvent
from docimpact.impact.models import MergeRequest
from docimpact.impact.models import MergeRequestStatus


def map_github_state(pr: GitHubPullRequest) -> MergeRequestStatus:
    if pr.draft:
        return "draft"
    if pr.state == "open":
        return "opened"
    if pr.state == "closed":
        return "merged" if pr.merged else "closed"
    return "unknown"


def build_merge_request_from_github_event(
    event: GitHubPullRequestWebhookEvent,
    diff_url: str | None = None,
) -> MergeRequest:
    pr = event.pull_request
    return MergeRequest(
        id=str(pr.number),
        title=pr.title,
        description=pr.body or "",
        source_branch=pr.head.ref,
        target_branch=pr.base.ref,
        author=pr.user.login if pr.user is not None else "Unknown",
        url=pr.html_url,
        status=map_github_state(pr),
        diff_url=diff_url,
        repository=event.repository.full_name,
    )


def split_repository(full_name: str) -> tuple[str, str]:
    owner, sep, repo = full_name.partition("/")
    if not sep or not owner or not repo:
        raise ValueError(f"Invalid GitHub repository full_name: {full_name!r}")
    return owner, repo
