"""
GitLab -> 领域模型 adapter。

职责：
- webhook event -> 平台无关的 `MergeRequest`
- MR changes -> 统一格式的 unified diff 文本
- 只做数据归一化，不做业务决策
"""

from __future__ import annotations

from docimpact.gitlab.schemas import GitLabMergeRequestChanges
from docimpact.gitlab.schemas import GitLabMergeRequestWebhookEvent
from docimpact.impact.models import MergeRequest
from docimpact.impact.models import MergeRequestStatus

_STATE_MAP: dict[str, MergeRequestStatus] = {
    "opened": "opened",
    "reopened": "opened",
    "closed": "closed",
    "locked": "closed",
    "merged": "merged",
}


def map_gitlab_state(state: str | None, draft: bool) -> MergeRequestStatus:
    if draft:
        return "draft"
    if state is None:
        return "unknown"
    return _STATE_MAP.get(state, "unknown")


def build_merge_request_from_gitlab_event(
    event: GitLabMergeRequestWebhookEvent,
    diff_url: str | None = None,
) -> MergeRequest:
    attrs = event.object_attributes
    author = "Unknown"
    if event.user is not None:
        author = event.user.name or event.user.username
    return MergeRequest(
        id=str(attrs.iid),
        title=attrs.title,
        description=attrs.description or "",
        source_branch=attrs.source_branch,
        target_branch=attrs.target_branch,
        author=author,
        url=attrs.url or "",
        status=map_gitlab_state(state=attrs.state, draft=attrs.draft or attrs.work_in_progress),
        diff_url=diff_url,
        repository=str(event.project.id),
    )


def format_diff_from_changes(changes: GitLabMergeRequestChanges) -> str:
    """每个文件补上 `--- a/` / `+++ b/` 头，保证 classifier 能从 diff 里识别路径。"""
    parts: list[str] = []
    for c in changes.changes:
        parts.append(f"--- a/{c.old_path}\n+++ b/{c.new_path}\n{c.diff}")
    return "\n".join(parts)
