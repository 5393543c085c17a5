"""
GitLab Webhook / API response schemas（Pydantic）。

为什么要单独放 schema：
- GitLab 的 payload 结构复杂，直接用 dict 容易写错 key
- schema 校验失败会立刻暴露问题（比“默默 None”安全）

说明：
- 这里的字段只覆盖文档影响分析所需子集，后续可按需补充
"""

from __future__ import annotations

from pydantic import BaseModel


class GitLabUser(BaseModel):
    """Webhook 里触发事件的 user。"""

    username: str
    name: str | None = None


class GitLabProject(BaseModel):
    id: int


class GitLabMergeRequestObjectAttributes(BaseModel):
    """Merge request webhook 的 object_attributes 子结构。"""

    iid: int
    title: str = ""
    description: str | None = None
    source_branch: str = ""
    target_branch: str = ""
    state: str | None = None
    url: str | None = None
    action: str | None = None
    draft: bool = False
    work_in_progress: bool = False


class GitLabMergeRequestWebhookEvent(BaseModel):
    object_kind: str
    user: GitLabUser | None = None
    project: GitLabProject
    object_attributes: GitLabMergeRequestObjectAttributes


class GitLabMRChange(BaseModel):
    """单个文件变更（包含 diff 字符串）。"""

    old_path: str
    new_path: str
    diff: str = ""


class GitLabMergeRequestChanges(BaseModel):
    """MR changes API 返回结构。"""

    changes: list[GitLabMRChange]


class GitLabNote(BaseModel):
    """MR note 返回结构。"""

    id: int
    body: str
