"""
GitHub Webhook / API response schemas（Pydantic）。

说明：
- 字段只覆盖文档影响分析需要的子集（PR webhook + list files）。
"""

from __future__ import annotations

from pydantic import BaseModel


class GitHubUser(BaseModel):
    login: str


class GitHubRepository(BaseModel):
    full_name: str


class GitHubPullRequestHead(BaseModel):
    ref: str


class GitHubPullRequestBase(BaseModel):
    ref: str


class GitHubPullRequest(BaseModel):
    number: int
    title: str = ""
    body: str | None = None
    state: str = "open"
    draft: bool = False
    merged: bool = False
    html_url: str = ""
    user: GitHubUser | None = None
    head: GitHubPullRequestHead
    base: GitHubPullRequestBase


class GitHubPullRequestWebhookEvent(BaseModel):
    """
    GitHub `pull_request` webhook event（最小结构）。

    action 不做枚举限制：不关心的 action 在 provider 里直接忽略。
    """

    action: str
    pull_request: GitHubPullRequest
    repository: GitHubRepository


class GitHubPullRequestFile(BaseModel):
    """PR 文件列表 item（GET /pulls/{pull_number}/files）。"""

    filename: str


class GitHubIssueComment(BaseModel):
    id: int
    html_url: str | None = None
