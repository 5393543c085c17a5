"""
GitHub API 客户端（外部系统连接器）。

约定：
- 这里只做 HTTP 调用 + 错误处理 + schema 校验
- 出错直接抛错（不要吞），由上游决定是否降级
"""

from __future__ import annotations

import httpx

from docimpact.github.schemas import GitHubIssueComment
from docimpact.github.schemas import GitHubPullRequestFile

USER_AGENT = "Documentation-Impact-Analyzer/1.0"


class GitHubClient:
    """最小 GitHub API client（PR files / PR diff / issue comment）。"""

    def __init__(self, api_base_url: str, token: str, http_client: httpx.AsyncClient) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._http_client = http_client

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": USER_AGENT,
        }

    def pull_request_url(self, owner: str, repo: str, pull_number: int) -> str:
        return f"{self._api_base_url}/repos/{owner}/{repo}/pulls/{pull_number}"

    async def list_pull_request_files(self, owner: str, repo: str, pull_number: int) -> list[GitHubPullRequestFile]:
        """
        拉取 PR 的变更文件列表。

        注意：GitHub API 有分页；这里会拉取全部文件。
        """
        per_page = 100
        page = 1
        all_items: list[GitHubPullRequestFile] = []
        while True:
            url = f"{self.pull_request_url(owner, repo, pull_number)}/files"
            response = await self._http_client.get(
                url,
                headers=self._headers(),
                params={"per_page": per_page, "page": page},
            )
            if response.status_code >= 400:
                raise RuntimeError(f"GitHub API error {response.status_code}: {response.text}")
            data = response.json()
            if not isinstance(data, list):
                raise RuntimeError(f"Unexpected GitHub response shape for PR files: {data}")
            items = [GitHubPullRequestFile.model_validate(x) for x in data]
            all_items.extend(items)
            if len(items) < per_page:
                break
            page += 1
        return all_items

    async def get_pull_request_diff(self, owner: str, repo: str, pull_number: int) -> str:
        """用 diff media type 拿整个 PR 的 unified diff。"""
        response = await self._http_client.get(
            self.pull_request_url(owner, repo, pull_number),
            headers=self._headers(accept="application/vnd.github.diff"),
        )
        if response.status_code >= 400:
            raise RuntimeError(f"GitHub API error {response.status_code}: {response.text}")
        return response.text

    async def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> GitHubIssueComment:
        """PR 在 GitHub 里也是 issue：评论走 issues comments 接口。"""
        url = f"{self._api_base_url}/repos/{owner}/{repo}/issues/{issue_number}/comments"
        response = await self._http_client.post(url, headers=self._headers(), json={"body": body})
        if response.status_code >= 400:
            raise RuntimeError(f"GitHub API error {response.status_code}: {response.text}")
        return GitHubIssueComment.model_validate(response.json())
