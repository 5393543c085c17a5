"""
GitLab API 客户端（外部系统连接器）。

约定：
- 这里只做“HTTP 调用 + 错误处理 + schema 校验”，不做业务决策。
- 发生错误时**直接抛错**，不要吞异常（由 orchestrator 决定怎么处理）。
"""

from __future__ import annotations

import httpx

from docimpact.gitlab.schemas import GitLabMergeRequestChanges
from docimpact.gitlab.schemas import GitLabNote


class GitLabClient:
    """最小 GitLab API client（拉 MR changes + 发 MR note）。"""

    def __init__(self, base_url: str, private_token: str, http_client: httpx.AsyncClient) -> None:
        """
        - base_url: GitLab 实例地址（不包含末尾 /）
        - private_token: PRIVATE-TOKEN（建议用专用机器人账号）
        - http_client: 复用的 httpx.AsyncClient
        """
        self._base_url = base_url.rstrip("/")
        self._private_token = private_token
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        """GitLab API 鉴权头。"""
        return {"PRIVATE-TOKEN": self._private_token}

    def merge_request_changes_url(self, project_id: str, mr_iid: str) -> str:
        return f"{self._base_url}/api/v4/projects/{project_id}/merge_requests/{mr_iid}/changes"

    async def get_merge_request_changes(self, project_id: str, mr_iid: str) -> GitLabMergeRequestChanges:
        """
        获取 MR changes（包含每个文件的 diff）。

        说明：
        - GitLab v4 API: GET /projects/:id/merge_requests/:iid/changes
        - 返回用 Pydantic 校验为 `GitLabMergeRequestChanges`
        """
        url = self.merge_request_changes_url(project_id=project_id, mr_iid=mr_iid)
        response = await self._http_client.get(url, headers=self._headers())
        if response.status_code >= 400:
            raise RuntimeError(f"GitLab API error {response.status_code}: {response.text}")
        return GitLabMergeRequestChanges.model_validate(response.json())

    async def post_merge_request_note(self, project_id: str, mr_iid: str, body: str) -> GitLabNote:
        """在 MR 下发布一条全局评论（note）。"""
        url = f"{self._base_url}/api/v4/projects/{project_id}/merge_requests/{mr_iid}/notes"
        response = await self._http_client.post(url, headers=self._headers(), json={"body": body})
        if response.status_code >= 400:
            raise RuntimeError(f"GitLab API error {response.status_code}: {response.text}")
        return GitLabNote.model_validate(response.json())
