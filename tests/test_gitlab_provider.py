from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from docimpact.gitlab.adapter import format_diff_from_changes
from docimpact.gitlab.adapter import map_gitlab_state
from docimpact.gitlab.client import GitLabClient
from docimpact.gitlab.provider import GitLabProvider
from docimpact.gitlab.schemas import GitLabMergeRequestChanges
from docimpact.impact.classifier import extract_files_from_diff


def _payload(action: str = "open", state: str = "opened", title: str = "Add user API") -> dict[str, object]:
    return {
        "object_kind": "merge_request",
        "user": {"username": "dev", "name": "Dev Eloper"},
        "project": {"id": 7, "web_url": "https://gitlab.example.com/group/app"},
        "object_attributes": {
            "iid": 42,
            "title": title,
            "description": "New endpoint",
            "source_branch": "feature/user-api",
            "target_branch": "main",
            "state": state,
            "url": "https://gitlab.example.com/group/app/-/merge_requests/42",
            "action": action,
        },
    }


def _changes() -> dict[str, object]:
    return {
        "changes": [
            {
                "old_path": "src/Controller/UserController.php",
                "new_path": "src/Controller/UserController.php",
                "diff": "@@ -1 +1,2 @@\n+#[Route('/api/users')]",
            },
            {"old_path": ".env", "new_path": ".env", "diff": "@@ -1 +1,2 @@\n+FEATURE_FLAG=true"},
        ]
    }


def _provider(handler: Callable[[httpx.Request], httpx.Response] | None = None) -> GitLabProvider:
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(404)))
    client = GitLabClient(
        base_url="https://gitlab.example.com/",
        private_token="glpat-test",
        http_client=httpx.AsyncClient(transport=transport),
    )
    return GitLabProvider(client=client, webhook_secret="s3cret")


def test_validate_auth() -> None:
    provider = _provider()
    assert provider.validate_auth(headers={"X-Gitlab-Token": "s3cret"}, body=b"{}")
    assert not provider.validate_auth(headers={"X-Gitlab-Token": "wrong"}, body=b"{}")
    assert not provider.validate_auth(headers={}, body=b"{}")


def test_parse_event_builds_merge_request() -> None:
    mr = _provider().parse_event(headers={}, payload=_payload())

    assert mr is not None
    assert mr.id == "42"
    assert mr.title == "Add user API"
    assert mr.description == "New endpoint"
    assert mr.author == "Dev Eloper"
    assert mr.status == "opened"
    assert mr.repository == "7"
    assert mr.source_branch == "feature/user-api"
    assert mr.url == "https://gitlab.example.com/group/app/-/merge_requests/42"
    assert mr.diff_url == "https://gitlab.example.com/api/v4/projects/7/merge_requests/42/changes"


def test_parse_event_ignores_other_kinds_and_actions() -> None:
    provider = _provider()
    assert provider.parse_event(headers={}, payload={"object_kind": "push"}) is None
    assert provider.parse_event(headers={}, payload=_payload(action="approved")) is None
    assert provider.parse_event(headers={}, payload=[1, 2]) is None


def test_parse_event_invalid_payload_raises_value_error() -> None:
    with pytest.raises(ValueError):
        _provider().parse_event(headers={}, payload={"object_kind": "merge_request", "project": {}})


@pytest.mark.parametrize(
    "state,draft,expected",
    [
        ("opened", False, "opened"),
        ("reopened", False, "opened"),
        ("closed", False, "closed"),
        ("locked", False, "closed"),
        ("merged", False, "merged"),
        ("opened", True, "draft"),
        ("weird", False, "unknown"),
        (None, False, "unknown"),
    ],
)
def test_map_gitlab_state(state: str | None, draft: bool, expected: str) -> None:
    assert map_gitlab_state(state=state, draft=draft) == expected


def test_format_diff_from_changes_adds_file_headers() -> None:
    diff = format_diff_from_changes(GitLabMergeRequestChanges.model_validate(_changes()))
    assert diff.startswith("--- a/src/Controller/UserController.php\n+++ b/src/Controller/UserController.php\n@@")
    assert "+++ b/.env\n@@ -1 +1,2 @@\n+FEATURE_FLAG=true" in diff


def test_details_and_diff_call_changes_api_once() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=_changes())

    provider = _provider(handler)
    mr = provider.parse_event(headers={}, payload=_payload())
    assert mr is not None

    detailed = asyncio.run(provider.get_merge_request_details(mr))
    diff = asyncio.run(provider.fetch_diff(detailed))

    assert detailed == mr
    assert "+FEATURE_FLAG=true" in diff
    assert len(captured) == 1
    assert str(captured[0].url) == "https://gitlab.example.com/api/v4/projects/7/merge_requests/42/changes"
    assert captured[0].headers["PRIVATE-TOKEN"] == "glpat-test"
    assert extract_files_from_diff(diff) == ["src/Controller/UserController.php", ".env"]


def test_parse_event_tolerates_minimal_project_and_changes() -> None:
    payload = _payload()
    payload["project"] = {"id": 7}
    mr = _provider().parse_event(headers={}, payload=payload)
    assert mr is not None
    assert mr.repository == "7"

    changes = GitLabMergeRequestChanges.model_validate({"changes": [{"old_path": "a.md", "new_path": "b.md"}]})
    assert format_diff_from_changes(changes) == "--- a/a.md\n+++ b/b.md\n"


def test_fetch_diff_error_propagates() -> None:
    provider = _provider(lambda request: httpx.Response(500, text="boom"))
    mr = provider.parse_event(headers={}, payload=_payload())
    assert mr is not None
    with pytest.raises(RuntimeError):
        asyncio.run(provider.fetch_diff(mr))


def test_post_comment_creates_note() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={"id": 1, "body": "ok"})

    provider = _provider(handler)
    mr = provider.parse_event(headers={}, payload=_payload())
    assert mr is not None
    asyncio.run(provider.post_comment(mr, "## report"))

    assert captured[0].method == "POST"
    assert str(captured[0].url) == "https://gitlab.example.com/api/v4/projects/7/merge_requests/42/notes"
    assert json.loads(captured[0].content) == {"body": "## report"}
