from __future__ import annotations

import asyncio

import httpx
import pytest

from docimpact.errors import MalformedModelResponse
from docimpact.errors import ModelInvocationError
from docimpact.impact.analyzer import DocumentationAnalyzer
from docimpact.impact.model_client import ImpactModelClient
from docimpact.impact.models import ImpactLevel
from docimpact.impact.models import MergeRequest
from docimpact.impact.sanitizer import DiffSanitizer
from docimpact.llm.client import OpenAICompatLLMClient


class FakeModelClient:
    """记录 prompt，并返回预设结果（或抛预设异常）。"""

    def __init__(self, result: dict[str, object] | Exception) -> None:
        self.result = result
        self.prompts: list[str] = []

    async def invoke(self, prompt: str) -> dict[str, object]:
        self.prompts.append(prompt)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _mr(changed_files: tuple[str, ...] = ()) -> MergeRequest:
    return MergeRequest(
        id="123",
        title="Change",
        description="",
        source_branch="feature",
        target_branch="main",
        author="dev",
        url="https://example.com/mr/123",
        changed_files=changed_files,
        status="opened",
    )


def _analyze(model_client: FakeModelClient, diff: str, mr: MergeRequest | None = None):
    analyzer = DocumentationAnalyzer(model_client=model_client)
    return asyncio.run(analyzer.analyze(mr=mr or _mr(), diff=diff))


def test_analyze_new_endpoint() -> None:
    model = FakeModelClient(
        {
            "requires_documentation": True,
            "impact_level": "high",
            "impacted_areas": ["api_docs"],
            "reasons": ["New API endpoint added"],
            "suggestions": [
                "Document the new POST /api/users endpoint",
                "Add authentication examples with TOKEN=abc123",
            ],
        }
    )
    diff = (
        "+++ b/src/Controller/UserController.php\n"
        "@@ -0,0 +1,4 @@\n"
        "+    #[Route('/api/users', methods: ['POST'])]\n"
        "+    public function createUser(Request $request): Response\n"
    )
    impact = _analyze(model, diff, _mr(("src/Controller/UserController.php",)))

    assert impact.required is True
    assert impact.level is ImpactLevel.HIGH
    assert "api_docs" in impact.impacted_areas
    assert "**POST** `/api/users`" in impact.suggestions[0]
    assert "`TOKEN=abc123`" in impact.suggestions[1]
    assert len(model.prompts) == 1
    assert "- Controllers: src/Controller/UserController.php" in model.prompts[0]


def test_analyze_pure_refactor() -> None:
    model = FakeModelClient(
        {
            "requires_documentation": False,
            "impact_level": "none",
            "impacted_areas": [],
            "reasons": ["Internal refactoring with no user impact"],
            "suggestions": [],
        }
    )
    diff = "+++ b/src/Service/UserService.php\n@@ -10,1 +10,1 @@\n-        $this->oldMethod();\n+        $this->newMethod();"
    impact = _analyze(model, diff)

    assert impact.required is False
    assert impact.level is ImpactLevel.NONE
    assert impact.impacted_areas == ()
    assert impact.suggestions == ()
    assert not impact.should_comment()


def test_analyze_config_addition() -> None:
    model = FakeModelClient(
        {
            "requires_documentation": True,
            "impact_level": "medium",
            "impacted_areas": ["configuration"],
            "reasons": ["New environment variable added"],
            "suggestions": ["Document FEATURE_FLAG=true environment variable"],
        }
    )
    impact = _analyze(model, "+++ b/.env\n@@ -5,0 +5,1 @@\n+FEATURE_FLAG=true", _mr((".env",)))

    assert impact.required is True
    assert impact.level is ImpactLevel.MEDIUM
    assert "configuration" in impact.impacted_areas
    assert "`FEATURE_FLAG=true`" in impact.suggestions[0]


@pytest.mark.parametrize("diff", ["", "   \n\t", "<p></p>"])
def test_analyze_empty_diff_skips_model(diff: str) -> None:
    model = FakeModelClient(RuntimeError("must not be called"))
    impact = _analyze(model, diff)

    assert model.prompts == []
    assert impact.level is ImpactLevel.NONE
    assert impact.required is False
    assert impact.reasons == ("No meaningful changes detected",)


@pytest.mark.parametrize(
    "error",
    [
        MalformedModelResponse("LLM did not return valid JSON"),
        ModelInvocationError("timeout"),
        RuntimeError("unexpected"),
    ],
)
def test_analyze_failures_return_safe_default(error: Exception) -> None:
    impact = _analyze(FakeModelClient(error), "+change")

    assert impact.level is ImpactLevel.MEDIUM
    assert impact.required is True
    assert impact.impacted_areas == ("unknown",)
    assert impact.reasons[0].startswith("AI analysis failed")
    assert str(error) in impact.reasons[0]


def test_analyze_missing_fields_return_safe_default() -> None:
    impact = _analyze(FakeModelClient({"reasons": ["no level"]}), "+change")
    assert impact.level is ImpactLevel.MEDIUM
    assert impact.impacted_areas == ("unknown",)
    assert "Missing required fields" in impact.reasons[0]


def test_analyze_invalid_level_is_recovered_not_defaulted() -> None:
    impact = _analyze(
        FakeModelClient({"requires_documentation": False, "impact_level": "extreme", "reasons": ["r"]}),
        "+change",
    )
    assert impact.level is ImpactLevel.MEDIUM
    assert impact.required is False
    assert impact.reasons == ("r",)


def test_analyze_truncates_diff_before_prompting() -> None:
    model = FakeModelClient({"requires_documentation": False, "impact_level": "none"})
    analyzer = DocumentationAnalyzer(model_client=model, sanitizer=DiffSanitizer(max_size=20))
    asyncio.run(analyzer.analyze(mr=_mr(), diff="+" + "a" * 200))
    assert "... [truncated due to size]" in model.prompts[0]
    assert "a" * 30 not in model.prompts[0]


def test_analyze_malformed_http_response_returns_safe_default() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "x",
                "object": "chat.completion",
                "created": 0,
                "model": "m",
                "choices": [{"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": "oops"}}],
            },
        )

    llm = OpenAICompatLLMClient(
        api_key="k",
        base_url="https://llm.example.com/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        model="m",
    )
    analyzer = DocumentationAnalyzer(model_client=ImpactModelClient(llm_client=llm))
    impact = asyncio.run(analyzer.analyze(mr=_mr(), diff="+change"))

    assert impact.level is ImpactLevel.MEDIUM
    assert impact.required is True
    assert impact.impacted_areas == ("unknown",)
