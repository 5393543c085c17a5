"""
应用配置加载。

设计目标：
- **严格**：缺少必要环境变量就直接报错（避免“看起来跑了其实没配置好”）
- **类型安全**：使用 Pydantic 校验 URL/数值范围等，减少运行时踩坑
- **可测试**：核心加载函数接收 `environ` 显式输入，便于单元测试

约定：
- LLM 配置必填
- GitLab / GitHub 两组配置各自“要么全填、要么全不填”，且至少启用一个
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field, HttpUrl

_GITLAB_KEYS: tuple[str, ...] = ("GITLAB_BASE_URL", "GITLAB_TOKEN", "GITLAB_WEBHOOK_SECRET")
_GITHUB_KEYS: tuple[str, ...] = ("GITHUB_API_BASE_URL", "GITHUB_TOKEN", "GITHUB_WEBHOOK_SECRET")
_LLM_KEYS: tuple[str, ...] = ("LLM_BASE_URL", "LLM_API_KEY", "LLM_MODEL")


class LLMConfig(BaseModel):
    """OpenAI-compatible 模型网关配置。"""

    base_url: HttpUrl
    api_key: str
    model: str
    timeout_seconds: float = Field(default=60.0, gt=0)
    temperature: float = Field(default=0.3, ge=0, le=2)


class GitLabConfig(BaseModel):
    base_url: HttpUrl
    token: str
    webhook_secret: str


class GitHubConfig(BaseModel):
    api_base_url: HttpUrl
    token: str
    webhook_secret: str


class AnalysisConfig(BaseModel):
    """分析流水线的可调参数（都有默认值）。"""

    max_diff_size: int = Field(default=50000, gt=0)
    documentation_guidelines_url: HttpUrl | None = None


class AppConfig(BaseModel):
    """应用运行所需的配置集合。"""

    llm: LLMConfig
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    gitlab: GitLabConfig | None = None
    github: GitHubConfig | None = None
    log_level: str = "INFO"


def _is_set(environ: Mapping[str, str], key: str) -> bool:
    return key in environ and bool(environ[key])


def _load_optional_group(environ: Mapping[str, str], keys: tuple[str, ...], name: str) -> bool:
    """返回该组是否启用；部分配置直接报错。"""
    present = [key for key in keys if _is_set(environ, key)]
    if not present:
        return False
    missing = [key for key in keys if key not in present]
    if missing:
        raise ValueError(f"Incomplete {name} config, missing env vars: {', '.join(missing)}")
    return True


def load_config_from_env(environ: Mapping[str, str]) -> AppConfig:
    """
    从环境变量加载并校验配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`AppConfig`
    - **失败**：缺失/为空/类型不合法则抛 `ValueError`（Pydantic 的 ValidationError 也是 ValueError）
    """
    missing: list[str] = [key for key in _LLM_KEYS if not _is_set(environ, key)]
    if missing:
        raise ValueError(f"Missing required env vars: {', '.join(missing)}")

    gitlab_enabled = _load_optional_group(environ, _GITLAB_KEYS, "GitLab")
    github_enabled = _load_optional_group(environ, _GITHUB_KEYS, "GitHub")
    if not gitlab_enabled and not github_enabled:
        raise ValueError("At least one of GitLab or GitHub must be configured")

    llm_fields: dict[str, object] = {
        "base_url": environ["LLM_BASE_URL"],
        "api_key": environ["LLM_API_KEY"],
        "model": environ["LLM_MODEL"],
    }
    if _is_set(environ, "LLM_TIMEOUT_SECONDS"):
        llm_fields["timeout_seconds"] = environ["LLM_TIMEOUT_SECONDS"]
    if _is_set(environ, "LLM_TEMPERATURE"):
        llm_fields["temperature"] = environ["LLM_TEMPERATURE"]

    analysis_fields: dict[str, object] = {}
    if _is_set(environ, "MAX_DIFF_SIZE"):
        analysis_fields["max_diff_size"] = environ["MAX_DIFF_SIZE"]
    if _is_set(environ, "DOCUMENTATION_GUIDELINES_URL"):
        analysis_fields["documentation_guidelines_url"] = environ["DOCUMENTATION_GUIDELINES_URL"]

    # 交给 Pydantic 做类型校验（例如 URL 合法性、数值范围）
    return AppConfig(
        llm=LLMConfig.model_validate(llm_fields),
        analysis=AnalysisConfig.model_validate(analysis_fields),
        gitlab=GitLabConfig(
            base_url=environ["GITLAB_BASE_URL"],
            token=environ["GITLAB_TOKEN"],
            webhook_secret=environ["GITLAB_WEBHOOK_SECRET"],
        )
        if gitlab_enabled
        else None,
        github=GitHubConfig(
            api_base_url=environ["GITHUB_API_BASE_URL"],
            token=environ["GITHUB_TOKEN"],
            webhook_secret=environ["GITHUB_WEBHOOK_SECRET"],
        )
        if github_enabled
        else None,
        log_level=environ.get("LOG_LEVEL") or "INFO",
    )
