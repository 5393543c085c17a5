from __future__ import annotations

import pytest

from docimpact.config import load_config_from_env

_LLM = {"LLM_BASE_URL": "https://llm.example.com", "LLM_API_KEY": "k", "LLM_MODEL": "m"}
_GITLAB = {
    "GITLAB_BASE_URL": "https://gitlab.example.com",
    "GITLAB_TOKEN": "t",
    "GITLAB_WEBHOOK_SECRET": "s",
}
_GITHUB = {
    "GITHUB_API_BASE_URL": "https://api.github.com",
    "GITHUB_TOKEN": "t",
    "GITHUB_WEBHOOK_SECRET": "s",
}


def test_load_config_requires_llm() -> None:
    with pytest.raises(ValueError):
        load_config_from_env(environ={})


def test_load_config_requires_at_least_one_scm() -> None:
    with pytest.raises(ValueError):
        load_config_from_env(environ=dict(_LLM))


def test_load_config_gitlab_only_ok() -> None:
    cfg = load_config_from_env(environ={**_LLM, **_GITLAB})
    assert cfg.gitlab is not None
    assert cfg.github is None


def test_load_config_github_only_ok() -> None:
    cfg = load_config_from_env(environ={**_LLM, **_GITHUB})
    assert cfg.gitlab is None
    assert cfg.github is not None


def test_load_config_rejects_partial_gitlab() -> None:
    environ = {**_LLM, **_GITLAB}
    del environ["GITLAB_WEBHOOK_SECRET"]
    with pytest.raises(ValueError):
        load_config_from_env(environ=environ)


def test_load_config_rejects_partial_github() -> None:
    environ = {**_LLM, **_GITHUB}
    environ["GITHUB_WEBHOOK_SECRET"] = ""
    with pytest.raises(ValueError):
        load_config_from_env(environ=environ)


def test_load_config_analysis_defaults() -> None:
    cfg = load_config_from_env(environ={**_LLM, **_GITLAB})
    assert cfg.analysis.max_diff_size == 50000
    assert cfg.analysis.documentation_guidelines_url is None
    assert cfg.llm.timeout_seconds == 60.0
    assert cfg.llm.temperature == 0.3
    assert cfg.log_level == "INFO"


def test_load_config_analysis_overrides() -> None:
    environ = {
        **_LLM,
        **_GITLAB,
        "MAX_DIFF_SIZE": "1000",
        "LLM_TIMEOUT_SECONDS": "15",
        "LLM_TEMPERATURE": "0",
        "DOCUMENTATION_GUIDELINES_URL": "https://docs.example.com/guidelines",
        "LOG_LEVEL": "DEBUG",
    }
    cfg = load_config_from_env(environ=environ)
    assert cfg.analysis.max_diff_size == 1000
    assert cfg.llm.timeout_seconds == 15.0
    assert cfg.llm.temperature == 0.0
    assert str(cfg.analysis.documentation_guidelines_url) == "https://docs.example.com/guidelines"
    assert cfg.log_level == "DEBUG"


def test_load_config_rejects_invalid_max_diff_size() -> None:
    with pytest.raises(ValueError):
        load_config_from_env(environ={**_LLM, **_GITLAB, "MAX_DIFF_SIZE": "lots"})
    with pytest.raises(ValueError):
        load_config_from_env(environ={**_LLM, **_GITLAB, "MAX_DIFF_SIZE": "0"})


def test_load_config_rejects_invalid_llm_url() -> None:
    with pytest.raises(ValueError):
        load_config_from_env(environ={**_LLM, **_GITLAB, "LLM_BASE_URL": "not a url"})
