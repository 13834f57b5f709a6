import os

import pytest
from pydantic import ValidationError

from variant_critique.config import load_config
from variant_critique.models import Config

ENV_VARS = [
    "ANTHROPIC_API_KEY", "OPENAI_API_KEY", "OLLAMA_HOST", "OLLAMA_MODEL",
    "ANALYSIS_PROVIDER", "ANTHROPIC_MODEL", "OPENAI_MODEL", "ANALYSIS_MAX_TOKENS",
    "GITHUB_TOKEN", "GITHUB_API_URL", "MAX_FILES_PER_VARIANT", "MAX_TOTAL_FILES",
    "MAX_FILES_PER_PR_SIDE", "FETCH_CONCURRENCY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults():
    config = load_config()
    assert config.analysis_provider == "anthropic"
    assert config.max_files_per_variant == 10
    assert config.max_total_files == 30
    assert config.max_files_per_pr_side == 15
    assert config.github_api_url == "https://api.github.com"
    assert not config.has_anthropic()
    assert not config.has_github_token()


def test_env_file(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "ANTHROPIC_API_KEY=sk-ant-test\n"
        "ANALYSIS_PROVIDER=openai\n"
        "MAX_TOTAL_FILES=12\n"
        "GITHUB_TOKEN=ghp_test\n"
    )

    config = load_config(env_file)

    assert config.has_anthropic()
    assert config.analysis_provider == "openai"
    assert config.max_total_files == 12
    assert config.has_github_token()


def test_environment_overrides_env_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("MAX_FILES_PER_VARIANT=3\n")
    monkeypatch.setenv("MAX_FILES_PER_VARIANT", "7")
    assert load_config().max_files_per_variant == 7


def test_invalid_provider_rejected(monkeypatch):
    monkeypatch.setenv("ANALYSIS_PROVIDER", "gemini")
    with pytest.raises(ValidationError):
        load_config()


def test_caps_must_be_positive():
    with pytest.raises(ValidationError):
        Config(max_total_files=0)
