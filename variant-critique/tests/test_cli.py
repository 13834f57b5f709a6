import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from variant_critique.cli import main
from variant_critique.providers.base import AnalysisProvider


class StubProvider(AnalysisProvider):
    def __init__(self, text):
        self.text = text

    @property
    def name(self):
        return "stub"

    def is_available(self):
        return True

    async def analyze(self, request):
        return self.text_body(self.text)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    root = tmp_path / "variants"
    for name in ("a", "b"):
        (root / name).mkdir(parents=True)
        (root / name / "index.html").write_text(f"<h1>{name}</h1>")
    return root


def test_dry_run_lists_variants(workspace):
    result = CliRunner().invoke(main, ["--folder", str(workspace), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Variant A" in result.output
    assert "Variant B" in result.output
    assert "local-folder" in result.output


def test_dry_run_json_prints_request(workspace):
    result = CliRunner().invoke(main, ["--folder", str(workspace), "--dry-run", "--output", "json"])

    assert result.exit_code == 0, result.output
    request = json.loads(result.stdout)
    assert request["messages"][0]["content"][-1]["type"] == "text"


def test_too_few_variants(workspace):
    only_a = workspace / "a"
    result = CliRunner().invoke(main, ["--folder", str(only_a), "--provider", "local"])

    assert result.exit_code == 1
    assert "at least 2 variants" in result.output


def test_invalid_github_url_reported(workspace):
    result = CliRunner().invoke(
        main, ["--github", "https://example.com/x/y", "--folder", str(workspace), "--dry-run"]
    )

    assert result.exit_code == 0
    assert "Invalid GitHub URL" in result.output
    assert "Variant B" in result.output


def test_analysis_json_output(workspace, analysis_json, sample_analysis):
    with patch("variant_critique.cli.get_provider", return_value=StubProvider(analysis_json)):
        result = CliRunner().invoke(main, ["--folder", str(workspace), "--output", "json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == sample_analysis


def test_analysis_rich_output(workspace, analysis_json):
    with patch("variant_critique.cli.get_provider", return_value=StubProvider(analysis_json)):
        result = CliRunner().invoke(main, ["--folder", str(workspace)])

    assert result.exit_code == 0, result.output
    assert "Winner" in result.output
    assert "Raise CTA contrast" in result.output


def test_malformed_analysis_exits(workspace):
    with patch("variant_critique.cli.get_provider", return_value=StubProvider("not json")):
        result = CliRunner().invoke(main, ["--folder", str(workspace)])

    assert result.exit_code == 1
    assert "Analysis failed" in result.output


def test_malformed_github_body_does_not_stop_other_sources(workspace):
    reply = MagicMock(status_code=200, ok=True, url="https://api.github.com/repos/acme/site/pulls/7")
    reply.json.return_value = {"base": "main", "head": "feature"}

    with patch("variant_critique.github.client.requests.Session.get", return_value=reply):
        result = CliRunner().invoke(main, [
            "--github", "https://github.com/acme/site/pull/7",
            "--folder", str(workspace),
            "--dry-run",
        ])

    assert result.exit_code == 0, result.output
    assert "Unexpected GitHub API response" in result.output
    assert "Variant B" in result.output


def test_dry_run_json_uses_selected_provider_model(workspace):
    result = CliRunner().invoke(
        main, ["--folder", str(workspace), "--dry-run", "--output", "json", "--provider", "openai"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["model"] == "gpt-4o"


def test_json_output_keeps_source_errors_on_stderr(workspace):
    result = CliRunner().invoke(
        main,
        ["--github", "https://example.com/x/y", "--folder", str(workspace), "--dry-run", "--output", "json"],
    )

    assert result.exit_code == 0, result.output
    request = json.loads(result.stdout)
    assert request["messages"][0]["role"] == "user"
    assert "Invalid GitHub URL" in result.stderr
