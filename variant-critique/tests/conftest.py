"""Shared fixtures: an in-memory GitHub client and sample data"""

import json

import pytest

from variant_critique.errors import BranchNotFound, PullRequestNotFound
from variant_critique.models import BranchRef, Config, PullRequestInfo, TreeEntry


class FakeGitHubClient:
    """
    Stands in for GitHubClient.

    trees:    branch -> list of paths (all blobs)
    contents: (path, ref) -> text, or an exception instance to raise
    pulls:    number -> PullRequestInfo
    """

    def __init__(self, trees=None, contents=None, pulls=None):
        self.trees = trees or {}
        self.contents = contents or {}
        self.pulls = pulls or {}
        self.content_calls = []

    def get_tree(self, owner, repo, branch):
        if branch not in self.trees:
            raise BranchNotFound(owner, repo, branch)
        tree = self.trees[branch]
        if isinstance(tree, Exception):
            raise tree
        return [
            entry if isinstance(entry, TreeEntry) else TreeEntry(path=entry)
            for entry in tree
        ]

    def get_file_content(self, owner, repo, path, ref):
        self.content_calls.append((path, ref))
        value = self.contents.get((path, ref), f"<!-- {path}@{ref} -->")
        if isinstance(value, Exception):
            raise value
        return value

    def get_pull_request(self, owner, repo, number):
        if number not in self.pulls:
            raise PullRequestNotFound(owner, repo, number)
        return self.pulls[number]


def make_pull(number=42, base="main", head="feature/new-hero", title="New hero"):
    return PullRequestInfo(
        number=number,
        title=title,
        base=BranchRef(branch=base, sha="b" * 40, label=f"Base ({base})"),
        head=BranchRef(branch=head, sha="h" * 40, label=f"PR #{number} ({head})"),
    )


SAMPLE_ANALYSIS = {
    "variants": [
        {
            "id": 1,
            "name": "Variant A",
            "score": 72,
            "strengths": ["Clear headline"],
            "weaknesses": ["Weak CTA contrast"],
            "conversionPotential": "medium",
            "targetAudience": "Returning visitors",
        },
        {
            "id": 2,
            "name": "Variant B",
            "score": 88,
            "strengths": ["Prominent CTA", "Social proof"],
            "weaknesses": ["Busy footer"],
            "conversionPotential": "high",
            "targetAudience": "First-time visitors",
            "codeQuality": "Small, reusable components",
        },
    ],
    "winner": {"id": 2, "reason": "Stronger call to action"},
    "comparison": {"ctaEffectiveness": "B's CTA stands out more"},
    "improvements": [
        {"variant": 1, "suggestion": "Raise CTA contrast", "impact": "high", "effort": "low"}
    ],
    "gaps": [
        {"issue": "No pricing info", "affectedVariants": [1, 2], "recommendation": "Add a pricing teaser"}
    ],
    "testingRecommendations": ["Run for two full weeks"],
}


@pytest.fixture
def config():
    return Config(anthropic_api_key="test-key")


@pytest.fixture
def analysis_json():
    return json.dumps(SAMPLE_ANALYSIS, indent=2)


@pytest.fixture
def make_client():
    return FakeGitHubClient


@pytest.fixture
def make_pr():
    return make_pull


@pytest.fixture
def sample_analysis():
    return json.loads(json.dumps(SAMPLE_ANALYSIS))
