"""
GitHub URL Resolver

Turns a pasted GitHub URL into a RepoRef or PullRequestRef.
Pure string parsing; no network access.
"""

import re

from ..errors import InvalidUrl
from ..models import PullRequestRef, RepoRef, SourceReference

_HOST = r"github\.com/"

PR_PATTERN = re.compile(_HOST + r"([^/]+)/([^/]+)/pull/(\d+)")

# Tried in order, tightest first
REPO_PATTERNS = (
    re.compile(_HOST + r"([^/]+)/([^/]+)/tree/([^/]+)(?:/(.*))?$"),
    re.compile(_HOST + r"([^/]+)/([^/]+)"),
)


def _clean(url: str) -> str:
    url = url.strip()
    for marker in ("?", "#"):
        url = url.split(marker, 1)[0]
    return url.rstrip("/")


def _strip_git_suffix(repo: str) -> str:
    return repo[:-4] if repo.endswith(".git") else repo


def parse_github_url(url: str) -> SourceReference:
    """
    Parse a GitHub URL into a source reference.

    Supported forms:
        https://github.com/{owner}/{repo}
        https://github.com/{owner}/{repo}/tree/{branch}
        https://github.com/{owner}/{repo}/tree/{branch}/{path...}
        https://github.com/{owner}/{repo}/pull/{number}

    Args:
        url: Free-text URL as typed by the user

    Returns:
        PullRequestRef for pull request URLs, RepoRef otherwise

    Raises:
        InvalidUrl: If no supported form matches

    Example:
        >>> parse_github_url("https://github.com/acme/site/tree/dev/src/variants")
        RepoRef(kind='repo', owner='acme', repo='site', branch='dev', path='src/variants')
    """
    cleaned = _clean(url or "")
    if not cleaned:
        raise InvalidUrl(url or "")

    pr_match = PR_PATTERN.search(cleaned)
    if pr_match:
        owner, repo, number = pr_match.groups()
        return PullRequestRef(
            owner=owner,
            repo=_strip_git_suffix(repo),
            pr_number=int(number),
        )

    for pattern in REPO_PATTERNS:
        match = pattern.search(cleaned)
        if not match:
            continue

        groups = match.groups() + (None,) * (4 - len(match.groups()))
        owner, repo, branch, path = groups
        repo = _strip_git_suffix(repo)
        if not owner or not repo:
            continue

        return RepoRef(
            owner=owner,
            repo=repo,
            branch=branch or "main",
            path=(path or "").strip("/"),
        )

    raise InvalidUrl(url)
