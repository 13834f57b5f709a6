"""
Error Taxonomy

Every failure a user action can end in. Each exception carries one
human-readable message that the CLI prints as-is; nothing is retried.
"""

from typing import Iterable, Optional


class VariantCritiqueError(RuntimeError):
    """Base class for all variant critique failures"""


class ConfigurationError(VariantCritiqueError, ValueError):
    """A provider was selected without the settings it needs"""


class InvalidUrl(VariantCritiqueError):
    """The input could not be parsed as a supported GitHub URL"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Invalid GitHub URL: {url!r}. Use format: "
            "https://github.com/owner/repo, "
            "https://github.com/owner/repo/tree/branch/path or "
            "https://github.com/owner/repo/pull/123"
        )


class GitHubError(VariantCritiqueError):
    """A GitHub API request did not succeed"""


class BranchNotFound(GitHubError):
    """The repository or branch returned 404"""

    def __init__(self, owner: str, repo: str, branch: str):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        super().__init__(
            f"Repository {owner}/{repo} not found or branch \"{branch}\" "
            "doesn't exist. Try specifying the correct branch."
        )


class PullRequestNotFound(GitHubError):
    """The pull request returned 404"""

    def __init__(self, owner: str, repo: str, number: int):
        self.owner = owner
        self.repo = repo
        self.number = number
        super().__init__(f"Pull Request #{number} not found in {owner}/{repo}")


class ApiError(GitHubError):
    """Any other non-2xx response"""

    def __init__(self, status: int, url: Optional[str] = None):
        self.status = status
        self.url = url
        super().__init__(f"GitHub API error: {status}")


class UnexpectedResponse(GitHubError):
    """A 2xx response whose body is not shaped as expected"""

    def __init__(self, url: Optional[str], detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"Unexpected GitHub API response from {url}: {detail}")


class NoMatchingFiles(VariantCritiqueError):
    """The fetch succeeded but no file qualified as UI source"""

    def __init__(
        self,
        extensions: Iterable[str],
        base_path: str = "",
        pr_number: Optional[int] = None,
    ):
        self.extensions = tuple(extensions)
        self.base_path = base_path
        self.pr_number = pr_number

        where = f"PR #{pr_number}" if pr_number is not None else "the repository"
        at = f" at path \"{base_path}\"" if base_path else ""
        super().__init__(
            f"No UI files found in {where}{at}. "
            f"Looking for: {', '.join(self.extensions)}"
        )


class InsufficientVariants(VariantCritiqueError):
    """Analysis needs at least two variants"""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Please provide at least 2 variants to compare (got {count})"
        )


class MalformedAnalysis(VariantCritiqueError):
    """The model answer was not valid JSON after unwrapping"""

    def __init__(self, reason: str, text: str):
        self.reason = reason
        self.text = text
        super().__init__(
            f"Analysis failed: {reason}\n"
            f"Response text: {text[:500]}"
        )


class ProviderError(VariantCritiqueError):
    """The analysis model call itself failed"""
