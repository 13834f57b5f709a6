"""
GitHub REST Client

Synchronous requests-based access to the three read endpoints the
fetchers need. Coroutines drive it through asyncio.to_thread.
"""

import base64
import logging
from typing import Optional
from urllib.parse import quote

import requests

from ..errors import ApiError, BranchNotFound, PullRequestNotFound, UnexpectedResponse
from ..models import BranchRef, PullRequestInfo, TreeEntry

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Minimal GitHub read API client.

    Example:
        client = GitHubClient(token=config.github_token)
        entries = client.get_tree("acme", "site", "main")
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Optional token, only needed for private repositories
            api_url: REST API base URL (GitHub Enterprise uses its own)
            session: Optional pre-built requests session
        """
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": "variant-critique",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = f"{self.api_url}{path}"
        logger.debug("GET %s %s", url, params or "")
        return self.session.get(url, params=params)

    def get_tree(self, owner: str, repo: str, branch: str) -> list[TreeEntry]:
        """
        List every entry of a branch, recursively.

        Raises:
            BranchNotFound: On 404
            ApiError: On any other non-2xx status
            UnexpectedResponse: If the listing body is malformed
        """
        response = self._get(
            f"/repos/{owner}/{repo}/git/trees/{quote(branch, safe='')}",
            params={"recursive": "1"},
        )
        if response.status_code == 404:
            raise BranchNotFound(owner, repo, branch)
        if not response.ok:
            raise ApiError(response.status_code, response.url)

        data = response.json()
        try:
            if data.get("truncated"):
                logger.warning(
                    "Tree listing for %s/%s@%s was truncated by GitHub", owner, repo, branch
                )
            return [TreeEntry(**item) for item in data.get("tree", []) if "path" in item]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UnexpectedResponse(response.url, f"malformed tree listing ({e})") from e

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """
        Fetch one file's text content at a ref.

        Raises:
            ApiError: On any non-2xx status
            ValueError: If the payload carries no decodable content
        """
        response = self._get(
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            params={"ref": ref},
        )
        if not response.ok:
            raise ApiError(response.status_code, response.url)

        data = response.json()
        if not isinstance(data, dict) or "content" not in data:
            raise ValueError(f"No file content returned for {path}")

        raw = base64.b64decode(data["content"])
        return raw.decode("utf-8", errors="replace")

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestInfo:
        """
        Resolve a pull request's base and head branches.

        Raises:
            PullRequestNotFound: On 404
            ApiError: On any other non-2xx status
            UnexpectedResponse: If the pull request body is malformed
        """
        response = self._get(f"/repos/{owner}/{repo}/pulls/{number}")
        if response.status_code == 404:
            raise PullRequestNotFound(owner, repo, number)
        if not response.ok:
            raise ApiError(response.status_code, response.url)

        data = response.json()
        try:
            return self._pull_request_info(data, number)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UnexpectedResponse(response.url, f"malformed pull request ({e!r})") from e

    @staticmethod
    def _pull_request_info(data: dict, number: int) -> PullRequestInfo:
        base_branch = data["base"]["ref"]
        head_branch = data["head"]["ref"]
        return PullRequestInfo(
            number=data.get("number", number),
            title=data.get("title") or "",
            base=BranchRef(
                branch=base_branch,
                sha=data["base"].get("sha"),
                label=f"Base ({base_branch})",
            ),
            head=BranchRef(
                branch=head_branch,
                sha=data["head"].get("sha"),
                label=f"PR #{number} ({head_branch})",
            ),
        )
