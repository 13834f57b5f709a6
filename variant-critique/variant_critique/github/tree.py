"""
Tree Fetcher

Lists a branch's files and keeps only recognized UI sources outside
build and dependency directories.
"""

import asyncio
import logging
from typing import Iterable

from ..errors import NoMatchingFiles
from ..models import UI_FILE_EXTENSIONS, TreeEntry
from .client import GitHubClient

logger = logging.getLogger(__name__)

EXCLUDED_SEGMENTS = ("node_modules/", ".git/", "dist/", "build/")


def is_ui_file(entry: TreeEntry, base_path: str = "") -> bool:
    """
    Check whether a tree entry qualifies as UI source.

    A qualifying entry is a blob with a UI extension, lies under base_path
    when one is given, and contains none of EXCLUDED_SEGMENTS anywhere in
    its path.
    """
    if entry.type != "blob":
        return False
    if entry.extension not in UI_FILE_EXTENSIONS:
        return False
    if base_path and not entry.path.startswith(base_path):
        return False
    return not any(segment in entry.path for segment in EXCLUDED_SEGMENTS)


def filter_ui_files(entries: Iterable[TreeEntry], base_path: str = "") -> list[TreeEntry]:
    """Keep qualifying entries, preserving tree order"""
    base_path = base_path.strip("/")
    return [entry for entry in entries if is_ui_file(entry, base_path)]


class TreeFetcher:
    """
    Fetches and filters the recursive file tree of one branch.

    Example:
        fetcher = TreeFetcher(GitHubClient())
        files = await fetcher.fetch("acme", "site", "main", "src/variants")
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    async def fetch(
        self,
        owner: str,
        repo: str,
        branch: str,
        base_path: str = "",
        allow_empty: bool = False,
    ) -> list[TreeEntry]:
        """
        Fetch the UI files of a branch.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Branch to list
            base_path: Optional path prefix files must start with
            allow_empty: Return [] instead of raising when nothing matches

        Returns:
            Qualifying entries in tree order

        Raises:
            BranchNotFound: If the repository or branch does not exist
            ApiError: On any other request failure
            NoMatchingFiles: If nothing qualifies and allow_empty is False
        """
        entries = await asyncio.to_thread(self.client.get_tree, owner, repo, branch)
        files = filter_ui_files(entries, base_path)

        logger.info(
            "%s/%s@%s: %d of %d tree entries are UI files",
            owner, repo, branch, len(files), len(entries),
        )

        if not files and not allow_empty:
            raise NoMatchingFiles(UI_FILE_EXTENSIONS, base_path=base_path.strip("/"))

        return files
