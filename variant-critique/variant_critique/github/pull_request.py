"""
Pull Request Expander

Turns a pull request into two code variants: the base branch (the
current design) and the head branch (the proposed design).
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

from ..errors import NoMatchingFiles
from ..models import (
    UI_FILE_EXTENSIONS,
    BranchRef,
    PullRequestInfo,
    PullRequestRef,
    RepoMetadata,
    Variant,
)
from .client import GitHubClient
from .grouper import fetch_file_contents
from .tree import TreeFetcher

logger = logging.getLogger(__name__)


class PullRequestExpander:
    """
    Fetches both sides of a pull request as whole-branch variants.

    The base side is always produced before the head side, so starting
    from an empty session the base becomes "Variant A" and the head
    "Variant B".

    Example:
        expander = PullRequestExpander(client)
        async for variant in expander.variants(ref, base_path="src"):
            session.add(variant)
    """

    def __init__(
        self,
        client: GitHubClient,
        max_files_per_side: int = 15,
        concurrency: int = 8,
    ):
        self.client = client
        self.tree_fetcher = TreeFetcher(client)
        self.max_files_per_side = max_files_per_side
        self.concurrency = concurrency

    async def resolve(self, ref: PullRequestRef) -> PullRequestInfo:
        """
        Look up the base and head branches of a pull request.

        Raises:
            PullRequestNotFound: On 404
            ApiError: On any other request failure
        """
        return await asyncio.to_thread(
            self.client.get_pull_request, ref.owner, ref.repo, ref.pr_number
        )

    async def variants(
        self,
        ref: PullRequestRef,
        base_path: str = "",
    ) -> AsyncIterator[Variant]:
        """
        Yield the base variant, then the head variant.

        A side whose filtered tree or fetched contents come up empty yields
        nothing. An error on the head side surfaces after the base variant
        has already been yielded, so a consumer that appended it keeps it.

        Raises:
            PullRequestNotFound: If the pull request does not exist
            BranchNotFound: If either branch no longer exists
            ApiError: On any other request failure
            NoMatchingFiles: If neither side yields a variant
        """
        info = await self.resolve(ref)
        logger.info(
            "PR #%d %r: %s <- %s", info.number, info.title, info.base.branch, info.head.branch
        )

        produced = 0
        sides = (
            ("github-pr-base", info.base, True),
            ("github-pr-head", info.head, False),
        )
        for origin, side, is_base in sides:
            variant = await self._side_variant(ref, info, origin, side, is_base, base_path)
            if variant is not None:
                produced += 1
                yield variant

        if produced == 0:
            raise NoMatchingFiles(
                UI_FILE_EXTENSIONS,
                base_path=base_path.strip("/"),
                pr_number=ref.pr_number,
            )

    async def _side_variant(
        self,
        ref: PullRequestRef,
        info: PullRequestInfo,
        origin: str,
        side: BranchRef,
        is_base: bool,
        base_path: str,
    ) -> Optional[Variant]:
        files = await self.tree_fetcher.fetch(
            ref.owner, ref.repo, side.branch, base_path, allow_empty=True
        )
        if not files:
            return None

        fetched = await fetch_file_contents(
            self.client,
            ref.owner,
            ref.repo,
            side.branch,
            files[:self.max_files_per_side],
            asyncio.Semaphore(self.concurrency),
        )
        if not fetched:
            return None

        return Variant(
            kind="code",
            origin=origin,
            folder_name=side.label,
            files=fetched,
            metadata=RepoMetadata(
                owner=ref.owner,
                repo=ref.repo,
                branch=side.branch,
                pr_number=info.number,
                pr_title=info.title,
                is_base=is_base,
            ),
        )
