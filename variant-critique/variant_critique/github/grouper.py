"""
Variant Grouper

Splits a filtered file list into one code variant per top-level folder
and fetches each folder's file contents under per-variant and total caps.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

import requests

from ..errors import VariantCritiqueError
from ..models import CodeFile, RepoMetadata, TreeEntry, Variant
from .client import GitHubClient

logger = logging.getLogger(__name__)

ROOT_GROUP = "root"


def relative_path(path: str, base_path: str = "") -> str:
    """Strip base_path and its trailing slash from the front of path"""
    base_path = base_path.strip("/")
    if base_path and path.startswith(base_path + "/"):
        return path[len(base_path) + 1:]
    return path


def group_by_folder(files: list[TreeEntry], base_path: str = "") -> dict[str, list[TreeEntry]]:
    """
    Group files by their first folder below base_path.

    Files sitting directly at base_path land in the "root" group.
    Groups and the files inside them keep first-appearance order.

    Example:
        src/variants/a/index.html -> "a"
        src/variants/b/style.css  -> "b"
        src/variants/index.html   -> "root"
    """
    groups: dict[str, list[TreeEntry]] = {}
    for entry in files:
        parts = relative_path(entry.path, base_path).split("/")
        key = parts[0] if len(parts) > 1 else ROOT_GROUP
        groups.setdefault(key, []).append(entry)
    return groups


async def fetch_file_contents(
    client: GitHubClient,
    owner: str,
    repo: str,
    ref: str,
    files: list[TreeEntry],
    semaphore: Optional[asyncio.Semaphore] = None,
) -> list[CodeFile]:
    """
    Fetch file contents concurrently and keep the ones that succeeded.

    Each fetch is independent: a failure drops that file only. The result
    keeps the order of files, not completion order.
    """
    semaphore = semaphore or asyncio.Semaphore(len(files) or 1)

    async def fetch_one(entry: TreeEntry) -> Optional[CodeFile]:
        async with semaphore:
            try:
                content = await asyncio.to_thread(
                    client.get_file_content, owner, repo, entry.path, ref
                )
            except (VariantCritiqueError, requests.RequestException, ValueError, KeyError) as e:
                logger.debug("Dropping %s@%s: %s", entry.path, ref, e)
                return None
        return CodeFile.from_path(entry.path, content)

    results = await asyncio.gather(*(fetch_one(entry) for entry in files))
    fetched = [code_file for code_file in results if code_file is not None]

    dropped = len(files) - len(fetched)
    if dropped:
        logger.warning(
            "%s/%s@%s: %d of %d file(s) could not be fetched and were skipped",
            owner, repo, ref, dropped, len(files),
        )

    return fetched


class VariantGrouper:
    """
    Turns the UI files of one branch into folder-based code variants.

    Example:
        grouper = VariantGrouper(client, max_files_per_variant=10, max_total_files=30)
        async for variant in grouper.variants("acme", "site", "main", files, "src/variants"):
            session.add(variant)
    """

    def __init__(
        self,
        client: GitHubClient,
        max_files_per_variant: int = 10,
        max_total_files: int = 30,
        concurrency: int = 8,
    ):
        self.client = client
        self.max_files_per_variant = max_files_per_variant
        self.max_total_files = max_total_files
        self.concurrency = concurrency

    async def variants(
        self,
        owner: str,
        repo: str,
        branch: str,
        files: list[TreeEntry],
        base_path: str = "",
    ) -> AsyncIterator[Variant]:
        """
        Yield one variant per folder group, in group order.

        Groups are processed one after another. Each group fetches at most
        max_files_per_variant files, and never more than what is left of
        max_total_files after the groups before it. Once the total is used
        up the remaining groups are skipped. A group whose fetches all fail
        yields nothing.
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        retrieved = 0

        for folder_name, entries in group_by_folder(files, base_path).items():
            remaining = self.max_total_files - retrieved
            if remaining <= 0:
                logger.info(
                    "Total file cap of %d reached; skipping remaining folders",
                    self.max_total_files,
                )
                break

            to_fetch = entries[:min(self.max_files_per_variant, remaining)]
            fetched = await fetch_file_contents(
                self.client, owner, repo, branch, to_fetch, semaphore
            )
            retrieved += len(fetched)

            if not fetched:
                logger.info("Folder %r produced no files; no variant created", folder_name)
                continue

            yield Variant(
                kind="code",
                origin="github-branch",
                folder_name=folder_name,
                files=fetched,
                metadata=RepoMetadata(
                    owner=owner,
                    repo=repo,
                    branch=branch,
                    folder_name=folder_name,
                ),
            )
