"""
Variant Session

Owns the variant collection for one run. Every producer (uploads,
folder scans, GitHub fetches, pull request expansion) hands back new
variants; only the session appends them, names them and clears the
analysis when the collection changes.
"""

import logging
import string
from pathlib import Path
from typing import Iterable, Optional

from .errors import InsufficientVariants
from .github import (
    GitHubClient,
    PullRequestExpander,
    TreeFetcher,
    VariantGrouper,
    parse_github_url,
)
from .interpreter import interpret_response
from .local import load_image_variant, scan_local_folder
from .models import AnalysisResult, Config, PullRequestRef, Variant
from .payload import build_analysis_request
from .providers.base import AnalysisProvider

logger = logging.getLogger(__name__)


def variant_label(index: int) -> str:
    """
    Letter name for the variant at a zero-based collection position.

    0 -> "Variant A", 25 -> "Variant Z", 26 -> "Variant AA"
    """
    letters = ""
    n = index + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters = string.ascii_uppercase[remainder] + letters
    return f"Variant {letters}"


class VariantSession:
    """
    Append-only variant collection with analysis state.

    Display names come from the collection length at the moment a variant
    is added. Removing a variant never renames the others, so after a
    removal the next variant can repeat a letter already on screen.

    Example:
        session = VariantSession(config)
        await session.add_github("https://github.com/acme/site/pull/42")
        session.add_image(Path("hero.png"))
        result = await session.analyze(provider)
    """

    def __init__(self, config: Optional[Config] = None, client: Optional[GitHubClient] = None):
        self.config = config or Config()
        self.client = client or GitHubClient(
            token=self.config.github_token,
            api_url=self.config.github_api_url,
        )
        self._variants: list[Variant] = []
        self.analysis: Optional[AnalysisResult] = None

    @property
    def variants(self) -> tuple[Variant, ...]:
        return tuple(self._variants)

    def __len__(self) -> int:
        return len(self._variants)

    def add(self, variant: Variant) -> Variant:
        """Name and append one variant; clears any previous analysis"""
        named = variant.model_copy(update={"display_name": variant_label(len(self._variants))})
        self._variants.append(named)
        self.analysis = None
        logger.info(
            "Added %s (%s, %s, %d file(s))",
            named.display_name, named.kind, named.origin, named.file_count,
        )
        return named

    def extend(self, variants: Iterable[Variant]) -> list[Variant]:
        return [self.add(variant) for variant in variants]

    def remove(self, variant_id: str) -> bool:
        """Remove a variant by id; returns False if it was not present"""
        before = len(self._variants)
        self._variants = [v for v in self._variants if v.id != variant_id]
        removed = len(self._variants) != before
        if removed:
            self.analysis = None
        return removed

    def reset(self) -> None:
        self._variants = []
        self.analysis = None

    # -- producers ---------------------------------------------------------

    def add_image(self, image_path: Path) -> Variant:
        return self.add(load_image_variant(image_path))

    def add_folder(self, folder: Path) -> list[Variant]:
        return self.extend(scan_local_folder(folder))

    async def add_github(self, url: str, path: Optional[str] = None) -> list[Variant]:
        """
        Fetch variants for a GitHub URL and append them as they arrive.

        Args:
            url: Repository, branch/path or pull request URL
            path: Optional sub-path overriding the one in the URL

        Returns:
            The variants appended by this call

        Raises:
            InvalidUrl, BranchNotFound, PullRequestNotFound, ApiError,
            NoMatchingFiles: Whatever ended the fetch. Variants appended
            before the failure stay in the session.
        """
        ref = parse_github_url(url)
        added: list[Variant] = []

        if isinstance(ref, PullRequestRef):
            base_path = (path or "").strip("/")
            expander = PullRequestExpander(
                self.client,
                max_files_per_side=self.config.max_files_per_pr_side,
                concurrency=self.config.fetch_concurrency,
            )
            async for variant in expander.variants(ref, base_path):
                added.append(self.add(variant))
            return added

        base_path = (path or ref.path).strip("/")
        files = await TreeFetcher(self.client).fetch(ref.owner, ref.repo, ref.branch, base_path)
        grouper = VariantGrouper(
            self.client,
            max_files_per_variant=self.config.max_files_per_variant,
            max_total_files=self.config.max_total_files,
            concurrency=self.config.fetch_concurrency,
        )
        async for variant in grouper.variants(ref.owner, ref.repo, ref.branch, files, base_path):
            added.append(self.add(variant))
        return added

    # -- analysis ----------------------------------------------------------

    def build_request(self, provider: Optional[str] = None) -> dict:
        """Analysis request stamped with the model of the given provider"""
        return build_analysis_request(
            self._variants,
            model=self.config.model_for(provider or self.config.analysis_provider),
            max_tokens=self.config.max_tokens,
        )

    async def analyze(self, provider: AnalysisProvider) -> AnalysisResult:
        """
        Send the collection to a provider and keep the parsed verdict.

        Raises:
            InsufficientVariants: If fewer than two variants are present
            ProviderError: If the model call fails
            MalformedAnalysis: If the answer cannot be parsed
        """
        if len(self._variants) < 2:
            raise InsufficientVariants(len(self._variants))

        request = self.build_request(provider.name)
        body = await provider.analyze(request)
        self.analysis = interpret_response(body)
        return self.analysis
