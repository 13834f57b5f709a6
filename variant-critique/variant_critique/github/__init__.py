"""
GitHub Sources

URL resolution, tree listing, folder grouping and pull request
expansion for code variants fetched from GitHub.
"""

from .client import GitHubClient
from .grouper import VariantGrouper, group_by_folder
from .pull_request import PullRequestExpander
from .tree import EXCLUDED_SEGMENTS, TreeFetcher, filter_ui_files
from .urls import parse_github_url

__all__ = [
    "GitHubClient",
    "VariantGrouper",
    "group_by_folder",
    "PullRequestExpander",
    "EXCLUDED_SEGMENTS",
    "TreeFetcher",
    "filter_ui_files",
    "parse_github_url",
]
