import asyncio

import pytest

from variant_critique.errors import BranchNotFound, NoMatchingFiles
from variant_critique.github.tree import TreeFetcher, filter_ui_files
from variant_critique.models import TreeEntry


def entries(*paths):
    return [TreeEntry(path=p) for p in paths]


def paths(result):
    return [e.path for e in result]


def test_keeps_ui_extensions_only():
    result = filter_ui_files(entries(
        "index.html", "page.HTM", "App.jsx", "App.tsx", "Card.vue", "Nav.svelte",
        "Layout.astro", "main.css", "theme.scss", "old.sass",
        "README.md", "main.js", "logo.png", "Makefile",
    ))
    assert paths(result) == [
        "index.html", "page.HTM", "App.jsx", "App.tsx", "Card.vue", "Nav.svelte",
        "Layout.astro", "main.css", "theme.scss", "old.sass",
    ]


def test_skips_non_blobs():
    result = filter_ui_files([
        TreeEntry(path="styles.css", type="tree"),
        TreeEntry(path="a/index.html", type="blob"),
    ])
    assert paths(result) == ["a/index.html"]


@pytest.mark.parametrize("path", [
    "node_modules/pkg/index.html",
    "web/node_modules/pkg/button.css",
    "dist/index.html",
    "app/build/main.css",
    ".git/hooks/sample.html",
])
def test_excluded_segments(path):
    assert filter_ui_files(entries(path)) == []


def test_node_modules_excluded_regardless_of_prefix():
    result = filter_ui_files(
        entries("src/variants/node_modules/x/index.html", "src/variants/a/index.html"),
        base_path="src/variants",
    )
    assert paths(result) == ["src/variants/a/index.html"]


def test_base_path_prefix():
    result = filter_ui_files(
        entries("src/variants/a/index.html", "src/other/b.html", "index.html"),
        base_path="/src/variants/",
    )
    assert paths(result) == ["src/variants/a/index.html"]


def test_fetch_returns_filtered_in_tree_order(make_client):
    client = make_client(trees={"main": ["b/x.css", "README.md", "a/y.html"]})
    result = asyncio.run(TreeFetcher(client).fetch("acme", "site", "main"))
    assert paths(result) == ["b/x.css", "a/y.html"]


def test_fetch_missing_branch(make_client):
    client = make_client(trees={"main": ["index.html"]})
    with pytest.raises(BranchNotFound) as exc:
        asyncio.run(TreeFetcher(client).fetch("acme", "site", "nope"))
    assert '"nope"' in str(exc.value)


def test_fetch_no_matching_files(make_client):
    client = make_client(trees={"main": ["README.md", "src/app.py"]})
    with pytest.raises(NoMatchingFiles) as exc:
        asyncio.run(TreeFetcher(client).fetch("acme", "site", "main", "src"))
    assert 'at path "src"' in str(exc.value)
    assert ".html" in str(exc.value)


def test_fetch_allow_empty(make_client):
    client = make_client(trees={"main": ["README.md"]})
    result = asyncio.run(TreeFetcher(client).fetch("acme", "site", "main", allow_empty=True))
    assert result == []
