import asyncio

import pytest

from variant_critique.errors import ApiError, InsufficientVariants, InvalidUrl, NoMatchingFiles
from variant_critique.models import AnalysisResult, CodeFile, Config, ImagePayload, Variant
from variant_critique.providers.base import AnalysisProvider
from variant_critique.session import VariantSession, variant_label


def code_variant(folder="a"):
    return Variant(
        kind="code",
        origin="local-folder",
        folder_name=folder,
        files=[CodeFile.from_path(f"{folder}/index.html", "<main></main>")],
    )


def image_variant(name="shot.png"):
    return Variant(
        kind="image",
        origin="upload",
        image=ImagePayload(filename=name, media_type="image/png", data="iVBORw0KGgoAAAA"),
    )


class StubProvider(AnalysisProvider):
    def __init__(self, text):
        self.text = text
        self.requests = []

    @property
    def name(self):
        return "stub"

    def is_available(self):
        return True

    async def analyze(self, request):
        self.requests.append(request)
        return self.text_body(self.text)


@pytest.mark.parametrize("index, label", [
    (0, "Variant A"), (1, "Variant B"), (25, "Variant Z"), (26, "Variant AA"), (27, "Variant AB"),
])
def test_variant_label(index, label):
    assert variant_label(index) == label


def test_names_follow_collection_length(make_client):
    session = VariantSession(Config(), client=make_client())
    session.add(image_variant())
    session.add(code_variant())
    third = session.add(image_variant("other.jpg"))
    assert third.display_name == "Variant C"
    assert [v.display_name for v in session.variants] == ["Variant A", "Variant B", "Variant C"]


def test_removal_does_not_rename(make_client):
    session = VariantSession(Config(), client=make_client())
    a = session.add(code_variant("a"))
    session.add(code_variant("b"))
    session.add(code_variant("c"))

    assert session.remove(a.id) is True
    assert [v.display_name for v in session.variants] == ["Variant B", "Variant C"]

    added = session.add(code_variant("d"))
    assert added.display_name == "Variant C"


def test_remove_unknown_id(make_client):
    session = VariantSession(Config(), client=make_client())
    session.add(code_variant())
    assert session.remove("missing") is False
    assert len(session) == 1


def test_ids_are_unique(make_client):
    session = VariantSession(Config(), client=make_client())
    ids = {session.add(code_variant()).id for _ in range(5)}
    assert len(ids) == 5


def test_add_github_repo(make_client):
    client = make_client(trees={"dev": [
        "src/variants/a/index.html",
        "src/variants/b/index.html",
        "src/variants/b/style.css",
        "package.json",
    ]})
    session = VariantSession(Config(), client=client)

    added = asyncio.run(session.add_github("https://github.com/acme/site/tree/dev/src/variants"))

    assert [(v.display_name, v.folder_name, v.file_count) for v in added] == [
        ("Variant A", "a", 1),
        ("Variant B", "b", 2),
    ]


def test_add_github_path_override(make_client):
    client = make_client(trees={"main": ["web/x/index.html", "src/y/index.html"]})
    session = VariantSession(Config(), client=client)

    added = asyncio.run(session.add_github("https://github.com/acme/site", path="web/"))

    assert [v.folder_name for v in added] == ["x"]


def test_add_github_pull_request_names(make_client, make_pr):
    client = make_client(
        trees={"main": ["index.html"], "feature/new-hero": ["index.html"]},
        pulls={42: make_pr()},
    )
    session = VariantSession(Config(), client=client)

    asyncio.run(session.add_github("https://github.com/acme/site/pull/42"))

    assert [(v.display_name, v.origin) for v in session.variants] == [
        ("Variant A", "github-pr-base"),
        ("Variant B", "github-pr-head"),
    ]


def test_pull_request_with_no_files_adds_nothing(make_client, make_pr):
    client = make_client(
        trees={"main": ["README.md"], "feature/new-hero": ["README.md"]},
        pulls={42: make_pr()},
    )
    session = VariantSession(Config(), client=client)

    with pytest.raises(NoMatchingFiles):
        asyncio.run(session.add_github("https://github.com/acme/site/pull/42"))
    assert len(session) == 0


def test_pull_request_head_failure_keeps_base(make_client, make_pr):
    client = make_client(
        trees={"main": ["index.html"], "feature/new-hero": ApiError(500)},
        pulls={42: make_pr()},
    )
    session = VariantSession(Config(), client=client)

    with pytest.raises(ApiError):
        asyncio.run(session.add_github("https://github.com/acme/site/pull/42"))
    assert [v.origin for v in session.variants] == ["github-pr-base"]


def test_invalid_url(make_client):
    session = VariantSession(Config(), client=make_client())
    with pytest.raises(InvalidUrl):
        asyncio.run(session.add_github("https://example.com/acme/site"))


def test_analyze_requires_two_variants(make_client):
    session = VariantSession(Config(), client=make_client())
    session.add(code_variant())
    provider = StubProvider("{}")

    with pytest.raises(InsufficientVariants):
        asyncio.run(session.analyze(provider))
    assert provider.requests == []


def test_analyze_stores_result_and_changes_clear_it(make_client, analysis_json):
    session = VariantSession(Config(), client=make_client())
    session.add(image_variant())
    b = session.add(code_variant())
    provider = StubProvider(analysis_json)

    result = asyncio.run(session.analyze(provider))

    assert isinstance(result, AnalysisResult)
    assert session.analysis is result
    assert provider.requests[0]["model"] == Config().anthropic_model

    session.remove(b.id)
    assert session.analysis is None

    session.add(code_variant())
    asyncio.run(session.analyze(provider))
    session.add(code_variant())
    assert session.analysis is None


def test_reset(make_client):
    session = VariantSession(Config(), client=make_client())
    session.extend([code_variant(), image_variant()])
    session.reset()
    assert len(session) == 0
    assert session.add(code_variant()).display_name == "Variant A"


@pytest.mark.parametrize("provider, model", [
    (None, "claude-x"), ("anthropic", "claude-x"), ("openai", "gpt-x"), ("local", "llava:13b"),
])
def test_build_request_uses_provider_model(make_client, provider, model):
    config = Config(anthropic_model="claude-x", openai_model="gpt-x", ollama_model="llava:13b")
    session = VariantSession(config, client=make_client())
    session.extend([code_variant(), image_variant()])

    assert session.build_request(provider)["model"] == model
