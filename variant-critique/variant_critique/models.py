"""
Data Models for Variant Critique

Type-safe Pydantic models for all data structures.
Variants are frozen once created; the analysis result keeps the model's
JSON as-is and reads typed views from it.
"""

import copy
import re
import uuid
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


UI_FILE_EXTENSIONS = (
    ".html", ".htm", ".jsx", ".tsx", ".vue",
    ".svelte", ".astro", ".css", ".scss", ".sass",
)

VariantKind = Literal["image", "code"]
VariantOrigin = Literal[
    "upload",
    "local-folder",
    "github-branch",
    "github-pr-base",
    "github-pr-head",
]


def file_extension(path: str) -> str:
    """Lower-cased dotted suffix of the last path segment ("" when none)"""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[-1].lower()


# ---------------------------------------------------------------------------
# Source references
# ---------------------------------------------------------------------------

class RepoRef(BaseModel):
    """A repository, branch and optional sub-path"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["repo"] = "repo"
    owner: str
    repo: str
    branch: str = "main"
    path: str = ""


class PullRequestRef(BaseModel):
    """A pull request by number"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pr"] = "pr"
    owner: str
    repo: str
    pr_number: int


SourceReference = Union[RepoRef, PullRequestRef]


class TreeEntry(BaseModel):
    """One entry of a recursive git tree listing"""

    path: str
    type: str = "blob"
    sha: Optional[str] = None
    size: Optional[int] = None

    @property
    def extension(self) -> str:
        return file_extension(self.path)


class BranchRef(BaseModel):
    """One side of a pull request"""

    branch: str
    sha: Optional[str] = None
    label: str


class PullRequestInfo(BaseModel):
    """Resolved pull request details"""

    number: int
    title: str = ""
    base: BranchRef
    head: BranchRef


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class CodeFile(BaseModel):
    """
    One source file of a code variant.

    Attributes:
        name: File basename
        path: Path as fetched (repository path or folder-relative path)
        content: Full text content
        extension: Lower-cased dotted suffix, e.g. ".tsx"
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    content: str
    extension: str

    @classmethod
    def from_path(cls, path: str, content: str) -> "CodeFile":
        return cls(
            name=path.rsplit("/", 1)[-1],
            path=path,
            content=content,
            extension=file_extension(path),
        )


class ImagePayload(BaseModel):
    """A base64-encoded screenshot"""

    model_config = ConfigDict(frozen=True)

    filename: str
    media_type: Literal["image/png", "image/jpeg"] = "image/png"
    data: str = Field(repr=False)


class RepoMetadata(BaseModel):
    """Repository coordinates of a GitHub-derived variant"""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str
    folder_name: Optional[str] = None
    pr_number: Optional[int] = None
    pr_title: Optional[str] = None
    is_base: Optional[bool] = None


class Variant(BaseModel):
    """
    One candidate UI design submitted for comparison.

    Producers create variants without a display name; the session assigns
    "Variant A", "Variant B", ... when the variant is appended.

    Attributes:
        id: Process-unique identifier
        display_name: Sequential letter name, set on insertion
        kind: "image" or "code"
        origin: Where the variant came from
        folder_name: Group key or side label for code variants
        image: Encoded screenshot (image variants only)
        files: Ordered source files (code variants only)
        metadata: Repository coordinates for GitHub-derived variants
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    display_name: Optional[str] = None
    kind: VariantKind
    origin: VariantOrigin
    folder_name: Optional[str] = None
    image: Optional[ImagePayload] = None
    files: list[CodeFile] = Field(default_factory=list)
    metadata: Optional[RepoMetadata] = None

    @model_validator(mode="after")
    def check_payload(self) -> "Variant":
        if self.kind == "image" and self.image is None:
            raise ValueError("image variant requires an image payload")
        if self.kind == "code" and not self.files:
            raise ValueError("code variant requires at least one file")
        return self

    @property
    def name(self) -> str:
        return self.display_name or "Unnamed variant"

    @property
    def file_count(self) -> int:
        return len(self.files)


# ---------------------------------------------------------------------------
# Analysis result
# ---------------------------------------------------------------------------

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def _pick(item: dict, *keys: str) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return ", ".join(f"{k}: {v}" for k, v in value.items())
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _as_number(value: Any) -> Optional[float]:
    """Best-effort score: 85, 85.5, "85" and "85/100" all read as a number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER.search(value)
        return float(match.group()) if match else None
    return None


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_text_list(value: Any) -> list[str]:
    return [text for text in (_as_text(v) for v in _as_list(value)) if text]


class VariantAssessment(BaseModel):
    id: Any = None
    name: Optional[str] = None
    score: Optional[float] = Field(default=None, description="0-100")
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    conversion_potential: Optional[str] = None
    target_audience: Optional[str] = None
    code_quality: Optional[str] = None

    @classmethod
    def from_raw(cls, item: Any) -> "VariantAssessment":
        if not isinstance(item, dict):
            return cls(name=_as_text(item))
        return cls(
            id=item.get("id"),
            name=_as_text(item.get("name")),
            score=_as_number(item.get("score")),
            strengths=_as_text_list(item.get("strengths")),
            weaknesses=_as_text_list(item.get("weaknesses")),
            conversion_potential=_as_text(_pick(item, "conversionPotential", "conversion_potential")),
            target_audience=_as_text(_pick(item, "targetAudience", "target_audience")),
            code_quality=_as_text(_pick(item, "codeQuality", "code_quality")),
        )


class Winner(BaseModel):
    id: Any = None
    reason: Optional[str] = None

    @classmethod
    def from_raw(cls, value: Any) -> Optional["Winner"]:
        if value is None:
            return None
        if isinstance(value, dict):
            return cls(id=value.get("id"), reason=_as_text(value.get("reason")))
        return cls(id=value)


class Improvement(BaseModel):
    variant: Any = None
    suggestion: Optional[str] = None
    impact: Optional[str] = None
    effort: Optional[str] = None

    @classmethod
    def from_raw(cls, item: Any) -> "Improvement":
        if not isinstance(item, dict):
            return cls(suggestion=_as_text(item))
        return cls(
            variant=item.get("variant"),
            suggestion=_as_text(item.get("suggestion")),
            impact=_as_text(item.get("impact")),
            effort=_as_text(item.get("effort")),
        )


class Gap(BaseModel):
    issue: Optional[str] = None
    affected_variants: list[Any] = Field(default_factory=list)
    recommendation: Optional[str] = None

    @classmethod
    def from_raw(cls, item: Any) -> "Gap":
        if not isinstance(item, dict):
            return cls(issue=_as_text(item))
        return cls(
            issue=_as_text(item.get("issue")),
            affected_variants=_as_list(_pick(item, "affectedVariants", "affected_variants")),
            recommendation=_as_text(item.get("recommendation")),
        )


class AnalysisResult(BaseModel):
    """
    Parsed A/B analysis verdict.

    The JSON object the model returned is kept untouched in ``raw``; no
    shape is enforced on it. The typed properties below are best-effort
    views for display: entries of an unexpected shape are coerced to
    text or skipped, never rejected.

    Attributes:
        raw: The parsed JSON object, exactly as the model sent it
    """

    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def variants(self) -> list[VariantAssessment]:
        """Per-variant scores, strengths and weaknesses"""
        return [VariantAssessment.from_raw(item) for item in _as_list(self.raw.get("variants"))]

    @property
    def winner(self) -> Optional[Winner]:
        """Recommended variant and the reason"""
        return Winner.from_raw(self.raw.get("winner"))

    @property
    def comparison(self) -> dict[str, str]:
        """Named dimension -> free-text comparison"""
        value = self.raw.get("comparison")
        if isinstance(value, dict):
            return {str(k): _as_text(v) or "" for k, v in value.items()}
        text = _as_text(value)
        return {"overall": text} if text else {}

    @property
    def improvements(self) -> list[Improvement]:
        """Actionable suggestions with impact/effort"""
        return [Improvement.from_raw(item) for item in _as_list(self.raw.get("improvements"))]

    @property
    def gaps(self) -> list[Gap]:
        """Issues shared by several variants"""
        return [Gap.from_raw(item) for item in _as_list(self.raw.get("gaps"))]

    @property
    def testing_recommendations(self) -> list[str]:
        """Follow-up A/B test ideas"""
        return _as_text_list(
            _pick(self.raw, "testingRecommendations", "testing_recommendations")
        )

    def assessment_for(self, variant_id: Any) -> Optional[VariantAssessment]:
        """Find the assessment whose id matches (compared as strings)"""
        for assessment in self.variants:
            if str(assessment.id) == str(variant_id):
                return assessment
        return None

    @property
    def winning_assessment(self) -> Optional[VariantAssessment]:
        if self.winner is None:
            return None
        return self.assessment_for(self.winner.id)

    def to_dict(self) -> dict:
        """The analysis exactly as the model sent it"""
        return copy.deepcopy(self.raw)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class Config(BaseModel):
    """
    Configuration for variant critique.

    Loaded from .env file and environment variables.

    Attributes:
        anthropic_api_key: Anthropic API key (optional)
        openai_api_key: OpenAI API key (optional)
        ollama_host: Ollama server URL for local LLMs
        ollama_model: Model name for Ollama (default: llava)
        analysis_provider: Which provider to use by default
        anthropic_model: Claude model for analysis
        openai_model: OpenAI model for analysis
        max_tokens: Response token budget
        github_token: Token for private repositories (optional)
        github_api_url: GitHub REST API base URL
        max_files_per_variant: Cap per folder group
        max_total_files: Cap across all folder groups of one fetch
        max_files_per_pr_side: Cap per pull request side
        fetch_concurrency: Concurrent content requests per group
    """

    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llava"
    analysis_provider: Literal["anthropic", "openai", "local"] = "anthropic"
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4o"
    max_tokens: int = Field(default=4000, ge=256, le=64000)
    github_token: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    max_files_per_variant: int = Field(default=10, ge=1)
    max_total_files: int = Field(default=30, ge=1)
    max_files_per_pr_side: int = Field(default=15, ge=1)
    fetch_concurrency: int = Field(default=8, ge=1, le=64)

    def has_anthropic(self) -> bool:
        """Check if Anthropic is configured"""
        return self.anthropic_api_key is not None and len(self.anthropic_api_key) > 0

    def has_openai(self) -> bool:
        """Check if OpenAI is configured"""
        return self.openai_api_key is not None and len(self.openai_api_key) > 0

    def has_github_token(self) -> bool:
        return self.github_token is not None and len(self.github_token) > 0

    def model_for(self, provider: str) -> str:
        """Model name the given provider sends requests to"""
        return {
            "anthropic": self.anthropic_model,
            "openai": self.openai_model,
            "local": self.ollama_model,
        }.get(provider.lower(), self.anthropic_model)
