"""
Analysis Payload Builder

Shapes the variant collection into one multimodal analysis request:
image blocks for screenshots, then one text block holding the analysis
instructions, the variant enumeration and all code.
"""

from typing import Sequence

from .errors import InsufficientVariants
from .models import Variant

PNG_BASE64_SIGNATURE = "iVBORw0KGgo"

ANALYSIS_PROMPT = """You are an expert UI/UX analyst specializing in A/B testing and conversion optimization. Analyze the provided UI variants and return a JSON response.

For each variant, evaluate:
1. Visual hierarchy and clarity
2. Call-to-action effectiveness
3. Trust signals and credibility
4. Cognitive load and usability
5. Mobile responsiveness indicators
6. Accessibility considerations
7. Emotional appeal and brand alignment
8. Code quality and maintainability (for code variants)
9. Component structure and reusability (for code variants)

Return ONLY valid JSON in this exact format (no markdown, no code blocks):
{
  "variants": [
    {
      "id": 1,
      "name": "Variant A",
      "score": 85,
      "strengths": ["strength 1", "strength 2", "strength 3"],
      "weaknesses": ["weakness 1", "weakness 2"],
      "conversionPotential": "high/medium/low",
      "targetAudience": "description of ideal audience",
      "codeQuality": "Only for code variants - assessment of code structure, readability, best practices"
    }
  ],
  "winner": {
    "id": 1,
    "reason": "Clear explanation of why this variant is recommended"
  },
  "comparison": {
    "visualHierarchy": "Comparison of visual hierarchy across variants",
    "ctaEffectiveness": "Comparison of CTAs",
    "trustSignals": "Comparison of trust elements",
    "userExperience": "Overall UX comparison",
    "codeArchitecture": "Only if code variants present - comparison of code structure and patterns"
  },
  "improvements": [
    {
      "variant": 1,
      "suggestion": "Specific actionable improvement",
      "impact": "high/medium/low",
      "effort": "high/medium/low"
    }
  ],
  "gaps": [
    {
      "issue": "Gap or missing element description",
      "affectedVariants": [1, 2],
      "recommendation": "How to address this gap"
    }
  ],
  "testingRecommendations": [
    "Recommendation 1 for A/B testing",
    "Recommendation 2 for A/B testing"
  ]
}"""

CLOSING_INSTRUCTION = (
    "Please analyze each variant and provide your comprehensive comparison. "
    "For code variants, analyze the UI that would be rendered and also "
    "comment on code quality."
)


def detect_media_type(encoded: str) -> str:
    """
    Tell png from jpeg by the encoded data.

    Accepts either a data URL ("data:image/png;base64,...") or bare base64.
    Anything that is not recognizably png is treated as jpeg.
    """
    if encoded.startswith("data:"):
        header = encoded.split(",", 1)[0]
        return "image/png" if "png" in header else "image/jpeg"
    return "image/png" if encoded.startswith(PNG_BASE64_SIGNATURE) else "image/jpeg"


def describe_variant(variant: Variant) -> str:
    """One-line summary of a variant: kind, origin and file count"""
    if variant.kind == "image":
        return f"{variant.name}: Screenshot ({variant.image.filename})"

    source_info = ""
    meta = variant.metadata
    if variant.origin in ("github-pr-base", "github-pr-head") and meta is not None:
        side = "base branch" if variant.origin == "github-pr-base" else "PR changes"
        source_info = f" from GitHub PR #{meta.pr_number} ({side})"
    elif variant.origin == "github-branch" and meta is not None:
        source_info = f" from GitHub {meta.owner}/{meta.repo}@{meta.branch}"
    elif variant.origin == "local-folder":
        source_info = " from a local folder"

    return (
        f"{variant.name}: Code files from folder \"{variant.folder_name}\""
        f"{source_info} ({variant.file_count} files)"
    )


def render_code_variant(variant: Variant) -> str:
    """All files of a code variant, each under its own delimiter"""
    files_content = "\n\n".join(
        f"--- File: {code_file.path} ---\n{code_file.content}"
        for code_file in variant.files
    )
    return (
        f"\n=== CODE VARIANT: {variant.name} (Folder: {variant.folder_name}) ===\n"
        f"{files_content}"
    )


def build_analysis_text(variants: Sequence[Variant]) -> str:
    descriptions = ", ".join(describe_variant(v) for v in variants)
    code_text = "\n\n".join(render_code_variant(v) for v in variants if v.kind == "code")

    return (
        f"{ANALYSIS_PROMPT}\n\n"
        f"I'm providing {len(variants)} UI variants for A/B testing analysis:\n"
        f"{descriptions}\n\n"
        f"{code_text}\n\n"
        f"{CLOSING_INSTRUCTION}"
    )


def build_content_blocks(variants: Sequence[Variant]) -> list[dict]:
    """Image blocks in collection order, followed by the text block"""
    blocks = []
    for variant in variants:
        if variant.kind != "image":
            continue
        blocks.append({
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": detect_media_type(variant.image.data),
                "data": variant.image.data,
            },
        })

    blocks.append({"type": "text", "text": build_analysis_text(variants)})
    return blocks


def build_analysis_request(
    variants: Sequence[Variant],
    model: str = "claude-sonnet-4-20250514",
    max_tokens: int = 4000,
) -> dict:
    """
    Build the analysis request body for the variant collection.

    The body follows the Anthropic Messages API shape; other providers
    translate the content blocks from it.

    Args:
        variants: Current collection, in display order
        model: Model identifier to request
        max_tokens: Response token budget

    Returns:
        {"model", "max_tokens", "messages": [{"role": "user", "content": [...]}]}

    Raises:
        InsufficientVariants: If fewer than two variants are given
    """
    if len(variants) < 2:
        raise InsufficientVariants(len(variants))

    return {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [{
            "role": "user",
            "content": build_content_blocks(variants),
        }],
    }
