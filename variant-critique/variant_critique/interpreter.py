"""
Response Interpreter

Pulls the model's text answer out of a response body, unwraps any
markdown code fences and parses it into an AnalysisResult.
"""

import json
import logging
from typing import Any, Mapping

from .errors import MalformedAnalysis
from .models import AnalysisResult

logger = logging.getLogger(__name__)


def _block_field(block: Any, field: str) -> Any:
    if isinstance(block, Mapping):
        return block.get(field)
    return getattr(block, field, None)


def extract_text(body: Any) -> str:
    """
    Text of the first text-typed content block, or "" when there is none.

    Accepts a response body dict ({"content": [...]}) or an SDK message
    object with a .content list.
    """
    content = _block_field(body, "content") or []
    for block in content:
        if _block_field(block, "type") == "text":
            return _block_field(block, "text") or ""
    return ""


def strip_code_fences(text: str) -> str:
    """
    Remove a leading ```json / ``` marker and a trailing ``` marker.

    Example:
        >>> strip_code_fences('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_analysis_text(text: str) -> AnalysisResult:
    """
    Parse unwrapped model text into an AnalysisResult.

    Raises:
        MalformedAnalysis: If the text is not valid JSON or its top level
            is not an object. Nothing else about the shape is checked.
    """
    json_text = strip_code_fences(text)

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MalformedAnalysis(f"response is not valid JSON ({e})", json_text) from e

    if not isinstance(data, dict):
        raise MalformedAnalysis(
            f"expected a JSON object, got {type(data).__name__}", json_text
        )

    return AnalysisResult(raw=data)


def interpret_response(body: Any) -> AnalysisResult:
    """
    Turn a raw analysis response body into an AnalysisResult.

    Args:
        body: Response body with a "content" list of typed blocks

    Returns:
        Parsed analysis; optional fields the model left out stay empty

    Raises:
        MalformedAnalysis: If the answer does not parse, including when the
            response carries no text block at all
    """
    text = extract_text(body)
    if not text:
        logger.warning("Analysis response contained no text block")

    result = parse_analysis_text(text)
    logger.info(
        "Parsed analysis for %d variant(s); winner=%s",
        len(result.variants),
        result.winner.id if result.winner else None,
    )
    return result
