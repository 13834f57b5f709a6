"""
Variant Critique - A/B UI Variant Analysis Tool

Collects UI variants (screenshots, local folders, GitHub branches and
pull requests) and asks a vision/code model for a comparative A/B-test
verdict: scores, a winner, improvements and testing recommendations.

Supports multiple analysis providers:
- Anthropic Claude
- OpenAI GPT-4o
- Local LLMs (Ollama/LLaVA)
"""

from .models import AnalysisResult, Config, Variant
from .session import VariantSession

__version__ = "0.1.0"
__all__ = ["AnalysisResult", "Config", "Variant", "VariantSession"]
