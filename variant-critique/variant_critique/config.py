"""
Configuration Management

Loads configuration from .env files and provides typed config objects.
Handles API keys, provider settings, GitHub access and fetch caps.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models import Config


def load_config(env_file: Optional[Path] = None) -> Config:
    """
    Load configuration from .env file and environment variables.

    Searches for .env file in:
    1. Provided env_file path
    2. Current directory
    3. User's home directory

    Environment variables override .env file values.

    Args:
        env_file: Optional path to .env file

    Returns:
        Config object with all settings

    Example:
        config = load_config()
        if config.has_anthropic():
            provider = AnthropicProvider(config.anthropic_api_key)
    """
    if env_file and env_file.exists():
        load_dotenv(env_file)
    elif Path(".env").exists():
        load_dotenv(".env")
    elif (Path.home() / ".env").exists():
        load_dotenv(Path.home() / ".env")

    config = Config(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        ollama_host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llava"),
        analysis_provider=os.getenv("ANALYSIS_PROVIDER", "anthropic"),
        anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        max_tokens=int(os.getenv("ANALYSIS_MAX_TOKENS", "4000")),
        github_token=os.getenv("GITHUB_TOKEN"),
        github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
        max_files_per_variant=int(os.getenv("MAX_FILES_PER_VARIANT", "10")),
        max_total_files=int(os.getenv("MAX_TOTAL_FILES", "30")),
        max_files_per_pr_side=int(os.getenv("MAX_FILES_PER_PR_SIDE", "15")),
        fetch_concurrency=int(os.getenv("FETCH_CONCURRENCY", "8")),
    )

    return config
