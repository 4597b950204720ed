"""
Configuration Management
========================

Centralized configuration for the runtime core. Every tunable (LLM model,
context budgets, vault location) is read from the environment here, once,
and handed out as frozen dataclasses.

Only the OpenAI API key is needed to talk to the model, and even that is
checked lazily: the context pipeline, the vault and the tool registry all
work without it, which keeps offline use and tests simple.

Usage:
    from sovereign.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.context.recency_count)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from sovereign.utils.logger import Logger

logger = Logger("Config")

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are the orchestration core of a sovereign operating environment. "
    "Ground every answer in the supplied context, prefer tools for actions, "
    "and answer tersely."
)


def _optional(name: str, default: str) -> str:
    """Get an optional environment variable with a default."""
    return os.getenv(name, default)


def _optional_int(name: str, default: int) -> int:
    """Get an optional integer environment variable."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default


def _optional_float(name: str, default: float) -> float:
    """Get an optional float environment variable."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default


def _optional_bool(name: str, default: bool) -> bool:
    """True if the value is 'true' (case-insensitive)."""
    value = os.getenv(name)
    if not value:
        return default
    return value.lower() == "true"


def _optional_list(name: str, default: list[str], separator: str = "||") -> list[str]:
    """
    Get an optional list environment variable.

    Items are separated by `separator` so that single instructions may
    contain commas.
    """
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(separator) if item.strip()]


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str | None     # sk-... API key, only needed for live calls
    model: str              # Model for chat completions
    embedding_model: str    # Model for embeddings


@dataclass(frozen=True)
class ContextConfig:
    """Budgets for the context-assembly pipeline."""
    recency_count: int = 10
    relevance_limit: int = 3
    artifact_char_limit: int = 5000
    fact_confidence_threshold: float = 0.6
    fact_limit: int = 10
    parallel_processors: bool = False
    system_instructions: list[str] = field(
        default_factory=lambda: [DEFAULT_SYSTEM_INSTRUCTION]
    )


@dataclass(frozen=True)
class VaultConfig:
    """Location of the file-backed record vault."""
    directory: Path


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API configuration (optional)."""
    token: str | None


@dataclass(frozen=True)
class AgentConfig:
    """Agent runtime defaults."""
    default_mode: str


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.openai.model
        config.context.artifact_char_limit
        config.vault.directory
    """
    openai: OpenAIConfig
    context: ContextConfig
    vault: VaultConfig
    github: GitHubConfig
    agent: AgentConfig


def load_config() -> Config:
    """
    Load all configuration from the environment.

    Loads the .env file first; variables already present in the
    environment win.

    Returns:
        Config: The validated configuration
    """
    load_dotenv()

    return Config(
        openai=OpenAIConfig(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            model=_optional("OPENAI_MODEL", "gpt-4o"),
            embedding_model=_optional("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
        ),
        context=ContextConfig(
            recency_count=_optional_int("CONTEXT_RECENCY_COUNT", 10),
            relevance_limit=_optional_int("CONTEXT_RELEVANCE_LIMIT", 3),
            artifact_char_limit=_optional_int("CONTEXT_ARTIFACT_CHAR_LIMIT", 5000),
            fact_confidence_threshold=_optional_float("CONTEXT_FACT_THRESHOLD", 0.6),
            fact_limit=_optional_int("CONTEXT_FACT_LIMIT", 10),
            parallel_processors=_optional_bool("CONTEXT_PARALLEL", False),
            system_instructions=_optional_list(
                "SYSTEM_INSTRUCTION", [DEFAULT_SYSTEM_INSTRUCTION]
            ),
        ),
        vault=VaultConfig(
            directory=Path(_optional("VAULT_DIR", "vault")),
        ),
        github=GitHubConfig(
            token=os.getenv("GITHUB_TOKEN") or None,
        ),
        agent=AgentConfig(
            default_mode=_optional("AGENT_DEFAULT_MODE", "DASHBOARD").upper(),
        ),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the singleton configuration instance.

    Loaded on first access and cached afterwards.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None


def require_openai_key(config: Config) -> str:
    """
    Return the OpenAI key or fail with a clear message.

    Raises:
        ValueError: If OPENAI_API_KEY is not configured
    """
    if not config.openai.api_key:
        raise ValueError(
            "OpenAI api_key is required for live model calls. "
            "Set OPENAI_API_KEY in your .env file."
        )
    return config.openai.api_key


def is_github_configured() -> bool:
    """Check if GitHub integration is configured."""
    return get_config().github.token is not None
