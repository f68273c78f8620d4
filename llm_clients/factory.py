"""
Factory Pattern for completion clients.
Allows registration and creation of different provider implementations.
"""
from typing import Dict, Type, Optional, List
import logging

from config.settings import Settings, settings as default_settings
from llm_clients.base import BaseCompletionClient, CompletionConfig
from llm_clients.gemini_client import GeminiClient
from llm_clients.openai_client import OpenAICompatibleClient
from llm_clients.retry import RetryingCompletionClient

logger = logging.getLogger(__name__)

# Global registry of completion providers
_CLIENT_REGISTRY: Dict[str, Type[BaseCompletionClient]] = {}


def register_llm_client(name: str):
    """
    Decorator/function to register a completion client provider.

    Usage:
        register_llm_client("openai")(OpenAICompatibleClient)
    """
    def decorator(cls: Type[BaseCompletionClient]) -> Type[BaseCompletionClient]:
        if name in _CLIENT_REGISTRY:
            logger.warning(
                f"Completion provider '{name}' is already registered. "
                f"Overwriting with {cls.__name__}"
            )
        _CLIENT_REGISTRY[name] = cls
        logger.debug(f"Registered completion provider: {name} -> {cls.__name__}")
        return cls

    return decorator


register_llm_client("openai")(OpenAICompatibleClient)
register_llm_client("gemini")(GeminiClient)


def create_llm_client(
    provider: str,
    config: CompletionConfig,
    **kwargs
) -> BaseCompletionClient:
    """
    Factory function to create a completion client by provider name.

    Args:
        provider: Provider name ("openai", "gemini")
        config: Completion configuration
        **kwargs: Provider-specific arguments (base_url, api_key)

    Returns:
        Instance of the requested client

    Raises:
        ValueError: If provider is not registered
    """
    if provider not in _CLIENT_REGISTRY:
        raise ValueError(
            f"Completion provider '{provider}' not found. "
            f"Available providers: {list_llm_clients()}"
        )
    client = _CLIENT_REGISTRY[provider](config=config, **kwargs)
    logger.info(f"Created completion client: {provider} ({config.model_name})")
    return client


def create_llm_client_from_settings(
    cfg: Optional[Settings] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> BaseCompletionClient:
    """Build the configured client, wrapped for retries when LLM_MAX_RETRIES > 0."""
    cfg = cfg or default_settings
    provider = provider or cfg.LLM_PROVIDER

    if provider == "gemini":
        default_model, api_key_env, base_url = (
            cfg.GEMINI_MODEL, cfg.GEMINI_API_KEY_ENV, cfg.GEMINI_BASE_URL
        )
    else:
        default_model, api_key_env, base_url = (
            cfg.LLM_MODEL, cfg.LLM_API_KEY_ENV, cfg.LLM_BASE_URL
        )

    config = CompletionConfig(
        model_name=model or default_model,
        temperature=cfg.LLM_TEMPERATURE,
        max_tokens=cfg.LLM_MAX_TOKENS,
        timeout=cfg.LLM_TIMEOUT,
        api_key_env=api_key_env,
    )
    client = create_llm_client(provider, config, base_url=base_url)

    if cfg.LLM_MAX_RETRIES > 0:
        client = RetryingCompletionClient(
            client, max_retries=cfg.LLM_MAX_RETRIES, backoff=cfg.LLM_RETRY_BACKOFF
        )
    return client


def list_llm_clients() -> List[str]:
    return sorted(_CLIENT_REGISTRY.keys())
