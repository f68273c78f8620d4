"""
Completion service clients.

  llm_clients.base            — interface, config and error taxonomy
  llm_clients.openai_client   — OpenAI-compatible chat completions (Groq by default)
  llm_clients.gemini_client   — Google Gemini generateContent
  llm_clients.retry           — bounded-retry wrapper
  llm_clients.factory         — provider registry
"""
from llm_clients.base import (
    BaseCompletionClient,
    CompletionConfig,
    CompletionException,
    CompletionConfigurationError,
    CompletionServiceError,
    CompletionResponseError,
)
from llm_clients.openai_client import OpenAICompatibleClient
from llm_clients.gemini_client import GeminiClient
from llm_clients.retry import RetryingCompletionClient
from llm_clients.factory import (
    create_llm_client,
    create_llm_client_from_settings,
    list_llm_clients,
    register_llm_client,
)

__all__ = [
    "BaseCompletionClient",
    "CompletionConfig",
    "CompletionException",
    "CompletionConfigurationError",
    "CompletionServiceError",
    "CompletionResponseError",
    "OpenAICompatibleClient",
    "GeminiClient",
    "RetryingCompletionClient",
    "create_llm_client",
    "create_llm_client_from_settings",
    "list_llm_clients",
    "register_llm_client",
]
