"""Base interface for completion service clients."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any

from config.settings import load_api_key


@dataclass
class CompletionConfig:
    """Configuration for a completion client.

    Attributes:
        model_name: Name of the model to use
        temperature: Sampling temperature (kept near zero for determinism)
        max_tokens: Maximum tokens in response
        timeout: Request timeout in seconds
        json_mode: Ask the provider for JSON-only output where supported
        api_key_env: Environment variable holding the API key
        additional_params: Additional provider-specific request parameters
    """
    model_name: str = "llama-3.1-8b-instant"
    temperature: float = 0.1
    max_tokens: int = 2048
    timeout: int = 30
    json_mode: bool = True
    api_key_env: str = "GROQ_API_KEY"
    additional_params: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.additional_params is None:
            self.additional_params = {}


class CompletionException(Exception):
    """Base exception for completion-service errors."""
    pass


class CompletionConfigurationError(CompletionException):
    """Raised when the client cannot be used as configured (e.g. missing API key).

    Fatal: retrying cannot fix it.
    """
    pass


class CompletionServiceError(CompletionException):
    """Raised on transport failures and non-2xx responses.

    Attributes:
        status_code: HTTP status, or None for transport errors
        body: Provider error body, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def is_transient(self) -> bool:
        """Transport errors, rate limiting and 5xx responses may succeed on retry."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class CompletionResponseError(CompletionException):
    """Raised when a 2xx response does not have the expected structure."""
    pass


class BaseCompletionClient(ABC):
    """Abstract base class for completion clients.

    Implementations send one prompt per call and return the generated text.
    They do not retry; see ``llm_clients.retry`` for a retrying wrapper.
    """

    def __init__(self, config: CompletionConfig, api_key: Optional[str] = None):
        """Initialize the client.

        Args:
            config: Completion configuration
            api_key: Explicit key; when omitted the key is read from
                ``config.api_key_env`` on every call
        """
        self.config = config
        self._api_key = api_key

    @abstractmethod
    def complete(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> str:
        """Generate text for a single-turn prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction
            **kwargs: Per-call overrides (temperature, max_tokens)

        Returns:
            Generated text

        Raises:
            CompletionConfigurationError: If the API key is missing
            CompletionServiceError: On transport or HTTP errors
            CompletionResponseError: If the response body is unexpected
        """
        pass

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": self.provider_name,
            "model_name": self.config.model_name,
            "json_mode": self.config.json_mode,
            "api_key_configured": bool(self._api_key or load_api_key(self.config.api_key_env)),
        }

    @property
    def provider_name(self) -> str:
        return self.__class__.__name__

    def _resolve_api_key(self) -> str:
        api_key = self._api_key or load_api_key(self.config.api_key_env)
        if not api_key:
            raise CompletionConfigurationError(
                f"Completion API key not configured (set {self.config.api_key_env})"
            )
        return api_key
