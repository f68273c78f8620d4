"""Bounded-retry wrapper for completion clients."""
import logging
import random
import time
from typing import Callable, Optional, Dict, Any

from llm_clients.base import BaseCompletionClient, CompletionServiceError

logger = logging.getLogger(__name__)


class RetryingCompletionClient(BaseCompletionClient):
    """Retries transient service errors with jittered exponential backoff.

    Only ``CompletionServiceError`` with ``is_transient`` is retried.
    Configuration errors, 4xx responses and malformed responses are raised on
    the first attempt.

    Example usage:
        client = RetryingCompletionClient(OpenAICompatibleClient(config), max_retries=2)
    """

    def __init__(
        self,
        client: BaseCompletionClient,
        max_retries: int = 2,
        backoff: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(client.config)
        self.client = client
        self.max_retries = max(0, max_retries)
        self.backoff = backoff
        self._sleep = sleep

    @property
    def provider_name(self) -> str:
        return self.client.provider_name

    def get_model_info(self) -> Dict[str, Any]:
        info = self.client.get_model_info()
        info["max_retries"] = self.max_retries
        return info

    def complete(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> str:
        attempt = 0
        while True:
            try:
                return self.client.complete(prompt, system_prompt=system_prompt, **kwargs)
            except CompletionServiceError as e:
                if not e.is_transient or attempt >= self.max_retries:
                    raise
                delay = self._delay(attempt)
                attempt += 1
                logger.warning(
                    "Completion attempt %d/%d failed (%s); retrying in %.2fs",
                    attempt, self.max_retries + 1, e, delay,
                )
                self._sleep(delay)

    def _delay(self, attempt: int) -> float:
        base = self.backoff * (2 ** attempt)
        return base + random.uniform(0, base / 2)
