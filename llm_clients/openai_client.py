"""OpenAI-compatible chat completions client (Groq, OpenAI, local gateways)."""
import logging
from typing import List, Dict, Optional

import requests

from llm_clients.base import (
    BaseCompletionClient,
    CompletionConfig,
    CompletionResponseError,
    CompletionServiceError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"


class OpenAICompatibleClient(BaseCompletionClient):
    """Client for ``POST {base_url}/chat/completions`` endpoints.

    Example usage:
        config = CompletionConfig(model_name="llama-3.1-8b-instant")
        client = OpenAICompatibleClient(config)
        text = client.complete("Extract data from this resume: ...")
    """

    def __init__(
        self,
        config: CompletionConfig,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
    ):
        super().__init__(config, api_key=api_key)
        self.base_url = base_url.rstrip('/')
        self.chat_endpoint = f"{self.base_url}/chat/completions"

    @property
    def provider_name(self) -> str:
        return "openai"

    def build_payload(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> dict:
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.config.model_name,
            "messages": messages,
            "temperature": kwargs.get("temperature", self.config.temperature),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            **(self.config.additional_params or {}),
        }
        if self.config.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def complete(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> str:
        api_key = self._resolve_api_key()
        payload = self.build_payload(prompt, system_prompt, **kwargs)

        try:
            response = requests.post(
                self.chat_endpoint,
                json=payload,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.ConnectionError as e:
            raise CompletionServiceError(
                f"Failed to connect to completion service at {self.base_url}. Error: {e}"
            ) from e
        except requests.exceptions.Timeout as e:
            raise CompletionServiceError(
                f"Request to completion service timed out after {self.config.timeout}s. "
                f"Error: {e}"
            ) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else None
            raise CompletionServiceError(
                f"Completion service returned error: {e}. Response: {body or 'N/A'}",
                status_code=status_code,
                body=body,
            ) from e
        except requests.exceptions.RequestException as e:
            raise CompletionServiceError(f"Completion request failed: {e}") from e

        # requests.JSONDecodeError is both a ValueError and a RequestException
        try:
            result = response.json()
        except ValueError as e:
            raise CompletionResponseError(f"Completion response is not JSON: {e}") from e
        return self._extract_content(result)

    @staticmethod
    def _extract_content(result) -> str:
        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise CompletionResponseError(f"Unexpected response format: {result}")
        if not isinstance(content, str) or not content.strip():
            raise CompletionResponseError("Completion response contained no text")
        return content
