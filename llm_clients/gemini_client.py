"""Google Gemini ``generateContent`` client."""
import logging
from typing import Optional

import requests

from llm_clients.base import (
    BaseCompletionClient,
    CompletionConfig,
    CompletionResponseError,
    CompletionServiceError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient(BaseCompletionClient):
    """Client for the Gemini REST API.

    The key is sent in the ``x-goog-api-key`` header rather than the query
    string so it does not end up in access logs.
    """

    def __init__(
        self,
        config: CompletionConfig,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
    ):
        super().__init__(config, api_key=api_key)
        self.base_url = base_url.rstrip('/')

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def generate_endpoint(self) -> str:
        return f"{self.base_url}/models/{self.config.model_name}:generateContent"

    def build_payload(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> dict:
        generation_config = {
            "temperature": kwargs.get("temperature", self.config.temperature),
            "topK": 1,
            "topP": 1,
            "maxOutputTokens": kwargs.get("max_tokens", self.config.max_tokens),
            **(self.config.additional_params or {}),
        }
        if self.config.json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        return payload

    def complete(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> str:
        api_key = self._resolve_api_key()
        payload = self.build_payload(prompt, system_prompt, **kwargs)

        try:
            response = requests.post(
                self.generate_endpoint,
                json=payload,
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.ConnectionError as e:
            raise CompletionServiceError(f"Failed to connect to Gemini at {self.base_url}: {e}") from e
        except requests.exceptions.Timeout as e:
            raise CompletionServiceError(
                f"Request to Gemini timed out after {self.config.timeout}s: {e}"
            ) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else None
            raise CompletionServiceError(
                f"AI parsing failed with status: {status_code}. Response: {body or 'N/A'}",
                status_code=status_code,
                body=body,
            ) from e
        except requests.exceptions.RequestException as e:
            raise CompletionServiceError(f"Gemini request failed: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise CompletionResponseError(f"Gemini response is not JSON: {e}") from e
        return self._extract_text(result)

    @staticmethod
    def _extract_text(result) -> str:
        try:
            text = result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise CompletionResponseError(f"No response from AI service: {result}")
        if not isinstance(text, str) or not text.strip():
            raise CompletionResponseError("No response from AI service")
        return text
