"""
Response generation via the Gemini generateContent API.
"""

from typing import Optional

import httpx
from loguru import logger

from app.utils.config import DEFAULT_PROMPT_TEMPLATE
from domains.screen_ingest.errors import GenerationError


class ResponseGenerator:
    """Client for the text-generation collaborator."""

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.prompt_template = prompt_template
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings, client: Optional[httpx.Client] = None) -> "ResponseGenerator":
        return cls(
            api_key=settings.gemini_api_key,
            endpoint=settings.gemini_endpoint(),
            prompt_template=settings.prompt_template,
            timeout=settings.generation_timeout_seconds,
            client=client,
        )

    def build_prompt(self, text: str) -> str:
        """Prefix extracted text with the instruction template."""
        return self.prompt_template + text

    def generate(self, prompt: str) -> str:
        """
        Generate a response for a prompt.

        Args:
            prompt: Full prompt text

        Returns:
            Text of the first part of the first candidate

        Raises:
            GenerationError: If the request fails or the response has no candidates
        """
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            response = self.client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            # Query string carries the API key
            detail = _redact(str(e), self.api_key)
            raise GenerationError(f"Generation request failed: {type(e).__name__}: {detail}") from e
        except ValueError as e:
            raise GenerationError(f"Generation response is not valid JSON: {e}") from e

        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError("No response from Gemini API") from e

        if not isinstance(text, str):
            raise GenerationError("Gemini response part has no text")

        logger.debug(f"Generated {len(text)} characters")
        return text

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()


def _redact(message: str, secret: str) -> str:
    return message.replace(secret, "***") if secret else message
