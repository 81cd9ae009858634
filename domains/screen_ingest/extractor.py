"""
OCR text extraction via the OCR.space parse API.

Sends a screenshot as a base64 data URI and returns the first parsed text
block. Any failure surfaces as ExtractionError.
"""

from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from domains.screen_ingest.codec import encode_image
from domains.screen_ingest.errors import ExtractionError


class TextExtractor:
    """Client for the OCR collaborator."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.ocr.space/parse/image",
        language: str = "rus",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize text extractor.

        Args:
            api_key: OCR.space API key, sent in the ``apikey`` header
            url: Parse endpoint
            language: Recognition language hint
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client
        """
        self.api_key = api_key
        self.url = url
        self.language = language
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings, client: Optional[httpx.Client] = None) -> "TextExtractor":
        return cls(
            api_key=settings.ocr_api_key,
            url=settings.ocr_url,
            language=settings.ocr_language,
            timeout=settings.ocr_timeout_seconds,
            client=client,
        )

    def _form_data(self, data_uri: str) -> dict[str, str]:
        return {
            "language": self.language,
            "isOverlayRequired": "false",
            "base64Image": data_uri,
            "iscreatesearchablepdf": "false",
            "issearchablepdfhidetextlayer": "false",
        }

    def extract(self, image_path: Path) -> str:
        """
        Extract text from an image.

        Args:
            image_path: Path to a PNG/JPEG screenshot

        Returns:
            Text of the first parsed result

        Raises:
            ExtractionError: If the file is unreadable, the request fails,
                the response is malformed, or nothing was recognized
        """
        image_path = Path(image_path)

        try:
            data_uri = encode_image(image_path)
        except OSError as e:
            raise ExtractionError(f"Cannot read {image_path}: {e}") from e

        try:
            response = self.client.post(
                self.url,
                headers={"apikey": self.api_key},
                data=self._form_data(data_uri),
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise ExtractionError(f"OCR request failed: {e}") from e
        except ValueError as e:
            raise ExtractionError(f"OCR response is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ExtractionError("OCR response has unexpected structure")

        results = payload.get("ParsedResults") or []
        if not isinstance(results, list):
            raise ExtractionError("OCR response has unexpected structure")

        if not results:
            message = payload.get("ErrorMessage")
            if payload.get("IsErroredOnProcessing") and message:
                if isinstance(message, list):
                    message = "; ".join(str(m) for m in message)
                raise ExtractionError(f"No text found in image: {message}")
            raise ExtractionError("No text found in image")

        first = results[0]
        if not isinstance(first, dict) or not isinstance(first.get("ParsedText"), str):
            raise ExtractionError("OCR result is missing ParsedText")

        text = first["ParsedText"]
        logger.debug(f"Extracted {len(text)} characters from {image_path.name}")
        return text

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()
