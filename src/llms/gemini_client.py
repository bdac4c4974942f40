import os
import json
import logging
import requests
from typing import Optional, Dict, Any
from dataclasses import dataclass

from src.texcore.errors import CapabilityError
from src.texcore.io import DocumentPayload

logger = logging.getLogger(__name__)


@dataclass
class GeminiConfig:
    """Configuration for the Google Gemini REST API client."""

    api_key: str
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    default_model: str = "gemini-2.5-flash"
    temperature: Optional[float] = None
    timeout: int = 300


class GeminiClient:
    """Client sending a prompt plus an inline document to Gemini generateContent."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        config: Optional[GeminiConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: API key for Gemini (can also be set via env var GEMINI_API_KEY)
            model: Model to use (defaults to config default_model)
            config: Configuration object containing API key and settings
            session: Optional requests session to reuse
        """
        if config:
            self.config = config
        else:
            api_key = api_key or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise ValueError(
                    "GEMINI_API_KEY not found in environment variables or parameters"
                )

            self.config = GeminiConfig(
                api_key=api_key, default_model=model or "gemini-2.5-flash"
            )

        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def build_payload(
        self, prompt: str, document: DocumentPayload, json_output: bool = False
    ) -> Dict[str, Any]:
        """Create payload for a prompt sent alongside the full document."""
        payload: Dict[str, Any] = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {
                            "inline_data": {
                                "mime_type": document.mime_type,
                                "data": document.data,
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {},
        }
        if json_output:
            payload["generationConfig"]["responseMimeType"] = "application/json"
        if self.config.temperature is not None:
            payload["generationConfig"]["temperature"] = self.config.temperature
        return payload

    def generate(
        self,
        prompt: str,
        document: DocumentPayload,
        json_output: bool = False,
        model: Optional[str] = None,
    ) -> str:
        """Send the prompt and document; return the response text.

        Args:
            prompt: Instruction text
            document: Encoded document sent as inline data
            json_output: Ask the service for a JSON response body
            model: Model override

        Returns:
            Generated text, possibly empty
        """
        payload = self.build_payload(prompt, document, json_output=json_output)
        response_data = self.make_request(payload, model=model)
        return self.extract_text(response_data)

    def make_request(
        self, payload: Dict[str, Any], model: Optional[str] = None
    ) -> Dict[str, Any]:
        """Make API request to Gemini"""
        model = model or self.config.default_model
        url = f"{self.config.base_url}/models/{model}:generateContent"
        params = {"key": self.config.api_key}

        logger.debug(f"Making API request to: {url}")
        logger.debug(f"Payload size: {len(json.dumps(payload))} characters")

        try:
            response = self.session.post(
                url, params=params, json=payload, timeout=self.config.timeout
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.debug(f"HTTP Error details: {status}")
            try:
                error_response = e.response.json()
            except (ValueError, AttributeError):
                error_response = None
            if isinstance(error_response, dict) and "error" in error_response:
                raise CapabilityError(
                    error_response["error"].get("message", "Unknown error")
                ) from e
            reason = e.response.reason if e.response is not None else str(e)
            raise CapabilityError(f"HTTP Error {status}: {reason}") from e

        except requests.exceptions.RequestException as e:
            logger.debug(f"Request exception: {type(e).__name__}: {e}")
            raise CapabilityError(f"Request failed: {e}") from e

    def extract_text(self, response_data: Dict[str, Any]) -> str:
        """Join the text parts of the first candidate; empty if there are none."""
        candidates = response_data.get("candidates") or []
        if not candidates:
            feedback = response_data.get("promptFeedback", {})
            if feedback.get("blockReason"):
                raise CapabilityError(f"Prompt blocked: {feedback['blockReason']}")
            return ""

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

