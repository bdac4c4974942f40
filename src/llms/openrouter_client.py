import os
import logging
import openai
from typing import Optional, Dict, Any, List
from dataclasses import dataclass

from src.texcore.errors import CapabilityError
from src.texcore.io import DocumentPayload

logger = logging.getLogger(__name__)


@dataclass
class OpenRouterConfig:
    """Configuration for OpenRouter API client."""

    api_key: str
    base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "google/gemini-2.5-flash"
    max_tokens: int = 8000
    temperature: Optional[float] = None
    timeout: int = 300


class OpenRouterClient:
    """Client for OpenRouter.ai models that accept PDF file parts."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        config: Optional[OpenRouterConfig] = None,
        client: Optional[Any] = None,
    ):
        """Initialize the OpenRouter client.

        Args:
            api_key: API key for OpenRouter (can also be set via env var)
            model: Model to use (defaults to config default_model)
            config: Configuration object containing API key and settings
            client: Prebuilt OpenAI-compatible client
        """
        if config:
            self.config = config
        else:
            api_key = api_key or os.getenv("OPENROUTER_API_KEY")
            if not api_key:
                raise ValueError(
                    "OPENROUTER_API_KEY not found in environment variables or parameters"
                )

            self.config = OpenRouterConfig(
                api_key=api_key, default_model=model or "google/gemini-2.5-flash"
            )

        self.client = client or openai.OpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )

    def build_messages(
        self, prompt: str, document: DocumentPayload
    ) -> List[Dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "file",
                        "file": {
                            "filename": document.name,
                            "file_data": document.as_data_url(),
                        },
                    },
                ],
            }
        ]

    def generate(
        self,
        prompt: str,
        document: DocumentPayload,
        json_output: bool = False,
        model: Optional[str] = None,
    ) -> str:
        """Generate text for a prompt sent alongside the full document.

        Args:
            prompt: Instruction text
            document: Encoded document sent as a file part
            json_output: Ask for a JSON object response
            model: Model override

        Returns:
            Generated text response, possibly empty
        """
        kwargs: Dict[str, Any] = {}
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        result = self.chat_completion(
            messages=self.build_messages(prompt, document),
            model=model,
            **kwargs,
        )

        if result["success"]:
            return result["content"] or ""
        else:
            raise CapabilityError(result["error"])

    def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """Generate a chat completion using OpenRouter models.

        Returns:
            API response dictionary
        """
        try:
            response = self.client.chat.completions.create(
                model=model or self.config.default_model,
                messages=messages,
                max_tokens=max_tokens or self.config.max_tokens,
                **kwargs,
            )
            return {
                "success": True,
                "response": response,
                "content": response.choices[0].message.content,
                "usage": response.usage.model_dump() if response.usage else None,
            }
        except Exception as e:
            logger.debug(f"OpenRouter request failed: {type(e).__name__}: {e}")
            return {
                "success": False,
                "error": str(e),
                "response": None,
                "content": None,
                "usage": None,
            }

