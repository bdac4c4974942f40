from .openrouter_client import OpenRouterClient, OpenRouterConfig
from .gemini_client import GeminiClient, GeminiConfig

__all__ = [
    "OpenRouterClient",
    "OpenRouterConfig",
    "GeminiClient",
    "GeminiConfig",
]
