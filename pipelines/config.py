"""
Configuration classes for the Paper LaTeX Pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path

PROVIDERS = ("gemini", "openrouter")

DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openrouter": "google/gemini-2.5-flash",
}


@dataclass
class LLMConfig:
    """Configuration for the LLM service that reads the PDF."""

    provider: str = "gemini"
    model_name: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    timeout: int = 300

    def __post_init__(self):
        if self.provider not in PROVIDERS:
            raise ValueError(
                f"Unknown provider: {self.provider} (expected one of {', '.join(PROVIDERS)})"
            )
        if not self.model_name:
            self.model_name = DEFAULT_MODELS[self.provider]


@dataclass
class PaperLatexConfig:
    """Main configuration for the Paper LaTeX Pipeline."""

    # Component configurations
    llm: LLMConfig = field(default_factory=LLMConfig)

    # Limits; the whole document is resent for every paper
    max_papers: int = 50
    max_document_bytes: int = 20 * 1024 * 1024

    # Output settings
    output_dir: str = "./outputs"
    save_results: bool = True
    output_format: str = "tex"  # tex, json, jsonl

    def __post_init__(self):
        """Post-initialization validation and setup."""
        if isinstance(self.llm, dict):
            self.llm = LLMConfig(**self.llm)

        if self.output_format not in ("tex", "json", "jsonl"):
            raise ValueError(f"Unknown output format: {self.output_format}")
        if self.max_papers < 1:
            raise ValueError("max_papers must be at least 1")

        if self.save_results:
            Path(self.output_dir).mkdir(parents=True, exist_ok=True)


def config_from_dict(data: Dict[str, Any], **overrides) -> PaperLatexConfig:
    """Build a config from a loaded YAML/JSON mapping plus keyword overrides."""
    data = dict(data or {})
    llm = dict(data.pop("llm", None) or {})
    llm_overrides = {
        k: v for k, v in overrides.pop("llm", {}).items() if v is not None
    }
    # a model name only makes sense for the provider it was written for
    if llm_overrides.get("provider", llm.get("provider")) != llm.get("provider"):
        llm.pop("model_name", None)
    llm.update(llm_overrides)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return PaperLatexConfig(llm=LLMConfig(**llm), **data)
