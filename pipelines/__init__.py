"""
Paper LaTeX Pipeline

A high-level pipeline that identifies the papers inside a PDF and converts each
one into a paperentrynum LaTeX block using an LLM service.
"""

from .paper_latex_pipeline import PaperLatexPipeline, create_llm_client
from .config import PaperLatexConfig, LLMConfig

__version__ = "0.1.0"
__all__ = ["PaperLatexPipeline", "PaperLatexConfig", "LLMConfig", "create_llm_client"]
