"""
Paper LaTeX Pipeline

A high-level pipeline that turns a PDF holding one or more research papers into
one ``\\paperentrynum`` LaTeX block per paper using an LLM service.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from dataclasses import asdict

from .config import PaperLatexConfig, LLMConfig
from src.llms.gemini_client import GeminiClient, GeminiConfig
from src.llms.openrouter_client import OpenRouterClient, OpenRouterConfig
from src.texcore.analyzer import DocumentAnalyzer
from src.texcore.extractor import PaperExtractor
from src.texcore.io import DocumentPayload, load_document, write_jsonl
from src.texcore.latex import build_document
from src.texcore.models import PaperMetadata, Phase, SessionSnapshot
from src.texcore.orchestrator import UpdateCallback, run_session
from src.texcore.session import SessionStore


logger = logging.getLogger(__name__)


def create_llm_client(llm: LLMConfig) -> Any:
    """Build the capability client for the configured provider."""
    if llm.provider == "gemini":
        if not llm.api_key:
            return GeminiClient(model=llm.model_name)
        config = GeminiConfig(
            api_key=llm.api_key,
            default_model=llm.model_name,
            temperature=llm.temperature,
            timeout=llm.timeout,
        )
        if llm.base_url:
            config.base_url = llm.base_url
        return GeminiClient(config=config)

    if not llm.api_key:
        return OpenRouterClient(model=llm.model_name)
    config = OpenRouterConfig(
        api_key=llm.api_key,
        default_model=llm.model_name,
        temperature=llm.temperature,
        timeout=llm.timeout,
    )
    if llm.base_url:
        config.base_url = llm.base_url
    return OpenRouterClient(config=config)


class PaperLatexPipeline:
    """
    End-to-end pipeline for converting a multi-paper PDF into LaTeX entries.

    The document is analyzed once, then every paper is extracted in order, one
    request at a time. Progress is published as immutable session snapshots.
    """

    def __init__(
        self,
        config: Optional[PaperLatexConfig] = None,
        client: Optional[Any] = None,
        **kwargs,
    ):
        """
        Initialize the Paper LaTeX Pipeline.

        Args:
            config: Configuration object for the pipeline
            client: Prebuilt capability client; built from config.llm if omitted
            **kwargs: Additional configuration parameters
        """
        self.config = config or PaperLatexConfig(**kwargs)
        self.llm_client = client
        if self.llm_client is None:
            self._init_llm()

        self.analyzer = DocumentAnalyzer(
            self.llm_client, max_papers=self.config.max_papers
        )
        self.extractor = PaperExtractor(self.llm_client)
        self.store = SessionStore()

        logger.info("Paper LaTeX Pipeline initialized successfully")

    def _init_llm(self):
        """Initialize LLM client."""
        try:
            self.llm_client = create_llm_client(self.config.llm)
            logger.info(
                f"LLM client initialized: {self.config.llm.provider}/{self.config.llm.model_name}"
            )
        except Exception as e:
            logger.error(f"Failed to initialize LLM client: {e}")
            raise

    def load(self, source: Union[str, Path, DocumentPayload]) -> DocumentPayload:
        if isinstance(source, DocumentPayload):
            return source
        return load_document(Path(source), max_bytes=self.config.max_document_bytes)

    def analyze(self, source: Union[str, Path, DocumentPayload]) -> List[PaperMetadata]:
        """Only list the papers found in the document."""
        return self.analyzer.analyze(self.load(source))

    def __call__(
        self,
        source: Union[str, Path, DocumentPayload],
        on_update: Optional[UpdateCallback] = None,
    ) -> SessionSnapshot:
        """
        Convert every paper in the document.

        Args:
            source: PDF path or an already encoded document
            on_update: Called with a snapshot after every state transition

        Returns:
            The final snapshot of the session
        """
        document = self.load(source)
        logger.info(f"Processing document: {document.name}")

        snapshot = run_session(
            self.store, document, self.analyzer, self.extractor, on_update=on_update
        )

        if (
            self.config.save_results
            and snapshot.phase is Phase.FINISHED
            and self.store.is_current_id(snapshot.session_id)
        ):
            self._save_results(snapshot, document)

        return snapshot

    def reset(self) -> SessionSnapshot:
        return self.store.reset()

    def export_records(
        self, snapshot: SessionSnapshot, document: DocumentPayload
    ) -> List[Dict[str, Any]]:
        timestamp = self._get_timestamp()
        return [
            {
                "document_id": document.document_id,
                "session_id": snapshot.session_id,
                **result.to_dict(),
                "timestamp_iso": timestamp,
            }
            for result in snapshot.results
        ]

    def _save_results(self, snapshot: SessionSnapshot, document: DocumentPayload):
        """Save conversion results to file."""
        try:
            stem = Path(document.name).stem or document.document_id
            output_dir = Path(self.config.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

            if self.config.output_format == "tex":
                output_file = output_dir / f"{stem}.tex"
                blocks = [
                    (r.metadata.index, r.metadata.title, r.content)
                    for r in snapshot.successes()
                ]
                output_file.write_text(
                    build_document(blocks, source=document.name), encoding="utf-8"
                )
            elif self.config.output_format == "json":
                output_file = output_dir / f"{stem}_results.json"
                with open(output_file, "w", encoding="utf-8") as f:
                    json.dump(
                        self.export_records(snapshot, document),
                        f,
                        indent=2,
                        ensure_ascii=False,
                    )
            else:
                output_file = output_dir / f"{stem}_results.jsonl"
                write_jsonl(output_file, self.export_records(snapshot, document))

            logger.info(f"Results saved to: {output_file}")

        except OSError as e:
            logger.error(f"Failed to save results: {e}")

    def _get_timestamp(self) -> str:
        """Get current timestamp."""
        return datetime.now().astimezone().isoformat(timespec="seconds")

    def save_pretrained(self, save_directory: str):
        """Save the pipeline configuration; the API key is never written."""
        save_directory = Path(save_directory)
        save_directory.mkdir(parents=True, exist_ok=True)

        config_dict = asdict(self.config)
        config_dict["llm"]["api_key"] = None

        config_file = save_directory / "config.json"
        with open(config_file, "w") as f:
            json.dump(config_dict, f, indent=2)

        logger.info(f"Pipeline configuration saved to: {save_directory}")

    @classmethod
    def from_pretrained(cls, save_directory: str, **kwargs):
        """Load pipeline from saved configuration."""
        config_file = Path(save_directory) / "config.json"

        if not config_file.exists():
            raise ValueError(f"Configuration file not found: {config_file}")

        with open(config_file, "r") as f:
            config_dict = json.load(f)

        llm_config = LLMConfig(**config_dict["llm"])
        main_config_dict = {k: v for k, v in config_dict.items() if k != "llm"}

        config = PaperLatexConfig(llm=llm_config, **main_config_dict)

        return cls(config, **kwargs)
