from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from .errors import AnalysisError
from .io import DocumentPayload
from .models import PaperMetadata
from .prompts import build_analysis_prompt
from .responses import strip_json_fence

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Failed to analyze PDF structure."


def parse_paper_list(text: Optional[str], max_papers: int = 0) -> List[PaperMetadata]:
    """Turn the analyzer's raw response into an ordered list of papers.

    Order is kept as emitted by the model; indices are not re-sorted or checked
    for contiguity.
    """
    if not text or not text.strip():
        raise ValueError("No response from AI for structure analysis.")

    try:
        data = json.loads(strip_json_fence(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not valid JSON: {e}") from e

    if isinstance(data, dict):
        # JSON-object mode wraps the array, e.g. {"papers": [...]}
        lists = [v for v in data.values() if isinstance(v, list)]
        if len(lists) == 1:
            data = lists[0]

    if not isinstance(data, list) or len(data) == 0:
        raise ValueError("Could not identify papers in the PDF.")
    if max_papers and len(data) > max_papers:
        raise ValueError(
            f"Found {len(data)} papers; at most {max_papers} can be processed."
        )

    return [PaperMetadata.from_dict(item) for item in data]


class DocumentAnalyzer:
    """Asks the capability which papers the document contains."""

    def __init__(self, client: Any, max_papers: int = 50):
        self.client = client
        self.max_papers = max_papers

    def analyze(self, document: DocumentPayload) -> List[PaperMetadata]:
        logger.info(f"Analyzing structure of {document.name} ({document.size} bytes)")
        try:
            text = self.client.generate(
                build_analysis_prompt(), document, json_output=True
            )
            papers = parse_paper_list(text, self.max_papers)
        except Exception as e:
            logger.error(f"Analysis failed for {document.name}: {e}")
            raise AnalysisError(f"{ANALYSIS_FAILED} {e}") from e

        logger.info(f"Identified {len(papers)} papers in {document.name}")
        return papers
