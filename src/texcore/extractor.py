from __future__ import annotations

import logging
from typing import Any

from .errors import ExtractionError
from .io import DocumentPayload
from .models import PaperMetadata
from .prompts import build_extraction_prompt
from .responses import strip_code_fence

logger = logging.getLogger(__name__)

EXTRACTION_FAILED = "Failed to extract abstract."


class PaperExtractor:
    """Converts one identified paper into a ``\\paperentrynum`` block.

    The returned text may still be the unreadable-content sentinel; deciding
    what that means is left to the caller.
    """

    def __init__(self, client: Any):
        self.client = client

    def extract(self, document: DocumentPayload, metadata: PaperMetadata) -> str:
        try:
            text = self.client.generate(build_extraction_prompt(metadata), document)
        except Exception as e:
            logger.error(f"Extraction error (paper {metadata.index}): {e}")
            raise ExtractionError(str(e) or EXTRACTION_FAILED) from e

        if not text or not text.strip():
            logger.error(f"Extraction error (paper {metadata.index}): empty response")
            raise ExtractionError(EXTRACTION_FAILED)

        return strip_code_fence(text)
