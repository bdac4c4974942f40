"""Core library for the PDF to paperentry LaTeX converter.

Modules include the data model, document encoding, prompts, the analyzer and
extractor steps, the session state machine, orchestration, LaTeX field
helpers and export QC.
"""

from .models import PaperMetadata, PaperResult, Phase, SessionSnapshot, Status
from .session import Session, SessionStore
from .orchestrator import run_session

__all__ = [
    "PaperMetadata",
    "PaperResult",
    "Phase",
    "SessionSnapshot",
    "Status",
    "Session",
    "SessionStore",
    "run_session",
]
