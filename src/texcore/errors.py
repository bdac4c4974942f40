from __future__ import annotations


class PaperEntryError(Exception):
    """Base class for every error raised by the converter."""


class CapabilityError(PaperEntryError):
    """The LLM service call failed; the message is the service's own text."""


class AnalysisError(PaperEntryError):
    """Session-fatal: the paper list could not be obtained from the document."""


class ExtractionError(PaperEntryError):
    """Item-local: one paper could not be converted."""


class UnsupportedDocumentError(PaperEntryError):
    pass


class DocumentTooLargeError(PaperEntryError):
    pass


class SessionStateError(PaperEntryError):
    pass
