from __future__ import annotations

import base64
import json
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional

from .errors import DocumentTooLargeError, UnsupportedDocumentError
from .hashing import document_id

PDF_MIME_TYPE = "application/pdf"
DEFAULT_MAX_DOCUMENT_BYTES = 20 * 1024 * 1024


@dataclass(frozen=True)
class DocumentPayload:
    """Base64 encoding of an uploaded file plus its declared media type.

    Built once per session and shared read-only by every request.
    """

    name: str
    mime_type: str
    data: str
    size: int
    document_id: str

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def strip_data_url(text: str) -> str:
    """Drop a ``data:<type>;base64,`` prefix if present."""
    if text.startswith("data:") and "," in text:
        return text.split(",", 1)[1]
    return text


def guess_mime_type(name: str) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type


def is_pdf(mime_type: Optional[str]) -> bool:
    return (mime_type or "").split(";")[0].strip().lower() == PDF_MIME_TYPE


def encode_document(
    data: bytes,
    name: str = "document.pdf",
    mime_type: Optional[str] = None,
    max_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES,
) -> DocumentPayload:
    mime_type = mime_type or guess_mime_type(name)
    if not is_pdf(mime_type):
        raise UnsupportedDocumentError(
            f"Please upload a PDF file (got {mime_type or 'unknown type'})."
        )
    if not data:
        raise UnsupportedDocumentError(f"{name} is empty.")
    if max_bytes and len(data) > max_bytes:
        raise DocumentTooLargeError(
            f"{name} is {len(data)} bytes; the limit is {max_bytes} bytes."
        )
    return DocumentPayload(
        name=name,
        mime_type=PDF_MIME_TYPE,
        data=base64.b64encode(data).decode("ascii"),
        size=len(data),
        document_id=document_id(data),
    )


def load_document(
    path: Path, max_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
) -> DocumentPayload:
    return encode_document(path.read_bytes(), name=path.name, max_bytes=max_bytes)


def read_jsonl(path: Path) -> Iterator[Dict[str, Any]]:
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            yield json.loads(line)


def write_jsonl(path: Path, records: Iterable[Dict[str, Any]]) -> int:
    """Write one JSON object per line, replacing the file. Returns the line count."""
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
            count += 1
    return count
