from __future__ import annotations

import hashlib
import uuid


def document_id(data: bytes) -> str:
    """Compute document_id as doc_ + blake2s(data)[:8] hex.

    Parameters
    ----------
    data: bytes
        Raw bytes of the uploaded file.

    Returns
    -------
    str
        Identifier of the form doc_XXXXXXXX
    """
    digest = hashlib.blake2s(data).hexdigest()[:8]
    return f"doc_{digest}"


def new_token() -> str:
    return uuid.uuid4().hex
