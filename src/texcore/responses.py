from __future__ import annotations

import re

SENTINEL = "ERROR: Unable to read PDF content."

_SENTINEL_MARKER = "ERROR: Unable to read PDF content"
_LATEX_FENCE_RE = re.compile(r"^```latex\n")
_PLAIN_FENCE_RE = re.compile(r"^```\n")
_CLOSING_FENCE_RE = re.compile(r"\n```$")


def strip_json_fence(text: str) -> str:
    """Remove ```json / ``` markers the model may emit despite instructions."""
    text = text.strip()
    if text.startswith("```"):
        text = text.replace("```json", "").replace("```", "")
    return text.strip()


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```latex"):
        text = _CLOSING_FENCE_RE.sub("", _LATEX_FENCE_RE.sub("", text))
    elif text.startswith("```"):
        text = _CLOSING_FENCE_RE.sub("", _PLAIN_FENCE_RE.sub("", text))
    return text.strip()


def is_unreadable(text: str) -> bool:
    return _SENTINEL_MARKER in text
