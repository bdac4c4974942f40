from __future__ import annotations

from typing import Any, Callable, List, Union

import pytest

from src.texcore.io import encode_document

BLOCK_A = (
    "\\paperentrynum{Gaussian Widgets}{Ada Lovelace, Alan Turing}"
    "{Univ. A; Univ. B}{We study widgets \\& gadgets.}{widgets; gadgets}"
)
BLOCK_B = (
    "\\paperentrynum{Sparse Gizmos}{Grace Hopper}{Navy Lab}"
    "{A 50\\% faster {gizmo} design.}{gizmos}"
)

Reply = Union[str, Exception, Callable[[], str]]


class FakeClient:
    """Scripted stand-in for the LLM service; replies are consumed in order."""

    def __init__(self, replies: List[Reply]):
        self.replies = list(replies)
        self.calls: List[dict] = []

    def generate(self, prompt: str, document: Any, json_output: bool = False) -> str:
        self.calls.append(
            {"prompt": prompt, "document": document, "json_output": json_output}
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply()
        return reply


@pytest.fixture
def document():
    return encode_document(b"%PDF-1.7 fake bytes", name="proceedings.pdf")


@pytest.fixture
def fake_client_factory():
    return FakeClient
