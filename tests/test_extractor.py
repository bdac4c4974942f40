from __future__ import annotations

import pytest

from conftest import BLOCK_A, FakeClient
from src.texcore.errors import CapabilityError, ExtractionError
from src.texcore.extractor import PaperExtractor
from src.texcore.models import PaperMetadata
from src.texcore.responses import SENTINEL, is_unreadable, strip_code_fence

META = PaperMetadata(index=3, title="Gaussian Widgets")


def test_prompt_names_paper_and_rules(document):
    client = FakeClient([BLOCK_A])
    PaperExtractor(client).extract(document, META)

    call = client.calls[0]
    assert call["json_output"] is False
    assert "paper number 3" in call["prompt"]
    assert '"Gaussian Widgets"' in call["prompt"]
    assert "\\paperentrynum{TITLE}{AUTHORS}{AFFILIATIONS}{ABSTRACT}{KEYWORDS}" in call["prompt"]
    assert "Escape & as \\&" in call["prompt"]
    assert SENTINEL in call["prompt"]


@pytest.mark.parametrize(
    "reply",
    [
        BLOCK_A,
        f"  {BLOCK_A}\n",
        f"```latex\n{BLOCK_A}\n```",
        f"```\n{BLOCK_A}\n```",
    ],
)
def test_returns_trimmed_block(document, reply):
    assert PaperExtractor(FakeClient([reply])).extract(document, META) == BLOCK_A


def test_sentinel_is_returned_not_raised(document):
    text = PaperExtractor(FakeClient([SENTINEL])).extract(document, META)
    assert is_unreadable(text)


def test_empty_response(document):
    with pytest.raises(ExtractionError, match="Failed to extract abstract."):
        PaperExtractor(FakeClient(["   "])).extract(document, META)


def test_capability_failure_message(document):
    with pytest.raises(ExtractionError, match="quota exceeded"):
        PaperExtractor(FakeClient([CapabilityError("quota exceeded")])).extract(
            document, META
        )


def test_failure_without_text_uses_fallback(document):
    with pytest.raises(ExtractionError, match="Failed to extract abstract."):
        PaperExtractor(FakeClient([RuntimeError()])).extract(document, META)


def test_strip_code_fence_leaves_plain_text():
    assert strip_code_fence("plain") == "plain"
