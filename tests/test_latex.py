from __future__ import annotations

import pytest

from conftest import BLOCK_A, BLOCK_B
from src.texcore.latex import (
    PaperEntry,
    build_document,
    parse_paperentry,
    split_fields,
)


def test_parse_block_fields():
    entry = parse_paperentry(BLOCK_A)
    assert entry.title == "Gaussian Widgets"
    assert entry.authors == ["Ada Lovelace", "Alan Turing"]
    assert entry.affiliations == ["Univ. A", "Univ. B"]
    assert entry.abstract == "We study widgets \\& gadgets."
    assert entry.keywords == ["widgets", "gadgets"]


def test_nested_and_escaped_braces_stay_in_one_field():
    fields = split_fields("\\paperentrynum{T}{A}{F}{x {y} \\{ z}{k}")
    assert fields == ["T", "A", "F", "x {y} \\{ z", "k"]


def test_multiline_layout_is_accepted():
    block = "\\paperentrynum\n  {T}\n  {A, B}\n  {F1; F2}\n  {Abs}\n  {k1; k2}"
    assert parse_paperentry(block).authors == ["A", "B"]


def test_entry_with_nested_groups_keeps_five_fields():
    block = "\\paperentrynum{On {Nested} Groups}{A. Author}{Lab}{Text with \\% and \\$.}{k}"
    assert len(split_fields(block)) == 5
    assert parse_paperentry(block) == PaperEntry(
        title="On {Nested} Groups",
        authors=["A. Author"],
        affiliations=["Lab"],
        abstract="Text with \\% and \\$.",
        keywords=["k"],
    )


@pytest.mark.parametrize(
    "text",
    [
        "\\paperentrynum{T}{A}{F}{Abs}",
        "\\paperentrynum{T}{A}{F}{Abs}{K}{extra}",
        "\\othermacro{T}{A}{F}{Abs}{K}",
        "\\paperentrynum{T}{A}{F}{Abs}{K",
        "ERROR: Unable to read PDF content.",
    ],
)
def test_invalid_blocks(text):
    with pytest.raises(ValueError):
        parse_paperentry(text)


def test_unbalanced_closing_brace():
    with pytest.raises(ValueError, match="Unbalanced"):
        split_fields("{a}}")


def test_build_document_lists_each_paper():
    body = build_document(
        [(1, "Gaussian Widgets", BLOCK_A), (2, "Sparse Gizmos", BLOCK_B)],
        source="proceedings.pdf",
    )
    assert body.startswith("% Converted from proceedings.pdf")
    assert "% Paper 2: Sparse Gizmos\n" + BLOCK_B in body
    assert body.index(BLOCK_A) < body.index(BLOCK_B)
