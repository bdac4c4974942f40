from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .prompts import MACRO_NAME

MACRO = "\\" + MACRO_NAME
FIELD_COUNT = 5


@dataclass
class PaperEntry:
    title: str
    authors: List[str]
    affiliations: List[str]
    abstract: str
    keywords: List[str]


def split_fields(text: str) -> List[str]:
    """Return the contents of every top-level ``{...}`` group in text.

    Braces escaped with a backslash do not change the depth. Raises ValueError
    on unbalanced braces.
    """
    fields: List[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            if depth == 0:
                start = i + 1
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced '}}' at offset {i}")
            if depth == 0:
                fields.append(text[start:i])
        i += 1
    if depth != 0:
        raise ValueError("Unbalanced '{' at end of block")
    return fields


def _split_list(value: str, sep: str) -> List[str]:
    return [part.strip() for part in value.split(sep) if part.strip()]


def parse_paperentry(block: str) -> PaperEntry:
    block = block.strip()
    if not block.startswith(MACRO):
        raise ValueError(f"Block does not start with {MACRO}")
    fields = split_fields(block[len(MACRO):])
    if len(fields) != FIELD_COUNT:
        raise ValueError(f"Expected {FIELD_COUNT} fields, found {len(fields)}")
    title, authors, affiliations, abstract, keywords = (f.strip() for f in fields)
    return PaperEntry(
        title=title,
        authors=_split_list(authors, ","),
        affiliations=_split_list(affiliations, ";"),
        abstract=abstract,
        keywords=_split_list(keywords, ";"),
    )


def build_document(blocks: Iterable[tuple], source: str = "") -> str:
    """Join (index, title, block) triples into one .tex body."""
    lines: List[str] = []
    if source:
        lines.append(f"% Converted from {source}")
        lines.append("")
    for index, title, block in blocks:
        lines.append(f"% Paper {index}: {title}")
        lines.append(block.strip())
        lines.append("")
    return "\n".join(lines)
