"""
Citation parsing for model answers.

Reads the ``SOURCES_USED:`` line the model was asked to append. The parser is
deliberately forgiving: a missing or garbled line yields an answer without
citations, never an error.
"""

import re

from pydantic import BaseModel, Field

from mindmesh.services.prompt_builder import SOURCES_MARKER

_MARKER_RE = re.compile(re.escape(SOURCES_MARKER), re.IGNORECASE)
# Markdown and punctuation models wrap around citation numbers
_TOKEN_NOISE = " \t*_`#[]().;"
_INDEX_RE = re.compile(r"[0-9]+")


class ParsedAnswer(BaseModel):
    """Answer text with the citation line removed, and the cited 1-based indices."""

    answer: str
    cited_indices: list[int] = Field(default_factory=list)


def _parse_index(token: str) -> int | None:
    token = token.strip(_TOKEN_NOISE)
    if not _INDEX_RE.fullmatch(token):
        return None
    return int(token)


def parse_answer(raw_answer: str, max_index: int) -> ParsedAnswer:
    """
    Split a raw model answer into visible text and cited source indices.

    Args:
        raw_answer: Text returned by the model
        max_index: Number of sources shown to the model

    Returns:
        ParsedAnswer. Without a marker, the raw text verbatim and no indices.
        Otherwise the text before the marker (trimmed) and the in-range
        integers from the marker line, de-duplicated in order.
    """
    match = _MARKER_RE.search(raw_answer)
    if not match:
        return ParsedAnswer(answer=raw_answer, cited_indices=[])

    remainder = raw_answer[match.end() :]
    citation_line = remainder.split("\n", 1)[0]

    indices: list[int] = []
    for token in citation_line.split(","):
        index = _parse_index(token)
        if index is None or not 1 <= index <= max_index:
            continue
        if index not in indices:
            indices.append(index)

    cleaned = raw_answer[: match.start()].rstrip().rstrip("*_").strip()
    return ParsedAnswer(answer=cleaned, cited_indices=indices)
