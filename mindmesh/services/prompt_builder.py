"""
Prompt construction for grounded answers.

Selected sources are numbered 1..N in selection order. That number is the only
handle the model has for citing a source, so the same order must be used when
the answer is parsed. The model reports its citations on a trailing
``SOURCES_USED:`` line, which keeps the exchange usable with any plain chat
model.
"""

from mindmesh.models.document import DocumentMatch
from mindmesh.services.normalizer import format_tags, truncate_text

SOURCES_MARKER = "SOURCES_USED:"
MAX_CONTEXT_LENGTH = 900

SYSTEM_INSTRUCTION = " ".join(
    [
        "You are MindMesh, a helpful personal assistant.",
        "Use the provided context to answer in a natural, personalized tone.",
        "Do not dump raw database fields or copy text verbatim.",
        "Summarize and connect relevant items. Ask a brief clarification if needed.",
        "If no relevant context exists, say so and ask a helpful follow-up.",
    ]
)


def format_sources_used(indices: list[int]) -> str:
    """Render the trailing citation line for 1-based ``indices``."""
    if not indices:
        return SOURCES_MARKER
    return f"{SOURCES_MARKER} {','.join(str(index) for index in indices)}"


def format_context_item(
    index: int, source: DocumentMatch, max_length: int = MAX_CONTEXT_LENGTH
) -> str:
    lines = [
        f"{index}. [{source.source_type.value}] {source.title or 'Untitled'}",
        truncate_text(source.content or "", max_length),
        format_tags(source.tags),
    ]
    return "\n".join(line for line in lines if line)


def build_prompt(
    question: str,
    sources: list[DocumentMatch],
    max_context_length: int = MAX_CONTEXT_LENGTH,
) -> str:
    """
    Build the user prompt for one question.

    Args:
        question: The trimmed user question
        sources: Selected sources, in citation order
        max_context_length: Per-source snippet cap

    Returns:
        Prompt text ending with the citation instructions
    """
    if not sources:
        return "\n".join(
            [
                f"User question: {question}",
                "",
                "Context: No relevant items found in the user library.",
                "",
                f"At the end of your answer add: {SOURCES_MARKER} (empty)",
            ]
        )

    context = "\n\n".join(
        format_context_item(index, source, max_context_length)
        for index, source in enumerate(sources, start=1)
    )

    return "\n".join(
        [
            f"User question: {question}",
            "",
            "Context items:",
            context,
            "",
            "Answer in a personalized, human tone.",
            "Only use sources that directly support your answer.",
            f"At the end add a line like: {format_sources_used([1, 3])} "
            "(numbers from the context list).",
            f"If none are used, return: {format_sources_used([])}",
        ]
    )
