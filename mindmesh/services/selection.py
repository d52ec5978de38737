"""
Source selection policy.

Decides which retrieved candidates are shown to the model. Candidates that
clear the similarity bar are used, capped at ``max_sources``. When none clear
it, the single best candidate is used anyway so the model always has some
grounding; the prompt tells it to ignore irrelevant context and it may cite
nothing.
"""

from pydantic import BaseModel

from mindmesh.models.document import DocumentMatch

MIN_SIMILARITY = 0.25
MAX_SOURCES = 4


class SelectionPolicy(BaseModel):
    """Threshold, cap and below-threshold fallback for retrieved candidates."""

    model_config = {"frozen": True}

    min_similarity: float = MIN_SIMILARITY
    max_sources: int = MAX_SOURCES
    fallback_to_best: bool = True

    def select(self, candidates: list[DocumentMatch]) -> list[DocumentMatch]:
        """
        Pick the sources for the prompt, highest similarity first.

        Args:
            candidates: Retrieved matches in any order

        Returns:
            Up to ``max_sources`` matches at or above ``min_similarity``; or the
            single best match when none qualify; or nothing for no candidates
        """
        ranked = sorted(candidates, key=lambda match: match.similarity, reverse=True)

        qualified = [match for match in ranked if match.similarity >= self.min_similarity]
        if qualified:
            return qualified[: self.max_sources]

        if self.fallback_to_best:
            return ranked[:1]
        return []
