"""
Generation Client - model resolution and one-shot fallback around an LLM provider.

Resolution order for the chat model:
1. The configured model name
2. A cached earlier resolution that has not expired
3. The provider's model listing, matched against an ordered preference list
4. The configured default model when listing fails or returns nothing

When a call fails because the model is gone or its quota is spent, the client
lists models again without the failed one and retries exactly once.
"""

import time
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from mindmesh.config import DEFAULT_MODEL_PREFERENCES
from mindmesh.core.llm.base import LLMProvider
from mindmesh.services.prompt_builder import SYSTEM_INSTRUCTION
from mindmesh.utils.exceptions import GenerationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "llama3.1:8b"

_MODEL_NOT_FOUND_MARKERS = ("not found", "not_found", "does not exist")
_QUOTA_MARKERS = (
    "resource_exhausted",
    "quota exceeded",
    "insufficient_quota",
    "exceeded your current quota",
)


class GenerationFailure(str, Enum):
    """Kinds of provider failure the client reacts to."""

    MODEL_NOT_FOUND = "model_not_found"
    QUOTA_EXCEEDED = "quota_exceeded"
    OTHER = "other"


class GenerationResult(BaseModel):
    """Generated text and the model that produced it."""

    text: str
    model: str


def classify_generation_failure(error_text: str | None) -> GenerationFailure:
    """
    Classify a provider error body by substring.

    Args:
        error_text: Error message or response body from the provider

    Returns:
        MODEL_NOT_FOUND, QUOTA_EXCEEDED or OTHER
    """
    if not error_text:
        return GenerationFailure.OTHER

    lowered = error_text.lower()
    if any(marker in lowered for marker in _MODEL_NOT_FOUND_MARKERS):
        return GenerationFailure.MODEL_NOT_FOUND
    if any(marker in lowered for marker in _QUOTA_MARKERS):
        return GenerationFailure.QUOTA_EXCEEDED
    return GenerationFailure.OTHER


def normalize_model_name(name: str) -> str:
    """Strip the ``models/`` resource prefix some providers put on names."""
    name = name.strip()
    if name.startswith("models/"):
        return name[len("models/") :]
    return name


def pick_preferred_model(
    models: list[str], preferences: list[str], avoid: str | None = None
) -> str | None:
    """
    Pick a model from a listing.

    A listed model matches a preference when it equals it, or starts with it
    followed by ``-`` or ``:`` (``llama3.1`` matches ``llama3.1:8b``).
    Preferences are tried in order; without a match the first listed model is
    used.

    Args:
        models: Model names as listed by the provider
        preferences: Ordered model families
        avoid: Model to exclude, usually the one that just failed

    Returns:
        Chosen model name, or None when nothing is left
    """
    excluded = normalize_model_name(avoid) if avoid else None
    candidates = [normalize_model_name(name) for name in models]
    candidates = [name for name in candidates if name and name != excluded]

    for preference in preferences:
        for name in candidates:
            if name == preference or name.startswith((f"{preference}-", f"{preference}:")):
                return name

    return candidates[0] if candidates else None


class ModelCache:
    """
    Holds the last resolved model name for a limited time.

    Shared by concurrent requests; the last write wins.
    """

    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl: Seconds a resolution stays valid
            clock: Monotonic time source
        """
        self.ttl = ttl
        self._clock = clock
        self._model: str | None = None
        self._stored_at = 0.0

    def get(self) -> str | None:
        if self._model is None:
            return None
        if self._clock() - self._stored_at > self.ttl:
            self._model = None
            return None
        return self._model

    def set(self, model: str) -> None:
        self._model = model
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._model = None


class ModelResolver:
    """Decides which chat model to call."""

    def __init__(
        self,
        llm: LLMProvider,
        cache: ModelCache,
        configured_model: str | None = None,
        preferences: list[str] | None = None,
        default_model: str = DEFAULT_MODEL,
    ):
        """
        Initialize resolver.

        Args:
            llm: Provider used for model listing
            cache: Resolution cache
            configured_model: Explicit model; skips discovery entirely
            preferences: Ordered model families for discovery
            default_model: Used when the listing fails or is empty
        """
        self.llm = llm
        self.cache = cache
        self.configured_model = (
            normalize_model_name(configured_model) if configured_model else None
        )
        self.preferences = preferences if preferences is not None else list(DEFAULT_MODEL_PREFERENCES)
        self.default_model = default_model

    async def _list_models(self) -> list[str]:
        try:
            return await self.llm.list_models()
        except GenerationError as e:
            logger.bind(error_type=type(e).__name__).warning(
                f"Model listing failed: {e}"
            )
            return []

    async def resolve(self) -> str:
        """Return the model for the next call."""
        if self.configured_model:
            return self.configured_model

        cached = self.cache.get()
        if cached:
            return cached

        models = await self._list_models()
        model = pick_preferred_model(models, self.preferences)
        if not model:
            # Not cached, so the next call lists again
            logger.bind(listed=len(models)).info(
                f"No chat model listed, using default {self.default_model}"
            )
            return self.default_model

        self.cache.set(model)
        logger.bind(listed=len(models)).info(f"Resolved chat model: {model}")
        return model

    async def resolve_alternative(self, failed_model: str) -> str | None:
        """
        Find a replacement for a model that just failed.

        Returns:
            Another listed model, or None when the listing offers nothing else
        """
        models = await self._list_models()
        return pick_preferred_model(models, self.preferences, avoid=failed_model)


class GenerationClient:
    """
    Sends grounded prompts to the chat model.

    Every call carries the assistant's fixed system instruction.
    """

    def __init__(
        self,
        llm: LLMProvider,
        resolver: ModelResolver,
        system_instruction: str = SYSTEM_INSTRUCTION,
        max_tokens: int = 1024,
        temperature: float = 0.2,
    ):
        self.llm = llm
        self.resolver = resolver
        self.system_instruction = system_instruction
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def _complete(self, prompt: str, model: str) -> str:
        return await self.llm.complete(
            prompt,
            system=self.system_instruction,
            model=model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

    async def generate(self, prompt: str) -> GenerationResult:
        """
        Generate an answer for a built prompt.

        Args:
            prompt: Output of ``build_prompt``

        Returns:
            GenerationResult with the raw model text and the model used

        Raises:
            GenerationError: If the call fails for any reason other than a
                missing model or spent quota, if no alternative model exists,
                or if the single retry fails
        """
        model = await self.resolver.resolve()

        try:
            text = await self._complete(prompt, model)
            return GenerationResult(text=text, model=model)
        except GenerationError as e:
            failure = classify_generation_failure(e.context.get("response_text") or e.message)
            if failure is GenerationFailure.OTHER:
                raise
            first_error = e

        logger.bind(model=model, failure=failure.value).warning(
            f"Chat model {model} unavailable ({failure.value}), looking for an alternative"
        )

        alternative = await self.resolver.resolve_alternative(model)
        if not alternative:
            self.resolver.cache.invalidate()
            raise GenerationError(
                f"No alternative chat model after {failure.value} on {model}",
                context={"model": model, "failure": failure.value},
            ) from first_error

        try:
            text = await self._complete(prompt, alternative)
        except GenerationError as e:
            self.resolver.cache.invalidate()
            logger.bind(model=alternative, failed_model=model).error(
                f"Retry with {alternative} failed: {e}"
            )
            raise GenerationError(
                f"Retry with {alternative} failed: {e.message}",
                context={"model": alternative, "failed_model": model, "failure": failure.value},
            ) from e

        self.resolver.cache.set(alternative)
        logger.bind(failed_model=model).info(f"Switched chat model to {alternative}")
        return GenerationResult(text=text, model=alternative)
