"""
Assistant Service - end-to-end answering over a user's own library.

One ``ask`` runs, in order:
- index sync for the caller's scope (blocking)
- query embedding and tenant-scoped retrieval
- source selection and prompt building
- generation with model fallback
- citation parsing and mapping back to sources
"""

from mindmesh.config import Config
from mindmesh.core.document_store.base import DocumentStore
from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.core.llm.base import LLMProvider
from mindmesh.core.source_store.base import SourceStore
from mindmesh.models.chat import AssistantAnswer, ChatSource
from mindmesh.models.document import DocumentMatch
from mindmesh.services.answer_parser import parse_answer
from mindmesh.services.generation import GenerationClient, ModelCache, ModelResolver
from mindmesh.services.index_sync import IndexSynchronizer
from mindmesh.services.prompt_builder import build_prompt
from mindmesh.services.retriever import Retriever
from mindmesh.services.selection import SelectionPolicy
from mindmesh.utils.exceptions import EmptyQuestionError, UnauthenticatedError, ValidationError
from mindmesh.utils.logger import get_logger, scoped

logger = get_logger(__name__)


class AssistantService:
    """
    Answers questions grounded in the caller's notes, tasks, files and reminders.

    Stateless between calls except for the model cache, which concurrent
    calls share.
    """

    def __init__(
        self,
        source_store: SourceStore,
        document_store: DocumentStore,
        embedder: Embedder,
        llm: LLMProvider,
        config: Config,
        model_cache: ModelCache | None = None,
    ):
        """
        Initialize Assistant Service.

        Args:
            source_store: Reader for source records and tags
            document_store: Document index
            embedder: Embedder for documents and questions
            llm: Chat model provider
            config: Configuration object
            model_cache: Shared model resolution cache (created from config if omitted)
        """
        self.source_store = source_store
        self.document_store = document_store
        self.embedder = embedder
        self.llm = llm
        self.config = config

        settings = config.assistant

        self.synchronizer = IndexSynchronizer(
            source_store=source_store,
            document_store=document_store,
            embedder=embedder,
            max_content_length=settings.max_content_length,
            prune_deleted=settings.prune_deleted,
        )
        self.retriever = Retriever(document_store, match_count=settings.match_count)
        self.selection = SelectionPolicy(
            min_similarity=settings.min_similarity,
            max_sources=settings.max_sources,
        )

        self.model_cache = model_cache or ModelCache(ttl=config.llm.model_cache_ttl)
        self.generation = GenerationClient(
            llm=llm,
            resolver=ModelResolver(
                llm=llm,
                cache=self.model_cache,
                configured_model=config.llm.model,
                preferences=config.llm.model_preferences,
                default_model=config.llm.default_model,
            ),
            max_tokens=config.llm.max_tokens,
            temperature=config.llm.temperature,
        )

    async def initialize(self) -> None:
        """Initialize both stores."""
        logger.info("Initializing Assistant Service")

        await self.source_store.initialize()
        logger.info("Source store initialized")

        await self.document_store.initialize()
        logger.info("Document store initialized")

    async def ask(self, tenant_id: str, question: str, user_id: str | None) -> AssistantAnswer:
        """
        Answer a question from the caller's own data.

        Args:
            tenant_id: Workspace ID
            question: Free-form question
            user_id: Authenticated caller, None when unauthenticated

        Returns:
            AssistantAnswer with the cleaned answer and only the cited sources

        Raises:
            EmptyQuestionError: If the question is blank
            UnauthenticatedError: If there is no caller
            IndexSyncError: If the index cannot be brought up to date
            EmbeddingError: If the question cannot be embedded
            DocumentStoreError: If retrieval fails
            GenerationError: If no model produces an answer
        """
        trimmed = (question or "").strip()
        if not trimmed:
            raise EmptyQuestionError("Question cannot be empty")

        if not user_id:
            raise UnauthenticatedError("Sign in to use the assistant")

        if not tenant_id:
            raise ValidationError("Tenant is required", context={"user_id": user_id})

        log = scoped(logger, tenant_id, user_id)
        log.debug("Answering question")

        await self.synchronizer.sync(tenant_id, user_id)

        query_vector = await self.embedder.embed(trimmed, EmbeddingIntent.QUERY)
        candidates = await self.retriever.retrieve(tenant_id, query_vector)
        selected = self.selection.select(candidates)

        prompt = build_prompt(
            trimmed, selected, max_context_length=self.config.assistant.max_context_length
        )
        result = await self.generation.generate(prompt)

        parsed = parse_answer(result.text, max_index=len(selected))
        sources = self._cited_sources(selected, parsed.cited_indices)

        log.bind(candidates=len(candidates), model=result.model).info(
            f"Answered with {len(sources)}/{len(selected)} sources cited"
        )

        return AssistantAnswer(
            answer=parsed.answer or result.text,
            sources=sources,
            model=result.model,
        )

    @staticmethod
    def _cited_sources(selected: list[DocumentMatch], indices: list[int]) -> list[ChatSource]:
        # Indices are 1-based positions in the prompt's context list
        return [
            ChatSource.from_match(selected[index - 1])
            for index in indices
            if 1 <= index <= len(selected)
        ]

    async def close(self) -> None:
        """Close all connections."""
        logger.info("Closing Assistant Service")

        await self.document_store.close()
        await self.source_store.close()
        await self.llm.close()
        await self.embedder.close()

        logger.info("Assistant Service closed")
