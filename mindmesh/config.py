"""
Configuration for MindMesh.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MODEL_PREFERENCES = ["llama3.1", "llama3.2", "llama3", "mistral", "gemma2"]


class LLMConfig(BaseModel):
    """Chat model configuration."""

    provider: str = "ollama"  # ollama, openai
    # Explicit model name; when unset the model is discovered from the provider
    model: str | None = None
    default_model: str = "llama3.1:8b"
    model_preferences: list[str] = Field(default_factory=lambda: list(DEFAULT_MODEL_PREFERENCES))
    model_cache_ttl: float = 3600.0
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    temperature: float = 0.2
    max_tokens: int = 1024
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "nomic-embed-text"
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    timeout: float = 120.0
    # Optional: embedding dimension (fallback to auto-detect)
    dimension: int | None = None
    # Task hints prepended per intent
    document_prefix: str = "search_document: "
    query_prefix: str = "search_query: "


class AssistantConfig(BaseModel):
    """Retrieval and answering limits."""

    match_count: int = 8
    max_sources: int = 4
    min_similarity: float = 0.25
    max_content_length: int = 4000
    max_context_length: int = 900
    # Delete indexed documents whose source record no longer exists
    prune_deleted: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class QdrantConfig(BaseModel):
    """Qdrant document index configuration."""

    url: str = "http://localhost:6333"
    collection_name: str = "documents"
    use_grpc: bool = False
    hnsw_m: int = 16
    hnsw_ef_construct: int = 100
    on_disk: bool = False
    scroll_batch_size: int = 256
    timeout: int = 30


class SourceStoreConfig(BaseModel):
    """Source record database configuration."""

    db_path: str = "data/mindmesh.db"


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    qdrant: QdrantConfig = Field(default_factory=QdrantConfig)
    source_store: SourceStoreConfig = Field(default_factory=SourceStoreConfig)

    # Document index backend: qdrant, memory
    document_backend: str = "qdrant"

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            MINDMESH_LLM_PROVIDER: Chat provider (ollama, openai)
            MINDMESH_LLM_MODEL: Explicit chat model (skips discovery)
            MINDMESH_LLM_DEFAULT_MODEL: Model used when discovery fails
            MINDMESH_LLM_MODEL_PREFERENCES: Comma-separated model families
            MINDMESH_LLM_API_KEY: Chat API key (for OpenAI)
            MINDMESH_EMBEDDER_PROVIDER: Embedder provider
            MINDMESH_EMBEDDER_MODEL: Embedder model name
            MINDMESH_EMBEDDER_API_KEY: Embedder API key (for OpenAI)
            MINDMESH_EMBEDDER_DIMENSION: Embedding dimension (optional)
            MINDMESH_DOCUMENT_BACKEND: Document index backend (qdrant, memory)
            MINDMESH_QDRANT_URL: Qdrant URL
            MINDMESH_QDRANT_COLLECTION: Qdrant collection name
            MINDMESH_SOURCE_DB_PATH: SQLite database holding source records
            MINDMESH_PRUNE_DELETED: Purge documents of deleted sources
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            if value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            if isinstance(default, list):
                return [item.strip() for item in value.split(",") if item.strip()]
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("MINDMESH_LLM_PROVIDER", "ollama"),
                model=get_env("MINDMESH_LLM_MODEL"),
                default_model=get_env("MINDMESH_LLM_DEFAULT_MODEL", "llama3.1:8b"),
                model_preferences=get_env(
                    "MINDMESH_LLM_MODEL_PREFERENCES", list(DEFAULT_MODEL_PREFERENCES)
                ),
                model_cache_ttl=get_env("MINDMESH_LLM_MODEL_CACHE_TTL", 3600.0),
                base_url=get_env("MINDMESH_LLM_BASE_URL", "http://localhost:11434"),
                api_key=get_env("MINDMESH_LLM_API_KEY"),
                temperature=get_env("MINDMESH_LLM_TEMPERATURE", 0.2),
                max_tokens=get_env("MINDMESH_LLM_MAX_TOKENS", 1024),
                timeout=get_env("MINDMESH_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("MINDMESH_EMBEDDER_PROVIDER", "ollama"),
                model=get_env("MINDMESH_EMBEDDER_MODEL", "nomic-embed-text"),
                base_url=get_env("MINDMESH_EMBEDDER_BASE_URL", "http://localhost:11434"),
                api_key=get_env("MINDMESH_EMBEDDER_API_KEY"),
                timeout=get_env("MINDMESH_EMBEDDER_TIMEOUT", 120.0),
                dimension=get_env("MINDMESH_EMBEDDER_DIMENSION"),
                document_prefix=get_env("MINDMESH_EMBEDDER_DOCUMENT_PREFIX", "search_document: "),
                query_prefix=get_env("MINDMESH_EMBEDDER_QUERY_PREFIX", "search_query: "),
            ),
            assistant=AssistantConfig(
                match_count=get_env("MINDMESH_MATCH_COUNT", 8),
                max_sources=get_env("MINDMESH_MAX_SOURCES", 4),
                min_similarity=get_env("MINDMESH_MIN_SIMILARITY", 0.25),
                prune_deleted=get_env("MINDMESH_PRUNE_DELETED", False),
            ),
            document_backend=get_env("MINDMESH_DOCUMENT_BACKEND", "qdrant"),
            qdrant=QdrantConfig(
                url=get_env("MINDMESH_QDRANT_URL", "http://localhost:6333"),
                collection_name=get_env("MINDMESH_QDRANT_COLLECTION", "documents"),
                use_grpc=get_env("MINDMESH_QDRANT_USE_GRPC", False),
                hnsw_m=get_env("MINDMESH_QDRANT_HNSW_M", 16),
                hnsw_ef_construct=get_env("MINDMESH_QDRANT_HNSW_EF_CONSTRUCT", 100),
                on_disk=get_env("MINDMESH_QDRANT_ON_DISK", False),
            ),
            source_store=SourceStoreConfig(
                db_path=get_env("MINDMESH_SOURCE_DB_PATH", "data/mindmesh.db"),
            ),
            logging=LoggingConfig(
                level=get_env("MINDMESH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("MINDMESH_LOG_TO_FILE", True),
                log_dir=get_env("MINDMESH_LOG_DIR", "logs"),
                file_rotation=get_env("MINDMESH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("MINDMESH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("MINDMESH_LOG_COMPRESSION", "zip"),
                serialize=get_env("MINDMESH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Only sections that differ from defaults count as env overrides
        default = cls()
        for section in ("llm", "embedder", "assistant", "qdrant", "source_store", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        if env_config.document_backend != default.document_backend:
            final_dict["document_backend"] = env_config.document_backend

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
