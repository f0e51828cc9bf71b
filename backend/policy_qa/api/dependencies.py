"""Shared FastAPI dependencies.

Providers and gateways are built once from settings and reused for the
process lifetime.
"""

from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI
from qdrant_client import AsyncQdrantClient

from policy_qa.answer.generator import AnswerGenerator
from policy_qa.answer.service import QAService
from policy_qa.core.capability import Capability, Configured, Unconfigured
from policy_qa.core.config import Settings, get_settings
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.ingest.pipeline import IngestPipeline
from policy_qa.models.entities import IndexConfig
from policy_qa.retrieval import IndexManager, Retriever

_QDRANT: AsyncQdrantClient | None = None
_EMBEDDING_CLIENT: Capability[AsyncOpenAI] | None = None
_CHAT_CLIENT: Capability[AsyncOpenAI] | None = None
_INDEX: IndexManager | None = None
_PIPELINE: IngestPipeline | None = None
_QA_SERVICE: QAService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_qdrant_client() -> AsyncQdrantClient:
    global _QDRANT
    if _QDRANT is None:
        _QDRANT = AsyncQdrantClient(location=get_app_settings().qdrant_url)
    return _QDRANT


def _openai_capability(api_key: str | None) -> Capability[AsyncOpenAI]:
    if not api_key:
        return Unconfigured()
    return Configured(AsyncOpenAI(api_key=api_key))


def get_embedding_client() -> Capability[AsyncOpenAI]:
    global _EMBEDDING_CLIENT
    if _EMBEDDING_CLIENT is None:
        _EMBEDDING_CLIENT = _openai_capability(get_app_settings().resolved_embedding_key)
    return _EMBEDDING_CLIENT


def get_chat_client() -> Capability[AsyncOpenAI]:
    global _CHAT_CLIENT
    if _CHAT_CLIENT is None:
        _CHAT_CLIENT = _openai_capability(get_app_settings().resolved_chat_key)
    return _CHAT_CLIENT


def get_index_config() -> IndexConfig:
    settings = get_app_settings()
    return IndexConfig(collection_name=settings.collection, vector_size=settings.vector_size)


def get_index_manager() -> IndexManager:
    global _INDEX
    if _INDEX is None:
        _INDEX = IndexManager(get_qdrant_client(), get_index_config())
    return _INDEX


def get_embedding_gateway() -> EmbeddingGateway:
    settings = get_app_settings()
    return EmbeddingGateway(
        get_embedding_client(),
        model=settings.embedding_model,
        vector_size=settings.vector_size,
        batch_size=settings.embedding_batch_size,
    )


def get_answer_generator() -> Capability[AnswerGenerator]:
    settings = get_app_settings()
    chat = get_chat_client()
    if isinstance(chat, Configured):
        return Configured(AnswerGenerator(chat.client, model=settings.chat_model, temperature=settings.temperature))
    return chat


def get_ingest_pipeline() -> IngestPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = IngestPipeline(
            index=get_index_manager(),
            embeddings=get_embedding_gateway(),
            max_chars=get_app_settings().chunk_max_chars,
        )
    return _PIPELINE


def get_qa_service() -> QAService:
    global _QA_SERVICE
    if _QA_SERVICE is None:
        index = get_index_manager()
        _QA_SERVICE = QAService(
            index=index,
            retriever=Retriever(index, get_embedding_gateway()),
            generator=get_answer_generator(),
            limit=get_app_settings().top_k,
        )
    return _QA_SERVICE


def reset_state() -> None:
    """Drop cached singletons so the next request rebuilds them from settings."""
    global _QDRANT, _EMBEDDING_CLIENT, _CHAT_CLIENT, _INDEX, _PIPELINE, _QA_SERVICE
    get_app_settings.cache_clear()
    get_settings.cache_clear()
    _QDRANT = None
    _EMBEDDING_CLIENT = None
    _CHAT_CLIENT = None
    _INDEX = None
    _PIPELINE = None
    _QA_SERVICE = None


__all__ = [
    "get_app_settings",
    "get_qdrant_client",
    "get_embedding_client",
    "get_chat_client",
    "get_index_manager",
    "get_embedding_gateway",
    "get_answer_generator",
    "get_ingest_pipeline",
    "get_qa_service",
    "reset_state",
]
