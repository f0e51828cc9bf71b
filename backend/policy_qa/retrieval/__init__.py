"""Retrieval components."""

from .context import build_context, to_sources
from .search import Retriever
from .vector_index import IdAllocator, IndexManager

__all__ = [
    "IdAllocator",
    "IndexManager",
    "Retriever",
    "build_context",
    "to_sources",
]
