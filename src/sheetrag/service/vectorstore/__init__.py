"""In-memory vector store for spreadsheet chunks.

This package provides:
- VectorStoreEntry / SearchResult data models
- InMemoryVectorStore with cosine-similarity search
- retrieval_width for sizing top-k to the dataset

Usage:
    from sheetrag.service.vectorstore import InMemoryVectorStore, retrieval_width

    store = InMemoryVectorStore.from_chunks(chunks, llm_service)
    results = store.similarity_search(query_vector, k=retrieval_width(len(store)))
"""

from sheetrag.service.vectorstore.models import SearchResult, VectorStoreEntry
from sheetrag.service.vectorstore.store import Embedder, InMemoryVectorStore
from sheetrag.service.vectorstore.utils import cosine_similarity, retrieval_width

__all__ = [
    # Models
    "SearchResult",
    "VectorStoreEntry",
    # Store
    "Embedder",
    "InMemoryVectorStore",
    # Utils
    "cosine_similarity",
    "retrieval_width",
]
