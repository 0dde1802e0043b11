"""Data models for the in-memory vector store."""

from dataclasses import dataclass

from sheetrag.service.chunking import TextChunk


@dataclass(frozen=True)
class VectorStoreEntry:
    """A chunk paired with its embedding vector."""

    chunk: TextChunk
    embedding: list[float]


@dataclass(frozen=True)
class SearchResult:
    """A chunk returned by a similarity search, with its cosine score."""

    chunk: TextChunk
    score: float
