"""In-memory vector store with cosine-similarity search."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from sheetrag.constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_MIN_RELEVANCE_SCORE
from sheetrag.service.chunking import TextChunk
from sheetrag.service.vectorstore.models import SearchResult, VectorStoreEntry
from sheetrag.service.vectorstore.utils import cosine_similarity

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns texts into one vector per text."""

    def embed(self, texts: list[str]) -> list[list[float]]: ...


class InMemoryVectorStore:
    """Holds (chunk, vector) entries for the lifetime of one question.

    The store is never persisted; it is rebuilt from the document rows each
    time a question is asked.
    """

    def __init__(self) -> None:
        self.entries: list[VectorStoreEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_chunks(cls, chunks: list[TextChunk], embedder: Embedder) -> "InMemoryVectorStore":
        """Embed chunks and build a store holding them.

        Args:
            chunks: Chunks to store
            embedder: Provider used to embed the chunk texts

        Returns:
            InMemoryVectorStore: A store with one entry per chunk
        """
        store = cls()
        store.add_chunks(chunks, embedder)
        return store

    def add_chunks(self, chunks: list[TextChunk], embedder: Embedder) -> int:
        """Embed chunks and append them to the store.

        Returns:
            int: Number of entries added

        Raises:
            ValueError: If the embedder returns a different number of vectors
        """
        if not chunks:
            return 0

        embeddings = embedder.embed([chunk.content for chunk in chunks])
        if len(embeddings) != len(chunks):
            raise ValueError(
                f"Embedder returned {len(embeddings)} vectors for {len(chunks)} chunks"
            )

        self.entries.extend(
            VectorStoreEntry(chunk=chunk, embedding=list(embedding))
            for chunk, embedding in zip(chunks, embeddings)
        )
        logger.info(f"✅ Stored {len(chunks)} chunks in memory ({len(self.entries)} total)")
        return len(chunks)

    def similarity_search(
        self,
        query_embedding: list[float],
        k: int,
        min_score: float = DEFAULT_MIN_RELEVANCE_SCORE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> list[SearchResult]:
        """Find the entries most similar to a query vector.

        Args:
            query_embedding: Embedding of the query
            k: Maximum number of results
            min_score: Entries scoring below this are dropped
            max_concurrency: Maximum number of worker threads used for scoring

        Returns:
            list[SearchResult]: Up to k results by descending score (ties keep store order)
        """
        if not self.entries or k <= 0:
            return []

        workers = max(1, min(max_concurrency, len(self.entries)))
        batch_size = -(-len(self.entries) // workers)
        batches = [
            self.entries[start : start + batch_size]
            for start in range(0, len(self.entries), batch_size)
        ]

        def score_batch(batch: list[VectorStoreEntry]) -> list[float]:
            return [cosine_similarity(query_embedding, entry.embedding) for entry in batch]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            scores = [score for batch_scores in pool.map(score_batch, batches) for score in batch_scores]

        ranked = sorted(
            (
                (score, position)
                for position, score in enumerate(scores)
                if score >= min_score
            ),
            key=lambda item: (-item[0], item[1]),
        )
        results = [
            SearchResult(chunk=self.entries[position].chunk, score=score)
            for score, position in ranked[:k]
        ]
        logger.debug(
            f"Similarity search: {len(results)} of {len(self.entries)} entries "
            f"(k={k}, min_score={min_score})"
        )
        return results
