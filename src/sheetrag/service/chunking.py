"""Recursive, boundary-aware text chunking.

Text is cut on the largest separator that occurs in it (paragraph breaks,
line breaks, sentence punctuation in Latin and CJK scripts, spaces, then
single characters). Pieces still over the size bound are cut again with the
next separators. Pieces are then packed greedily into chunks, and the tail of
each chunk is carried into the next one as overlap.

Every chunk is a contiguous slice of its source text: ``start_index`` locates
it and ``overlap`` counts the leading characters it shares with the previous
chunk, so dropping each overlap and concatenating gives back the source.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sheetrag.constants import CHUNK_OVERLAP, CHUNK_SEPARATORS, CHUNK_SIZE
from sheetrag.service.documents import TextDocument

logger = logging.getLogger(__name__)

_NOT_LATIN_OR_SPACE = re.compile(r"[^a-zA-Z\s]")


def measure_length(text: str) -> int:
    """Measure text for chunk sizing.

    The larger of the code point count (surrogate pairs and other multi-unit
    glyphs count once) and the count of Latin letters and whitespace.
    """
    return max(len(text), len(_NOT_LATIN_OR_SPACE.sub("", text)))


@dataclass(frozen=True)
class TextChunk:
    """A contiguous slice of a document's content.

    Attributes:
        content: The chunk text
        metadata: The parent document's metadata, unchanged
        chunk_index: Position of the chunk within its document
        start_index: Offset of the chunk in the parent content
        overlap: Leading characters shared with the previous chunk
    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    chunk_index: int = 0
    start_index: int = 0
    overlap: int = 0


def _split_keeping_separator(text: str, separator: str) -> list[str]:
    """Split text after every separator, keeping it on the preceding piece."""
    if separator == "":
        return list(text)
    parts = text.split(separator)
    pieces = [part + separator for part in parts[:-1]] + [parts[-1]]
    return [piece for piece in pieces if piece]


class RecursiveTextSplitter:
    """Split text into bounded, overlapping chunks on natural boundaries."""

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        separators: list[str] | None = None,
        length_function: Callable[[str], int] = measure_length,
    ) -> None:
        """Initialize the splitter.

        Args:
            chunk_size: Maximum measured length of a chunk (default: 2000)
            chunk_overlap: Maximum measured length carried between chunks (default: 500)
            separators: Separators in priority order (default: CHUNK_SEPARATORS)
            length_function: Function measuring text length

        Raises:
            ValueError: If the sizes are not positive or the overlap is not smaller
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be a positive integer")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be non-negative and smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators if separators is not None else CHUNK_SEPARATORS)
        self.length_function = length_function

    def _split_pieces(self, text: str, separators: list[str]) -> list[str]:
        separator = ""
        remaining: list[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                remaining = separators[i + 1 :]
                break

        pieces: list[str] = []
        for piece in _split_keeping_separator(text, separator):
            if self.length_function(piece) <= self.chunk_size:
                pieces.append(piece)
            elif remaining:
                pieces.extend(self._split_pieces(piece, remaining))
            else:
                pieces.extend(piece)
        return pieces

    def split_text(self, text: str) -> list[tuple[int, str, int]]:
        """Split text into chunks.

        Args:
            text: The text to split

        Returns:
            List of (start_index, chunk_text, overlap) tuples in source order
        """
        if not text:
            return []

        pieces = self._split_pieces(text, self.separators)
        chunks: list[tuple[int, str, int]] = []
        current: list[str] = []
        current_start = 0
        previous_end = 0

        def emit() -> None:
            nonlocal previous_end
            content = "".join(current)
            overlap = max(0, previous_end - current_start)
            chunks.append((current_start, content, overlap))
            previous_end = current_start + len(content)

        for piece in pieces:
            if current and self.length_function("".join(current) + piece) > self.chunk_size:
                emit()
                # Keep at most chunk_overlap of the tail, and only if the next piece still fits
                while current and (
                    self.length_function("".join(current)) > self.chunk_overlap
                    or self.length_function("".join(current) + piece) > self.chunk_size
                ):
                    current_start += len(current.pop(0))
            current.append(piece)

        if current:
            emit()
        return chunks

    def split_documents(self, documents: list[TextDocument]) -> list[TextChunk]:
        """Split documents into chunks carrying each document's metadata.

        Args:
            documents: Documents in source order

        Returns:
            list[TextChunk]: Chunks of all documents, in order
        """
        chunks: list[TextChunk] = []
        for document in documents:
            for index, (start, content, overlap) in enumerate(self.split_text(document.content)):
                chunks.append(
                    TextChunk(
                        content=content,
                        metadata=dict(document.metadata),
                        chunk_index=index,
                        start_index=start,
                        overlap=overlap,
                    )
                )

        logger.info(f"✂️  Split {len(documents)} documents into {len(chunks)} chunks")
        return chunks
