"""Tests for recursive text chunking."""

import pytest

from sheetrag.service.chunking import (
    RecursiveTextSplitter,
    _split_keeping_separator,
    measure_length,
)
from sheetrag.service.documents import TextDocument


def reconstruct(chunks: list[tuple[int, str, int]]) -> str:
    """Join chunks with their declared overlaps removed."""
    return "".join(content[overlap:] for _, content, overlap in chunks)


@pytest.fixture
def long_row_text() -> str:
    """A row document far longer than one chunk."""
    lines = [f"Kolom {i} (text): nilai panjang nomor {i}, status Lunas." for i in range(200)]
    return "Row 1:\n" + "\n".join(lines)


class TestMeasureLength:
    """Tests for measure_length."""

    def test_plain_text(self):
        assert measure_length("abc def") == 7

    def test_non_latin(self):
        assert measure_length("héllo 世界") == 8


class TestSplitKeepingSeparator:
    """Tests for _split_keeping_separator."""

    def test_separator_stays_on_preceding_piece(self):
        assert _split_keeping_separator("a.b.c", ".") == ["a.", "b.", "c"]

    def test_trailing_separator(self):
        assert _split_keeping_separator("a\nb\n", "\n") == ["a\n", "b\n"]

    def test_empty_separator_splits_characters(self):
        assert _split_keeping_separator("abc", "") == ["a", "b", "c"]


class TestRecursiveTextSplitter:
    """Tests for RecursiveTextSplitter."""

    def test_short_text_is_one_chunk(self):
        splitter = RecursiveTextSplitter()
        assert splitter.split_text("Row 1:\nNama (text): Budi") == [
            (0, "Row 1:\nNama (text): Budi", 0)
        ]

    def test_empty_text(self):
        assert RecursiveTextSplitter().split_text("") == []

    def test_long_text_bounds(self, long_row_text):
        """Test every chunk and overlap stays within its bound."""
        chunks = RecursiveTextSplitter().split_text(long_row_text)

        assert len(chunks) > 1
        for _, content, overlap in chunks:
            assert measure_length(content) <= 2000
            assert overlap <= 500
        assert any(overlap > 0 for _, _, overlap in chunks[1:])

    def test_long_text_reconstructs(self, long_row_text):
        """Test dropping overlaps and concatenating gives back the text."""
        chunks = RecursiveTextSplitter().split_text(long_row_text)

        assert reconstruct(chunks) == long_row_text
        for start, content, _ in chunks:
            assert long_row_text[start : start + len(content)] == content

    def test_splits_on_line_breaks(self, long_row_text):
        """Test chunks end on line boundaries when lines are short."""
        chunks = RecursiveTextSplitter().split_text(long_row_text)
        assert all(content.endswith("\n") for _, content, _ in chunks[:-1])

    def test_text_without_separators(self):
        """Test text with no separators falls back to single characters."""
        text = "x" * 4500
        chunks = RecursiveTextSplitter(chunk_size=1000, chunk_overlap=100).split_text(text)

        assert reconstruct(chunks) == text
        assert all(len(content) <= 1000 for _, content, _ in chunks)
        assert all(overlap <= 100 for _, _, overlap in chunks)

    def test_small_custom_sizes(self):
        text = "satu dua tiga empat lima enam tujuh delapan sembilan sepuluh"
        chunks = RecursiveTextSplitter(chunk_size=20, chunk_overlap=8).split_text(text)

        assert reconstruct(chunks) == text
        assert all(len(content) <= 20 for _, content, _ in chunks)

    @pytest.mark.parametrize("size,overlap", [(0, 0), (100, 100), (100, -1)])
    def test_invalid_sizes(self, size, overlap):
        with pytest.raises(ValueError):
            RecursiveTextSplitter(chunk_size=size, chunk_overlap=overlap)

    def test_split_documents_keeps_metadata(self, long_row_text):
        """Test chunks carry the parent metadata and per-document indexes."""
        documents = [
            TextDocument(content=long_row_text, metadata={"row_index": 1, "total_rows": 2}),
            TextDocument(content="Row 2:\nNama (text): Siti", metadata={"row_index": 2, "total_rows": 2}),
        ]

        chunks = RecursiveTextSplitter().split_documents(documents)

        first_doc = [chunk for chunk in chunks if chunk.metadata["row_index"] == 1]
        assert [chunk.chunk_index for chunk in first_doc] == list(range(len(first_doc)))
        assert chunks[-1].content == "Row 2:\nNama (text): Siti"
        assert chunks[-1].chunk_index == 0
        assert chunks[-1].metadata == {"row_index": 2, "total_rows": 2}
