"""SheetRAG: chat with your spreadsheets using retrieval-augmented generation."""

__version__ = "0.1.0"
