"""Exceptions raised when user input cannot be turned into a document."""


class SheetRAGError(Exception):
    """Base class for SheetRAG input errors."""


class InvalidSpreadsheetError(SheetRAGError):
    """Raised when an upload is not a readable Excel workbook (.xlsx or .xls)."""


class EmptySpreadsheetError(SheetRAGError):
    """Raised when the first sheet of a workbook holds no data rows."""
