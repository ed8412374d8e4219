"""Tabular export of extracted records."""

from appphoto_ai.export.spreadsheet import (
    DEFAULT_FILENAME,
    SHEET_NAME,
    RecordExporter,
    SpreadsheetExporter,
)

__all__ = ["DEFAULT_FILENAME", "SHEET_NAME", "RecordExporter", "SpreadsheetExporter"]
