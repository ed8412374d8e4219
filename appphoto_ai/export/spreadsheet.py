"""Spreadsheet export for flattened records."""

from pathlib import Path
from typing import BinaryIO, Protocol

from openpyxl import Workbook

from appphoto_ai.schemas.extraction import EXPORT_COLUMNS

DEFAULT_FILENAME = "appphoto_data.xlsx"
SHEET_NAME = "Datos Extraídos"


class RecordExporter(Protocol):
    """Anything that can take flat rows keyed by column label."""

    def export_records(self, rows: list[dict[str, str]]) -> None:
        """Export the rows."""


class SpreadsheetExporter:
    """Write flat rows to a single-sheet .xlsx workbook."""

    def __init__(self, target: Path | BinaryIO | None = None):
        """Initialize the exporter.

        Args:
            target: File path or writable binary stream (default: ./appphoto_data.xlsx)
        """
        self.target = target if target is not None else Path(DEFAULT_FILENAME)

    def build_workbook(self, rows: list[dict[str, str]]) -> Workbook:
        """Build a workbook with a header row followed by one row per record."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_NAME

        headers = list(rows[0]) if rows else list(EXPORT_COLUMNS.values())
        sheet.append(headers)
        for row in rows:
            sheet.append([row.get(header, "") for header in headers])
        return workbook

    def export_records(self, rows: list[dict[str, str]]) -> None:
        """Write the rows to the configured target."""
        if isinstance(self.target, Path):
            self.target.parent.mkdir(parents=True, exist_ok=True)
        self.build_workbook(rows).save(self.target)
