"""Analyzer view controller.

States: IDLE -> FILE_SELECTED -> ANALYZING -> SUCCEEDED | FAILED. Choosing a new
file from any settled state returns to FILE_SELECTED and discards earlier
results. One controller never runs two analyses at once.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from appphoto_ai.export.spreadsheet import RecordExporter
from appphoto_ai.ingestion.images import is_image_mime
from appphoto_ai.schemas.extraction import (
    ExtractedRecord,
    display_fields,
    display_title,
    flatten_record,
)

logger = logging.getLogger(__name__)

INVALID_FILE_MESSAGE = "Please upload a valid image file."
NO_FILE_MESSAGE = "Please select an image first."
ANALYSIS_FAILED_MESSAGE = (
    "Failed to analyze the image. The AI model might be unable to process this "
    "document. Please try another one."
)


class AnalyzerState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    ANALYZING = "analyzing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DocumentClient(Protocol):
    async def analyze_document(self, image: bytes, mime_type: str) -> list[ExtractedRecord]: ...


@dataclass(frozen=True)
class SelectedImage:
    """An image chosen by the user, waiting to be analyzed."""

    data: bytes
    mime_type: str
    filename: str | None = None


class AnalyzerController:
    """Drive one analyzer view: file selection, analysis, export."""

    def __init__(self, client: DocumentClient, exporter: RecordExporter | None = None):
        """Initialize the controller.

        Args:
            client: Document analysis client
            exporter: Optional exporter used by ``export``
        """
        self.client = client
        self.exporter = exporter
        self.state = AnalyzerState.IDLE
        self.image: SelectedImage | None = None
        self.records: list[ExtractedRecord] | None = None
        self.error: str | None = None
        self._busy = False

    @property
    def is_analyzing(self) -> bool:
        return self._busy

    def select_file(self, data: bytes, mime_type: str | None, filename: str | None = None) -> bool:
        """Choose the image to analyze.

        A non-image file only sets the inline error; the current selection and
        state are kept. Selection is refused while an analysis is running.

        Returns:
            True if the file was accepted
        """
        if self._busy:
            logger.debug("Ignoring file selection while analyzing")
            return False

        if not is_image_mime(mime_type):
            self.error = INVALID_FILE_MESSAGE
            return False

        self.image = SelectedImage(data=data, mime_type=mime_type, filename=filename)
        self.records = None
        self.error = None
        self.state = AnalyzerState.FILE_SELECTED
        return True

    async def analyze(self) -> bool:
        """Run the analysis for the selected image.

        Returns:
            True if an analysis was started (whatever its outcome)
        """
        if self.image is None:
            self.error = NO_FILE_MESSAGE
            return False
        if self._busy:
            return False

        self._busy = True
        self.state = AnalyzerState.ANALYZING
        self.records = None
        self.error = None
        try:
            self.records = await self.client.analyze_document(
                self.image.data, self.image.mime_type
            )
            self.state = AnalyzerState.SUCCEEDED
        except Exception:
            logger.exception("Document analysis failed for %s", self.image.filename or "image")
            self.error = ANALYSIS_FAILED_MESSAGE
            self.state = AnalyzerState.FAILED
        finally:
            self._busy = False
        return True

    def export_rows(self) -> list[dict[str, str]]:
        """Flatten the current records for tabular export."""
        return [flatten_record(record) for record in self.records or []]

    def export(self, exporter: RecordExporter | None = None) -> bool:
        """Hand the current records to an exporter.

        Args:
            exporter: Exporter for this call (default: the injected one)

        Returns:
            True if anything was exported
        """
        exporter = exporter or self.exporter
        if not self.records or self._busy or exporter is None:
            return False
        exporter.export_records(self.export_rows())
        return True

    def to_view(self) -> dict[str, Any]:
        """Snapshot of the view state for rendering."""
        records = None
        if self.records is not None:
            records = [
                {
                    "title": display_title(record, index),
                    "fields": [{"label": label, "value": value} for label, value in display_fields(record)],
                    "data": record.model_dump(by_alias=True),
                }
                for index, record in enumerate(self.records)
            ]
        return {
            "state": self.state.value,
            "filename": self.image.filename if self.image else None,
            "is_analyzing": self._busy,
            "records": records,
            "can_export": bool(self.records) and not self._busy,
            "error": self.error,
        }
