"""Unit tests for the analyzer view controller."""

import asyncio
import unittest

from appphoto_ai.controllers.analyzer import (
    ANALYSIS_FAILED_MESSAGE,
    INVALID_FILE_MESSAGE,
    NO_FILE_MESSAGE,
    AnalyzerController,
    AnalyzerState,
)
from appphoto_ai.errors import AnalysisError
from appphoto_ai.schemas.extraction import ExtractedRecord


class _StubDocumentClient:
    def __init__(self, records=None, error: Exception | None = None) -> None:
        self.records = records if records is not None else []
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    async def analyze_document(self, image: bytes, mime_type: str):
        self.calls.append((image, mime_type))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.records


class _StubExporter:
    def __init__(self) -> None:
        self.exported: list[list[dict[str, str]]] = []

    def export_records(self, rows: list[dict[str, str]]) -> None:
        self.exported.append(rows)


class AnalyzerControllerTests(unittest.IsolatedAsyncioTestCase):
    def test_starts_idle(self) -> None:
        controller = AnalyzerController(_StubDocumentClient())
        self.assertIs(controller.state, AnalyzerState.IDLE)
        self.assertIsNone(controller.records)

    def test_non_image_file_is_rejected_inline(self) -> None:
        controller = AnalyzerController(_StubDocumentClient())

        self.assertFalse(controller.select_file(b"%PDF", "application/pdf", "acta.pdf"))

        self.assertEqual(controller.error, INVALID_FILE_MESSAGE)
        self.assertIs(controller.state, AnalyzerState.IDLE)
        self.assertIsNone(controller.image)

    async def test_analyze_without_file_sets_error(self) -> None:
        client = _StubDocumentClient()
        controller = AnalyzerController(client)

        self.assertFalse(await controller.analyze())

        self.assertEqual(controller.error, NO_FILE_MESSAGE)
        self.assertEqual(client.calls, [])

    async def test_successful_analysis(self) -> None:
        records = [ExtractedRecord(full_name="Ana"), ExtractedRecord(full_name="Luis")]
        client = _StubDocumentClient(records)
        controller = AnalyzerController(client)
        controller.select_file(b"img", "image/jpeg", "acta.jpg")
        self.assertIs(controller.state, AnalyzerState.FILE_SELECTED)

        self.assertTrue(await controller.analyze())

        self.assertIs(controller.state, AnalyzerState.SUCCEEDED)
        self.assertEqual(controller.records, records)
        self.assertIsNone(controller.error)
        self.assertEqual(client.calls, [(b"img", "image/jpeg")])
        self.assertFalse(controller.is_analyzing)

    async def test_failure_clears_previous_results(self) -> None:
        client = _StubDocumentClient([ExtractedRecord(full_name="Ana")])
        controller = AnalyzerController(client)
        controller.select_file(b"img", "image/png")
        await controller.analyze()
        self.assertEqual(len(controller.records), 1)

        client.error = AnalysisError("Could not parse AI response.")
        await controller.analyze()

        self.assertIs(controller.state, AnalyzerState.FAILED)
        self.assertIsNone(controller.records)
        self.assertEqual(controller.error, ANALYSIS_FAILED_MESSAGE)
        self.assertFalse(controller.is_analyzing)

    async def test_transport_error_is_converted(self) -> None:
        controller = AnalyzerController(_StubDocumentClient(error=TimeoutError("slow")))
        controller.select_file(b"img", "image/png")

        await controller.analyze()

        self.assertIs(controller.state, AnalyzerState.FAILED)
        self.assertEqual(controller.error, ANALYSIS_FAILED_MESSAGE)

    async def test_concurrent_analyze_issues_one_request(self) -> None:
        client = _StubDocumentClient([ExtractedRecord(full_name="Ana")])
        controller = AnalyzerController(client)
        controller.select_file(b"img", "image/png")

        started = await asyncio.gather(controller.analyze(), controller.analyze())

        self.assertEqual(started, [True, False])
        self.assertEqual(len(client.calls), 1)
        self.assertIs(controller.state, AnalyzerState.SUCCEEDED)

    async def test_new_file_discards_results(self) -> None:
        controller = AnalyzerController(_StubDocumentClient([ExtractedRecord(full_name="Ana")]))
        controller.select_file(b"one", "image/png")
        await controller.analyze()

        self.assertTrue(controller.select_file(b"two", "image/png", "two.png"))

        self.assertIs(controller.state, AnalyzerState.FILE_SELECTED)
        self.assertIsNone(controller.records)
        self.assertEqual(controller.image.data, b"two")

    async def test_export_flattens_records(self) -> None:
        exporter = _StubExporter()
        controller = AnalyzerController(
            _StubDocumentClient([ExtractedRecord(full_name="Ana", paternal_grandparents=["A", "B"])]),
            exporter=exporter,
        )
        self.assertFalse(controller.export())

        controller.select_file(b"img", "image/png")
        await controller.analyze()

        self.assertTrue(controller.export())
        [rows] = exporter.exported
        self.assertEqual(rows[0]["Nombre Completo"], "Ana")
        self.assertEqual(rows[0]["Abuelos Paternos"], "A, B")

    async def test_export_skipped_without_records(self) -> None:
        exporter = _StubExporter()
        controller = AnalyzerController(_StubDocumentClient([]), exporter=exporter)
        controller.select_file(b"img", "image/png")
        await controller.analyze()

        self.assertFalse(controller.export())
        self.assertEqual(exporter.exported, [])

    async def test_view_snapshot(self) -> None:
        controller = AnalyzerController(_StubDocumentClient([ExtractedRecord(father_name="Luis")]))
        controller.select_file(b"img", "image/png", "acta.png")
        await controller.analyze()

        view = controller.to_view()

        self.assertEqual(view["state"], "succeeded")
        self.assertEqual(view["filename"], "acta.png")
        self.assertTrue(view["can_export"])
        [card] = view["records"]
        self.assertEqual(card["title"], "Person 1")
        self.assertEqual(card["fields"], [{"label": "Father's Name", "value": "Luis"}])
        self.assertEqual(card["data"]["nombrePadre"], "Luis")


if __name__ == "__main__":
    unittest.main()
