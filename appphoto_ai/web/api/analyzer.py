"""Document analyzer API endpoints."""

import io

from quart import Blueprint, Response, current_app, jsonify, request
from werkzeug.utils import secure_filename

from appphoto_ai.controllers.analyzer import AnalyzerController, AnalyzerState
from appphoto_ai.export.spreadsheet import SpreadsheetExporter
from appphoto_ai.ingestion.images import detect_image_mime, is_image_mime

analyzer_bp = Blueprint("analyzer", __name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _get_view(view_id: str) -> AnalyzerController | None:
    return current_app.extensions["views"].get(view_id, AnalyzerController)


def _not_found() -> tuple[Response, int]:
    return jsonify({"error": "Analyzer view not found"}), 404


@analyzer_bp.route("/api/analyzer", methods=["POST"])
async def mount_analyzer() -> tuple[Response, int]:
    """Mount a new analyzer view.

    Returns:
        JSON response with the view id and its initial state
    """
    controller = AnalyzerController(current_app.extensions["document_client"])
    view_id = current_app.extensions["views"].add(controller)
    return jsonify({"id": view_id, **controller.to_view()}), 201


@analyzer_bp.route("/api/analyzer/<view_id>", methods=["GET"])
async def get_analyzer(view_id: str) -> Response | tuple[Response, int]:
    """Get the current state of an analyzer view."""
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()
    return jsonify({"id": view_id, **controller.to_view()})


@analyzer_bp.route("/api/analyzer/<view_id>", methods=["DELETE"])
async def unmount_analyzer(view_id: str) -> Response | tuple[Response, int]:
    """Drop an analyzer view and everything it holds."""
    if _get_view(view_id) is None:
        return _not_found()
    current_app.extensions["views"].remove(view_id)
    return jsonify({"success": True})


@analyzer_bp.route("/api/analyzer/<view_id>/file", methods=["POST"])
async def select_file(view_id: str) -> Response | tuple[Response, int]:
    """Select the document image for an analyzer view.

    Accepts multipart/form-data with a ``file`` field. The declared content
    type is trusted; when the browser sends none, the bytes are sniffed.

    Returns:
        JSON response with the updated view state
    """
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()

    files = await request.files
    if "file" not in files:
        return jsonify({"error": "No file provided"}), 400

    file = files["file"]
    if not file.filename:
        return jsonify({"error": "No file selected"}), 400

    data = file.read()
    mime_type = file.mimetype
    if not is_image_mime(mime_type):
        mime_type = detect_image_mime(data) or mime_type

    if not controller.select_file(data, mime_type, secure_filename(file.filename)):
        if controller.is_analyzing:
            return jsonify({"error": "Analysis already in progress"}), 409
        return jsonify({"id": view_id, **controller.to_view()}), 400

    return jsonify({"id": view_id, **controller.to_view()})


@analyzer_bp.route("/api/analyzer/<view_id>/analyze", methods=["POST"])
async def analyze(view_id: str) -> Response | tuple[Response, int]:
    """Run the analysis for the selected image.

    Returns:
        JSON response with extracted records, or the user-facing error
    """
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()

    if controller.is_analyzing:
        return jsonify({"error": "Analysis already in progress"}), 409

    if not await controller.analyze():
        return jsonify({"id": view_id, **controller.to_view()}), 400

    status = 200 if controller.state is AnalyzerState.SUCCEEDED else 502
    return jsonify({"id": view_id, **controller.to_view()}), status


@analyzer_bp.route("/api/analyzer/<view_id>/export", methods=["GET"])
async def export(view_id: str) -> Response | tuple[Response, int]:
    """Download the extracted records as an .xlsx spreadsheet."""
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()

    buffer = io.BytesIO()
    if not controller.export(SpreadsheetExporter(buffer)):
        return jsonify({"error": "No extracted data to export"}), 400

    filename = current_app.config.get("EXPORT_FILENAME", "appphoto_data.xlsx")
    return Response(
        buffer.getvalue(),
        mimetype=XLSX_MIMETYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
