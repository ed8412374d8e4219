"""Chatbot API endpoints."""

from quart import Blueprint, Response, current_app, jsonify, request

from appphoto_ai.controllers.chatbot import ChatbotController

chat_bp = Blueprint("chat", __name__)


def _get_view(view_id: str) -> ChatbotController | None:
    return current_app.extensions["views"].get(view_id, ChatbotController)


def _not_found() -> tuple[Response, int]:
    return jsonify({"error": "Chat session not found"}), 404


@chat_bp.route("/api/chat/sessions", methods=["POST"])
async def mount_chat() -> tuple[Response, int]:
    """Mount a chatbot view with a fresh session and the greeting."""
    controller = ChatbotController(current_app.extensions["chat_client"])
    controller.mount()
    view_id = current_app.extensions["views"].add(controller)
    return jsonify({"id": view_id, **controller.to_view()}), 201


@chat_bp.route("/api/chat/sessions/<view_id>", methods=["GET"])
async def get_chat(view_id: str) -> Response | tuple[Response, int]:
    """Get the messages, state and error banner of a chatbot view."""
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()
    return jsonify({"id": view_id, **controller.to_view()})


@chat_bp.route("/api/chat/sessions/<view_id>", methods=["DELETE"])
async def unmount_chat(view_id: str) -> Response | tuple[Response, int]:
    """Drop a chatbot view and its session."""
    if _get_view(view_id) is None:
        return _not_found()
    current_app.extensions["views"].remove(view_id)
    return jsonify({"success": True})


@chat_bp.route("/api/chat/sessions/<view_id>/messages", methods=["POST"])
async def send_message(view_id: str):
    """Send a user message and stream the reply.

    Expects JSON body with:
        - message: The user's message

    Returns:
        ``text/plain`` stream of reply fragments. If the stream fails the body
        ends early; fetch the session to read the error banner.
    """
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()

    data = await request.get_json(silent=True)
    if not data or not isinstance(data.get("message"), str):
        return jsonify({"error": "No message provided"}), 400

    message = data["message"]
    if not message.strip():
        return jsonify({"error": "Message cannot be empty"}), 400

    # Claim the view before the response starts streaming
    turn = controller.begin_turn(message)
    if turn is None:
        return jsonify({"error": "A reply is already being generated"}), 409

    async def generate():
        try:
            async for fragment in turn:
                yield fragment.encode("utf-8")
        finally:
            await turn.aclose()

    return generate(), 200, {"Content-Type": "text/plain; charset=utf-8"}


@chat_bp.route("/api/chat/sessions/<view_id>/error", methods=["DELETE"])
async def dismiss_error(view_id: str) -> Response | tuple[Response, int]:
    """Dismiss the error banner of a chatbot view."""
    controller = _get_view(view_id)
    if controller is None:
        return _not_found()
    controller.dismiss_error()
    return jsonify({"id": view_id, **controller.to_view()})
