"""Main Quart application for the AppPhoto AI front end."""

import logging
from pathlib import Path
from typing import Any

from quart import Quart, jsonify, send_from_directory
from quart_cors import cors

from appphoto_ai import __version__
from appphoto_ai.config import init_settings
from appphoto_ai.web.api import analyzer_bp, chat_bp
from appphoto_ai.web.config import get_config
from appphoto_ai.web.state import ViewRegistry

logger = logging.getLogger(__name__)


def create_app(
    config_name: str = "development",
    document_client: Any = None,
    chat_client: Any = None,
) -> Quart:
    """Create and configure the Quart application.

    Model clients are built from validated settings unless both are passed
    in; without an API key the app refuses to start.

    Args:
        config_name: Configuration environment name
        document_client: Optional document analysis client
        chat_client: Optional chat session client

    Returns:
        Configured Quart app

    Raises:
        ConfigurationError: If a client must be built and no API key is set
    """
    app = Quart(__name__, static_folder="static", static_url_path="")

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)

    if document_client is None or chat_client is None:
        from appphoto_ai.agents import ChatSessionManager, DocumentAnalyzer

        settings = init_settings()
        document_client = document_client or DocumentAnalyzer(settings=settings)
        chat_client = chat_client or ChatSessionManager(settings=settings)

    app.extensions["document_client"] = document_client
    app.extensions["chat_client"] = chat_client
    app.extensions["views"] = ViewRegistry()

    # Enable CORS for frontend (only needed in development)
    if config.DEBUG:
        app = cors(
            app,
            allow_origin=config.CORS_ORIGINS,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    # Register blueprints
    app.register_blueprint(analyzer_bp)
    app.register_blueprint(chat_bp)

    register_routes(app)

    return app


def register_routes(app: Quart) -> None:
    """Register API routes.

    Args:
        app: Quart application
    """

    @app.errorhandler(413)
    async def too_large(_error):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return jsonify({"error": f"File too large. Maximum size is {limit_mb}MB."}), 413

    @app.route("/api/health", methods=["GET"])
    async def health_check():
        """Health check endpoint."""
        return jsonify(
            {
                "status": "healthy",
                "service": "appphoto-ai",
                "version": __version__,
            }
        )

    @app.route("/api/info", methods=["GET"])
    async def info():
        """Get API information."""
        return jsonify(
            {
                "service": "AppPhoto AI API",
                "version": __version__,
                "endpoints": {
                    "health": "/api/health",
                    "info": "/api/info",
                    "analyzer": "/api/analyzer",
                    "chat": "/api/chat/sessions",
                },
            }
        )

    # Serve the built front end
    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    async def serve_frontend(path: str):
        """Serve the front end from the static folder when it has been built."""
        static_dir = Path(app.static_folder or "static")

        if static_dir.exists():
            if path and (static_dir / path).is_file():
                return await send_from_directory(static_dir, path)
            if (static_dir / "index.html").exists():
                return await send_from_directory(static_dir, "index.html")

        return jsonify(
            {
                "message": "AppPhoto AI",
                "version": __version__,
                "note": "Frontend not built. Place the build output in appphoto_ai/web/static.",
                "api_docs": "/api/info",
            }
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    create_app().run(host="0.0.0.0", port=5001, debug=True)
