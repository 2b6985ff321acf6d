from flask import Flask, jsonify
from flask_cors import CORS
from config import Config
from ytravel_rag.config import Config as RagConfig
from backend.routes import auth_bp, chat_bp, init_chatbot
import logging

RagConfig.setup_logging()
logger = logging.getLogger(__name__)


def initialize_chatbot(start_build: bool = True):
    """
    Wire the query service and start the corpus build in the background.

    The server keeps running without chatbot functionality if the providers
    cannot be configured.
    """
    if not Config.CHATBOT_ENABLED:
        return None
    try:
        logger.info("🚀 Initializing travel chatbot system...")

        missing = RagConfig.missing_settings()
        if missing:
            logger.warning(f"⚠️ {', '.join(missing)} not set. Chatbot will not be available.")
            return None

        from ytravel_rag.rag.query_service import initialize_rag_system

        service = initialize_rag_system()
        init_chatbot(service)

        if start_build:
            # Not awaited: requests before completion get a "not ready" response
            service.start_background_build()

        logger.info("✅ Travel chatbot system initialized")
        return service

    except Exception as e:
        logger.error(f"❌ Failed to initialize chatbot: {str(e)}")
        logger.info("💡 The server will run without chatbot functionality")
        return None


def create_app(query_service=None, start_build: bool = True) -> Flask:
    """
    Create the Flask application.

    Args:
        query_service: Pre-built QueryService (tests); built from config if None
        start_build: Start the background corpus build for a config-built service
    """
    app = Flask(__name__)
    app.config.from_object(Config)

    CORS(app, origins=Config.ALLOWED_ORIGINS, supports_credentials=True)

    app.register_blueprint(auth_bp)
    app.register_blueprint(chat_bp)

    if query_service is not None:
        init_chatbot(query_service)
    else:
        initialize_chatbot(start_build=start_build)

    @app.route('/')
    def home():
        return jsonify({"message": "Y-Travels Server is Running"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(
        host="0.0.0.0",
        port=Config.PORT,
        debug=Config.DEBUG,
        use_reloader=False
    )
