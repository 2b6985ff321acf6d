"""
Chat routes for the travel assistant API.
Answers travel questions from the retrieved corpus and generates itineraries.
"""

from flask import Blueprint, request, jsonify
from ytravel_rag.errors import (
    DimensionMismatchError,
    NotReadyError,
    TravelRagError,
    UpstreamDependencyError,
    UserInputError,
)
from ytravel_rag.rag.corpus import CorpusState
from backend.utils import as_json_object, validate_top_k
import logging

logger = logging.getLogger(__name__)

# Create blueprint
chat_bp = Blueprint("chat", __name__)

# Global reference (will be set by init_chatbot)
_QUERY_SERVICE = None

# Error type -> (HTTP status, response "type")
_ERROR_STATUS = {
    UserInputError: (400, "invalid_request"),
    NotReadyError: (503, "not_ready"),
    UpstreamDependencyError: (502, "upstream_error"),
    DimensionMismatchError: (500, "dimension_mismatch"),
}


def init_chatbot(query_service):
    """
    Initialize chatbot components.
    Called from app.py once the query service is wired.

    Args:
        query_service: QueryService instance (may still be building its corpus)
    """
    global _QUERY_SERVICE
    _QUERY_SERVICE = query_service
    logger.info("Chat routes initialized with query service")


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def error_response(error: Exception):
    """
    Convert an exception into a JSON error response.

    Args:
        error: Raised exception

    Returns:
        (response, status) tuple
    """
    for error_type, (status, kind) in _ERROR_STATUS.items():
        if isinstance(error, error_type):
            return jsonify({"success": False, "error": str(error), "type": kind}), status

    if isinstance(error, TravelRagError):
        logger.error(f"Unhandled service error: {error}")
    else:
        logger.exception("Unexpected error while handling request")
    return jsonify({"success": False, "error": "Internal server error", "type": "error"}), 500


def _service_unavailable():
    return (
        jsonify(
            {
                "success": False,
                "error": "Chatbot system is not initialized",
                "type": "not_ready",
            }
        ),
        503,
    )


# ============================================================================
# API ENDPOINTS
# ============================================================================


@chat_bp.route("/api/health", methods=["GET"])
def health_check():
    """
    Health check endpoint exposing corpus readiness.
    """
    if _QUERY_SERVICE is None:
        return jsonify({"status": "unavailable", "corpus_state": None, "documents": 0}), 503

    snapshot = _QUERY_SERVICE.corpus.snapshot
    # A built corpus without documents answers every query with nothing
    empty = snapshot.state is CorpusState.READY and not snapshot.documents
    return jsonify(
        {
            "status": "degraded" if empty else "healthy",
            "corpus_state": snapshot.state.value,
            "documents": len(snapshot.documents),
            "dimension": snapshot.dimension,
            "last_error": snapshot.error,
        }
    ), 200


@chat_bp.route("/generate", methods=["POST"])
async def generate():
    """
    Answer a travel question using the most relevant corpus documents.

    Request body:
        { "prompt": "What can I visit in Lisbon?" }

    Response:
        {
            "text": "Generated answer",
            "generatedText": "Generated answer",
            "citations": [...],
            "documents": [{ id, title, text }, ...]
        }
    """
    if _QUERY_SERVICE is None:
        return _service_unavailable()

    data = as_json_object(request.get_json(silent=True))

    try:
        result = await _QUERY_SERVICE.generate_answer(data.get("prompt"))
    except Exception as e:
        return error_response(e)

    return jsonify(result.to_dict()), 200


@chat_bp.route("/api/retrieve", methods=["POST"])
async def retrieve():
    """
    Return the top-K corpus documents for a prompt without generation.

    Request body:
        { "prompt": "...", "k": 5 (optional) }
    """
    if _QUERY_SERVICE is None:
        return _service_unavailable()

    data = as_json_object(request.get_json(silent=True))

    is_valid, error_msg = validate_top_k(data.get("k"))
    if not is_valid:
        return jsonify({"success": False, "error": error_msg, "type": "invalid_request"}), 400

    try:
        result = await _QUERY_SERVICE.answer(data.get("prompt"), k=data.get("k"))
    except Exception as e:
        return error_response(e)

    return jsonify({"documents": [doc.to_dict() for doc in result.documents]}), 200


@chat_bp.route("/holiday", methods=["POST"])
async def holiday():
    """
    Generate a day-wise holiday itinerary.

    Request body:
        { "userInput": "5 days in Japan in spring" }

    Response:
        { "itinerary": "Day 1: ..." }
    """
    if _QUERY_SERVICE is None:
        return _service_unavailable()

    data = as_json_object(request.get_json(silent=True))

    try:
        itinerary = await _QUERY_SERVICE.generate_itinerary(data.get("userInput"))
    except Exception as e:
        return error_response(e)

    return jsonify({"itinerary": itinerary}), 200
