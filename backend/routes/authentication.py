"""
Authentication routes.
Checks credentials against the static user list from configuration.
"""

import hmac
from flask import Blueprint, request, jsonify
from ytravel_rag.config import Config
from backend.utils import as_json_object, validate_credentials

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with a static demo account.

    Request Body:
        email: str
        password: str

    Returns:
        200: Login successful, with token
        400: Missing fields
        401: Invalid credentials
    """
    data = as_json_object(request.get_json(silent=True))
    email = data.get('email')
    password = data.get('password')

    is_valid, error_msg = validate_credentials(email, password)
    if not is_valid:
        return jsonify({"success": False, "message": error_msg}), 400

    expected = Config.AUTH_USERS.get(email)
    if expected is None or not hmac.compare_digest(expected.encode('utf-8'), password.encode('utf-8')):
        return jsonify({"success": False, "message": "Invalid credentials"}), 401

    return jsonify({
        "success": True,
        "message": "Login successful",
        "token": Config.AUTH_TOKEN
    }), 200
