"""
Flask server settings for the Y-Travels backend.
CORS origins, port and the chatbot switch come from the environment.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Web server configuration."""

    # Flask Configuration
    SECRET_KEY = os.getenv('SECRET_KEY')
    JSON_SORT_KEYS = False

    # CORS Configuration
    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv('ALLOWED_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',')
        if origin.strip()
    ]

    # Server Configuration
    PORT = int(os.getenv('PORT', '5000'))
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Chatbot Configuration
    CHATBOT_ENABLED = os.getenv('CHATBOT_ENABLED', 'True').lower() == 'true'
