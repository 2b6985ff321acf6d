"""
Configuration management for the Y-Travels RAG backend
"""

import os
import logging
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _parse_users(raw: str) -> Dict[str, str]:
    """Parse "email:password,email:password" into a dict."""
    users = {}
    for entry in raw.split(','):
        if ':' not in entry:
            continue
        email, password = entry.split(':', 1)
        if email.strip():
            users[email.strip()] = password.strip()
    return users


class Config:
    """
    Centralized configuration for the RAG subsystem.
    """

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent
    DOCUMENTS_DIR = Path(os.getenv("DOCUMENTS_DIR", PROJECT_ROOT / "documents"))
    EMBEDDINGS_FILE = Path(os.getenv("EMBEDDINGS_FILE", DOCUMENTS_DIR / "embeddings.json"))

    # Cohere configuration
    COHERE_API_KEY = os.getenv("COHERE_API_KEY")
    COHERE_BASE_URL = os.getenv("COHERE_BASE_URL", "https://api.cohere.com/v1")
    EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "embed-multilingual-v3.0")
    CHAT_MODEL = os.getenv("CHAT_MODEL", "command-r-plus")

    # Generation backend: "cohere" or "gemini"
    CHAT_PROVIDER = os.getenv("CHAT_PROVIDER", "cohere").lower()
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    # Embedding backend: "cohere" or "local"
    EMBEDDING_PROVIDER = os.getenv("EMBEDDING_PROVIDER", "cohere").lower()
    LOCAL_EMBEDDING_MODEL = os.getenv("LOCAL_EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2")

    # Batching and pacing for the embedding provider
    EMBED_BATCH_SIZE = int(os.getenv("EMBED_BATCH_SIZE", "96"))
    EMBED_PACE_SECONDS = float(os.getenv("EMBED_PACE_SECONDS", "10"))
    EMBED_TIMEOUT = int(os.getenv("EMBED_TIMEOUT", "60"))

    # Retrieval
    RETRIEVAL_TOP_K = int(os.getenv("RETRIEVAL_TOP_K", "5"))
    CHAT_TOP_K = int(os.getenv("CHAT_TOP_K", "10"))

    # Generation
    CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.3"))
    ITINERARY_TEMPERATURE = float(os.getenv("ITINERARY_TEMPERATURE", "0.7"))
    ITINERARY_MAX_TOKENS = int(os.getenv("ITINERARY_MAX_TOKENS", "1000"))

    # Static login
    AUTH_USERS = _parse_users(os.getenv("AUTH_USERS", "test@cohere.com:123456"))
    AUTH_TOKEN = os.getenv("AUTH_TOKEN", "dummy-token")

    # Logging configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def setup_logging(cls) -> None:
        """Configure the root logger from LOG_LEVEL / LOG_FORMAT."""
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO),
            format=cls.LOG_FORMAT
        )

    @classmethod
    def missing_settings(cls) -> List[str]:
        """
        List required settings that are not set for the selected providers.

        Returns:
            List of missing environment variable names
        """
        required = []
        if cls.EMBEDDING_PROVIDER == "cohere" or cls.CHAT_PROVIDER == "cohere":
            required.append(("COHERE_API_KEY", cls.COHERE_API_KEY))
        if cls.CHAT_PROVIDER == "gemini":
            required.append(("GEMINI_API_KEY", cls.GEMINI_API_KEY))

        return [name for name, value in required if not value]

    @classmethod
    def validate(cls) -> bool:
        """
        Validate that required configuration is present.

        Returns:
            bool: True if valid, False otherwise
        """
        missing = cls.missing_settings()

        if missing:
            print(f"❌ Missing required configuration: {', '.join(missing)}")
            return False

        return True

    @classmethod
    def display(cls):
        """Display current configuration (safe - no secrets)."""
        print("⚙️  Y-Travels RAG Configuration:")
        print(f"   Documents Directory: {cls.DOCUMENTS_DIR}")
        print(f"   Embeddings File: {cls.EMBEDDINGS_FILE}")
        print(f"   Embedding Provider: {cls.EMBEDDING_PROVIDER} ({cls.EMBEDDING_MODEL})")
        print(f"   Chat Provider: {cls.CHAT_PROVIDER}")
        print(f"   Batch Size: {cls.EMBED_BATCH_SIZE} (pace {cls.EMBED_PACE_SECONDS}s)")
        print(f"   Top K: {cls.RETRIEVAL_TOP_K} / chat {cls.CHAT_TOP_K}")
        print(f"   Log Level: {cls.LOG_LEVEL}")
        print(f"   Cohere Key Set: {'✅' if cls.COHERE_API_KEY else '❌'}")
        print(f"   Gemini Key Set: {'✅' if cls.GEMINI_API_KEY else '❌'}")


# Global config instance
config = Config()
