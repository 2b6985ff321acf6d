"""
Chat API clients

Generation backends for answers and itineraries:
- CohereChatClient: Cohere /chat REST API, grounded on retrieved documents
  and returning citations
- GeminiChatClient: Google Gemini through LangChain (no citations)
"""

import requests
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ChatResponse:
    text: str
    citations: List[Dict[str, Any]] = field(default_factory=list)


class CohereChatClient:
    """Client for the Cohere chat endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "command-r-plus",
        base_url: str = "https://api.cohere.com/v1",
        timeout: int = 60,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize chat client.

        Args:
            api_key: Cohere API key
            model: Chat model identifier
            base_url: API root (without trailing slash)
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise ValueError("api_key required for CohereChatClient")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        logger.info(f"🔗 CohereChatClient initialized: {self.model}")

    def chat(
        self,
        message: str,
        documents: Sequence[str] = (),
        preamble: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None
    ) -> ChatResponse:
        """
        Generate a response, optionally grounded on documents.

        Args:
            message: User message
            documents: Context snippets passed as Cohere documents
            preamble: System instructions
            temperature: Sampling temperature
            max_tokens: Optional response length limit

        Returns:
            ChatResponse with text and citations

        Raises:
            requests.RequestException: If API call fails
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "message": message,
            "temperature": temperature,
        }
        if documents:
            payload["documents"] = [{"text": text} for text in documents]
        if preamble:
            payload["preamble"] = preamble
        if max_tokens:
            payload["max_tokens"] = max_tokens

        try:
            response = self.session.post(
                f"{self.base_url}/chat",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Cohere chat API error: {e}")
            raise

        return ChatResponse(text=result.get("text", ""), citations=result.get("citations") or [])


class GeminiChatClient:
    """Gemini backend; documents are inlined into the prompt."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash"):
        if not api_key:
            raise ValueError("api_key required for GeminiChatClient")

        self.api_key = api_key
        self.model = model
        logger.info(f"🤖 GeminiChatClient initialized: {self.model}")

    def chat(
        self,
        message: str,
        documents: Sequence[str] = (),
        preamble: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None
    ) -> ChatResponse:
        parts = []
        if preamble:
            parts.append(preamble)
        if documents:
            context = "\n".join(f"- {text}" for text in documents)
            parts.append(f"Documents:\n{context}")
        parts.append(message)

        from langchain_google_genai import ChatGoogleGenerativeAI

        llm = ChatGoogleGenerativeAI(
            model=self.model,
            google_api_key=self.api_key,
            temperature=temperature,
            max_output_tokens=max_tokens
        )
        response = llm.invoke("\n\n".join(parts))
        return ChatResponse(text=response.content)


def get_chat_client(
    provider: str = "cohere",
    cohere_api_key: Optional[str] = None,
    cohere_model: str = "command-r-plus",
    base_url: str = "https://api.cohere.com/v1",
    gemini_api_key: Optional[str] = None,
    gemini_model: str = "gemini-2.0-flash",
    timeout: int = 60
):
    """
    Factory function to get the configured chat backend.

    Raises:
        ValueError: If configuration is invalid
    """
    if provider == "cohere":
        return CohereChatClient(api_key=cohere_api_key, model=cohere_model, base_url=base_url, timeout=timeout)
    if provider == "gemini":
        return GeminiChatClient(api_key=gemini_api_key, model=gemini_model)
    raise ValueError(f"Unknown chat provider: {provider}")
