"""
Generative model client - Gemini with structured JSON output

The recommendation service talks to the model through the narrow
GenerativeModel interface:

    complete(system_prompt, user_prompt, response_schema) -> content

GeminiGenerativeModel implements it with the Google Gen AI SDK (google-genai).
The response is constrained with response_mime_type='application/json' and
response_json_schema, and the raw text is handed back unparsed. Parsing and
validation belong to the service.
"""

import logging
from typing import Any, Dict, Optional, Protocol

from google import genai
from google.genai import types

from media_recommender.config import settings

logger = logging.getLogger(__name__)


class GenerativeModel(Protocol):
    """Anything that can complete a prompt under a JSON output schema."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: Dict[str, Any],
    ) -> Any:
        """Return the model's textual content (or None when it produced none)."""
        ...


class GeminiGenerativeModel:
    """
    GenerativeModel backed by Gemini.

    The underlying genai.Client is created lazily on first use so that
    importing the app never requires GOOGLE_API_KEY.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.temperature = (
            temperature if temperature is not None else settings.GEMINI_TEMPERATURE
        )
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client

        if not self._api_key:
            logger.error("GOOGLE_API_KEY not configured")
            raise ValueError(
                "GOOGLE_API_KEY is not configured. "
                "Please set it in your .env file to generate recommendations."
            )

        self._client = genai.Client(api_key=self._api_key)
        logger.info(f"Gemini client initialized for model={self.model}")
        return self._client

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: Dict[str, Any],
    ) -> Optional[str]:
        """
        Make one Gemini call and return its text.

        Args:
            system_prompt: Persona and JSON-only instruction
            user_prompt: Rendered user instruction
            response_schema: JSON Schema the output must satisfy

        Returns:
            The response text, or None if the model produced no text

        Raises:
            ValueError: If GOOGLE_API_KEY is not configured
            google.genai.errors.APIError: On transport or API failures
        """
        client = self._get_client()

        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self.temperature,
            response_mime_type="application/json",
            response_json_schema=response_schema,
        )

        logger.debug(f"Sending structured request to Gemini model={self.model}")
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=config,
        )

        if not response.candidates:
            logger.warning("Gemini returned no candidates")
            return None

        return response.text


# Initialize Gemini model (lazy initialization)
_generative_model: Optional[GeminiGenerativeModel] = None


def get_generative_model() -> GenerativeModel:
    """
    FastAPI dependency returning the process-wide Gemini model.

    Override with app.dependency_overrides to inject a different model.
    """
    global _generative_model

    if _generative_model is None:
        _generative_model = GeminiGenerativeModel()

    return _generative_model
