"""
Gemini service implementation for IdeaRoulette.
Generates ideas and remixes using Google's Gemini models.
"""

from google import genai

from idearoulette.errors import GenerationError
from idearoulette.services.ai_service import AIService
from idearoulette.utils.logger import logger


class GeminiService(AIService):
    """Gemini service implementation."""

    def __init__(self, google_api_key: str, model: str):
        """
        Initialize the Gemini service.

        Args:
            google_api_key: Google AI API key
            model: Gemini model to use
        """
        self.google_api_key = google_api_key
        self.model = model
        self.gemini_client = genai.Client(api_key=google_api_key)

    def generate_text(self, prompt: str, temperature: float) -> str:
        """
        Run a prompt through Gemini and return the response text.

        Args:
            prompt: The prompt to send
            temperature: Sampling temperature

        Returns:
            Response text, expected to contain a JSON array
        """
        try:
            logger.debug(f"Sending prompt to Gemini model {self.model}")
            config = {
                "temperature": temperature,
                "response_mime_type": "application/json",
            }

            response = self.gemini_client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config
            )
        except Exception as e:
            logger.error(f"Error generating content with Gemini: {e}")
            raise GenerationError(f"Gemini request failed: {e}") from e

        if not response.text:
            logger.error("Gemini returned an empty response")
            raise GenerationError("Gemini returned an empty response")
        return response.text
