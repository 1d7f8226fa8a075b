"""
OpenAI service implementation for IdeaRoulette.
Generates ideas and remixes using OpenAI chat models.
"""

from openai import OpenAI

from idearoulette.errors import GenerationError
from idearoulette.services.ai_service import AIService
from idearoulette.utils.logger import logger

SYSTEM_PROMPT = "You are a startup idea generator. Answer with a JSON array only, no prose."


class OpenAIService(AIService):
    """OpenAI service implementation."""

    def __init__(self, api_key: str, model: str):
        """
        Initialize the OpenAI service.

        Args:
            api_key: OpenAI API key
            model: OpenAI model to use
        """
        self.api_key = api_key
        self.model = model
        self.client = OpenAI(api_key=api_key)

    def generate_text(self, prompt: str, temperature: float) -> str:
        """
        Run a prompt through the chat completions API.

        Args:
            prompt: The prompt to send
            temperature: Sampling temperature

        Returns:
            Response text, expected to contain a JSON array
        """
        try:
            logger.debug(f"Sending prompt to OpenAI model {self.model}")
            completion = self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as e:
            logger.error(f"Error generating content with OpenAI: {e}")
            raise GenerationError(f"OpenAI request failed: {e}") from e

        if not completion.choices or not completion.choices[0].message.content:
            logger.error("OpenAI returned no content")
            raise GenerationError("OpenAI returned no content")
        return completion.choices[0].message.content
