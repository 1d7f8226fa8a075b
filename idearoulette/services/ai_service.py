"""
Abstract base class for AI services used in IdeaRoulette.
This provides a common interface for different generation providers.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from idearoulette.errors import GenerationError
from idearoulette.models.idea import (
    Idea,
    RemixResult,
    RemixTitles,
    decode_remix_payload,
    extract_json_array,
    parse_ideas,
)
from idearoulette.models.profile import UserPreferences
from idearoulette.services.prompt_service import (
    build_ideas_prompt,
    build_remix_ideas_prompt,
    build_remix_titles_prompt,
)
from idearoulette.utils.constants import IDEA_TEMPERATURE, REMIX_TEMPERATURE
from idearoulette.utils.logger import logger


class AIService(ABC):
    """Abstract base class for AI services."""

    @abstractmethod
    def generate_text(self, prompt: str, temperature: float) -> str:
        """
        Send a prompt to the provider and return the raw text answer.

        Args:
            prompt: The prompt to send
            temperature: Sampling temperature

        Returns:
            The model's text response

        Raises:
            GenerationError: If the provider could not be reached
        """
        pass

    def generate_ideas(
        self,
        preferences: Optional[UserPreferences] = None,
        count: int = 10,
        exclude_names: Optional[List[str]] = None
    ) -> List[Idea]:
        """
        Generate a batch of ideas biased towards the user's preferences.

        Args:
            preferences: Profile to bias towards, if any
            count: Maximum number of ideas to return
            exclude_names: Names the provider should avoid

        Returns:
            Between 0 and count ideas

        Raises:
            GenerationError: On transport failure or a malformed payload
        """
        prompt = build_ideas_prompt(preferences, count, exclude_names)
        text = self.generate_text(prompt, IDEA_TEMPERATURE)
        ideas = parse_ideas(extract_json_array(text))[:count]
        logger.info(f"Generated {len(ideas)} ideas")
        return ideas

    def generate_remixes(self, idea: Idea) -> List[str]:
        """Generate short variation titles for an idea."""
        text = self.generate_text(build_remix_titles_prompt(idea), REMIX_TEMPERATURE)
        result = decode_remix_payload(extract_json_array(text))
        if not isinstance(result, RemixTitles):
            raise GenerationError("Expected remix titles, got full ideas")
        return result.titles

    def generate_remix_ideas(self, idea: Idea) -> List[Idea]:
        """Generate complete ideas that remix the given one."""
        text = self.generate_text(build_remix_ideas_prompt(idea), REMIX_TEMPERATURE)
        return parse_ideas(extract_json_array(text))

    def remix(self, idea: Idea, full_ideas: bool = True) -> RemixResult:
        """
        Remix an idea, returning whichever shape the provider produced.

        Args:
            idea: The idea to remix
            full_ideas: Ask for complete ideas rather than titles

        Returns:
            RemixTitles or RemixRecords
        """
        prompt = build_remix_ideas_prompt(idea) if full_ideas else build_remix_titles_prompt(idea)
        text = self.generate_text(prompt, REMIX_TEMPERATURE)
        result = decode_remix_payload(extract_json_array(text))
        logger.info(f"Remixed {idea.name} into {type(result).__name__}")
        return result
