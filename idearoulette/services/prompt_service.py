"""
Prompt construction for idea and remix generation.
"""

import random
import time
import uuid
from pathlib import Path
from typing import List, Optional

from idearoulette.models.idea import Idea
from idearoulette.models.profile import UserPreferences
from idearoulette.utils.config import config
from idearoulette.utils.constants import (
    DIVERSITY_PROMPTS,
    EXCLUDED_NAMES_IN_PROMPT,
    ICON_OPTIONS,
    REMIX_COUNT,
)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


def load_prompt(name: str) -> str:
    with open(PROMPTS_DIR / f"{name}.txt", 'r') as prompt_file:
        return prompt_file.read()


def _preferences_clause(preferences: Optional[UserPreferences]) -> str:
    if not preferences or not (preferences.likedCategories or preferences.likedTags):
        return "Generate diverse ideas across multiple categories."
    return (
        f"User has shown interest in: {', '.join(preferences.likedCategories)}\n"
        f"Preferred tags: {', '.join(preferences.likedTags)}\n"
        f"User traits: {', '.join(preferences.personalityTraits)}\n\n"
        "Weight towards these preferences but still include variety from other categories."
    )


def _exclusion_clause(exclude_names: List[str]) -> str:
    if not exclude_names:
        return ""
    recent = exclude_names[-EXCLUDED_NAMES_IN_PROMPT:]
    return (
        "CRITICAL: DO NOT generate ideas with these names (user has already seen them):\n"
        f"{', '.join(recent)}\n\n"
        "Make sure ALL generated ideas are completely different and unique."
    )


def _category_options() -> str:
    options = config.category_options
    if not options:
        return "Any category written as \"Group / Subgroup\"."
    return ", ".join(f'"{option}"' for option in options)


def build_ideas_prompt(
    preferences: Optional[UserPreferences],
    count: int,
    exclude_names: Optional[List[str]] = None
) -> str:
    """
    Build the batch generation prompt.

    Args:
        preferences: Profile to bias towards, if any
        count: Number of ideas requested
        exclude_names: Names the user has already seen; only the most recent are sent

    Returns:
        The prompt text
    """
    return load_prompt("idea_generator").format(
        count=count,
        diversity_prompt=random.choice(DIVERSITY_PROMPTS),
        seed=uuid.uuid4().hex[:8],
        timestamp=int(time.time() * 1000),
        preferences_clause=_preferences_clause(preferences),
        exclusion_clause=_exclusion_clause(exclude_names or []),
        category_options=_category_options(),
        icon_options=", ".join(ICON_OPTIONS),
    )


def build_remix_titles_prompt(idea: Idea) -> str:
    return load_prompt("remix_titles").format(
        count=REMIX_COUNT,
        name=idea.name,
        tagline=idea.tagline,
        description=idea.description,
        category=idea.category,
    )


def build_remix_ideas_prompt(idea: Idea) -> str:
    return load_prompt("remix_ideas").format(
        count=REMIX_COUNT,
        name=idea.name,
        tagline=idea.tagline,
        description=idea.description,
        category=idea.category,
        tags=", ".join(idea.tags),
        seed=uuid.uuid4().hex[:8],
        icon_options=", ".join(ICON_OPTIONS),
    )
