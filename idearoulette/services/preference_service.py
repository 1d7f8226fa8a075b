"""
Preference aggregation and founder-personality derivation.

Everything here is pure: it takes the current profile plus an event and
returns a new value, leaving persistence to the user data service.
"""

from typing import Dict, List

from idearoulette.models.idea import Idea
from idearoulette.models.profile import UserPreferences
from idearoulette.utils.constants import (
    HIGH_STANDARDS_RATING,
    HIGH_STANDARDS_TRAIT,
    TECH_SAVVY_TRAIT,
    TECH_SAVVY_TAG,
    PERSONALITY_UNLOCK_SWIPES,
    IDEA_COLLECTOR_LIKES,
    ROULETTE_MASTER_SWIPES,
    TECH_VISIONARY,
    COMMUNITY_BUILDER,
    AI_PIONEER,
    IDEA_COLLECTOR,
    ROULETTE_MASTER,
    EMERGING_FOUNDER,
)

PERSONALITY_PROFILES: Dict[str, Dict[str, object]] = {
    TECH_VISIONARY: {
        "emoji": "🚀",
        "description": "You have a keen eye for cutting-edge technology and high-quality innovations.",
        "traits": ["Tech-savvy", "High standards", "Future-focused"],
    },
    COMMUNITY_BUILDER: {
        "emoji": "👥",
        "description": "You are drawn to ideas that bring people together and create social impact.",
        "traits": ["Social-minded", "Collaborative", "People-focused"],
    },
    AI_PIONEER: {
        "emoji": "🤖",
        "description": "You see the potential in artificial intelligence to transform industries.",
        "traits": ["AI enthusiast", "Innovation-driven", "Tech-forward"],
    },
    IDEA_COLLECTOR: {
        "emoji": "💡",
        "description": "You love exploring diverse concepts and building a rich collection of possibilities.",
        "traits": ["Curious", "Open-minded", "Eclectic taste"],
    },
    ROULETTE_MASTER: {
        "emoji": "🎡",
        "description": "You are a true idea explorer who has mastered the art of startup discovery.",
        "traits": ["Persistent", "Adventurous", "Experienced"],
    },
    EMERGING_FOUNDER: {
        "emoji": "🌟",
        "description": "You are just beginning your journey into the world of startup ideas.",
        "traits": ["Curious", "Learning", "Growing"],
    },
}


def _union(existing: List[str], additions: List[str]) -> List[str]:
    merged = list(existing)
    for value in additions:
        if value not in merged:
            merged.append(value)
    return merged


def traits_for(idea: Idea) -> List[str]:
    """Coarse traits implied by liking a single idea."""
    traits = []
    if idea.rating >= HIGH_STANDARDS_RATING:
        traits.append(HIGH_STANDARDS_TRAIT)
    if TECH_SAVVY_TAG in idea.tags:
        traits.append(TECH_SAVVY_TRAIT)
    return traits


def absorb_like(preferences: UserPreferences, idea: Idea) -> UserPreferences:
    """
    Fold a liked idea into the preference profile.

    Categories, tags and traits only ever grow; an unlike never shrinks them.

    Args:
        preferences: Current profile
        idea: The idea that was liked

    Returns:
        A new profile; the input is left untouched
    """
    return preferences.model_copy(update={
        "likedCategories": _union(preferences.likedCategories, [idea.category]),
        "likedTags": _union(preferences.likedTags, idea.tags),
        "personalityTraits": _union(preferences.personalityTraits, traits_for(idea)),
    })


def derive_personality(preferences: UserPreferences, swipe_count: int, liked_count: int) -> str:
    """
    Map profile state to a founder personality.

    Rules are a priority list: the first one that matches wins.
    """
    traits = preferences.personalityTraits
    if TECH_SAVVY_TRAIT in traits and HIGH_STANDARDS_TRAIT in traits:
        return TECH_VISIONARY

    if any("Social" in category for category in preferences.likedCategories):
        return COMMUNITY_BUILDER

    if any("AI" in category for category in preferences.likedCategories):
        return AI_PIONEER

    if liked_count > IDEA_COLLECTOR_LIKES:
        return IDEA_COLLECTOR

    if swipe_count > ROULETTE_MASTER_SWIPES:
        return ROULETTE_MASTER

    return EMERGING_FOUNDER


def should_unlock_personality(swipe_count: int, already_unlocked: bool) -> bool:
    """True exactly when the one-time unlock latch should trip."""
    return not already_unlocked and swipe_count >= PERSONALITY_UNLOCK_SWIPES


def format_personality(label: str) -> str:
    emoji = PERSONALITY_PROFILES.get(label, PERSONALITY_PROFILES[EMERGING_FOUNDER])["emoji"]
    return f"{emoji} {label}"
