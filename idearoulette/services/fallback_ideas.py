"""
Pre-written ideas served when generation is unavailable.
"""

from typing import List

from idearoulette.models.idea import Idea

FALLBACK_IDEAS = [
    {
        "name": "DreamSync",
        "icon": "moon",
        "tagline": "Record and analyze your dreams using AI",
        "category": "AI / Lifestyle",
        "rating": 8.4,
        "description": "Voice-record your dreams each morning and get AI-powered insights about your subconscious patterns and emotional state.",
        "tags": ["AI", "mental health", "sleep"],
        "remixes": ["DreamSync for Couples", "DreamSync for Kids", "DreamSync Analytics"],
    },
    {
        "name": "CodeWhisper",
        "icon": "code",
        "tagline": "AI pair programming with voice commands",
        "category": "AI / Developer Tools",
        "rating": 9.1,
        "description": "Talk to your IDE and let AI write code while you explain your logic in natural language.",
        "tags": ["AI", "developer tools", "voice"],
        "remixes": ["CodeWhisper Mobile", "CodeWhisper for Teams", "CodeWhisper Education"],
    },
    {
        "name": "PlantParent",
        "icon": "leaf",
        "tagline": "Smart plant care with computer vision",
        "category": "IoT / Home",
        "rating": 7.8,
        "description": "Point your phone at plants to get instant health diagnostics and personalized care recommendations.",
        "tags": ["computer vision", "plants", "home"],
        "remixes": ["PlantParent Pro", "PlantParent for Offices", "PlantParent Social"],
    },
]


def get_fallback_ideas(count: int = len(FALLBACK_IDEAS)) -> List[Idea]:
    """Return fresh copies of the fallback set, truncated to count."""
    return [Idea(**data) for data in FALLBACK_IDEAS[:count]]
