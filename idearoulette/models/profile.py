"""
Models for the per-user preference profile and stored user document.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from idearoulette.models.idea import Idea

EngagementPattern = Literal["quick", "thoughtful", "creative"]


class UserPreferences(BaseModel):
    """Rolling preference profile used to bias generation."""

    likedCategories: List[str] = Field(default_factory=list)
    likedTags: List[str] = Field(default_factory=list)
    personalityTraits: List[str] = Field(default_factory=list)
    engagementPattern: EngagementPattern = "thoughtful"


class UserDocument(BaseModel):
    """Shape of the document stored per user in the `users` collection."""

    likedIdeas: List[Idea] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    swipeCount: int = 0
    personalityUnlocked: bool = False
    onboardingCompleted: bool = False
    interests: List[str] = Field(default_factory=list)
    name: str = ""
    seenIdeas: List[str] = Field(default_factory=list)
    createdAt: Optional[datetime] = None
    lastActiveAt: Optional[datetime] = None
