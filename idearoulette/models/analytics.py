"""
Models for interaction logging and session tracking.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

InteractionAction = Literal["view", "like", "unlike", "remix", "share", "expand"]
SwipeDirection = Literal["up", "down"]


class IdeaInteraction(BaseModel):
    """Append-only record of a single user action on an idea."""

    userId: str
    sessionId: str
    ideaName: str
    ideaCategory: str
    ideaRating: float
    action: InteractionAction
    timestamp: datetime
    timeSpentOnIdea: Optional[int] = None
    swipeDirection: Optional[SwipeDirection] = None


class ClientInfo(BaseModel):
    """Client metadata captured once at session start."""

    userAgent: str = ""
    screenResolution: str = "unknown"
    referrer: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None


class UserSession(BaseModel):
    """Summary of one authenticated session."""

    userId: str
    sessionId: str
    startTime: datetime
    endTime: Optional[datetime] = None
    duration: Optional[int] = None
    actionsCount: int = 0
    ideasViewed: int = 0
    ideasLiked: int = 0
    ideasRemixed: int = 0
    ideasShared: int = 0
    swipeCount: int = 0
    device: str = "Desktop"
    browser: str = "Unknown"
    os: str = "Unknown"
    screenResolution: str = "unknown"
    referrer: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None

    def counters(self) -> dict:
        """Rolling counters flushed to the durable session record."""
        return self.model_dump(include={
            "actionsCount", "ideasViewed", "ideasLiked",
            "ideasRemixed", "ideasShared", "swipeCount",
        })


class EndSessionRequest(BaseModel):
    """Payload sent by the unload beacon."""

    sessionId: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1)
