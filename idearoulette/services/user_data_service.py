"""
User data service: the signed-in user's durable document.

Reads degrade to defaults when nobody is signed in or the store is
unreachable; writes raise so callers can roll back optimistic state.
"""

from typing import Any, Dict, List, NamedTuple, Optional

from idearoulette.errors import IdeaRouletteError
from idearoulette.models.idea import Idea
from idearoulette.models.profile import UserDocument, UserPreferences
from idearoulette.services.auth_service import AuthService, User
from idearoulette.services.preference_service import absorb_like, derive_personality, traits_for
from idearoulette.utils.constants import SEEN_IDEAS_LIMIT, PERSONALITY_UNLOCK_SWIPES
from idearoulette.utils.logger import logger
from idearoulette.utils.mongodb_client import MongoDBClient, utcnow


class SwipeResult(NamedTuple):
    count: int
    personality_unlocked: bool


def default_user_data(name: str = "") -> Dict[str, Any]:
    now = utcnow()
    return UserDocument(name=name, createdAt=now, lastActiveAt=now).model_dump()


def _preference_additions(idea: Idea) -> Dict[str, List[str]]:
    return {
        "preferences.likedCategories": [idea.category],
        "preferences.likedTags": list(idea.tags),
        "preferences.personalityTraits": traits_for(idea),
    }


class UserDataService:
    """Service for per-user document operations."""

    def __init__(self, mongodb_client: MongoDBClient, auth_service: AuthService):
        """
        Initialize the user data service.

        Args:
            mongodb_client: Durable store client
            auth_service: Identity boundary used to resolve the current user
        """
        self.mongodb_client = mongodb_client
        self.auth_service = auth_service

    def initialize_user(self, user: User) -> bool:
        """Create the user's document with empty defaults on first use."""
        return self.mongodb_client.ensure_user(user.uid, default_user_data(user.display_name))

    def _require_user(self) -> User:
        user = self.auth_service.require_user()
        self.initialize_user(user)
        return user

    def _read_raw(self) -> Optional[Dict[str, Any]]:
        user = self.auth_service.current_user
        if user is None:
            return None
        try:
            return self.mongodb_client.get_user(user.uid)
        except IdeaRouletteError as e:
            logger.error(f"Error reading user data: {e}")
            return None

    def get_user_data(self) -> UserDocument:
        raw = self._read_raw()
        if not raw:
            return UserDocument()
        raw = {key: value for key, value in raw.items() if key != "_id"}
        return UserDocument(**raw)

    # Liked ideas

    def get_liked_ideas(self) -> List[Idea]:
        return self.get_user_data().likedIdeas

    def is_idea_liked(self, idea_name: str) -> bool:
        return any(idea.name == idea_name for idea in self.get_liked_ideas())

    def add_liked_idea(self, idea: Idea) -> bool:
        """
        Append an idea to the liked list and fold it into the preferences.

        The liked record and the preference additions land in a single
        $addToSet update, so a failed write leaves neither behind. The
        "already liked" check is a read followed by that write; two clients
        racing on the same idea can both pass it, and $addToSet still keeps
        byte-identical records from doubling.

        Returns:
            True if the idea was added, False if it was already liked
        """
        user = self._require_user()
        if self.is_idea_liked(idea.name):
            logger.debug(f"Idea already liked: {idea.name}")
            return False

        logger.info(f"Adding liked idea: {idea.name} (category: {idea.category})")
        self.mongodb_client.add_to_user_set(user.uid, {
            "likedIdeas": [idea.model_dump()],
            **_preference_additions(idea),
        })
        return True

    def remove_liked_idea(self, idea_name: str) -> Optional[Idea]:
        """
        Remove an idea from the liked list. Preferences are left as they are.

        Returns:
            The removed idea, or None if it was not liked
        """
        user = self._require_user()
        raw = self.mongodb_client.get_user(user.uid) or {}
        stored = next(
            (item for item in raw.get("likedIdeas", []) if item.get("name") == idea_name),
            None
        )
        if stored is None:
            return None

        logger.info(f"Removing liked idea: {idea_name}")
        self.mongodb_client.pull_from_user_array(user.uid, "likedIdeas", stored)
        return Idea(**stored)

    # Preferences

    def get_user_preferences(self) -> UserPreferences:
        return self.get_user_data().preferences

    def absorb_like(self, idea: Idea) -> UserPreferences:
        """
        Persist the preference ratchet for a liked idea.

        Additions go through $addToSet, so concurrent writers can only add.
        """
        user = self._require_user()
        self.mongodb_client.add_to_user_set(user.uid, _preference_additions(idea))
        return absorb_like(self.get_user_preferences(), idea)

    # Swipes and personality

    def get_swipe_count(self) -> int:
        return self.get_user_data().swipeCount

    def increment_swipe_count(self) -> SwipeResult:
        """Count a swipe and trip the personality latch when it is due."""
        user = self._require_user()
        count = self.mongodb_client.increment_user_field(user.uid, "swipeCount")

        unlocked_now = False
        if count >= PERSONALITY_UNLOCK_SWIPES:
            unlocked_now = self.mongodb_client.set_user_flag_once(user.uid, "personalityUnlocked")
            if unlocked_now:
                logger.info(f"Personality unlocked for {user.uid} at {count} swipes")
        return SwipeResult(count=count, personality_unlocked=unlocked_now)

    def is_personality_unlocked(self) -> bool:
        return self.get_user_data().personalityUnlocked

    def set_personality_unlocked(self, unlocked: bool):
        user = self._require_user()
        self.mongodb_client.set_user_fields(user.uid, {"personalityUnlocked": unlocked})

    def get_founder_personality(self) -> str:
        data = self.get_user_data()
        return derive_personality(data.preferences, data.swipeCount, len(data.likedIdeas))

    # Onboarding

    def is_onboarding_completed(self) -> bool:
        return self.get_user_data().onboardingCompleted

    def set_onboarding_completed(self, completed: bool):
        user = self._require_user()
        self.mongodb_client.set_user_fields(user.uid, {"onboardingCompleted": completed})

    def get_user_interests(self) -> List[str]:
        return self.get_user_data().interests

    def set_user_interests(self, interests: List[str]):
        """Store onboarding interests and seed the liked categories with them."""
        user = self._require_user()
        self.mongodb_client.set_user_fields(user.uid, {"interests": list(interests)})
        self.mongodb_client.add_to_user_set(user.uid, {"preferences.likedCategories": list(interests)})

    def get_user_name(self) -> str:
        user = self.auth_service.current_user
        if user is None:
            return ""
        return self.get_user_data().name or user.display_name

    def set_user_name(self, name: str):
        user = self._require_user()
        self.mongodb_client.set_user_fields(user.uid, {"name": name})

    # Seen ideas

    def get_seen_ideas(self) -> List[str]:
        return self.get_user_data().seenIdeas

    def has_seen_idea(self, idea_name: str) -> bool:
        return idea_name in self.get_seen_ideas()

    def add_seen_idea(self, idea_name: str) -> bool:
        """
        Append a name to the bounded seen list, dropping the oldest entries.

        The membership check and the append happen in one store update.

        Returns:
            True if the name was new
        """
        user = self._require_user()
        return self.mongodb_client.push_unique_capped(user.uid, "seenIdeas", idea_name, SEEN_IDEAS_LIMIT)

    def clear_all_user_data(self):
        """Reset the user document to its initial state."""
        user = self.auth_service.require_user()
        data = default_user_data(user.display_name)
        data.pop("createdAt")
        self.mongodb_client.set_user_fields(user.uid, data)
        logger.info(f"Cleared all data for {user.uid}")
