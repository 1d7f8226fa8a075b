"""
Idea service: batch generation, storage and prefetching for the feed.
"""

import asyncio
from typing import Callable, List, Optional

from idearoulette.errors import GenerationError, IdeaRouletteError
from idearoulette.models.idea import Idea
from idearoulette.models.profile import UserPreferences
from idearoulette.services.ai_service import AIService
from idearoulette.services.fallback_ideas import get_fallback_ideas
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.constants import BATCH_SIZE, INITIAL_BATCH_SIZE, PREFETCH_THRESHOLD
from idearoulette.utils.logger import logger
from idearoulette.utils.mongodb_client import MongoDBClient, utcnow


def should_load_more_ideas(current_index: int, total_ideas: int, threshold: int = PREFETCH_THRESHOLD) -> bool:
    """True when the ideas left after the current one are at or below threshold."""
    remaining = total_ideas - current_index - 1
    return remaining <= threshold


class IdeaService:
    """Service for generating and storing idea batches."""

    def __init__(self, ai_service: AIService, user_data_service: UserDataService, mongodb_client: MongoDBClient):
        """
        Initialize the idea service.

        Args:
            ai_service: Generation provider
            user_data_service: Source of preferences and the seen list
            mongodb_client: Store for generated ideas
        """
        self.ai_service = ai_service
        self.user_data_service = user_data_service
        self.mongodb_client = mongodb_client

    def generate_and_store_ideas(
        self,
        preferences: Optional[UserPreferences] = None,
        count: int = BATCH_SIZE
    ) -> List[Idea]:
        """
        Generate fresh ideas that avoid the user's seen list and keep a copy of them.

        Args:
            preferences: Profile to bias generation towards
            count: Number of ideas to request

        Returns:
            The generated ideas

        Raises:
            GenerationError: If the provider fails
        """
        seen_ideas = self.user_data_service.get_seen_ideas()
        ideas = self.ai_service.generate_ideas(preferences, count, seen_ideas)

        user = self.user_data_service.auth_service.current_user
        if user and ideas:
            now = utcnow()
            documents = [
                {**idea.model_dump(), "userId": user.uid, "createdAt": now, "isGenerated": True}
                for idea in ideas
            ]
            try:
                self.mongodb_client.insert_generated_ideas(documents)
            except IdeaRouletteError as e:
                # Losing the archive copy never blocks the feed
                logger.error(f"Error storing generated ideas: {e}")

        logger.info(f"Generated and stored {len(ideas)} fresh ideas")
        return ideas

    def load_more_ideas(self, batch_size: int = BATCH_SIZE) -> List[Idea]:
        """Generate the next personalized batch for a running feed."""
        logger.info(f"Loading {batch_size} more ideas...")
        preferences = self.user_data_service.get_user_preferences()
        return self.generate_and_store_ideas(preferences, batch_size)

    def initialize_user_ideas(self, initial_count: int = INITIAL_BATCH_SIZE) -> List[Idea]:
        """
        Produce the first screenful of ideas.

        Falls back to the built-in ideas when generation fails so the feed
        always has something to show.
        """
        logger.info(f"Initializing with {initial_count} ideas...")
        try:
            return self.load_more_ideas(initial_count)
        except GenerationError as e:
            logger.warning(f"Falling back to built-in ideas: {e}")
            return get_fallback_ideas(initial_count)


class PrefetchController:
    """
    Keeps the feed buffer topped up.

    At most one batch is in flight; requests that arrive meanwhile are
    dropped rather than queued, and the predicate is simply checked again on
    the next cursor move.
    """

    def __init__(
        self,
        idea_service: IdeaService,
        on_batch: Callable[[List[Idea]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        threshold: int = PREFETCH_THRESHOLD,
        batch_size: int = BATCH_SIZE
    ):
        self.idea_service = idea_service
        self.on_batch = on_batch
        self.on_error = on_error
        self.threshold = threshold
        self.batch_size = batch_size
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _try_acquire(self) -> bool:
        if self._in_flight:
            logger.debug("Prefetch already in flight, dropping request")
            return False
        self._in_flight = True
        return True

    def request(self, size: Optional[int] = None) -> Optional[asyncio.Task]:
        """Schedule a batch fetch unless one is already running."""
        if not self._try_acquire():
            return None
        return asyncio.create_task(self._fetch(size or self.batch_size))

    def maybe_prefetch(self, cursor: int, total: int) -> Optional[asyncio.Task]:
        """Evaluate the threshold for the current cursor and fetch if needed."""
        if not should_load_more_ideas(cursor, total, self.threshold):
            return None
        return self.request()

    async def fetch_batch(self, size: Optional[int] = None) -> List[Idea]:
        """Fetch and append a batch now. Returns [] if another fetch is running."""
        if not self._try_acquire():
            return []
        return await self._fetch(size or self.batch_size)

    async def _fetch(self, size: int) -> List[Idea]:
        try:
            ideas = await asyncio.to_thread(self.idea_service.load_more_ideas, size)
            if ideas:
                self.on_batch(ideas)
            logger.info(f"Successfully loaded {len(ideas)} new ideas")
            return ideas
        except Exception as e:
            logger.error(f"Error loading more ideas: {e}")
            if self.on_error:
                self.on_error(e)
            return []
        finally:
            self._in_flight = False
