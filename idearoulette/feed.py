"""
Feed state: the idea buffer, the cursor and the user's actions on it.

Cursor moves are synchronous; everything that touches the store or a
provider runs in the background on the event loop and reports back through
the notice board.
"""

import asyncio
from typing import Coroutine, Dict, List, Literal, Optional, Set

from idearoulette.errors import IdeaRouletteError
from idearoulette.models.idea import Idea, RemixResult, RemixTitles
from idearoulette.notices import NoticeBoard
from idearoulette.services.ai_service import AIService
from idearoulette.services.analytics_service import InteractionRecorder, SessionContext
from idearoulette.services.idea_service import IdeaService, PrefetchController
from idearoulette.services.preference_service import format_personality
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.constants import BATCH_SIZE, INITIAL_LOAD_MINIMUM, PREFETCH_THRESHOLD
from idearoulette.utils.logger import logger

Direction = Literal["next", "previous"]


class FeedManager:
    """Owns the ordered idea buffer and the cursor into it."""

    def __init__(
        self,
        ideas: List[Idea],
        idea_service: IdeaService,
        ai_service: AIService,
        user_data_service: UserDataService,
        recorder: InteractionRecorder,
        session: Optional[SessionContext] = None,
        notices: Optional[NoticeBoard] = None,
        threshold: int = PREFETCH_THRESHOLD,
        batch_size: int = BATCH_SIZE,
        remix_full_ideas: bool = True
    ):
        self.ideas: List[Idea] = list(ideas)
        self.cursor = 0
        self.direction: Direction = "next"
        self.ai_service = ai_service
        self.user_data_service = user_data_service
        self.recorder = recorder
        self.session = session
        self.notices = notices or NoticeBoard()
        self.remix_full_ideas = remix_full_ideas

        self.prefetch = PrefetchController(
            idea_service,
            on_batch=self._append_batch,
            on_error=self._on_prefetch_error,
            threshold=threshold,
            batch_size=batch_size,
        )

        self._liked: Set[str] = set()
        self._remixing: Set[str] = set()
        self._like_locks: Dict[str, asyncio.Lock] = {}
        self._swipe_lock = asyncio.Lock()
        self._background: Set[asyncio.Task] = set()

    # State

    @property
    def current(self) -> Optional[Idea]:
        if not self.ideas:
            return None
        return self.ideas[self.cursor]

    @property
    def is_loading(self) -> bool:
        return self.prefetch.in_flight

    @property
    def liked_names(self) -> Set[str]:
        return set(self._liked)

    def is_liked(self, idea_name: str) -> bool:
        return idea_name in self._liked

    def is_remixing(self, idea_name: str) -> bool:
        return idea_name in self._remixing

    def index_of(self, idea_name: str) -> Optional[int]:
        for index, idea in enumerate(self.ideas):
            if idea.name == idea_name:
                return index
        return None

    @property
    def _can_persist(self) -> bool:
        return self.user_data_service.auth_service.is_signed_in

    async def load(self):
        """Mirror the durable liked list and top up a short initial buffer."""
        if self._can_persist:
            try:
                liked = await asyncio.to_thread(self.user_data_service.get_liked_ideas)
                self._liked = {idea.name for idea in liked}
            except IdeaRouletteError as e:
                logger.error(f"Error loading liked ideas: {e}")

        self._start_viewing()
        if len(self.ideas) < INITIAL_LOAD_MINIMUM:
            self._track(self.prefetch.request())
        else:
            self._check_prefetch()

    # Navigation

    def advance(self) -> bool:
        """Move to the next idea. Returns False at the end of the buffer."""
        if self.cursor + 1 >= len(self.ideas):
            return False

        leaving = self.ideas[self.cursor]
        self.cursor += 1
        self.direction = "next"
        self._start_viewing()

        if self._can_persist:
            self._spawn(self._record_swipe(leaving))

        self._check_prefetch()
        return True

    def retreat(self) -> bool:
        """Move to the previous idea. Returns False at the start of the buffer."""
        if self.cursor <= 0:
            return False
        self.cursor -= 1
        self.direction = "previous"
        self._start_viewing()
        self._check_prefetch()
        return True

    def select_idea(self, idea: Idea) -> int:
        """
        Jump to an idea, inserting it after the cursor if it is not in the feed.

        Returns:
            The new cursor position
        """
        existing = self.index_of(idea.name)
        if existing is not None:
            self.direction = "next" if existing >= self.cursor else "previous"
            self.cursor = existing
        elif not self.ideas:
            self.ideas.append(idea)
            self.cursor = 0
        else:
            self.ideas.insert(self.cursor + 1, idea)
            self.cursor += 1
            self.direction = "next"

        self._start_viewing()
        self._check_prefetch()
        return self.cursor

    # Actions

    async def like_current(self) -> Optional[bool]:
        """
        Toggle the like on the current idea.

        The local flag flips immediately. Durable writes for one idea run one
        at a time in the order the toggles were made; if a write fails the
        flag is rolled back and a notice is raised.

        Returns:
            The liked state after the call, or None on an empty feed
        """
        idea = self.current
        if idea is None:
            return None

        was_liked = idea.name in self._liked
        self._set_liked(idea.name, not was_liked)

        lock = self._like_locks.setdefault(idea.name, asyncio.Lock())
        try:
            async with lock:
                if was_liked:
                    await asyncio.to_thread(self._persist_unlike, idea)
                else:
                    await asyncio.to_thread(self._persist_like, idea)
        except IdeaRouletteError as e:
            logger.error(f"Error toggling like for {idea.name}: {e}")
            if self.is_liked(idea.name) != was_liked:
                self._set_liked(idea.name, was_liked)
            self.notices.push(
                "Couldn't save that",
                "Sign in to keep your favorites." if not self._can_persist else str(e),
                variant="destructive",
            )
            return was_liked

        if was_liked:
            self.notices.push("Removed from favorites", idea.name)
        else:
            self.notices.push("Added to favorites! ❤️", idea.name, variant="success")
        return not was_liked

    def _start_viewing(self):
        idea = self.current
        if self.session is not None and idea is not None:
            self.session.start_viewing(idea.name)

    def _set_liked(self, idea_name: str, liked: bool):
        if liked:
            self._liked.add(idea_name)
        else:
            self._liked.discard(idea_name)

    def _persist_like(self, idea: Idea):
        if not self.user_data_service.add_liked_idea(idea):
            return
        self._record_action_quietly(idea, "like")

    def _persist_unlike(self, idea: Idea):
        if self.user_data_service.remove_liked_idea(idea.name) is None:
            return
        self._record_action_quietly(idea, "unlike")

    def _record_action_quietly(self, idea: Idea, action: str):
        if self.session is None:
            return
        try:
            self.recorder.record_action(self.session, idea.name, idea.category, idea.rating, action)
        except IdeaRouletteError as e:
            logger.warning(f"Could not log {action} for {idea.name}: {e}")

    async def remix_current(self) -> Optional[RemixResult]:
        """
        Remix the current idea.

        Titles are attached to the idea in place; full ideas are spliced in
        right after the cursor. Only one remix per idea name runs at a time.
        """
        idea = self.current
        if idea is None:
            return None
        if idea.name in self._remixing:
            logger.info(f"Remix already running for {idea.name}")
            return None

        self._remixing.add(idea.name)
        self.notices.push("🎨 Generating Remixes...", f"Creating variations of {idea.name}")
        try:
            result = await asyncio.to_thread(self.ai_service.remix, idea, self.remix_full_ideas)
        except Exception as e:
            logger.error(f"Error remixing {idea.name}: {e}")
            self.notices.push("Remix failed", "Could not generate variations right now.", variant="destructive")
            return None
        finally:
            self._remixing.discard(idea.name)

        self._apply_remix(idea, result)
        if self._can_persist and self.session is not None:
            self._spawn(self._record_action(idea, "remix"))
        return result

    def _apply_remix(self, idea: Idea, result: RemixResult):
        if isinstance(result, RemixTitles):
            idea.remixes = list(result.titles)
            self.notices.push("✨ Remixes Ready!", f"{len(result.titles)} variations of {idea.name}", variant="success")
            return

        insert_at = self.cursor + 1 if self.ideas else 0
        self.ideas[insert_at:insert_at] = result.ideas
        self.notices.push("✨ Remixes Added!", f"{len(result.ideas)} new ideas up next", variant="success")
        logger.info(f"Inserted {len(result.ideas)} remixes of {idea.name} at {insert_at}")

    def share_current(self) -> Optional[str]:
        """Build share text for the current idea and log the share."""
        idea = self.current
        if idea is None:
            return None
        if self._can_persist and self.session is not None:
            self._spawn(self._record_action(idea, "share"))
        return f"Check out this startup idea: {idea.name} - {idea.tagline}"

    def expand_current(self) -> Optional[Idea]:
        """Open the detail view of the current idea and log it."""
        idea = self.current
        if idea is None:
            return None
        if self._can_persist and self.session is not None:
            self._spawn(self._record_action(idea, "expand"))
        return idea

    # Background work

    async def drain(self):
        """Wait for every outstanding background task, including new ones they spawn."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _check_prefetch(self):
        self._track(self.prefetch.maybe_prefetch(self.cursor, len(self.ideas)))

    def _append_batch(self, ideas: List[Idea]):
        was_empty = not self.ideas
        self.ideas.extend(ideas)
        if was_empty:
            self._start_viewing()

    def _on_prefetch_error(self, error: Exception):
        self.notices.push("Couldn't load more ideas", "We'll try again as you keep swiping.", variant="destructive")

    async def _record_swipe(self, idea: Idea):
        # Swipes reach the store in the order they were made
        async with self._swipe_lock:
            if self.session is not None:
                try:
                    await asyncio.to_thread(
                        self.recorder.record_view, self.session, idea.name, idea.category, idea.rating, "up"
                    )
                except IdeaRouletteError as e:
                    logger.error(f"Error tracking view for {idea.name}: {e}")
            await self._count_swipe()

    async def _record_action(self, idea: Idea, action: str):
        await asyncio.to_thread(
            self.recorder.record_action, self.session, idea.name, idea.category, idea.rating, action
        )

    async def _count_swipe(self):
        result = await asyncio.to_thread(self.user_data_service.increment_swipe_count)
        if result.personality_unlocked:
            label = await asyncio.to_thread(self.user_data_service.get_founder_personality)
            self.notices.push("🎉 Founder personality unlocked!", format_personality(label), variant="success")

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._track(task)
        return task

    def _track(self, task: Optional[asyncio.Task]):
        if task is None:
            return
        self._background.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task):
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background task failed: {error}")
