"""
Interaction recorder: session lifecycle, interaction log and rolling counters.
"""

import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from idearoulette.models.analytics import (
    ClientInfo,
    IdeaInteraction,
    InteractionAction,
    SwipeDirection,
    UserSession,
)
from idearoulette.services.auth_service import AuthService, User
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.constants import SESSION_FLUSH_INTERVAL
from idearoulette.utils.logger import logger
from idearoulette.utils.mongodb_client import MongoDBClient, utcnow

SESSION_COUNTERS = {
    "view": "ideasViewed",
    "like": "ideasLiked",
    "remix": "ideasRemixed",
    "share": "ideasShared",
}

BEHAVIOR_COUNTERS = {
    "view": "totalIdeasViewed",
    "like": "totalIdeasLiked",
    "unlike": "totalIdeasUnliked",
    "remix": "totalIdeasRemixed",
    "share": "totalIdeasShared",
    "expand": "totalIdeasExpanded",
}


def parse_user_agent(user_agent: str) -> Dict[str, str]:
    """Coarse device, browser and OS detection from a user agent string."""
    ua = user_agent or ""

    device = "Desktop"
    if any(marker in ua for marker in ("Mobile", "Android", "iPhone", "iPad")):
        device = "Tablet" if "iPad" in ua else "Mobile"

    browser = "Unknown"
    for name in ("Chrome", "Firefox", "Safari", "Edge"):
        if name in ua:
            browser = name
            break

    os_name = "Unknown"
    for marker, name in (("Windows", "Windows"), ("Mac", "macOS"), ("Linux", "Linux"),
                         ("Android", "Android"), ("iOS", "iOS")):
        if marker in ua:
            os_name = name
            break

    return {"device": device, "browser": browser, "os": os_name}


def generate_session_id() -> str:
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _as_utc(value: datetime) -> datetime:
    # Stored datetimes come back naive from the driver
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionContext:
    """
    Per-session state threaded into everything that logs interactions.

    Created by InteractionRecorder.start_session at sign-in and closed by
    end_session at sign-out or unload.
    """

    def __init__(self, session: UserSession):
        self.session = session
        self.current_idea_name: Optional[str] = None
        self.view_started_at: Optional[float] = None
        self.unflushed_actions = 0
        self.closed = False
        self._lock = threading.Lock()

    @property
    def session_id(self) -> str:
        return self.session.sessionId

    @property
    def user_id(self) -> str:
        return self.session.userId

    def start_viewing(self, idea_name: str):
        self.current_idea_name = idea_name
        self.view_started_at = time.monotonic()

    def seconds_on(self, idea_name: str) -> Optional[int]:
        """Seconds spent on idea_name since its view started, if it is the one on screen."""
        if idea_name != self.current_idea_name or self.view_started_at is None:
            return None
        return round(time.monotonic() - self.view_started_at)

    def count(self, action: str, swipe_direction: Optional[str]) -> bool:
        """Bump in-memory counters. Returns True when a flush is due."""
        with self._lock:
            self.session.actionsCount += 1
            counter = SESSION_COUNTERS.get(action)
            if counter:
                setattr(self.session, counter, getattr(self.session, counter) + 1)
            if swipe_direction:
                self.session.swipeCount += 1
            self.unflushed_actions += 1
            if self.unflushed_actions >= SESSION_FLUSH_INTERVAL:
                self.unflushed_actions = 0
                return True
            return False


class InteractionRecorder:
    """Service for recording views, actions and sessions."""

    def __init__(self, mongodb_client: MongoDBClient, user_data_service: UserDataService):
        """
        Initialize the interaction recorder.

        Args:
            mongodb_client: Durable store client
            user_data_service: Used for the seen-set that guards view logging
        """
        self.mongodb_client = mongodb_client
        self.user_data_service = user_data_service

    def start_session(self, user: User, client_info: Optional[ClientInfo] = None) -> SessionContext:
        """Open a session for a freshly signed-in user."""
        client_info = client_info or ClientInfo()
        session = UserSession(
            userId=user.uid,
            sessionId=generate_session_id(),
            startTime=utcnow(),
            screenResolution=client_info.screenResolution,
            referrer=client_info.referrer,
            country=client_info.country,
            region=client_info.region,
            city=client_info.city,
            **parse_user_agent(client_info.userAgent),
        )
        self.mongodb_client.insert_session(session.sessionId, session.model_dump(exclude_none=True))

        now = session.startTime
        self.mongodb_client.update_user_behavior(user.uid, {
            "totalSessions": 1,
            f"timeOfDayUsage.{now.hour}": 1,
            f"dayOfWeekUsage.{now.strftime('%A')}": 1,
        })
        logger.info(f"Started session {session.sessionId} for {user.uid}")
        return SessionContext(session)

    def record_view(
        self,
        ctx: SessionContext,
        idea_name: str,
        idea_category: str,
        idea_rating: float,
        swipe_direction: Optional[SwipeDirection] = None
    ) -> bool:
        """
        Log a view, once per idea while it remains in the seen list.

        Returns:
            True if a view was recorded, False if the idea was already seen
        """
        if not self.user_data_service.add_seen_idea(idea_name):
            return False

        self._log(ctx, idea_name, idea_category, idea_rating, "view", swipe_direction)
        logger.debug(f"Tracked view for {idea_name}")
        return True

    def record_action(
        self,
        ctx: SessionContext,
        idea_name: str,
        idea_category: str,
        idea_rating: float,
        action: InteractionAction
    ):
        """Log a like, unlike, remix, share or expand. Never deduplicated."""
        if action == "view":
            raise ValueError("Views are recorded through record_view")
        self._log(ctx, idea_name, idea_category, idea_rating, action)
        logger.debug(f"Tracked {action} for {idea_name}")

    def _log(
        self,
        ctx: SessionContext,
        idea_name: str,
        idea_category: str,
        idea_rating: float,
        action: InteractionAction,
        swipe_direction: Optional[SwipeDirection] = None
    ):
        now = utcnow()
        interaction = IdeaInteraction(
            userId=ctx.user_id,
            sessionId=ctx.session_id,
            ideaName=idea_name,
            ideaCategory=idea_category or "Unknown",
            ideaRating=idea_rating or 0,
            action=action,
            timestamp=now,
            timeSpentOnIdea=None if action == "view" else ctx.seconds_on(idea_name),
            swipeDirection=swipe_direction,
        )
        self.mongodb_client.insert_interaction(interaction.model_dump(exclude_none=True))

        increments = {BEHAVIOR_COUNTERS[action]: 1}
        if action == "view":
            increments["totalSwipes"] = 1
            increments[f"dailyViews.{now.strftime('%Y-%m-%d')}"] = 1
            increments[f"hourlyViews.{now.hour}"] = 1
        self.mongodb_client.update_user_behavior(ctx.user_id, increments)

        if ctx.count(action, swipe_direction):
            self.flush_session(ctx)

    def flush_session(self, ctx: SessionContext):
        """Write the in-memory counters to the session record."""
        self.mongodb_client.update_session(ctx.session_id, ctx.session.counters())

    def end_session(self, ctx: SessionContext):
        """Close the session: compute its duration and flush the final counters."""
        if ctx.closed:
            return
        ctx.closed = True

        end_time = utcnow()
        duration = round((end_time - ctx.session.startTime).total_seconds())
        ctx.session.endTime = end_time
        ctx.session.duration = duration

        self.mongodb_client.update_session(ctx.session_id, {
            "endTime": end_time,
            "duration": duration,
            **ctx.session.counters(),
        })
        self.mongodb_client.update_user_behavior(ctx.user_id, {"totalTimeSpent": duration})
        logger.info(f"Ended session {ctx.session_id} after {duration}s")

    def end_session_nowait(self, ctx: SessionContext) -> threading.Thread:
        """
        Best-effort session close for unload paths.

        Runs on a daemon thread so the caller never waits on the store; if
        the process exits first the close is simply lost.
        """
        def _close():
            try:
                self.end_session(ctx)
            except Exception as e:
                logger.warning(f"Could not end session {ctx.session_id}: {e}")

        thread = threading.Thread(target=_close, name=f"end-session-{ctx.session_id}", daemon=True)
        thread.start()
        return thread

    def close_session_record(self, session_id: str, user_id: Optional[str] = None) -> bool:
        """
        Close a stored session by id, as the unload beacon does.

        Returns:
            True if the session was open and has been closed
        """
        stored = self.mongodb_client.get_session(session_id)
        if not stored or stored.get("endTime"):
            return False
        if user_id and stored.get("userId") != user_id:
            logger.warning(f"Session {session_id} does not belong to {user_id}")
            return False

        end_time = utcnow()
        duration = round((end_time - _as_utc(stored["startTime"])).total_seconds())
        self.mongodb_client.update_session(session_id, {"endTime": end_time, "duration": duration})
        logger.info(f"Closed session {session_id} from beacon after {duration}s")
        return True


class SessionLifecycle:
    """
    Opens a session on sign-in and closes it on sign-out.

    The current SessionContext is exposed as ``context`` and is None while
    nobody is signed in.
    """

    def __init__(
        self,
        auth_service: AuthService,
        user_data_service: UserDataService,
        recorder: InteractionRecorder,
        client_info: Optional[ClientInfo] = None
    ):
        self.auth_service = auth_service
        self.user_data_service = user_data_service
        self.recorder = recorder
        self.client_info = client_info
        self.context: Optional[SessionContext] = None
        self._unsubscribe = auth_service.subscribe(self._on_auth_change)

    def _on_auth_change(self, user: Optional[User]):
        if user is not None:
            self.user_data_service.initialize_user(user)
            self.context = self.recorder.start_session(user, self.client_info)
        elif self.context is not None:
            ctx, self.context = self.context, None
            self.recorder.end_session(ctx)

    def unload(self) -> Optional[threading.Thread]:
        """Fire-and-forget close used when the process is going away."""
        if self.context is None:
            return None
        return self.recorder.end_session_nowait(self.context)

    def detach(self):
        self._unsubscribe()
