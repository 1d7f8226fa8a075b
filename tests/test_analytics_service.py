"""
Tests for the InteractionRecorder and session lifecycle.
"""

import pytest
from unittest.mock import patch

from idearoulette.models.analytics import ClientInfo
from idearoulette.services.analytics_service import SessionLifecycle, parse_user_agent

CHROME_ON_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
SAFARI_ON_IPAD = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) Version/17.0 Mobile/15E148 Safari/604.1"


@pytest.fixture
def session(recorder, user, user_data_service):
    """Fixture providing an open SessionContext for the signed-in user."""
    user_data_service.initialize_user(user)
    return recorder.start_session(user, ClientInfo(userAgent=CHROME_ON_WINDOWS, screenResolution="1920x1080"))


class TestParseUserAgent:

    def test_desktop_chrome(self):
        assert parse_user_agent(CHROME_ON_WINDOWS) == {"device": "Desktop", "browser": "Chrome", "os": "Windows"}

    def test_tablet(self):
        parsed = parse_user_agent(SAFARI_ON_IPAD)
        assert parsed["device"] == "Tablet"
        assert parsed["browser"] == "Safari"

    def test_empty(self):
        assert parse_user_agent("") == {"device": "Desktop", "browser": "Unknown", "os": "Unknown"}


class TestSessions:

    def test_start_session(self, session, mongodb_client, user):
        stored = mongodb_client.get_session(session.session_id)
        assert stored["userId"] == user.uid
        assert stored["browser"] == "Chrome"
        assert stored["screenResolution"] == "1920x1080"

        behavior = mongodb_client.get_user_behavior(user.uid)
        assert behavior["totalSessions"] == 1
        assert sum(behavior["timeOfDayUsage"].values()) == 1

    def test_end_session_is_idempotent(self, recorder, session, mongodb_client):
        with patch.object(mongodb_client, "update_session", wraps=mongodb_client.update_session) as update:
            recorder.end_session(session)
            recorder.end_session(session)
            assert update.call_count == 1

        stored = mongodb_client.get_session(session.session_id)
        assert stored["endTime"] is not None
        assert stored["duration"] >= 0

    def test_end_session_nowait(self, recorder, session, mongodb_client):
        thread = recorder.end_session_nowait(session)
        thread.join(timeout=5)
        assert mongodb_client.get_session(session.session_id)["endTime"] is not None

    def test_close_session_record(self, recorder, session, user):
        assert recorder.close_session_record(session.session_id, "someone-else") is False
        assert recorder.close_session_record(session.session_id, user.uid) is True
        assert recorder.close_session_record(session.session_id, user.uid) is False
        assert recorder.close_session_record("missing") is False


class TestInteractions:

    def test_view_recorded_once_per_idea(self, recorder, session, mongodb_client, user):
        assert recorder.record_view(session, "Pulse", "AI / Health", 8.5, "up") is True
        assert recorder.record_view(session, "Pulse", "AI / Health", 8.5, "up") is False

        interactions = list(mongodb_client.interactions.find({"userId": user.uid}))
        assert len(interactions) == 1
        assert interactions[0]["action"] == "view"
        assert interactions[0]["swipeDirection"] == "up"
        assert "timeSpentOnIdea" not in interactions[0]

        behavior = mongodb_client.get_user_behavior(user.uid)
        assert behavior["totalIdeasViewed"] == 1
        assert behavior["totalSwipes"] == 1

        assert session.session.ideasViewed == 1
        assert session.session.swipeCount == 1

    def test_action_on_card_in_view_records_time_spent(self, recorder, session, mongodb_client):
        session.start_viewing("Pulse")
        recorder.record_action(session, "Pulse", "AI / Health", 8.5, "like")

        like = mongodb_client.interactions.find_one({"action": "like"})
        assert like["timeSpentOnIdea"] >= 0
        assert session.session.ideasLiked == 1

    def test_actions_are_not_deduplicated(self, recorder, session, mongodb_client):
        recorder.record_action(session, "Pulse", "AI / Health", 8.5, "share")
        recorder.record_action(session, "Pulse", "AI / Health", 8.5, "share")
        assert mongodb_client.interactions.count_documents({"action": "share"}) == 2

    def test_view_cannot_be_recorded_as_action(self, recorder, session):
        with pytest.raises(ValueError):
            recorder.record_action(session, "Pulse", "AI / Health", 8.5, "view")

    def test_counters_flushed_every_ten_actions(self, recorder, session, mongodb_client):
        for _ in range(10):
            recorder.record_action(session, "Pulse", "AI / Health", 8.5, "expand")

        stored = mongodb_client.get_session(session.session_id)
        assert stored["actionsCount"] == 10


class TestSessionLifecycle:

    def test_sign_in_and_out(self, mongodb_client, auth_service, user, recorder):
        lifecycle = SessionLifecycle(auth_service, recorder.user_data_service, recorder)
        assert lifecycle.context is None

        auth_service.sign_in(user)
        ctx = lifecycle.context
        assert ctx is not None
        assert mongodb_client.get_user(user.uid) is not None

        auth_service.sign_out()
        assert lifecycle.context is None
        assert mongodb_client.get_session(ctx.session_id)["endTime"] is not None

    def test_unload_without_session(self, auth_service, recorder):
        # The recorder fixture signs the user in before the lifecycle subscribes
        lifecycle = SessionLifecycle(auth_service, recorder.user_data_service, recorder)
        assert lifecycle.unload() is None


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main(["-v", __file__]))
