"""
Tests for the command line interface.
"""

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock, patch

from idearoulette.cli import app
from idearoulette.errors import GenerationError
from tests.conftest import make_idea

runner = CliRunner()

INTERESTS = ["AI / Technology", "Health / Wellness", "Fintech / Crypto"]


@pytest.fixture
def mock_ai_service():
    mock_service = MagicMock()
    mock_service.generate_ideas.return_value = [make_idea("Pulse"), make_idea("Orbit")]
    with patch("idearoulette.cli.create_ai_service", return_value=mock_service):
        yield mock_service


@pytest.fixture
def store(mongodb_client):
    """Route the CLI's store connections to the in-memory client."""
    with patch("idearoulette.cli.MongoDBClient", return_value=mongodb_client):
        yield mongodb_client


class TestGenerate:

    def test_prints_ideas(self, mock_ai_service):
        result = runner.invoke(app, ["generate", "--count", "2"])
        assert result.exit_code == 0
        assert "Pulse" in result.output
        assert "Orbit" in result.output

    def test_verbose_flag(self, mock_ai_service):
        with patch("idearoulette.cli.configure_logging") as configure:
            result = runner.invoke(app, ["--verbose", "generate", "--count", "1"])
        assert result.exit_code == 0
        configure.assert_called_once_with("DEBUG")

    def test_falls_back_on_failure(self, mock_ai_service):
        mock_ai_service.generate_ideas.side_effect = GenerationError("quota")
        result = runner.invoke(app, ["generate", "--count", "1"])
        assert result.exit_code == 0
        assert "DreamSync" in result.output


class TestOnboard:

    def test_records_interests(self, store):
        args = ["onboard", "-u", "cli-user", "-n", "Grace"]
        for interest in INTERESTS:
            args += ["-i", interest]

        result = runner.invoke(app, args)

        assert result.exit_code == 0
        stored = store.get_user("cli-user")
        assert stored["name"] == "Grace"
        assert stored["interests"] == INTERESTS
        assert stored["onboardingCompleted"] is True
        assert stored["preferences"]["likedCategories"] == INTERESTS

    def test_rejects_unknown_category(self, store):
        result = runner.invoke(app, ["onboard", "-u", "cli-user", "-n", "Grace", "-i", "Underwater / Basket Weaving"])
        assert result.exit_code == 1
        assert store.get_user("cli-user") is None

    def test_requires_three_interests(self, store):
        result = runner.invoke(app, ["onboard", "-u", "cli-user", "-n", "Grace", "-i", INTERESTS[0]])
        assert result.exit_code == 1


class TestPersonality:

    def test_locked(self, store):
        result = runner.invoke(app, ["personality", "-u", "cli-user"])
        assert result.exit_code == 0
        assert "Swipe 10 more" in result.output

    def test_unlocked(self, store):
        store.ensure_user("cli-user", {"swipeCount": 12, "personalityUnlocked": True, "likedIdeas": []})
        store.add_to_user_set("cli-user", {"preferences.likedCategories": ["AI / Health"]})

        result = runner.invoke(app, ["personality", "-u", "cli-user"])

        assert result.exit_code == 0
        assert "AI Pioneer" in result.output


class TestReset:

    def test_reset_with_confirmation_flag(self, store):
        store.ensure_user("cli-user", {"swipeCount": 42, "seenIdeas": ["Pulse"]})

        result = runner.invoke(app, ["reset", "-u", "cli-user", "--yes"])

        assert result.exit_code == 0
        stored = store.get_user("cli-user")
        assert stored["swipeCount"] == 0
        assert stored["seenIdeas"] == []

    def test_reset_aborted(self, store):
        store.ensure_user("cli-user", {"swipeCount": 42})
        result = runner.invoke(app, ["reset", "-u", "cli-user"], input="n\n")
        assert result.exit_code == 1
        assert store.get_user("cli-user")["swipeCount"] == 42


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main(["-v", __file__]))
