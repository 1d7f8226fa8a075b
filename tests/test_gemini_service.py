"""
Tests for the Gemini service module.
"""

import json
import pytest
from unittest.mock import patch, MagicMock

from idearoulette.errors import GenerationError
from idearoulette.models.idea import RemixRecords, RemixTitles
from idearoulette.models.profile import UserPreferences
from idearoulette.services.gemini_service import GeminiService
from tests.conftest import make_idea


@pytest.fixture
def sample_idea_records():
    """Fixture providing raw idea records as the model would return them."""
    return [
        {
            "name": f"Idea{i}",
            "icon": "rocket",
            "tagline": f"Tagline {i}",
            "category": "AI / Productivity",
            "rating": 8.1,
            "description": f"Description {i}",
            "tags": ["AI"],
        }
        for i in range(3)
    ]


@pytest.fixture
def mock_gemini_client():
    """Fixture providing a mocked Gemini client."""
    with patch('google.genai.Client') as mock_client:
        mock_client.return_value.models = MagicMock()
        mock_client.return_value.models.generate_content = MagicMock()
        yield mock_client


@pytest.fixture
def gemini_service(mock_gemini_client):
    """Fixture providing a GeminiService instance with mocked dependencies."""
    service = GeminiService(
        google_api_key="test_google_key",
        model="gemini-2.5-flash"
    )
    service.gemini_client = mock_gemini_client.return_value
    return service


def _respond_with(mock_gemini_client, text):
    mock_response = MagicMock()
    mock_response.text = text
    mock_gemini_client.return_value.models.generate_content.return_value = mock_response


class TestGeminiService:
    """Tests for the GeminiService."""

    def test_generate_ideas_success(self, gemini_service, mock_gemini_client, sample_idea_records):
        """Test successful generation of an idea batch."""
        _respond_with(mock_gemini_client, json.dumps(sample_idea_records))

        result = gemini_service.generate_ideas(count=3)

        assert [idea.name for idea in result] == ["Idea0", "Idea1", "Idea2"]
        kwargs = mock_gemini_client.return_value.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"]["temperature"] == 0.9
        assert kwargs["config"]["response_mime_type"] == "application/json"

    def test_generate_ideas_truncates_to_count(self, gemini_service, mock_gemini_client, sample_idea_records):
        _respond_with(mock_gemini_client, json.dumps(sample_idea_records))
        assert len(gemini_service.generate_ideas(count=2)) == 2

    def test_prompt_carries_preferences_and_exclusions(self, gemini_service, mock_gemini_client, sample_idea_records):
        _respond_with(mock_gemini_client, json.dumps(sample_idea_records))
        preferences = UserPreferences(likedCategories=["Health / Wellness"], likedTags=["sleep"])

        gemini_service.generate_ideas(preferences, 3, ["SeenBefore"])

        prompt = mock_gemini_client.return_value.models.generate_content.call_args.kwargs["contents"]
        assert "Health / Wellness" in prompt
        assert "SeenBefore" in prompt

    def test_remix_titles(self, gemini_service, mock_gemini_client):
        _respond_with(mock_gemini_client, '["Pulse Pro", "Pulse Kids", "Pulse Teams"]')

        result = gemini_service.remix(make_idea("Pulse"), full_ideas=False)

        assert isinstance(result, RemixTitles)
        assert result.titles == ["Pulse Pro", "Pulse Kids", "Pulse Teams"]

    def test_remix_records(self, gemini_service, mock_gemini_client, sample_idea_records):
        _respond_with(mock_gemini_client, "```json\n" + json.dumps(sample_idea_records) + "\n```")

        result = gemini_service.remix(make_idea("Pulse"))

        assert isinstance(result, RemixRecords)
        assert len(result.ideas) == 3

    def test_generate_remixes_rejects_records(self, gemini_service, mock_gemini_client, sample_idea_records):
        _respond_with(mock_gemini_client, json.dumps(sample_idea_records))
        with pytest.raises(GenerationError):
            gemini_service.generate_remixes(make_idea("Pulse"))

    def test_malformed_response(self, gemini_service, mock_gemini_client):
        _respond_with(mock_gemini_client, "I could not think of anything.")
        with pytest.raises(GenerationError):
            gemini_service.generate_ideas(count=3)

    def test_empty_response(self, gemini_service, mock_gemini_client):
        _respond_with(mock_gemini_client, "")
        with pytest.raises(GenerationError):
            gemini_service.generate_ideas(count=3)

    @patch('idearoulette.services.gemini_service.logger')
    def test_generate_content_exception(self, mock_logger, gemini_service, mock_gemini_client):
        """Test handling of exceptions raised by the client."""
        mock_gemini_client.return_value.models.generate_content.side_effect = Exception("Test exception")

        with pytest.raises(GenerationError):
            gemini_service.generate_ideas(count=3)

        mock_logger.error.assert_called_once()


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
