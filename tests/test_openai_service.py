"""
Tests for the OpenAI service module.
"""

import json
import pytest
from unittest.mock import patch, MagicMock

from idearoulette.errors import GenerationError
from idearoulette.services.openai_service import OpenAIService


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client."""
    with patch('idearoulette.services.openai_service.OpenAI') as mock_client:
        yield mock_client


@pytest.fixture
def openai_service(mock_openai_client):
    return OpenAIService(api_key="test_openai_key", model="gpt-4o")


def _completion(content):
    message = MagicMock()
    message.content = content
    completion = MagicMock()
    completion.choices = [MagicMock(message=message)]
    return completion


class TestOpenAIService:

    def test_generate_ideas_success(self, openai_service, mock_openai_client):
        records = [{
            "name": "Pulse",
            "tagline": "Heartbeat for teams",
            "category": "Social / Community",
            "rating": 8.8,
            "description": "Team health check-ins.",
        }]
        mock_openai_client.return_value.chat.completions.create.return_value = _completion(json.dumps(records))

        ideas = openai_service.generate_ideas(count=5)

        assert ideas[0].name == "Pulse"
        assert ideas[0].icon == "lightbulb"
        kwargs = mock_openai_client.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"][0]["role"] == "system"

    def test_no_content(self, openai_service, mock_openai_client):
        mock_openai_client.return_value.chat.completions.create.return_value = _completion(None)
        with pytest.raises(GenerationError):
            openai_service.generate_text("prompt", 0.5)

    @patch('idearoulette.services.openai_service.logger')
    def test_request_exception(self, mock_logger, openai_service, mock_openai_client):
        mock_openai_client.return_value.chat.completions.create.side_effect = Exception("rate limited")

        with pytest.raises(GenerationError):
            openai_service.generate_text("prompt", 0.5)

        mock_logger.error.assert_called_once()


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main(["-v", __file__]))
