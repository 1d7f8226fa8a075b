"""
Tests for idea parsing and remix response decoding.
"""

import json

import pytest

from idearoulette.errors import GenerationError
from idearoulette.models.idea import (
    RemixRecords,
    RemixTitles,
    decode_remix_payload,
    extract_json_array,
    parse_ideas,
)


@pytest.fixture
def idea_record():
    return {
        "name": "DreamSync",
        "icon": "moon",
        "tagline": "Record and analyze your dreams",
        "category": "AI / Lifestyle",
        "rating": 8.4,
        "description": "Dream journaling with insights.",
        "tags": ["AI", "sleep"],
    }


class TestExtractJsonArray:
    """Tests for pulling a JSON array out of model output."""

    def test_plain_array(self):
        assert extract_json_array('["a", "b"]') == ["a", "b"]

    def test_array_wrapped_in_prose_and_fences(self, idea_record):
        text = "Here you go:\n```json\n" + json.dumps([idea_record]) + "\n```\nEnjoy!"
        assert extract_json_array(text)[0]["name"] == "DreamSync"

    def test_array_inside_object(self, idea_record):
        text = json.dumps({"ideas": [idea_record]})
        assert extract_json_array(text) == [idea_record]

    def test_no_array(self):
        with pytest.raises(GenerationError):
            extract_json_array("Sorry, I cannot help with that.")

    def test_invalid_json(self):
        with pytest.raises(GenerationError):
            extract_json_array("[{name: DreamSync}]")

    def test_empty_text(self):
        with pytest.raises(GenerationError):
            extract_json_array(None)


class TestParseIdeas:
    """Tests for validating idea records."""

    def test_defaults_applied(self, idea_record):
        del idea_record["icon"]
        del idea_record["tags"]
        idea = parse_ideas([idea_record])[0]
        assert idea.icon == "lightbulb"
        assert idea.tags == []
        assert idea.remixes == []

    def test_missing_field(self, idea_record):
        del idea_record["tagline"]
        with pytest.raises(GenerationError):
            parse_ideas([idea_record])

    def test_non_dict_element(self):
        with pytest.raises(GenerationError):
            parse_ideas(["DreamSync"])


class TestDecodeRemixPayload:
    """Tests for the two remix response shapes."""

    def test_titles(self):
        result = decode_remix_payload(["DreamSync for Kids", "DreamSync Pro"])
        assert isinstance(result, RemixTitles)
        assert result.titles == ["DreamSync for Kids", "DreamSync Pro"]

    def test_records(self, idea_record):
        result = decode_remix_payload([idea_record])
        assert isinstance(result, RemixRecords)
        assert result.ideas[0].name == "DreamSync"

    def test_empty(self):
        with pytest.raises(GenerationError):
            decode_remix_payload([])

    def test_mixed_titles_and_records(self, idea_record):
        with pytest.raises(GenerationError):
            decode_remix_payload(["DreamSync Pro", idea_record])

    def test_unexpected_element_type(self):
        with pytest.raises(GenerationError):
            decode_remix_payload([42])


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main(["-v", __file__]))
