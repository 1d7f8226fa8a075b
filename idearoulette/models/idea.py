"""
Shared data models for ideas and remix responses.
"""

import json
import re
from typing import Any, List, Union

from pydantic import BaseModel, Field, ValidationError

from idearoulette.errors import GenerationError

JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


class Idea(BaseModel):
    """Model representing a generated startup idea. `name` is its identity."""

    name: str = Field(..., description="Unique, catchy startup name")
    icon: str = Field("lightbulb", description="Symbolic icon name, opaque to the feed")
    tagline: str = Field(..., description="One-line pitch")
    category: str = Field(..., description="Two-part category, e.g. 'AI / Healthcare'")
    rating: float = Field(..., description="Score in the nominal 7.0-9.6 range")
    description: str = Field(..., description="What it does and why it matters")
    tags: List[str] = Field(default_factory=list, description="Short descriptive tags")
    remixes: List[str] = Field(default_factory=list, description="Short variation titles")


class RemixTitles(BaseModel):
    """Remix response carrying only variation titles for the current idea."""

    titles: List[str]


class RemixRecords(BaseModel):
    """Remix response carrying complete ideas to splice into the feed."""

    ideas: List[Idea]


RemixResult = Union[RemixTitles, RemixRecords]


def extract_json_array(text: str) -> List[Any]:
    """
    Pull the first JSON array out of a model response.

    Args:
        text: Raw text returned by the generation provider

    Returns:
        The decoded list

    Raises:
        GenerationError: If no array can be found or decoded
    """
    match = JSON_ARRAY_PATTERN.search(text or "")
    if not match:
        raise GenerationError("No valid JSON array found in response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Response is not valid JSON: {e}") from e
    if not isinstance(payload, list):
        raise GenerationError("Response JSON is not an array")
    return payload


def parse_ideas(payload: List[Any]) -> List[Idea]:
    """Validate a decoded array of idea records."""
    try:
        return [Idea(**item) for item in payload]
    except (TypeError, ValidationError) as e:
        raise GenerationError(f"Malformed idea record: {e}") from e


def decode_remix_payload(payload: List[Any]) -> RemixResult:
    """
    Decode a remix response into its tagged variant.

    The provider may answer with plain titles or with full idea records; the
    first element decides which.

    Args:
        payload: Decoded JSON array from the provider

    Returns:
        RemixTitles or RemixRecords
    """
    if not payload:
        raise GenerationError("Empty remix response")

    first = payload[0]
    if isinstance(first, str):
        if not all(isinstance(item, str) for item in payload):
            raise GenerationError("Mixed remix response: expected only titles")
        return RemixTitles(titles=payload)
    if isinstance(first, dict):
        return RemixRecords(ideas=parse_ideas(payload))
    raise GenerationError(f"Unexpected remix element type: {type(first).__name__}")
