"""
Exception types raised across IdeaRoulette.
"""


class IdeaRouletteError(Exception):
    """Base class for all IdeaRoulette errors."""


class GenerationError(IdeaRouletteError):
    """The generation provider was unreachable or returned a malformed payload."""


class AuthenticationRequiredError(IdeaRouletteError):
    """A write was attempted without a signed-in user."""

    def __init__(self, message: str = "User must be authenticated"):
        super().__init__(message)


class StoreError(IdeaRouletteError):
    """A durable store operation failed."""
