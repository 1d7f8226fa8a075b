"""
Factory for creating service instances and feeds.
"""

import asyncio
from typing import NamedTuple, Optional

from idearoulette.feed import FeedManager
from idearoulette.notices import NoticeBoard
from idearoulette.services.ai_service import AIService
from idearoulette.services.analytics_service import InteractionRecorder, SessionContext
from idearoulette.services.auth_service import AuthService
from idearoulette.services.gemini_service import GeminiService
from idearoulette.services.idea_service import IdeaService
from idearoulette.services.openai_service import OpenAIService
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.config import config
from idearoulette.utils.mongodb_client import MongoDBClient


class Services(NamedTuple):
    ai_service: AIService
    user_data_service: UserDataService
    recorder: InteractionRecorder
    idea_service: IdeaService


def create_ai_service(model_type: str) -> AIService:
    """
    Factory to create the generation provider for a model type.

    Args:
        model_type: Type of model to use ("openai" or "gemini")

    Returns:
        AIService instance
    """
    if model_type == "openai":
        return OpenAIService(config.openai_api_key, config.openai_model)
    elif model_type == "gemini":
        return GeminiService(config.google_ai_api_key, config.google_ai_model)
    else:
        raise ValueError(f"Unsupported model type: {model_type}")


def create_services(
    mongodb_client: MongoDBClient,
    auth_service: AuthService,
    model_type: Optional[str] = None,
    ai_service: Optional[AIService] = None
) -> Services:
    """Wire the store, identity and provider into the feed's services."""
    ai_service = ai_service or create_ai_service(model_type or config.ai_provider)
    user_data_service = UserDataService(mongodb_client, auth_service)
    recorder = InteractionRecorder(mongodb_client, user_data_service)
    idea_service = IdeaService(ai_service, user_data_service, mongodb_client)
    return Services(ai_service, user_data_service, recorder, idea_service)


async def create_feed(
    services: Services,
    session: Optional[SessionContext] = None,
    notices: Optional[NoticeBoard] = None
) -> FeedManager:
    """
    Build a feed with its initial batch loaded.

    Must be awaited inside a running event loop, since the feed schedules
    its prefetch and logging work there.
    """
    initial_ideas = await asyncio.to_thread(
        services.idea_service.initialize_user_ideas, config.initial_batch_size
    )
    feed = FeedManager(
        initial_ideas,
        idea_service=services.idea_service,
        ai_service=services.ai_service,
        user_data_service=services.user_data_service,
        recorder=services.recorder,
        session=session,
        notices=notices,
        threshold=config.prefetch_threshold,
        batch_size=config.batch_size,
        remix_full_ideas=config.remix_full_ideas,
    )
    await feed.load()
    return feed
