"""
HTTP surface for idea generation, remixing and the session unload beacon.
"""

from functools import lru_cache
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from idearoulette.errors import GenerationError, StoreError
from idearoulette.factory import create_ai_service
from idearoulette.models.analytics import EndSessionRequest
from idearoulette.models.idea import Idea, RemixTitles
from idearoulette.models.profile import UserPreferences
from idearoulette.services.ai_service import AIService
from idearoulette.services.analytics_service import InteractionRecorder
from idearoulette.services.auth_service import AuthService
from idearoulette.services.fallback_ideas import get_fallback_ideas
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.config import config
from idearoulette.utils.constants import INITIAL_BATCH_SIZE
from idearoulette.utils.logger import logger
from idearoulette.utils.mongodb_client import MongoDBClient

app = FastAPI(title="IdeaRoulette", version="0.1.0")


class IdeasRequest(BaseModel):
    preferences: Optional[UserPreferences] = None
    count: int = Field(INITIAL_BATCH_SIZE, ge=1, le=50)


class RemixRequest(BaseModel):
    idea: Idea
    fullIdeas: bool = True


@lru_cache()
def get_ai_service() -> AIService:
    return create_ai_service(config.ai_provider)


@lru_cache()
def get_mongodb_client() -> MongoDBClient:
    return MongoDBClient()


def get_recorder(mongodb_client: MongoDBClient = Depends(get_mongodb_client)) -> InteractionRecorder:
    # The beacon carries its own ids, so no signed-in identity is needed here
    return InteractionRecorder(mongodb_client, UserDataService(mongodb_client, AuthService()))


def _generate_or_fallback(ai_service: AIService, preferences: Optional[UserPreferences], count: int) -> List[Idea]:
    try:
        return ai_service.generate_ideas(preferences, count)
    except GenerationError as e:
        logger.error(f"Error generating ideas: {e}")
        return get_fallback_ideas(count)


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "idearoulette", "provider": config.ai_provider}


@app.get("/api/ideas", response_model=List[Idea])
def list_ideas(ai_service: AIService = Depends(get_ai_service)) -> List[Idea]:
    return _generate_or_fallback(ai_service, None, INITIAL_BATCH_SIZE)


@app.post("/api/ideas", response_model=List[Idea])
def generate_ideas(request: IdeasRequest, ai_service: AIService = Depends(get_ai_service)) -> List[Idea]:
    return _generate_or_fallback(ai_service, request.preferences, request.count)


@app.post("/api/remix", response_model=Union[List[str], List[Idea]])
def remix_idea(request: RemixRequest, ai_service: AIService = Depends(get_ai_service)):
    try:
        result = ai_service.remix(request.idea, request.fullIdeas)
    except GenerationError as e:
        logger.error(f"Error generating remixes: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate remixes")

    if isinstance(result, RemixTitles):
        return result.titles
    return result.ideas


@app.post("/api/analytics/end-session")
def end_session(request: EndSessionRequest, recorder: InteractionRecorder = Depends(get_recorder)) -> dict:
    try:
        closed = recorder.close_session_record(request.sessionId, request.userId)
    except StoreError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Session store unavailable")
    return {"success": True, "closed": closed}
