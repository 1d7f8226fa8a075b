"""
Shared fixtures: an in-memory store and a signed-in identity.
"""

import mongomock
import pytest

from idearoulette.models.idea import Idea
from idearoulette.services.analytics_service import InteractionRecorder
from idearoulette.services.auth_service import AuthService, User
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.mongodb_client import MongoDBClient


def make_idea(name, category="AI / Productivity", rating=8.0, tags=None, **extra):
    """Build an idea with sensible defaults for tests."""
    return Idea(
        name=name,
        tagline=f"{name} tagline",
        category=category,
        rating=rating,
        description=f"{name} description",
        tags=tags if tags is not None else [],
        **extra
    )


@pytest.fixture
def mongodb_client():
    """Fixture providing a MongoDBClient backed by mongomock."""
    client = MongoDBClient(client=mongomock.MongoClient(), db_name="idearoulette_test")
    yield client
    client.close()


@pytest.fixture
def user():
    return User(uid="user-1", display_name="Ada")


@pytest.fixture
def auth_service():
    """Fixture providing an AuthService with nobody signed in."""
    return AuthService()


@pytest.fixture
def signed_in_auth(auth_service, user):
    auth_service.sign_in(user)
    return auth_service


@pytest.fixture
def user_data_service(mongodb_client, signed_in_auth):
    return UserDataService(mongodb_client, signed_in_auth)


@pytest.fixture
def recorder(mongodb_client, user_data_service):
    return InteractionRecorder(mongodb_client, user_data_service)
