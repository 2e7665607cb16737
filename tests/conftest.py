from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from src.database import get_db
from src.main import app
from src.repositories.challenge_repository import ChallengeRepository
from src.repositories.user_challenge_repository import UserChallengeRepository
from src.services.enrollment_service import EnrollmentService


# A fresh in-memory database for each test
@pytest.fixture(scope="function")
async def db():
    client = AsyncMongoMockClient()
    database = client[f"ecotrack_test_{uuid4().hex}"]
    await UserChallengeRepository(database).ensure_indexes()
    yield database


@pytest.fixture(scope="function")
def challenge_repository(db):
    return ChallengeRepository(db)


@pytest.fixture(scope="function")
def user_challenge_repository(db):
    return UserChallengeRepository(db)


@pytest.fixture(scope="function")
def enrollment_service(challenge_repository, user_challenge_repository):
    return EnrollmentService(challenge_repository, user_challenge_repository)


# Override the get_db dependency to use the testing database
@pytest.fixture(scope="function")
async def async_client(db):
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
