from datetime import datetime, timezone
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from src.exceptions import Conflict, NotFound
from src.utils.constants import STATUS_NOT_STARTED, USER_CHALLENGES_COLLECTION
from src.utils.mongo import parse_object_id


class UserChallengeRepository:
    """Enrollment records linking a user to a challenge (``UserChallenges``)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[USER_CHALLENGES_COLLECTION]

    async def ensure_indexes(self):
        await self.collection.create_index(
            [("userId", ASCENDING), ("challengeId", ASCENDING)],
            unique=True,
            name="userId_challengeId_unique",
        )

    async def list_by_user(self, user_id: str) -> List[dict]:
        return await self.collection.find({"userId": user_id}).to_list(length=None)

    async def exists_for_user_and_challenge(self, user_id: str, challenge_id: str) -> bool:
        count = await self.collection.count_documents({"userId": user_id, "challengeId": challenge_id}, limit=1)
        return count > 0

    async def count_by_challenge(self, challenge_id: str) -> int:
        return await self.collection.count_documents({"challengeId": challenge_id})

    async def create(self, user_id: str, challenge_id: str) -> dict:
        user_challenge = {
            "userId": user_id,
            "challengeId": challenge_id,
            "status": STATUS_NOT_STARTED,
            "progress": 0,
            "joinDate": datetime.now(timezone.utc),
        }
        try:
            result = await self.collection.insert_one(user_challenge)
        except DuplicateKeyError:
            raise Conflict()
        user_challenge["_id"] = result.inserted_id
        return user_challenge

    async def get_by_id(self, user_challenge_id: str) -> dict:
        object_id = parse_object_id(user_challenge_id)
        user_challenge = await self.collection.find_one({"_id": object_id}) if object_id else None
        if not user_challenge:
            raise NotFound("User challenge not found")
        return user_challenge

    async def delete(self, user_challenge_id: str) -> None:
        object_id = parse_object_id(user_challenge_id)
        result = await self.collection.delete_one({"_id": object_id}) if object_id else None
        if result is None or result.deleted_count == 0:
            raise NotFound("User challenge not found")
