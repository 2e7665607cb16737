from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.exceptions import NotFound, ValidationError
from src.utils.constants import CHALLENGES_COLLECTION
from src.utils.mongo import parse_object_id, require_object_id

# fields only the repository itself may write
PROTECTED_FIELDS = {"_id", "participants"}


class ChallengeRepository:
    """Data access for the ``challenges`` collection.

    Identifiers are 24-hex ObjectId strings. Malformed ids raise
    ``InvalidIdentifier`` on the CRUD paths and are treated as "no match"
    by the counter helpers.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[CHALLENGES_COLLECTION]

    async def list(self) -> List[dict]:
        return await self.collection.find().to_list(length=None)

    async def get_by_id(self, challenge_id: str) -> dict:
        challenge = await self.collection.find_one({"_id": require_object_id(challenge_id)})
        if not challenge:
            raise NotFound("Challenge not found")
        return challenge

    async def find_by_ids(self, challenge_ids: Iterable[Any]) -> Dict[str, dict]:
        """Batched lookup keyed by string id, malformed ids are skipped."""
        object_ids = {oid for oid in map(parse_object_id, challenge_ids) if oid is not None}
        if not object_ids:
            return {}
        challenges = await self.collection.find({"_id": {"$in": list(object_ids)}}).to_list(length=None)
        return {str(challenge["_id"]): challenge for challenge in challenges}

    async def create(self, fields: Dict[str, Any]) -> str:
        if not fields.get("createdBy"):
            raise ValidationError("createdBy is required")

        document = {key: value for key, value in fields.items() if key != "_id"}
        participants = document.get("participants")
        if isinstance(participants, bool) or not isinstance(participants, (int, float)):
            document["participants"] = 0

        result = await self.collection.insert_one(document)
        return str(result.inserted_id)

    async def update(self, challenge_id: str, fields: Dict[str, Any]) -> None:
        object_id = require_object_id(challenge_id)
        changes = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}

        if not changes:
            # nothing to set, still report unknown ids
            if not await self.collection.count_documents({"_id": object_id}, limit=1):
                raise NotFound("Challenge not found")
            return

        result = await self.collection.update_one({"_id": object_id}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFound("Challenge not found")

    async def delete(self, challenge_id: str) -> None:
        result = await self.collection.delete_one({"_id": require_object_id(challenge_id)})
        if result.deleted_count == 0:
            raise NotFound("Challenge not found")

    async def adjust_participants(self, challenge_id: Any, delta: int) -> bool:
        # no lower bound, a counter can go negative if enrollments drift
        object_id = parse_object_id(challenge_id)
        if object_id is None:
            return False
        result = await self.collection.update_one({"_id": object_id}, {"$inc": {"participants": delta}})
        return result.matched_count > 0

    async def set_participants(self, challenge_id: Any, value: int) -> Optional[int]:
        """Overwrite the counter and return the value it held before."""
        object_id = parse_object_id(challenge_id)
        if object_id is None:
            return None
        previous = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": {"participants": value}},
            projection={"participants": True},
        )
        if previous is None:
            return None
        return previous.get("participants", 0)
