from typing import List, Optional

from pymongo.errors import PyMongoError

from src.exceptions import Conflict
from src.repositories.challenge_repository import ChallengeRepository
from src.repositories.user_challenge_repository import UserChallengeRepository
from src.utils.logging import setup_logging
from src.utils.mongo import parse_object_id

logger = setup_logging()


class EnrollmentService:
    """Join/leave workflows spanning ``UserChallenges`` and ``challenges``.

    The enrollment record is the source of truth and ``participants`` on the
    challenge is a derived counter. The two writes are not transactional: a
    failure after the first write leaves the counter off by one until
    ``reconcile_participants`` runs.
    """

    def __init__(self, challenges: ChallengeRepository, user_challenges: UserChallengeRepository):
        self.challenges = challenges
        self.user_challenges = user_challenges

    async def join(self, user_id: str, challenge_id: str) -> dict:
        # one spelling per challenge, "ABC..." and "abc..." are the same ObjectId
        object_id = parse_object_id(challenge_id)
        if object_id is not None:
            challenge_id = str(object_id)

        if await self.user_challenges.exists_for_user_and_challenge(user_id, challenge_id):
            raise Conflict()

        user_challenge = await self.user_challenges.create(user_id, challenge_id)

        try:
            matched = await self.challenges.adjust_participants(challenge_id, 1)
        except PyMongoError:
            logger.error(f"Enrollment {user_challenge['_id']} saved but participants of {challenge_id} not incremented")
            raise

        if not matched:
            logger.warning(f"User {user_id} joined unknown challenge {challenge_id}")
        return user_challenge

    async def leave(self, user_challenge_id: str) -> dict:
        user_challenge = await self.user_challenges.get_by_id(user_challenge_id)
        challenge_id = user_challenge["challengeId"]

        await self.user_challenges.delete(user_challenge_id)

        try:
            await self.challenges.adjust_participants(challenge_id, -1)
        except PyMongoError:
            logger.error(f"Enrollment {user_challenge_id} removed but participants of {challenge_id} not decremented")
            raise
        return user_challenge

    async def list_merged(self, user_id: str) -> List[dict]:
        user_challenges = await self.user_challenges.list_by_user(user_id)
        challenges = await self.challenges.find_by_ids(uc.get("challengeId") for uc in user_challenges)

        return [
            {**uc, "challenge": challenges.get(str(uc.get("challengeId")))}
            for uc in user_challenges
        ]

    async def reconcile_participants(self, challenge_id: Optional[str] = None) -> List[dict]:
        """Recount ``participants`` from enrollment records.

        Works on a single challenge when ``challenge_id`` is given, otherwise
        on every challenge. Returns the challenges whose counter was wrong.
        """
        if challenge_id is not None:
            targets = [await self.challenges.get_by_id(challenge_id)]
        else:
            targets = await self.challenges.list()

        updated = []
        for challenge in targets:
            key = str(challenge["_id"])
            count = await self.user_challenges.count_by_challenge(key)
            if challenge.get("participants") == count:
                continue

            previous = await self.challenges.set_participants(key, count)
            logger.info(f"Participants of challenge {key} reconciled: {previous} -> {count}")
            updated.append({"challengeId": key, "previous": previous, "current": count})
        return updated
