import asyncio

from src.config import DB_NAME
from src.database import create_client, ping
from src.repositories.challenge_repository import ChallengeRepository
from src.repositories.user_challenge_repository import UserChallengeRepository
from src.services.enrollment_service import EnrollmentService


async def reconcile_participants():
    client = create_client()
    try:
        if not await ping(client):
            return []

        db = client[DB_NAME]
        service = EnrollmentService(ChallengeRepository(db), UserChallengeRepository(db))
        updated = await service.reconcile_participants()

        for entry in updated:
            print(f"{entry['challengeId']}: {entry['previous']} -> {entry['current']}")
        print(f"{len(updated)} challenge(s) reconciled")
        return updated
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(reconcile_participants())
