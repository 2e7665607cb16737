from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.database import get_db
from src.repositories.challenge_repository import ChallengeRepository
from src.repositories.user_challenge_repository import UserChallengeRepository
from src.services.enrollment_service import EnrollmentService


def get_challenge_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> ChallengeRepository:
    return ChallengeRepository(db)


def get_user_challenge_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserChallengeRepository:
    return UserChallengeRepository(db)


def get_enrollment_service(
    challenges: ChallengeRepository = Depends(get_challenge_repository),
    user_challenges: UserChallengeRepository = Depends(get_user_challenge_repository),
) -> EnrollmentService:
    return EnrollmentService(challenges, user_challenges)
