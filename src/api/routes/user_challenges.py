from typing import List

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_enrollment_service
from src.schemas.challenge import MessageResponse
from src.schemas.user_challenge import UserChallengeCreate
from src.services.enrollment_service import EnrollmentService
from src.utils.logging import setup_logging
from src.utils.mongo import serialize_document

logger = setup_logging()
router = APIRouter()


@router.get("/{user_id}", response_model=List[dict])
async def get_user_challenges(user_id: str, service: EnrollmentService = Depends(get_enrollment_service)):
    """
    User challenges of a user, each one merged with its challenge
    (``challenge`` is null when the challenge no longer exists)
    """
    user_challenges = await service.list_merged(user_id)
    return [serialize_document(uc) for uc in user_challenges]


@router.post("", status_code=status.HTTP_201_CREATED)
async def join_challenge(
    join_data: UserChallengeCreate,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    user_challenge = await service.join(join_data.userId, join_data.challengeId)
    logger.info(f"User {join_data.userId} joined challenge {join_data.challengeId}")
    return {"message": "Challenge joined successfully", "data": serialize_document(user_challenge)}


@router.delete("/{user_challenge_id}", response_model=MessageResponse)
async def leave_challenge(user_challenge_id: str, service: EnrollmentService = Depends(get_enrollment_service)):
    user_challenge = await service.leave(user_challenge_id)
    logger.info(f"User {user_challenge['userId']} left challenge {user_challenge['challengeId']}")
    return MessageResponse(message="Challenge left successfully")
