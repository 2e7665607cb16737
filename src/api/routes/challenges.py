from typing import List

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_challenge_repository, get_enrollment_service
from src.repositories.challenge_repository import ChallengeRepository
from src.schemas.challenge import (
    ChallengeCreate,
    ChallengeCreated,
    ChallengeUpdate,
    MessageResponse,
    ReconcileResponse,
)
from src.services.enrollment_service import EnrollmentService
from src.utils.logging import setup_logging
from src.utils.mongo import serialize_document

logger = setup_logging()
router = APIRouter()


@router.get("", response_model=List[dict])
async def get_challenges(repository: ChallengeRepository = Depends(get_challenge_repository)):
    logger.info("Fetching challenges")
    challenges = await repository.list()
    return [serialize_document(challenge) for challenge in challenges]


@router.get("/{challenge_id}", response_model=dict)
async def get_challenge(challenge_id: str, repository: ChallengeRepository = Depends(get_challenge_repository)):
    challenge = await repository.get_by_id(challenge_id)
    return serialize_document(challenge)


@router.post("", response_model=ChallengeCreated, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    challenge_data: ChallengeCreate,
    repository: ChallengeRepository = Depends(get_challenge_repository),
):
    challenge_id = await repository.create(challenge_data.model_dump(exclude_unset=True))
    logger.info(f"Challenge {challenge_id} created by {challenge_data.createdBy}")
    return ChallengeCreated(message="Challenge created successfully", challengeId=challenge_id)


@router.put("/{challenge_id}", response_model=MessageResponse)
async def update_challenge(
    challenge_id: str,
    challenge_data: ChallengeUpdate,
    repository: ChallengeRepository = Depends(get_challenge_repository),
):
    await repository.update(challenge_id, challenge_data.model_dump(exclude_unset=True))
    logger.info(f"Challenge {challenge_id} updated")
    return MessageResponse(message="Challenge updated successfully")


@router.delete("/{challenge_id}", response_model=MessageResponse)
async def delete_challenge(challenge_id: str, repository: ChallengeRepository = Depends(get_challenge_repository)):
    await repository.delete(challenge_id)
    logger.info(f"Challenge {challenge_id} deleted")
    return MessageResponse(message="Challenge deleted successfully")


@router.post("/{challenge_id}/reconcile", response_model=ReconcileResponse)
async def reconcile_challenge_participants(
    challenge_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Recount the participants of a challenge from its user challenges and
    overwrite the stored counter when they disagree.
    """
    updated = await service.reconcile_participants(challenge_id)
    return ReconcileResponse(message="Participants reconciled", updated=updated)
