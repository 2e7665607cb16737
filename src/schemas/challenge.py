from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ChallengeBase(BaseModel):
    # title, description, category... are stored as sent
    model_config = ConfigDict(extra="allow")


class ChallengeCreate(ChallengeBase):
    createdBy: Optional[str] = None
    participants: Optional[Any] = None


class ChallengeUpdate(ChallengeBase):
    pass


class ChallengeCreated(BaseModel):
    message: str
    challengeId: str


class MessageResponse(BaseModel):
    message: str


class ParticipantsReconciled(BaseModel):
    challengeId: str
    previous: Optional[int] = None
    current: int


class ReconcileResponse(MessageResponse):
    updated: list[ParticipantsReconciled] = []
