from pydantic import BaseModel, Field


class UserChallengeCreate(BaseModel):
    userId: str = Field(..., min_length=1)
    challengeId: str = Field(..., min_length=1)
