"""Bid domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import ContractSummary, ProjectSummary, UserSummary


class BidCreate(BaseModel):
    """Schema for submitting a bid on a project"""

    projectId: int
    amount: float = Field(..., gt=0)
    duration: int = Field(..., gt=0, description="Estimated duration in days")
    coverLetter: Optional[str] = Field(None, max_length=5000)

    @field_validator("coverLetter")
    @classmethod
    def blank_cover_letter_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class BidStatusUpdate(BaseModel):
    """Schema for a client accepting or rejecting a bid"""

    status: Literal["ACCEPTED", "REJECTED"]


class BidResponse(BaseModel):
    """Schema for bid response"""

    id: int
    projectId: int
    freelancerId: int
    amount: float
    duration: int
    coverLetter: Optional[str]
    status: str
    createdAt: Optional[datetime]
    updatedAt: Optional[datetime]
    freelancer: Optional[UserSummary] = None
    project: Optional[ProjectSummary] = None
    contract: Optional[ContractSummary] = None

    class Config:
        from_attributes = True
