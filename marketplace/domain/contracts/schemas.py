"""Contract domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ...schemas import ProjectSummary, UserSummary


class ContractStatusUpdate(BaseModel):
    """Schema for closing out a contract"""

    status: Literal["COMPLETED", "TERMINATED"]


class ReviewCreate(BaseModel):
    """Schema for reviewing the other party of a contract"""

    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    """Schema for review response"""

    id: int
    contractId: int
    fromUserId: int
    toUserId: int
    rating: int
    comment: Optional[str]
    createdAt: Optional[datetime]
    fromUser: Optional[UserSummary] = None
    toUser: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class ContractResponse(BaseModel):
    """Schema for contract response"""

    id: int
    projectId: int
    bidId: int
    clientId: int
    freelancerId: int
    amount: float
    terms: Optional[str]
    status: str
    startDate: datetime
    endDate: Optional[datetime]
    createdAt: Optional[datetime]
    project: Optional[ProjectSummary] = None
    client: Optional[UserSummary] = None
    freelancer: Optional[UserSummary] = None
    reviews: list[ReviewResponse] = []

    class Config:
        from_attributes = True
