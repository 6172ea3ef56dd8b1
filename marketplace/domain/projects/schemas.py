"""Project domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...models import ProjectStatus
from ...schemas import ContractSummary, SkillResponse, UserSummary


class ProjectCreate(BaseModel):
    """Schema for creating a new project"""

    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    budget: float = Field(..., gt=0)
    deadline: Optional[datetime] = None
    skills: list[int] = Field(default_factory=list, description="Skill IDs")


class ProjectUpdate(BaseModel):
    """Schema for updating an existing project"""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    budget: Optional[float] = Field(None, gt=0)
    deadline: Optional[datetime] = None
    status: Optional[ProjectStatus] = None


class ProjectBidBrief(BaseModel):
    id: int
    freelancerId: int
    amount: float
    duration: int
    status: str
    freelancer: Optional[UserSummary] = None


class ProjectResponse(BaseModel):
    """Schema for project response"""

    id: int
    clientId: int
    title: str
    description: Optional[str]
    budget: float
    deadline: Optional[datetime]
    status: str
    createdAt: Optional[datetime]
    updatedAt: Optional[datetime]
    client: Optional[UserSummary] = None
    skills: list[SkillResponse] = []
    bids: list[ProjectBidBrief] = []
    contract: Optional[ContractSummary] = None

    class Config:
        from_attributes = True
