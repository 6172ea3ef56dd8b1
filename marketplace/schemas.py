from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .models import Contract, Project, Skill, User


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    id: int
    name: str
    role: str

    class Config:
        from_attributes = True

    @classmethod
    def from_user(cls, user: Optional[User]) -> Optional["UserSummary"]:
        if user is None:
            return None
        return cls(id=user.id, name=user.name, role=user.role)


class SkillResponse(BaseModel):
    id: int
    name: str
    category: str

    class Config:
        from_attributes = True

    @classmethod
    def from_skill(cls, skill: Skill) -> "SkillResponse":
        return cls(id=skill.id, name=skill.name, category=skill.category)


class ProjectSummary(BaseModel):
    """Project fields embedded in bid and contract responses"""

    id: int
    clientId: int
    title: str
    budget: float
    deadline: Optional[datetime]
    status: str

    @classmethod
    def from_project(cls, project: Optional[Project]) -> Optional["ProjectSummary"]:
        if project is None:
            return None
        return cls(
            id=project.id,
            clientId=project.client_id,
            title=project.title,
            budget=project.budget,
            deadline=project.deadline,
            status=project.status,
        )


class ContractSummary(BaseModel):
    """Contract fields embedded in bid and project responses"""

    id: int
    bidId: int
    amount: float
    status: str
    startDate: datetime
    endDate: Optional[datetime]

    @classmethod
    def from_contract(cls, contract: Optional[Contract]) -> Optional["ContractSummary"]:
        if contract is None:
            return None
        return cls(
            id=contract.id,
            bidId=contract.bid_id,
            amount=contract.amount,
            status=contract.status,
            startDate=contract.start_date,
            endDate=contract.end_date,
        )
