"""Project router - FastAPI endpoints for project operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...models import Project, ProjectStatus, User, UserRole
from ...schemas import ContractSummary, MessageResponse, SkillResponse, UserSummary
from .schemas import ProjectBidBrief, ProjectCreate, ProjectResponse, ProjectUpdate
from .service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    """Dependency injection for ProjectService"""
    return ProjectService(db)


def _project_response(project: Project, detail: bool = False) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        clientId=project.client_id,
        title=project.title,
        description=project.description,
        budget=project.budget,
        deadline=project.deadline,
        status=project.status,
        createdAt=project.created_at,
        updatedAt=project.updated_at,
        client=UserSummary.from_user(project.client),
        skills=[SkillResponse.from_skill(s) for s in project.skills],
        bids=[
            ProjectBidBrief(
                id=b.id,
                freelancerId=b.freelancer_id,
                amount=b.amount,
                duration=b.duration,
                status=b.status,
                freelancer=UserSummary.from_user(b.freelancer) if detail else None,
            )
            for b in project.bids
        ],
        contract=ContractSummary.from_contract(project.contract) if detail else None,
    )


@router.get("", response_model=list[ProjectResponse])
def get_projects(
    service: ProjectService = Depends(get_project_service),
    status: Optional[ProjectStatus] = Query(None, description="Filter by project status"),
    search: Optional[str] = Query(None, description="Match title or description"),
    skill: Optional[str] = Query(None, description="Match skill name"),
):
    """Get all projects with optional filters"""
    return [_project_response(p) for p in service.get_projects(status, search, skill)]


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
):
    """Get a project with its bids and contract"""
    return _project_response(service.get_project(project_id), detail=True)


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    data: ProjectCreate,
    current_user: User = Depends(require_role(UserRole.CLIENT)),
    service: ProjectService = Depends(get_project_service),
):
    """Create a new project"""
    return _project_response(service.create_project(data, current_user))


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Update a project"""
    return _project_response(
        service.update_project(project_id, data, current_user), detail=True
    )


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project"""
    return service.delete_project(project_id, current_user)
