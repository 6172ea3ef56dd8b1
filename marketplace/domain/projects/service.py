"""Project service - Business logic for client-owned projects"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...database import with_transaction
from ...errors import ForbiddenError, InvalidStateError, NotFoundError
from ...models import ContractStatus, Project, ProjectStatus, User
from ...utils.sanitization import sanitize_text
from .repository import ProjectRepository
from .schemas import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectService:
    """Service layer for project business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository()

    def get_projects(
        self,
        status: Optional[ProjectStatus] = None,
        search: Optional[str] = None,
        skill: Optional[str] = None,
    ) -> list[Project]:
        return self.repo.get_projects(
            self.db, status=status.value if status else None, search=search, skill=skill
        )

    def get_project(self, project_id: int) -> Project:
        project = self.repo.get_project_by_id(self.db, project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    def get_owned_project(self, project_id: int, user: User) -> Project:
        project = self.get_project(project_id)
        if project.client_id != user.id:
            raise ForbiddenError("Not authorized")
        return project

    def create_project(self, data: ProjectCreate, user: User) -> Project:
        """Create an OPEN project for the current client"""
        skill_ids = list(dict.fromkeys(data.skills))
        skills = self.repo.get_skills_by_ids(self.db, skill_ids)
        if len(skills) != len(skill_ids):
            missing = sorted(set(skill_ids) - {s.id for s in skills})
            raise NotFoundError(f"Skill not found: {', '.join(str(m) for m in missing)}")

        project_data = {
            "client_id": user.id,
            "title": sanitize_text(data.title),
            "description": sanitize_text(data.description, max_length=10000),
            "budget": data.budget,
            "deadline": data.deadline,
            "status": ProjectStatus.OPEN.value,
        }

        project = with_transaction(
            self.db, lambda db: self.repo.add_project(db, skills, **project_data)
        )
        logger.info(f"📁 Project {project.id} created by client {user.id}")
        return self.get_project(project.id)

    def update_project(self, project_id: int, data: ProjectUpdate, user: User) -> Project:
        """Update a project as its owner"""
        project = self.get_owned_project(project_id, user)

        # IN_PROGRESS is only reached by accepting a bid, which also creates the contract
        if data.status == ProjectStatus.IN_PROGRESS and project.status != ProjectStatus.IN_PROGRESS.value:
            raise InvalidStateError("Projects move to IN_PROGRESS by accepting a bid")

        # While work is under contract, the project status follows the contract
        if (
            data.status is not None
            and data.status.value != project.status
            and project.contract is not None
            and project.contract.status == ContractStatus.ACTIVE.value
        ):
            raise InvalidStateError(
                "Project has an active contract; complete or terminate the contract instead"
            )

        updates = {}
        if data.title is not None:
            updates["title"] = sanitize_text(data.title)
        if data.description is not None:
            updates["description"] = sanitize_text(data.description, max_length=10000)
        if data.budget is not None:
            updates["budget"] = data.budget
        if data.deadline is not None:
            updates["deadline"] = data.deadline
        if data.status is not None:
            updates["status"] = data.status.value

        with_transaction(self.db, lambda db: self.repo.update_project(db, project, **updates))
        logger.info(f"✏️ Project {project_id} updated by client {user.id}: {sorted(updates)}")
        return self.get_project(project_id)

    def delete_project(self, project_id: int, user: User) -> dict:
        """Delete a project and its bids as its owner"""
        project = self.get_owned_project(project_id, user)

        if project.contract is not None:
            raise InvalidStateError("Cannot delete a project with a contract")

        with_transaction(self.db, lambda db: self.repo.delete_project(db, project))
        logger.info(f"🗑️ Project {project_id} deleted by client {user.id}")
        return {"message": "Project deleted successfully"}
