"""Project repository - Database operations for projects"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Bid, Project, Skill


class ProjectRepository:
    """Repository for project database operations. Writes flush, callers commit."""

    @staticmethod
    def get_projects(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        skill: Optional[str] = None,
    ) -> list[Project]:
        """Get projects, newest first, with optional filters"""
        query = db.query(Project).options(
            joinedload(Project.client),
            selectinload(Project.skills),
            selectinload(Project.bids),
        )

        if status:
            query = query.filter(Project.status == status)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Project.title.ilike(pattern), Project.description.ilike(pattern))
            )

        if skill:
            query = query.filter(Project.skills.any(Skill.name.ilike(f"%{skill}%")))

        return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    @staticmethod
    def get_project_by_id(db: Session, project_id: int) -> Optional[Project]:
        return (
            db.query(Project)
            .options(
                joinedload(Project.client),
                selectinload(Project.skills),
                selectinload(Project.bids).joinedload(Bid.freelancer),
                joinedload(Project.contract),
            )
            .filter(Project.id == project_id)
            .first()
        )

    @staticmethod
    def get_skills_by_ids(db: Session, skill_ids: list[int]) -> list[Skill]:
        if not skill_ids:
            return []
        return db.query(Skill).filter(Skill.id.in_(skill_ids)).all()

    @staticmethod
    def add_project(db: Session, skills: list[Skill], **project_data) -> Project:
        project = Project(**project_data)
        project.skills = skills
        db.add(project)
        db.flush()
        return project

    @staticmethod
    def update_project(db: Session, project: Project, **updates) -> Project:
        """Update a project with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(project, key):
                setattr(project, key, value)
        db.flush()
        return project

    @staticmethod
    def delete_project(db: Session, project: Project) -> None:
        db.delete(project)
        db.flush()
