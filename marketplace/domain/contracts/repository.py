"""Contract repository - Database operations for contracts and reviews"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Contract, Project, Review


class ContractRepository:
    """Repository for contract database operations. Writes flush, callers commit."""

    @staticmethod
    def get_contracts_for_user(db: Session, user_id: int) -> list[Contract]:
        """Get all contracts where the user is the client or the freelancer"""
        return (
            db.query(Contract)
            .options(
                joinedload(Contract.project),
                joinedload(Contract.client),
                joinedload(Contract.freelancer),
            )
            .filter(or_(Contract.client_id == user_id, Contract.freelancer_id == user_id))
            .order_by(Contract.created_at.desc(), Contract.id.desc())
            .all()
        )

    @staticmethod
    def get_contract_by_id(db: Session, contract_id: int) -> Optional[Contract]:
        return db.query(Contract).filter(Contract.id == contract_id).first()

    @staticmethod
    def get_contract_for_project(db: Session, project_id: int) -> Optional[Contract]:
        return db.query(Contract).filter(Contract.project_id == project_id).first()

    @staticmethod
    def add_contract(db: Session, **contract_data) -> Contract:
        contract = Contract(**contract_data)
        db.add(contract)
        db.flush()
        return contract

    @staticmethod
    def set_contract_status(
        db: Session, contract: Contract, status: str, end_date: Optional[datetime] = None
    ) -> Contract:
        contract.status = status
        if end_date is not None:
            contract.end_date = end_date
        db.flush()
        return contract

    @staticmethod
    def set_project_status(db: Session, project: Project, status: str) -> Project:
        project.status = status
        db.flush()
        return project

    @staticmethod
    def get_review(db: Session, contract_id: int, from_user_id: int, to_user_id: int) -> Optional[Review]:
        return (
            db.query(Review)
            .filter(
                Review.contract_id == contract_id,
                Review.from_user_id == from_user_id,
                Review.to_user_id == to_user_id,
            )
            .first()
        )

    @staticmethod
    def add_review(db: Session, **review_data) -> Review:
        review = Review(**review_data)
        db.add(review)
        db.flush()
        return review
