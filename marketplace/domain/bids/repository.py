"""Bid repository - Database operations for bids"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Bid, Project


class BidRepository:
    """Repository for bid database operations. Writes flush, callers commit."""

    @staticmethod
    def get_bid(db: Session, bid_id: int) -> Optional[Bid]:
        return (
            db.query(Bid)
            .options(joinedload(Bid.project))
            .filter(Bid.id == bid_id)
            .first()
        )

    @staticmethod
    def lock_bid(db: Session, bid_id: int) -> Optional[Bid]:
        """Reload a bid under a row lock held until the surrounding transaction ends"""
        return (
            db.query(Bid)
            .filter(Bid.id == bid_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def get_bid_by_project_and_freelancer(
        db: Session, project_id: int, freelancer_id: int
    ) -> Optional[Bid]:
        return (
            db.query(Bid)
            .filter(Bid.project_id == project_id, Bid.freelancer_id == freelancer_id)
            .first()
        )

    @staticmethod
    def get_bids_for_project(db: Session, project_id: int) -> list[Bid]:
        return (
            db.query(Bid)
            .options(joinedload(Bid.freelancer))
            .filter(Bid.project_id == project_id)
            .order_by(Bid.created_at.desc(), Bid.id.desc())
            .all()
        )

    @staticmethod
    def get_bids_for_freelancer(db: Session, freelancer_id: int) -> list[Bid]:
        return (
            db.query(Bid)
            .options(joinedload(Bid.project))
            .filter(Bid.freelancer_id == freelancer_id)
            .order_by(Bid.created_at.desc(), Bid.id.desc())
            .all()
        )

    @staticmethod
    def get_project(db: Session, project_id: int, for_update: bool = False) -> Optional[Project]:
        """
        Load a project. With `for_update`, the row is locked until the
        surrounding transaction ends and any cached copy is refreshed.
        """
        query = db.query(Project).filter(Project.id == project_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    @staticmethod
    def add_bid(db: Session, **bid_data) -> Bid:
        bid = Bid(**bid_data)
        db.add(bid)
        db.flush()
        return bid

    @staticmethod
    def set_bid_status(db: Session, bid: Bid, status: str) -> Bid:
        bid.status = status
        db.flush()
        return bid

    @staticmethod
    def delete_bid(db: Session, bid: Bid) -> None:
        db.delete(bid)
        db.flush()
