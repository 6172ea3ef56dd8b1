"""Bid service - Bid lifecycle and its effects on projects and contracts"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import with_transaction
from ...errors import ConflictError, ForbiddenError, InvalidStateError, NotFoundError
from ...models import Bid, BidStatus, Contract, ProjectStatus, User
from ...utils.sanitization import sanitize_text
from ..contracts.repository import ContractRepository
from .repository import BidRepository
from .schemas import BidCreate

logger = logging.getLogger(__name__)


class BidService:
    """
    Service layer for the bid lifecycle.

    A bid starts PENDING and moves once, to ACCEPTED or REJECTED. Accepting a
    bid writes the bid status, a new contract and the project status in a
    single transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BidRepository()
        self.contracts = ContractRepository()

    def get_bid(self, bid_id: int) -> Bid:
        bid = self.repo.get_bid(self.db, bid_id)
        if not bid:
            raise NotFoundError("Bid not found")
        return bid

    def list_project_bids(self, project_id: int) -> list[Bid]:
        """Get all bids on a project, newest first"""
        if not self.repo.get_project(self.db, project_id):
            raise NotFoundError("Project not found")
        return self.repo.get_bids_for_project(self.db, project_id)

    def list_freelancer_bids(self, freelancer_id: int) -> list[Bid]:
        """Get all bids placed by a freelancer, newest first"""
        return self.repo.get_bids_for_freelancer(self.db, freelancer_id)

    def submit_bid(self, data: BidCreate, user: User) -> Bid:
        """Place a PENDING bid on an OPEN project"""
        project = self.repo.get_project(self.db, data.projectId)
        if not project:
            raise NotFoundError("Project not found")

        if project.status != ProjectStatus.OPEN.value:
            raise InvalidStateError("Project is not open for bids")

        if self.repo.get_bid_by_project_and_freelancer(self.db, project.id, user.id):
            raise ConflictError("You have already bid on this project")

        bid_data = {
            "project_id": project.id,
            "freelancer_id": user.id,
            "amount": data.amount,
            "duration": data.duration,
            "cover_letter": sanitize_text(data.coverLetter),
            "status": BidStatus.PENDING.value,
        }

        try:
            bid = with_transaction(self.db, lambda db: self.repo.add_bid(db, **bid_data))
        except IntegrityError as e:
            # Lost a race with a concurrent submission for the same pair
            logger.warning(f"⚠️ Duplicate bid for project {project.id} by user {user.id}: {e.orig}")
            raise ConflictError("You have already bid on this project") from e

        logger.info(f"📝 Bid {bid.id} submitted on project {project.id} by user {user.id}")
        return bid

    def update_bid_status(
        self, bid_id: int, new_status: str, user: User
    ) -> tuple[Bid, Optional[Contract]]:
        """
        Accept or reject a bid as the project's client.

        Returns the bid and, on acceptance, the contract created for it.
        """
        bid = self.get_bid(bid_id)

        if bid.project.client_id != user.id:
            raise ForbiddenError("Not authorized")

        if bid.status != BidStatus.PENDING.value:
            raise InvalidStateError(f"Bid has already been {bid.status.lower()}")

        if new_status == BidStatus.REJECTED.value:
            bid = with_transaction(self.db, lambda db: self._reject(db, bid_id))
            logger.info(f"🚫 Bid {bid.id} rejected by user {user.id}")
            return bid, None

        if new_status != BidStatus.ACCEPTED.value:
            raise InvalidStateError(f"Unsupported bid status: {new_status}")

        try:
            bid, contract = with_transaction(self.db, lambda db: self._accept(db, bid))
        except IntegrityError as e:
            logger.warning(f"⚠️ Concurrent acceptance on project {bid.project_id}: {e.orig}")
            raise InvalidStateError("Project already has an accepted bid") from e

        logger.info(
            f"✅ Bid {bid.id} accepted; contract {contract.id} created for project {bid.project_id}"
        )
        return bid, contract

    def _lock_pending_bid(self, db: Session, bid_id: int) -> Bid:
        # The status read before the transaction may be stale; re-check under the row lock
        bid = self.repo.lock_bid(db, bid_id)
        if not bid:
            raise NotFoundError("Bid not found")
        if bid.status != BidStatus.PENDING.value:
            raise InvalidStateError(f"Bid has already been {bid.status.lower()}")
        return bid

    def _reject(self, db: Session, bid_id: int) -> Bid:
        bid = self._lock_pending_bid(db, bid_id)
        return self.repo.set_bid_status(db, bid, BidStatus.REJECTED.value)

    def _accept(self, db: Session, bid: Bid) -> tuple[Bid, Contract]:
        # Lock the project row so concurrent acceptances on it run one at a time.
        # Lock order is project, then bid.
        project = self.repo.get_project(db, bid.project_id, for_update=True)

        if project.status != ProjectStatus.OPEN.value:
            raise InvalidStateError("Project is not open for bids")

        if self.contracts.get_contract_for_project(db, project.id):
            raise InvalidStateError("Project already has an accepted bid")

        bid = self._lock_pending_bid(db, bid.id)
        self.repo.set_bid_status(db, bid, BidStatus.ACCEPTED.value)
        contract = self.contracts.add_contract(
            db,
            project_id=project.id,
            bid_id=bid.id,
            client_id=project.client_id,
            freelancer_id=bid.freelancer_id,
            terms=f"Contract for project: {project.title}",
            amount=bid.amount,
            start_date=datetime.now(timezone.utc),
        )
        self.contracts.set_project_status(db, project, ProjectStatus.IN_PROGRESS.value)
        return bid, contract

    def withdraw_bid(self, bid_id: int, user: User) -> dict:
        """Delete a PENDING bid as its author"""
        bid = self.get_bid(bid_id)

        if bid.freelancer_id != user.id:
            raise ForbiddenError("Not authorized")

        if bid.status != BidStatus.PENDING.value:
            raise InvalidStateError("Only pending bids can be withdrawn")

        def _withdraw(db: Session) -> None:
            locked = self.repo.lock_bid(db, bid_id)
            if not locked:
                raise NotFoundError("Bid not found")
            if locked.status != BidStatus.PENDING.value:
                raise InvalidStateError("Only pending bids can be withdrawn")
            self.repo.delete_bid(db, locked)

        try:
            with_transaction(self.db, _withdraw)
        except IntegrityError as e:
            # A contract now references the bid
            logger.warning(f"⚠️ Withdrawal of bid {bid_id} blocked by a concurrent acceptance: {e.orig}")
            raise InvalidStateError("Only pending bids can be withdrawn") from e

        logger.info(f"🗑️ Bid {bid_id} withdrawn by user {user.id}")
        return {"message": "Bid withdrawn successfully"}
