"""Contract service - Business logic for contract operations"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import with_transaction
from ...errors import ConflictError, ForbiddenError, InvalidStateError, NotFoundError
from ...models import Contract, ContractStatus, Review, User
from ...utils.sanitization import sanitize_text
from .repository import ContractRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ContractService:
    """Service layer for contract business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContractRepository()

    def get_contracts(self, user: User) -> list[Contract]:
        """Get all contracts the user is a party to"""
        return self.repo.get_contracts_for_user(self.db, user.id)

    def get_contract(self, contract_id: int, user: User) -> Contract:
        """Get a specific contract, visible to its two parties only"""
        contract = self.repo.get_contract_by_id(self.db, contract_id)
        if not contract:
            raise NotFoundError("Contract not found")
        if user.id not in (contract.client_id, contract.freelancer_id):
            raise ForbiddenError("Not authorized")
        return contract

    def update_contract_status(self, contract_id: int, status: str, user: User) -> Contract:
        """
        Complete or terminate an ACTIVE contract.

        The project takes the same status, in the same transaction.
        """
        contract = self.get_contract(contract_id, user)

        if contract.status != ContractStatus.ACTIVE.value:
            raise InvalidStateError(f"Contract is already {contract.status.lower()}")

        end_date = datetime.now(timezone.utc) if status == ContractStatus.COMPLETED.value else None

        def _close(db: Session) -> Contract:
            self.repo.set_contract_status(db, contract, status, end_date=end_date)
            self.repo.set_project_status(db, contract.project, status)
            return contract

        with_transaction(self.db, _close)
        logger.info(f"📄 Contract {contract_id} marked {status} by user {user.id}")
        return contract

    def add_review(self, contract_id: int, data: ReviewCreate, user: User) -> Review:
        """Review the other party of a contract, once per reviewer"""
        contract = self.get_contract(contract_id, user)

        to_user_id = contract.freelancer_id if user.id == contract.client_id else contract.client_id

        if self.repo.get_review(self.db, contract.id, user.id, to_user_id):
            raise ConflictError("You have already submitted a review")

        review_data = {
            "contract_id": contract.id,
            "from_user_id": user.id,
            "to_user_id": to_user_id,
            "rating": data.rating,
            "comment": sanitize_text(data.comment),
        }

        try:
            review = with_transaction(self.db, lambda db: self.repo.add_review(db, **review_data))
        except IntegrityError as e:
            raise ConflictError("You have already submitted a review") from e

        logger.info(f"⭐ Review {review.id} on contract {contract.id}: {user.id} -> {to_user_id}")
        return review
