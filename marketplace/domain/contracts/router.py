"""Contract router - FastAPI endpoints for contract operations"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Contract, Review, User
from ...schemas import ProjectSummary, UserSummary
from .schemas import ContractResponse, ContractStatusUpdate, ReviewCreate, ReviewResponse
from .service import ContractService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])


def get_contract_service(db: Session = Depends(get_db)) -> ContractService:
    """Dependency injection for ContractService"""
    return ContractService(db)


def _review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        contractId=review.contract_id,
        fromUserId=review.from_user_id,
        toUserId=review.to_user_id,
        rating=review.rating,
        comment=review.comment,
        createdAt=review.created_at,
        fromUser=UserSummary.from_user(review.from_user),
        toUser=UserSummary.from_user(review.to_user),
    )


def _contract_response(contract: Contract) -> ContractResponse:
    return ContractResponse(
        id=contract.id,
        projectId=contract.project_id,
        bidId=contract.bid_id,
        clientId=contract.client_id,
        freelancerId=contract.freelancer_id,
        amount=contract.amount,
        terms=contract.terms,
        status=contract.status,
        startDate=contract.start_date,
        endDate=contract.end_date,
        createdAt=contract.created_at,
        project=ProjectSummary.from_project(contract.project),
        client=UserSummary.from_user(contract.client),
        freelancer=UserSummary.from_user(contract.freelancer),
        reviews=[_review_response(r) for r in contract.reviews],
    )


@router.get("", response_model=list[ContractResponse])
def get_contracts(
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Get contracts where the current user is client or freelancer"""
    return [_contract_response(c) for c in service.get_contracts(current_user)]


@router.get("/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: int,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Get a single contract"""
    return _contract_response(service.get_contract(contract_id, current_user))


@router.patch("/{contract_id}/status", response_model=ContractResponse)
def update_contract_status(
    contract_id: int,
    data: ContractStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Complete or terminate a contract"""
    contract = service.update_contract_status(contract_id, data.status, current_user)
    return _contract_response(contract)


@router.post("/{contract_id}/reviews", response_model=ReviewResponse, status_code=201)
def add_review(
    contract_id: int,
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Review the other party of a contract"""
    return _review_response(service.add_review(contract_id, data, current_user))
