"""Bid router - FastAPI endpoints for the bid lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_role
from ...database import get_db
from ...models import Bid, Contract, User, UserRole
from ...schemas import ContractSummary, MessageResponse, ProjectSummary, UserSummary
from .schemas import BidCreate, BidResponse, BidStatusUpdate
from .service import BidService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bids", tags=["Bids"])


def get_bid_service(db: Session = Depends(get_db)) -> BidService:
    """Dependency injection for BidService"""
    return BidService(db)


def _bid_response(
    bid: Bid,
    include_freelancer: bool = True,
    include_project: bool = False,
    contract: Optional[Contract] = None,
) -> BidResponse:
    return BidResponse(
        id=bid.id,
        projectId=bid.project_id,
        freelancerId=bid.freelancer_id,
        amount=bid.amount,
        duration=bid.duration,
        coverLetter=bid.cover_letter,
        status=bid.status,
        createdAt=bid.created_at,
        updatedAt=bid.updated_at,
        freelancer=UserSummary.from_user(bid.freelancer) if include_freelancer else None,
        project=ProjectSummary.from_project(bid.project) if include_project else None,
        contract=ContractSummary.from_contract(contract),
    )


# ============================================================================
# READ VIEWS
# ============================================================================


@router.get("/project/{project_id}", response_model=list[BidResponse])
def get_project_bids(
    project_id: int,
    service: BidService = Depends(get_bid_service),
):
    """Get bids for a project"""
    return [_bid_response(b) for b in service.list_project_bids(project_id)]


@router.get("/freelancer/{freelancer_id}", response_model=list[BidResponse])
def get_freelancer_bids(
    freelancer_id: int,
    service: BidService = Depends(get_bid_service),
):
    """Get bids placed by a freelancer"""
    return [
        _bid_response(b, include_freelancer=False, include_project=True)
        for b in service.list_freelancer_bids(freelancer_id)
    ]


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.post("", response_model=BidResponse, status_code=201)
def submit_bid(
    data: BidCreate,
    current_user: User = Depends(require_role(UserRole.FREELANCER)),
    service: BidService = Depends(get_bid_service),
):
    """Submit a bid on an open project"""
    bid = service.submit_bid(data, current_user)
    return _bid_response(bid)


@router.patch("/{bid_id}/status", response_model=BidResponse)
def update_bid_status(
    bid_id: int,
    data: BidStatusUpdate,
    current_user: User = Depends(require_role(UserRole.CLIENT)),
    service: BidService = Depends(get_bid_service),
):
    """Accept or reject a bid. Accepting creates the contract."""
    bid, contract = service.update_bid_status(bid_id, data.status, current_user)
    return _bid_response(bid, contract=contract)


@router.delete("/{bid_id}", response_model=MessageResponse)
def withdraw_bid(
    bid_id: int,
    current_user: User = Depends(require_role(UserRole.FREELANCER)),
    service: BidService = Depends(get_bid_service),
):
    """Withdraw a pending bid"""
    return service.withdraw_bid(bid_id, current_user)
