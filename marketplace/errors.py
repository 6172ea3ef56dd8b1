"""
Domain errors raised by the service layer.

Each error is an HTTPException carrying its own status code, so services can
raise them directly and FastAPI renders them as {"detail": "..."} without any
per-route translation.
"""

from typing import Optional

from fastapi import HTTPException


class MarketplaceError(HTTPException):
    status_code = 400
    default_detail = "Request could not be completed"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(MarketplaceError):
    """Referenced project, bid or contract does not exist"""

    status_code = 404
    default_detail = "Not found"


class ConflictError(MarketplaceError):
    """A record for the same unique key already exists"""

    status_code = 400
    default_detail = "Already exists"


class InvalidStateError(MarketplaceError):
    """Action attempted against a record not in the required status"""

    status_code = 400
    default_detail = "Invalid state for this action"


class ForbiddenError(MarketplaceError):
    """Actor is not the party authorized for the action"""

    status_code = 403
    default_detail = "Not authorized"
