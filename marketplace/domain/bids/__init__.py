from .router import router
from .service import BidService

__all__ = ["router", "BidService"]
