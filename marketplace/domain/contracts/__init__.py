from .router import router
from .service import ContractService

__all__ = ["router", "ContractService"]
