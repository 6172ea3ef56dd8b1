from .router import router
from .service import ProjectService

__all__ = ["router", "ProjectService"]
