"""HTTP routers."""

from .achievements import router as achievements_router
from .meals import router as meals_router
from .recommendations import router as recommendations_router

__all__ = ["achievements_router", "meals_router", "recommendations_router"]
