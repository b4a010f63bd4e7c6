"""
API route modules.
"""

from api.routes.accounts import router as accounts_router
from api.routes.health import router as health_router

__all__ = ["accounts_router", "health_router"]
