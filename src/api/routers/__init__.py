"""
API Routers Package

FastAPI routers grouped by resource. Routers are thin wrappers around
Application Layer use cases and query handlers.

Available Routers:
    - swipes_router: POST /swipes/interest, POST /swipes/disinterest
    - users_router: GET /users/{user_id}/connections, /users/{user_id}/candidates
    - pairs_router: GET /pairs/{user_a}/{user_b}
"""

from .pairs import router as pairs_router
from .swipes import router as swipes_router
from .users import router as users_router

__all__ = ["swipes_router", "users_router", "pairs_router"]
