from binderkeep.api.auth import router as auth_router
from binderkeep.api.cards import router as cards_router
from binderkeep.api.catalog import router as catalog_router
from binderkeep.api.health import router as health_router
from binderkeep.api.sets import router as sets_router

__all__ = [
    "auth_router",
    "cards_router",
    "catalog_router",
    "health_router",
    "sets_router",
]
