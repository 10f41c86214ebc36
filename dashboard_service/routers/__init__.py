# Dashboard Service Routers
from .activity import router as activity_router
from .prompts import router as prompts_router
from .subscriptions import router as subscriptions_router
from .trends import router as trends_router

__all__ = [
    'activity_router',
    'prompts_router',
    'subscriptions_router',
    'trends_router',
]
