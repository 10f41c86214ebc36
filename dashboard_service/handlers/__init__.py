# Request handlers
from .activity_handler import ActivityHandler
from .prompts_handler import PromptsHandler
from .subscriptions_handler import SubscriptionsHandler
from .trends_handler import TrendsHandler

__all__ = [
    'ActivityHandler',
    'PromptsHandler',
    'SubscriptionsHandler',
    'TrendsHandler',
]
