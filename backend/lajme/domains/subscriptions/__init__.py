"""
Subscriptions domain: trial/free/premium status and daily view quotas.
"""

from .services.subscription_service import (  # noqa: F401
    AccessStatus,
    SubscriptionService,
    ViewTrackingResult,
)
