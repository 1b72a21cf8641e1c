from .subscription_service import AccessStatus, SubscriptionService, ViewTrackingResult

__all__ = ["AccessStatus", "SubscriptionService", "ViewTrackingResult"]
