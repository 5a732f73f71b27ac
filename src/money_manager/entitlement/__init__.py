"""Subscription-based access to calculator operations."""

from money_manager.entitlement.checks import Entitlement, StaticEntitlement, SubscriptionEntitlement
from money_manager.entitlement.models import Subscription, add_months, create_subscription

__all__ = [
    "Entitlement",
    "StaticEntitlement",
    "Subscription",
    "SubscriptionEntitlement",
    "add_months",
    "create_subscription",
]
