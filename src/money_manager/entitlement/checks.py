"""Entitlement backends consulted before resetting a calculator session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from money_manager.entitlement.models import Subscription


class Entitlement:
    def has_active_entitlement(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class StaticEntitlement(Entitlement):
    active: bool = True

    def has_active_entitlement(self) -> bool:
        return self.active


class SubscriptionEntitlement(Entitlement):
    def __init__(
        self,
        lookup: Callable[[], Optional[Subscription]],
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.lookup = lookup
        self.clock = clock

    def has_active_entitlement(self) -> bool:
        subscription = self.lookup()
        if subscription is None:
            return False
        now = self.clock() if self.clock is not None else None
        return subscription.is_active(now)
