"""Subscription records used for entitlement checks."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

LIFETIME_MONTHS = -1
LIFETIME_YEARS = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class Subscription:
    plan_id: str
    plan_name: str
    start_date: datetime
    end_date: datetime
    is_lifetime: bool = False
    order_id: Optional[str] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        if self.is_lifetime:
            return True
        if now is None:
            now = _utcnow()
        return self.end_date > now


def create_subscription(
    plan_id: str,
    plan_name: str,
    duration_months: int,
    order_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Subscription:
    start = now or _utcnow()
    is_lifetime = duration_months == LIFETIME_MONTHS
    if is_lifetime:
        end = add_months(start, LIFETIME_YEARS * 12)
    elif duration_months < 1:
        raise ValueError(f"Invalid subscription duration: {duration_months}")
    else:
        end = add_months(start, duration_months)
    return Subscription(
        plan_id=plan_id,
        plan_name=plan_name,
        start_date=start,
        end_date=end,
        is_lifetime=is_lifetime,
        order_id=order_id,
    )
