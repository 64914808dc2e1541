"""
Configurator events.

Immutable event objects published whenever the service configurator's derived
state changes. Each event carries the computed value.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class ConfiguratorEvent:
    """Base class for all configurator events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)
    service_id: str = ""


@dataclass(frozen=True, kw_only=True)
class BreakdownUpdated(ConfiguratorEvent):
    """The price breakdown was recomputed after a period or option change."""
    period: str = ""
    selection: dict = field(default_factory=dict)
    breakdown: Any = None  # PriceBreakdown

    @classmethod
    def create(cls, service_id: str, period: str, selection: dict, breakdown: Any) -> "BreakdownUpdated":
        return cls(service_id=service_id, period=period, selection=selection, breakdown=breakdown)


@dataclass(frozen=True, kw_only=True)
class PeriodRepaired(ConfiguratorEvent):
    """The selected period was not offered by the schema and was replaced."""
    previous: str | None = None
    period: str = ""

    @classmethod
    def create(cls, service_id: str, previous: str | None, period: str) -> "PeriodRepaired":
        return cls(service_id=service_id, previous=previous, period=period)


@dataclass(frozen=True, kw_only=True)
class PurchaseStateResolved(ConfiguratorEvent):
    """Purchase history was loaded and the call-to-action decided."""
    state: Any = None  # PurchaseState

    @classmethod
    def create(cls, service_id: str, state: Any) -> "PurchaseStateResolved":
        return cls(service_id=service_id, state=state)
