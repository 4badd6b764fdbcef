"""
Subscription plan catalog.

Plans are display data plus the payment provider price id the backend needs
to open a checkout session. Price ids come from configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SubscriptionPlan:
    """A purchasable plan."""

    key: str
    name: str
    price_id: str
    monthly_price: Decimal
    description: str = ""
    highlights: Tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False

    @property
    def price_label(self) -> str:
        if self.monthly_price == self.monthly_price.to_integral_value():
            return f"${self.monthly_price:,.0f}"
        return f"${self.monthly_price:,.2f}"


# key -> (name, monthly price, description, highlights, featured)
_PLAN_DETAILS = {
    "test": (
        "Test Plan", Decimal("0.50"), "Try the full workflow end to end",
        ("All Pro features", "Billing test only"), False,
    ),
    "starter": (
        "Starter", Decimal("199"), "For small independent shops",
        ("Part requests", "AI parts search", "Email support"), False,
    ),
    "professional": (
        "Professional", Decimal("399"), "For busy repair shops",
        ("Unlimited AI searches", "AI voice calling", "Priority support"), True,
    ),
    "fleet": (
        "Fleet", Decimal("699"), "For fleet maintenance teams",
        ("Everything in Professional", "Multi-location ordering", "Advanced analytics"), False,
    ),
    "enterprise": (
        "Enterprise", Decimal("1200"), "For dealer groups and large fleets",
        ("Everything in Fleet", "API access", "Dedicated account manager"), False,
    ),
}

PRO_PLAN_KEY = "pro"


class PlanCatalog:
    """
    Plans offered on the subscription selection screen, plus the Pro upgrade
    offered from the dashboard.
    """

    def __init__(self, price_ids: Dict[str, str], pro_price_id: str):
        self._plans: List[SubscriptionPlan] = []
        for key, (name, price, description, highlights, featured) in _PLAN_DETAILS.items():
            price_id = price_ids.get(key)
            if not price_id:
                continue
            self._plans.append(SubscriptionPlan(
                key=key,
                name=name,
                price_id=price_id,
                monthly_price=price,
                description=description,
                highlights=highlights,
                featured=featured,
            ))

        self.pro = SubscriptionPlan(
            key=PRO_PLAN_KEY,
            name="Pro Plan",
            price_id=pro_price_id,
            monthly_price=Decimal("49"),
            description="Advanced AI-powered features",
            highlights=(
                "Unlimited AI searches",
                "AI voice calling",
                "Advanced analytics",
                "Priority support",
                "API access",
            ),
        )

    @property
    def plans(self) -> List[SubscriptionPlan]:
        return list(self._plans)

    def find_by_price_id(self, price_id: str) -> Optional[SubscriptionPlan]:
        """Only price ids from the catalog may be sent to checkout."""
        for plan in self._plans + [self.pro]:
            if plan.price_id == price_id:
                return plan
        return None
