"""
Part request models.

Part requests are created server-side. The client holds:
    - PartRequestDraft: the form value, validated before anything is sent
    - PartRequest: a record as the backend returned it (read-only)

The client never assigns ids or statuses and never edits a record in place;
after a create it reloads the whole list.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Any, Optional

from core.exceptions import PartRequestValidationError


class Urgency(Enum):
    """How soon the part is needed."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


DEFAULT_URGENCY = Urgency.NORMAL
PENDING_STATUS = "pending"


@dataclass(frozen=True)
class PartRequest:
    """A procurement record as stored by the backend."""

    id: Any
    part_number: str
    description: str = ""
    quantity: int = 1
    target_price: Optional[Decimal] = None
    urgency: str = DEFAULT_URGENCY.value
    """Kept as sent; unknown values are displayed verbatim."""

    status: str = PENDING_STATUS
    """Server-defined lifecycle status ("pending" initially)."""

    created_at: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING_STATUS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PartRequest":
        target_price = data.get("target_price")
        return cls(
            id=data.get("id"),
            part_number=data.get("part_number") or "",
            description=data.get("description") or "",
            quantity=int(data.get("quantity") or 0),
            target_price=_to_decimal(target_price) if target_price is not None else None,
            urgency=data.get("urgency") or DEFAULT_URGENCY.value,
            status=data.get("status") or PENDING_STATUS,
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class PartRequestDraft:
    """
    Part request form value before submission.

    Values may arrive as raw strings from a form; validate() normalizes them
    and raises PartRequestValidationError listing every bad field.
    """

    part_number: str
    quantity: Any = 1
    description: str = ""
    target_price: Any = None
    urgency: Any = DEFAULT_URGENCY.value

    def validate(self) -> "PartRequestDraft":
        """
        Check and normalize the draft.

        Rules:
            - part_number: non-empty after trimming
            - quantity: integer >= 1
            - target_price: absent/blank, or a number >= 0
            - urgency: one of low, normal, high, urgent

        Returns:
            A new draft with int quantity, Decimal/None target_price and
            Urgency value

        Raises:
            PartRequestValidationError: If any rule fails
        """
        errors: Dict[str, str] = {}

        part_number = (self.part_number or "").strip()
        if not part_number:
            errors["part_number"] = "Part number is required."

        quantity = _to_int(self.quantity)
        if quantity is None:
            errors["quantity"] = "Quantity must be a whole number."
        elif quantity < 1:
            errors["quantity"] = "Quantity must be at least 1."

        target_price = None
        if self.target_price is not None and str(self.target_price).strip() != "":
            target_price = _to_decimal(self.target_price)
            if target_price is None:
                errors["target_price"] = "Target price must be a number."
            elif target_price < 0:
                errors["target_price"] = "Target price cannot be negative."

        urgency = _to_urgency(self.urgency)
        if urgency is None:
            errors["urgency"] = "Urgency must be one of: low, normal, high, urgent."

        if errors:
            raise PartRequestValidationError(errors)

        return PartRequestDraft(
            part_number=part_number,
            quantity=quantity,
            description=(self.description or "").strip(),
            target_price=target_price,
            urgency=urgency,
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for POST /api/part-requests. Call on a validated draft."""
        urgency = self.urgency.value if isinstance(self.urgency, Urgency) else self.urgency
        return {
            "part_number": self.part_number,
            "description": self.description,
            "quantity": self.quantity,
            "target_price": float(self.target_price) if self.target_price is not None else None,
            "urgency": urgency,
        }


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _to_urgency(value: Any) -> Optional[Urgency]:
    if isinstance(value, Urgency):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_URGENCY
    try:
        return Urgency(str(value).strip().lower())
    except ValueError:
        return None
