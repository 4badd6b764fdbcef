"""
Unit tests for data models: profile parsing, part request validation and
the plan catalog.
"""

from decimal import Decimal

import pytest

from core.exceptions import PartRequestValidationError
from models.access import SubscriptionStatus, ViewState
from models.part_request import PartRequest, PartRequestDraft, Urgency
from models.profile import ProfileUpdate, UserProfile
from models.subscription import PlanCatalog


class TestSubscriptionStatus:
    """Backend strings onto tiers."""

    @pytest.mark.parametrize("raw, expected", [
        ("active", SubscriptionStatus.ACTIVE),
        ("FREE", SubscriptionStatus.FREE),
        (" inactive ", SubscriptionStatus.INACTIVE),
        ("trialing", None),
        ("", None),
        (None, None),
        (1, None),
    ])
    def test_parse(self, raw, expected):
        assert SubscriptionStatus.parse(raw) is expected

    def test_view_classes(self):
        assert ViewState.LOGIN.is_public
        assert ViewState.PROFILE.is_protected
        assert not ViewState.SUBSCRIPTION_SELECTION.is_public
        assert not ViewState.SUBSCRIPTION_SELECTION.is_protected
        assert ViewState.SUBSCRIPTION_SELECTION.value == "subscription-selection"


class TestUserProfile:
    """Profile parsing from the backend's user object."""

    def test_from_dict(self):
        profile = UserProfile.from_dict({
            "id": 5,
            "email": "a@b.com",
            "first_name": "Ana",
            "last_name": None,
            "subscription_status": "active",
        })

        assert profile.id == 5
        assert profile.last_name == ""
        assert profile.subscription_status is SubscriptionStatus.ACTIVE
        assert profile.is_pro
        assert profile.display_name == "Ana"

    def test_display_name_falls_back_to_email(self):
        profile = UserProfile.from_dict({"id": 1, "email": "a@b.com"})

        assert profile.display_name == "a@b.com"
        assert profile.subscription_status is None

    def test_profile_update_payload_excludes_email(self):
        profile = UserProfile.from_dict({"id": 1, "email": "a@b.com", "phone": "555"})

        payload = ProfileUpdate.from_profile(profile).to_payload()

        assert payload == {"first_name": "", "last_name": "", "company": "", "phone": "555"}


class TestPartRequestDraft:
    """Client-side validation before submission."""

    def test_quantity_zero_rejected(self):
        with pytest.raises(PartRequestValidationError) as exc_info:
            PartRequestDraft(part_number="X1", quantity=0).validate()

        assert set(exc_info.value.errors) == {"quantity"}

    def test_quantity_one_accepted(self):
        draft = PartRequestDraft(part_number="X1", quantity="1").validate()

        assert draft.quantity == 1

    @pytest.mark.parametrize("quantity", ["abc", "1.5", "", None, -3, True])
    def test_bad_quantities(self, quantity):
        with pytest.raises(PartRequestValidationError):
            PartRequestDraft(part_number="X1", quantity=quantity).validate()

    @pytest.mark.parametrize("price, expected", [
        (None, None),
        ("", None),
        ("12.50", Decimal("12.50")),
        (0, Decimal("0")),
    ])
    def test_valid_target_prices(self, price, expected):
        draft = PartRequestDraft(part_number="X1", target_price=price).validate()

        assert draft.target_price == expected

    @pytest.mark.parametrize("price", ["ten dollars", "-1", "NaN"])
    def test_bad_target_prices(self, price):
        with pytest.raises(PartRequestValidationError) as exc_info:
            PartRequestDraft(part_number="X1", target_price=price).validate()

        assert "target_price" in exc_info.value.errors

    def test_all_errors_reported_together(self):
        with pytest.raises(PartRequestValidationError) as exc_info:
            PartRequestDraft(part_number="  ", quantity=0, urgency="asap").validate()

        assert set(exc_info.value.errors) == {"part_number", "quantity", "urgency"}

    def test_payload(self):
        draft = PartRequestDraft(
            part_number=" X1 ",
            quantity=3,
            target_price="19.99",
            urgency="HIGH",
        ).validate()

        assert draft.urgency is Urgency.HIGH
        assert draft.to_payload() == {
            "part_number": "X1",
            "description": "",
            "quantity": 3,
            "target_price": 19.99,
            "urgency": "high",
        }

    def test_default_urgency_is_normal(self):
        assert PartRequestDraft(part_number="X1").validate().urgency is Urgency.NORMAL


class TestPartRequest:
    """Records as returned by the backend."""

    def test_from_dict(self):
        record = PartRequest.from_dict({
            "id": 3,
            "part_number": "LM358",
            "quantity": 10,
            "target_price": 0.45,
            "urgency": "urgent",
            "status": "sourcing",
        })

        assert record.target_price == Decimal("0.45")
        assert record.status == "sourcing"
        assert not record.is_pending

    def test_defaults(self):
        record = PartRequest.from_dict({"id": 1, "part_number": "A"})

        assert record.is_pending
        assert record.urgency == "normal"
        assert record.target_price is None


class TestPlanCatalog:
    """Plans and price id lookup."""

    @pytest.fixture
    def catalog(self):
        return PlanCatalog({"starter": "price_s", "fleet": "price_f", "unknown": "price_u"}, "price_pro")

    def test_only_configured_known_plans(self, catalog):
        assert [plan.key for plan in catalog.plans] == ["starter", "fleet"]

    def test_find_by_price_id(self, catalog):
        assert catalog.find_by_price_id("price_f").name == "Fleet"
        assert catalog.find_by_price_id("price_pro") is catalog.pro
        assert catalog.find_by_price_id("price_u") is None

    def test_price_label(self, catalog):
        assert catalog.plans[0].price_label == "$199"
        assert catalog.pro.price_label == "$49"
