"""
Data models for PartsQuest Web.

This module contains dataclasses and enums for:
- ViewState / SubscriptionStatus / Feature: access-control vocabulary
- UserProfile, ProfileUpdate, Registration: the authenticated user
- PartRequest, PartRequestDraft, Urgency: procurement records
- SubscriptionPlan, PlanCatalog: purchasable plans

Backend records (UserProfile, PartRequest) are frozen; they are replaced,
never edited.
"""

from .access import ViewState, SubscriptionStatus, Feature
from .profile import UserProfile, ProfileUpdate, Registration
from .part_request import PartRequest, PartRequestDraft, Urgency
from .subscription import SubscriptionPlan, PlanCatalog

__all__ = [
    # Access models
    "ViewState",
    "SubscriptionStatus",
    "Feature",
    # User models
    "UserProfile",
    "ProfileUpdate",
    "Registration",
    # Part request models
    "PartRequest",
    "PartRequestDraft",
    "Urgency",
    # Subscription models
    "SubscriptionPlan",
    "PlanCatalog",
]
