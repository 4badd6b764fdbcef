"""
Services layer for PartsQuest Web.

This module contains the client logic:
- access: Pure access evaluation and session reconciliation
- view_router: Finite-state controller over the screens
- workspace: Cached part request list
- portal: AppState and the PortalController that owns every mutation

Request Model:
    Flask request threads each build their own PortalController.
    AppState objects live in PortalStateStore (lock-protected, per token).
"""

from .access import (
    AccessDecision,
    FetchOutcome,
    ReconcileInput,
    ReconcileTrigger,
    allowed_features,
    can_view,
    reconcile,
)
from .view_router import ViewRouter
from .workspace import PartRequestWorkspace
from .portal import AppState, PortalController, PortalStateStore

__all__ = [
    "AccessDecision",
    "FetchOutcome",
    "ReconcileInput",
    "ReconcileTrigger",
    "allowed_features",
    "can_view",
    "reconcile",
    "ViewRouter",
    "PartRequestWorkspace",
    "AppState",
    "PortalController",
    "PortalStateStore",
]
