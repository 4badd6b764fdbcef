"""
Session token storage.

The bearer token is the ONLY piece of client state that survives a reload.
In the web app it lives in the signed Flask session cookie; tests hand in a
plain dict. Profile, part requests and the active view are rebuilt from the
backend by reconciliation.

Usage:
    store = SessionStore(flask.session)
    store.set_token(data["token"])

    if store.has_token():
        gateway.fetch_profile(store.get_token())

    store.clear()
"""

from __future__ import annotations

import hashlib
from typing import MutableMapping, Any, Optional

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

TOKEN_KEY = "token"


def mask_token(token: Optional[str]) -> str:
    """Short, stable fingerprint of a token for log lines."""
    if not token:
        return "<none>"
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"tok-{digest[:8]}"


class SessionStore:
    """
    Holds the opaque bearer token.

    clear() removes the token only. Dependent state (profile, part request
    cache) belongs to the PortalController, which clears it in the same
    transition.
    """

    def __init__(self, backend: MutableMapping[str, Any]):
        self._backend = backend

    def get_token(self) -> Optional[str]:
        """Current token, or None when absent."""
        token = self._backend.get(TOKEN_KEY)
        return token or None

    def has_token(self) -> bool:
        return self.get_token() is not None

    def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")

        self._backend[TOKEN_KEY] = token
        self._mark_modified()
        logger.debug(f"Token stored: {mask_token(token)}")

    def clear(self) -> None:
        token = self._backend.pop(TOKEN_KEY, None)
        self._mark_modified()
        if token:
            logger.debug(f"Token cleared: {mask_token(token)}")

    def _mark_modified(self) -> None:
        # Flask sessions track mutation; plain dicts don't have the attribute
        if hasattr(self._backend, "modified"):
            self._backend.modified = True
