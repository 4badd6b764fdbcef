"""
Part request workspace: the client-side cache of the user's part requests.

The cache is read-mostly:
    - refresh() replaces the whole list with the backend's current order
      (the client never re-sorts)
    - create() validates locally, posts, then refreshes the whole list
      instead of inserting the new record

On a 403 from either call nothing is retried and the cache is left as it
was; SubscriptionRequiredError goes up to the controller, which moves the
router to subscription selection.
"""

from __future__ import annotations

from typing import List

from core.exceptions import NetworkError
from core.gateway import RemoteGateway
from models.part_request import PartRequest, PartRequestDraft
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class PartRequestWorkspace:
    """
    Ordered cache of part requests for one session.

    Attributes:
        items: Cached records in server order (copy)
        loaded: Whether a refresh has ever succeeded since the last clear
    """

    def __init__(self, gateway: RemoteGateway):
        self._gateway = gateway
        self._items: List[PartRequest] = []
        self._loaded = False

    @property
    def items(self) -> List[PartRequest]:
        return list(self._items)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._items)

    def refresh(self, token: str) -> List[PartRequest]:
        """
        Reload the list from the backend.

        Returns:
            The new cached list

        Raises:
            SubscriptionRequiredError: On 403 (cache untouched)
            AuthenticationError: On 401 (cache untouched)
            GatewayError / NetworkError: On other failures (cache untouched)
        """
        response = self._gateway.list_part_requests(token).raise_for_error()

        raw_items = response.data.get("part_requests")
        if not isinstance(raw_items, list):
            logger.error("Part request list response has no part_requests array")
            raise _unreadable_list(response.operation)

        try:
            items = [PartRequest.from_dict(item) for item in raw_items]
        except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
            logger.error(f"Part request list response has a malformed item: {e}")
            raise _unreadable_list(response.operation) from e

        self._items = items
        self._loaded = True
        logger.info(f"Part request cache refreshed: {len(self._items)} item(s)")
        return self.items

    def create(self, token: str, draft: PartRequestDraft) -> List[PartRequest]:
        """
        Submit a new part request, then reload the whole list.

        Args:
            token: Bearer token
            draft: Unvalidated form value

        Returns:
            The refreshed list (contains the new record with its server id/status)

        Raises:
            PartRequestValidationError: Bad input; no network call was made
            SubscriptionRequiredError: On 403 (cache untouched)
            GatewayError / NetworkError: On other failures
        """
        valid = draft.validate()

        response = self._gateway.create_part_request(token, valid.to_payload()).raise_for_error()
        logger.info(
            f"Part request created: id={response.data.get('id')} "
            f"part={valid.part_number} qty={valid.quantity}"
        )

        return self.refresh(token)

    def clear(self) -> None:
        self._items = []
        self._loaded = False


def _unreadable_list(operation: str) -> NetworkError:
    return NetworkError(
        "The part request list could not be read. Please try again.",
        operation=operation,
    )
