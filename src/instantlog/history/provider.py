from __future__ import annotations

import logging
from typing import Any, Protocol

from ..api.client import ApiClient
from ..core.result import Err
from .model import HistoryPayload

logger = logging.getLogger(__name__)


class HistoryProvider(Protocol):
    def fetch_history(self, employee_id: Any) -> HistoryPayload:
        """Never raises: a failed fetch yields an empty payload."""

        raise NotImplementedError


def _as_list(value: Any) -> list:
    return [item for item in value] if isinstance(value, list) else []


def payload_from_response(data: Any) -> HistoryPayload:
    """Accept every history shape the backend has served.

    - {"attendance": [...], "leave" | "leaves": [...]}
    - a bare list of attendance records
    - legacy {"success": true, "history": [...]}
    """

    if isinstance(data, list):
        return HistoryPayload(attendance=_as_list(data))

    if isinstance(data, dict):
        if isinstance(data.get("attendance"), list):
            leaves = data.get("leaves")
            if not isinstance(leaves, list):
                leaves = data.get("leave")
            return HistoryPayload(attendance=_as_list(data["attendance"]), leaves=_as_list(leaves))
        if data.get("success") and isinstance(data.get("history"), list):
            return HistoryPayload(attendance=_as_list(data["history"]))

    logger.debug("Unrecognised history payload of type %s", type(data).__name__)
    return HistoryPayload()


class ApiHistoryProvider(HistoryProvider):
    def __init__(self, client: ApiClient):
        self._client = client

    def fetch_history(self, employee_id: Any) -> HistoryPayload:
        result = self._client.get_history(employee_id)
        if isinstance(result, Err):
            logger.warning("History fetch for employee %s failed: %s", employee_id, result.msg)
            return HistoryPayload()
        return payload_from_response(result.data)
