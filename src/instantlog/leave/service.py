from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..api.client import ApiClient
from ..common.validators import require_iso_date, require_non_empty
from ..core.exceptions import ValidationError
from ..core.result import Result


class LeaveService:
    """Use case: apply for leave. Approval happens on the backend."""

    def __init__(self, client: ApiClient):
        self._client = client

    def apply(
        self,
        emp_id: Any,
        reason: str,
        *,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Result[dict]:
        if not emp_id:
            raise ValidationError("User not found!")
        reason = require_non_empty(reason, "Reason")

        if not from_date and not to_date:
            return self._client.apply_leave(emp_id, "quick", reason)

        start: date = require_iso_date(from_date or "", "From date")
        end: date = require_iso_date(to_date or "", "To date")
        if end < start:
            raise ValidationError("To Date cannot be before From Date")

        return self._client.apply_leave(emp_id, "custom", reason, start.isoformat(), end.isoformat())
