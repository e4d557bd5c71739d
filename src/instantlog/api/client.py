"""Client for the attendance backend's HTTP JSON API.

Every call returns a Result. Network failures, HTML error pages and
non-JSON bodies are turned into Err values and never raised.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import requests

from ..core.constants import ABSENT_MARKER, DEFAULT_API_TIMEOUT, PIN_LENGTH
from ..core.enums import ApiErrorKind
from ..core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

NETWORK_FAILED = "Network connection failed"
PUNCH_TYPES = ("in", "out")
LEAVE_KINDS = ("quick", "custom")


@dataclass(frozen=True)
class Location:
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    maps_url: Optional[str] = None


def _coord(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _maps_url(lat: Optional[float], lng: Optional[float]) -> Optional[str]:
    if lat is None or lng is None:
        return None
    return f"https://www.google.com/maps?q={lat},{lng}"


def format_location(value: Any) -> Optional[Location]:
    """Parse a backend location.

    Accepts the "address|lat|lng" string or an object with address, latitude
    and longitude keys. Anything else yields None.
    """

    if isinstance(value, dict):
        address = value.get("address")
        lat, lng = _coord(value.get("latitude")), _coord(value.get("longitude"))
        if not address and lat is None and lng is None:
            return None
        return Location(
            address=str(address or ""),
            latitude=lat,
            longitude=lng,
            maps_url=_maps_url(lat, lng),
        )

    if not isinstance(value, str) or not value or value == ABSENT_MARKER:
        return None

    parts = value.split("|")
    if len(parts) == 3:
        try:
            lat, lng = float(parts[1]), float(parts[2])
        except ValueError:
            return Location(address=value)
        return Location(
            address=parts[0],
            latitude=lat,
            longitude=lng,
            maps_url=f"https://www.google.com/maps?q={parts[1]},{parts[2]}",
        )
    return Location(address=value)


def _looks_like_html(text: str) -> bool:
    lowered = text.lower()
    return "<html" in lowered or "<!doctype" in lowered


def handle_response(response: requests.Response) -> Result[Any]:
    try:
        text = response.text or ""
    except Exception:
        logger.exception("Could not read response body")
        return Err(ApiErrorKind.TRANSPORT, "Network or parsing error")

    try:
        data = json.loads(text or "{}")
    except ValueError:
        logger.warning("Non-JSON response (status=%s)", response.status_code)
        if _looks_like_html(text):
            return Err(ApiErrorKind.ERROR_PAGE, "Server returned an error page (404/500)")
        return Err(ApiErrorKind.INVALID_JSON, "Invalid JSON from server")

    if not response.ok:
        msg = None
        if isinstance(data, dict):
            msg = data.get("message") or data.get("msg")
        return Err(ApiErrorKind.SERVER, msg or f"Server error ({response.status_code})")

    return Ok(data)


def _rejected(data: Any) -> Optional[Err]:
    if isinstance(data, dict) and data.get("success") is False:
        return Err(ApiErrorKind.REJECTED, str(data.get("msg") or data.get("message") or "Request rejected"))
    return None


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(
        self, method: str, path: str, *, json_body: Optional[dict] = None, route: Optional[str] = None
    ) -> Result[Any]:
        # route is the unfilled path template; it is what gets logged
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, route or path, e.__class__.__name__)
            return Err(ApiErrorKind.TRANSPORT, NETWORK_FAILED)
        return handle_response(response)

    def _call(
        self, method: str, path: str, *, json_body: Optional[dict] = None, route: Optional[str] = None
    ) -> Result[Any]:
        result = self._request(method, path, json_body=json_body, route=route)
        if isinstance(result, Ok):
            return _rejected(result.data) or result
        return result

    def login_by_pin(self, pin: str) -> Result[dict]:
        if not pin or len(pin) < PIN_LENGTH:
            return Err(ApiErrorKind.VALIDATION, f"PIN must be {PIN_LENGTH} digits")

        result = self._call("POST", "/login_pin", json_body={"pin": pin})
        if isinstance(result, Err):
            return result
        data = result.data
        if not isinstance(data, dict) or not data.get("user") or not data.get("role"):
            return Err(ApiErrorKind.UNEXPECTED_SHAPE, "Invalid user data")
        return result

    def punch(self, pin: str, punch_type: str, location: Optional[dict] = None) -> Result[dict]:
        if not pin:
            return Err(ApiErrorKind.VALIDATION, "PIN missing")
        if punch_type not in PUNCH_TYPES:
            return Err(ApiErrorKind.VALIDATION, "Invalid punch type")

        body: dict[str, Any] = {"pin": pin, "type": punch_type}
        if location:
            address = location.get("address") or ""
            body["location"] = {
                "latitude": location.get("latitude"),
                "longitude": location.get("longitude"),
                "address": address,
                "city": address.split(",")[0] if address else "Unknown",
                "timestamp": location.get("timestamp") or datetime.now().isoformat(),
            }
        return self._call("POST", "/mobile/punch", json_body=body)

    def get_history(self, emp_id: Any) -> Result[Any]:
        if not emp_id:
            return Err(ApiErrorKind.VALIDATION, "Employee ID required")
        return self._request("GET", f"/mobile/history/{emp_id}", route="/mobile/history/<emp_id>")

    def get_profile(self, emp_code: str) -> Result[dict]:
        if not emp_code:
            return Err(ApiErrorKind.VALIDATION, "Employee code required")
        return self._call("POST", "/profile", json_body={"emp_code": emp_code})

    def apply_leave(
        self,
        emp_id: Any,
        leave_kind: str,
        reason: str,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Result[dict]:
        if not emp_id:
            return Err(ApiErrorKind.VALIDATION, "Employee ID required")
        if leave_kind not in LEAVE_KINDS:
            return Err(ApiErrorKind.VALIDATION, "Invalid leave type")

        body: dict[str, Any] = {"emp_id": emp_id, "type": leave_kind, "reason": reason or "No reason provided"}
        if leave_kind == "custom":
            if not from_date or not to_date:
                return Err(ApiErrorKind.VALIDATION, "From date and to date required for custom leave")
            body["from_date"] = from_date
            body["to_date"] = to_date
        return self._call("POST", "/api/leave", json_body=body)

    def whoami(self, pin: str) -> Result[dict]:
        if not pin:
            return Err(ApiErrorKind.VALIDATION, "PIN required")
        return self._call("GET", f"/mobile/whoami/{pin}", route="/mobile/whoami/<pin>")

    def ping(self) -> Result[dict]:
        result = self._request("GET", "/ping_json")
        if isinstance(result, Err) and result.kind == ApiErrorKind.TRANSPORT:
            return Err(ApiErrorKind.TRANSPORT, "Server unreachable")
        return result
