"""
LegalPro HTTP Client
====================

Async client for the LegalPro REST API (httpx).

Usage:
    client = LegalProClient("http://localhost:8000")
    await client.login("lawyer@example.com", "password123")
    cases = await client.list_records("cases")
    await client.close()
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

# Collection name -> path under /api
RESOURCE_PATHS = {
    "cases": "/api/cases",
    "clients": "/api/clients",
    "hearings": "/api/hearings",
    "alerts": "/api/alerts",
    "time_entries": "/api/time-entries",
    "invoices": "/api/invoices",
}


class ApiError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class StaleRecordError(ApiError):
    """Update rejected because the record changed since it was loaded (409)"""


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        message = response.json().get("error") or response.reason_phrase
    except (ValueError, AttributeError):
        message = response.text or response.reason_phrase

    return ApiError(response.status_code, message)


class LegalProClient:
    """
    Thin wrapper over the REST endpoints.

    The session token returned by login is sent as a Bearer header on every
    later request.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.timeout = timeout
        self.token: Optional[str] = None
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=self.transport,
                timeout=self.timeout,
            )
        return self._http_client

    async def close(self):
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "LegalProClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        client = await self._get_client()
        request_headers = dict(headers or {})
        if self.token:
            request_headers["Authorization"] = f"Bearer {self.token}"

        response = await client.request(method, path, json=json, headers=request_headers)
        if response.is_error:
            error = _error_from_response(response)
            logger.warning(f"{method} {path} failed: {error}")
            raise error
        if not response.content:
            return None
        return response.json()

    # =========================================================================
    # Session
    # =========================================================================

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    async def logout(self) -> None:
        await self.request("POST", "/api/auth/logout")
        self.token = None

    # =========================================================================
    # Records
    # =========================================================================

    async def list_records(self, collection: str) -> List[Dict[str, Any]]:
        return await self.request("GET", RESOURCE_PATHS[collection])

    async def create(self, collection: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", RESOURCE_PATHS[collection], json=payload)

    async def update(
        self,
        collection: str,
        record_id: str,
        changes: Dict[str, Any],
        version: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Partial update. With a version, a stale record raises StaleRecordError."""
        headers = {"If-Match": str(version)} if version is not None else None
        try:
            return await self.request(
                "PUT", f"{RESOURCE_PATHS[collection]}/{record_id}", json=changes, headers=headers
            )
        except ApiError as e:
            if e.status_code == 409:
                raise StaleRecordError(e.status_code, e.message) from e
            raise

    async def delete(self, collection: str, record_id: str) -> None:
        await self.request("DELETE", f"{RESOURCE_PATHS[collection]}/{record_id}")

    async def mark_alert_read(self, alert_id: str) -> Dict[str, Any]:
        return await self.request("PATCH", f"/api/alerts/{alert_id}/read")

    async def mark_all_alerts_read(self) -> int:
        data = await self.request("POST", "/api/alerts/read-all")
        return data["updated"]

    async def send_invoice(
        self,
        invoice_id: str,
        to: Optional[str] = None,
        subject: Optional[str] = None,
        message: Optional[str] = None,
    ) -> str:
        payload = {k: v for k, v in {"to": to, "subject": subject, "message": message}.items() if v}
        data = await self.request("POST", f"/api/invoices/{invoice_id}/send", json=payload)
        return data["to"]
