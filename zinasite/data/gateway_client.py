"""
HTTP client for the local gateway.

Request and response bodies use the public camelCase shape. Each call is
attempted once; non-2xx answers become typed DataAccessErrors carrying the
gateway's message.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic_core import to_jsonable_python

from zinasite.data.errors import (
    BackendFailure,
    DataAccessError,
    NotAuthenticated,
    NotFound,
    ValidationFailed,
)
from zinasite.logging_config import get_logger, get_request_id

logger = get_logger(__name__)

API_PREFIX = "/api"


def _error_for_status(status_code: int, message: str, resource: str) -> DataAccessError:
    if status_code in (400, 422):
        return ValidationFailed(message, resource=resource)
    if status_code == 404:
        return NotFound(message, resource=resource)
    if status_code in (401, 403):
        return NotAuthenticated(message, resource=resource)
    return BackendFailure(message, resource=resource)


def _message_from(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "error"):
            if isinstance(body.get(key), str):
                return body[key]
    return f"{response.status_code} {response.text}".strip()


class GatewayClient:
    """Thin async wrapper over the gateway's REST endpoints."""

    def __init__(
        self,
        base_url: str = "",
        *,
        http: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url
        self._http = http
        self._owns_http = http is None
        self.timeout = timeout

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._http

    async def list(self, resource: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        response = await self._request("GET", f"{API_PREFIX}/{resource}", resource, params=params)
        return response.json()

    async def list_admin(self, resource: str) -> List[Dict[str, Any]]:
        response = await self._request("GET", f"{API_PREFIX}/admin/{resource}", resource)
        return response.json()

    async def create(self, resource: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST", f"{API_PREFIX}/{resource}", resource, json=to_jsonable_python(payload)
        )
        return response.json()

    async def update(self, resource: str, record_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "PUT", f"{API_PREFIX}/{resource}/{record_id}", resource, json=to_jsonable_python(payload)
        )
        return response.json()

    async def delete(self, resource: str, record_id: str) -> None:
        await self._request("DELETE", f"{API_PREFIX}/{resource}/{record_id}", resource)

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def _request(self, method: str, url: str, resource: str, **kwargs: Any) -> httpx.Response:
        request_id = get_request_id()
        if request_id:
            kwargs["headers"] = {"X-Request-ID": request_id, **kwargs.get("headers", {})}
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Gateway unreachable: %s %s: %s", method, url, e,
                extra={"resource": resource},
            )
            raise BackendFailure(str(e) or type(e).__name__, resource=resource) from e

        if response.is_success:
            return response

        error = _error_for_status(response.status_code, _message_from(response), resource)
        log = logger.warning if isinstance(error, (ValidationFailed, NotFound)) else logger.error
        log(
            "Gateway rejected %s %s: %s", method, url, error.message,
            extra={"resource": resource, "status_code": response.status_code},
        )
        raise error
