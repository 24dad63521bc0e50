import logging
from typing import Any

import httpx

from gateway.exceptions.custom import GatewayError, HttpError, MalformedResponseError, NetworkError
from gateway.schemas.envelope import ApiError, Envelope

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for field in ("message", "error"):
            if isinstance(body.get(field), str) and body[field].strip():
                return body[field]
    return f"HTTP {resp.status_code} Error"


def _retryable(error: ApiError | None) -> bool:
    if error is None:
        return False
    return error.kind == "network" or (error.kind == "http" and error.status >= 500)


class TransportClient:
    """Uniform HTTP access to one upstream.

    Every call returns an Envelope; network failures, non-2xx statuses and
    non-JSON bodies become failed envelopes instead of exceptions. A GET is
    retried once on network failure or 5xx, a POST never is.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        service: str,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._client = client
        self.service = service
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }
        self._timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _fail(self, error: GatewayError) -> Envelope[Any]:
        return Envelope.fail(error.to_api_error())

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Envelope[Any]:
        envelope = await self._request("GET", path, params=params)
        if _retryable(envelope.error):
            logger.warning("%s GET %s failed (%s), retrying once", self.service, path, envelope.status)
            envelope = await self._request("GET", path, params=params)
        return envelope

    async def post(self, path: str, json: Any = None) -> Envelope[Any]:
        return await self._request("POST", path, json=json)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Envelope[Any]:
        url = self._url(path)
        logger.info("%s -> %s %s params=%s", self.service, method, url, params or {})
        try:
            resp = await self._client.request(
                method, url, params=params, json=json, headers=self._headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s %s network error: %s", self.service, method, url, exc)
            return self._fail(NetworkError(f"Network error: {exc}", service=self.service))

        logger.info("%s <- %s %s %s", self.service, resp.status_code, method, url)

        if not resp.is_success:
            message = _error_message(resp)
            logger.error("%s %s %s failed: %s", self.service, method, url, message)
            return self._fail(HttpError(message, status_code=resp.status_code, service=self.service))

        if not resp.content:
            return Envelope.ok(None, status=resp.status_code)
        try:
            body = resp.json()
        except ValueError:
            logger.error("%s %s %s returned a non-JSON body", self.service, method, url)
            return self._fail(MalformedResponseError("Response body is not valid JSON", service=self.service))
        return Envelope.ok(body, status=resp.status_code)
