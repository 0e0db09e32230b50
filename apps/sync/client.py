import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """
    Any failed round-trip to the central API
    Network errors, timeouts, non-2xx responses and unsuccessful envelopes
    all surface as this one type
    """

    def __init__(self, message: str, status_code: int = None):  # type: ignore
        self.status_code = status_code
        super().__init__(message)


class ApiClient:
    """
    Thin client for the central inspection API

    Responses use the envelope {"success": bool, "data": ..., "error": ...};
    every call returns the unwrapped data or raises RemoteError
    """

    def __init__(self, base_url: str = None, token: str = None, timeout: float = None, session: requests.Session = None):  # type: ignore
        self.base_url = (base_url or settings.SYNC_API_URL).rstrip("/")
        self.token = settings.SYNC_API_TOKEN if token is None else token
        self.timeout = timeout or settings.SYNC_REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _headers(self, with_body: bool) -> dict:
        headers = {"Accept": "application/json"}
        if with_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, endpoint: str, body: dict = None):  # type: ignore
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers=self._headers(with_body=body is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {endpoint} failed: {str(e)}")
            raise RemoteError(f"{method} {endpoint} failed: {str(e)}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = None

        if not response.ok:
            detail = data.get("error") if isinstance(data, dict) else None
            raise RemoteError(detail or f"{method} {endpoint} returned HTTP {response.status_code}", status_code=response.status_code)

        if not isinstance(data, dict):
            raise RemoteError(f"{method} {endpoint} returned an invalid body", status_code=response.status_code)

        if data.get("success") is False:
            raise RemoteError(data.get("error") or "An error occurred", status_code=response.status_code)

        return data.get("data")

    def is_reachable(self) -> bool:
        """True when the central server answers at all, whatever the status code"""
        try:
            self.session.request("HEAD", self.base_url, headers=self._headers(with_body=False), timeout=self.timeout)
        except requests.RequestException as e:
            logger.info(f"Central API unreachable: {str(e)}")
            return False
        return True

    def get(self, endpoint: str):
        return self._request("GET", endpoint)

    def post(self, endpoint: str, body: dict = None):  # type: ignore
        return self._request("POST", endpoint, body or {})

    def patch(self, endpoint: str, body: dict = None):  # type: ignore
        return self._request("PATCH", endpoint, body or {})

    def delete(self, endpoint: str):
        return self._request("DELETE", endpoint)
