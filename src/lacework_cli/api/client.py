"""API client for the Lacework platform."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from lacework_cli.models.profile import Profile
from lacework_cli.utils.error_utils import ApiError, handle_api_error
from lacework_cli.utils.formatting import format_time

logger = logging.getLogger(__name__)

API_VERSION = "v1"
TOKEN_EXPIRY_SECONDS = 3600
REQUEST_TIMEOUT = 60


class ApiClient:
    """Simple client for interacting with the Lacework API."""

    def __init__(self, account: str, api_key: str, api_secret: str,
                 timeout: int = REQUEST_TIMEOUT):
        """Initialize API client.

        Args:
            account: Account subdomain, i.e. <account>.lacework.net
            api_key: API access key id
            api_secret: API secret access key
            timeout: Timeout in seconds for every request
        """
        self.account = account
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.base_url = f"https://{account}.lacework.net"
        self._token: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ApiClient":
        return cls(profile.account, profile.api_key, profile.api_secret)

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/api/{API_VERSION}/{endpoint.lstrip('/')}"

    def generate_token(self) -> str:
        """Exchange the API key and secret for a bearer token.

        Returns:
            str: The access token

        Raises:
            ApiError: If the token cannot be generated
        """
        logger.debug("generating access token for account %s", self.account)
        try:
            response = requests.post(
                self._url("access/tokens"),
                headers={
                    "X-LW-UAKS": self.api_secret,
                    "Content-Type": "application/json",
                },
                json={"keyId": self.api_key, "expiryTime": TOKEN_EXPIRY_SECONDS},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as err:
            raise handle_api_error(err) from err

        data = payload.get("data") or []
        if not data or not data[0].get("token"):
            raise ApiError("unable to generate access token: empty response", response=payload)

        self._token = data[0]["token"]
        return self._token

    def _get_headers(self) -> Dict[str, str]:
        """Create request headers with auth token.

        Returns:
            Dict[str, str]: Headers for API requests
        """
        if self._token is None:
            self.generate_token()
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        headers = self._get_headers()
        url = self._url(endpoint)
        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))
        try:
            response = requests.request(method, url, headers=headers,
                                        timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as err:
            raise handle_api_error(err) from err

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """Make a GET request to the API.

        Args:
            endpoint: API endpoint relative to /api/v1
            params: Optional query parameters

        Returns:
            Response data

        Raises:
            LaceworkError: If the request fails
        """
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any) -> Any:
        """Make a POST request to the API.

        Args:
            endpoint: API endpoint relative to /api/v1
            data: Request payload

        Returns:
            Response data

        Raises:
            LaceworkError: If the request fails
        """
        return self._request("POST", endpoint, json=data)

    # Events

    def list_events(self, start: datetime, end: datetime) -> List[Dict]:
        response = self.get(
            "external/events/GetEventsForDateRange",
            params={"START_TIME": format_time(start), "END_TIME": format_time(end)},
        )
        return response.get("data") or []

    def event_details(self, event_id: str) -> List[Dict]:
        response = self.get("external/events/GetEventDetails", params={"EVENT_ID": event_id})
        return response.get("data") or []

    # Host vulnerabilities

    def list_host_cves(self) -> List[Dict]:
        return self.get("external/vulnerabilities/host").get("data") or []

    def list_hosts_with_cve(self, cve_id: str) -> List[Dict]:
        return self.get(f"external/vulnerabilities/host/cveId/{cve_id}").get("data") or []

    def host_assessment(self, machine_id: str) -> Dict:
        return self.get(f"external/vulnerabilities/host/machineId/{machine_id}").get("data") or {}

    def scan_pkg_manifest(self, manifest: Any) -> Any:
        return self.post("external/vulnerabilities/scan", manifest)
