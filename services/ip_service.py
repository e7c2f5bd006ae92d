"""
services/ip_service.py

Responsibility: Resolves the current public IPv4 address of the host machine.
Does NOT: parse DNS records, interact with Cloudflare, or read config files.
"""

from __future__ import annotations

import ipaddress
import logging

import httpx

from exceptions import NetworkError, ParseError

logger = logging.getLogger(__name__)

# NOTE: api.ipify.org only answers over IPv4, so the echoed address is IPv4.
DEFAULT_IP_SERVICE_URL = "https://api.ipify.org?format=json"


class IpService:
    """
    Resolves the host machine's current public IPv4 address.

    Makes exactly one request per call; retrying is left to the next
    scheduled cycle. Uses an injected httpx.AsyncClient so the service is
    fully testable without real network calls (use respx.mock in tests).

    Collaborators:
        - httpx.AsyncClient: injected; must be kept alive externally
    """

    def __init__(self, http_client: httpx.AsyncClient, url: str = DEFAULT_IP_SERVICE_URL) -> None:
        """
        Initialises the service with a shared HTTP client.

        Args:
            http_client: A long-lived httpx.AsyncClient instance created
                         during application startup.
            url: Address-echo endpoint answering with {"ip": "..."}.
        """
        self._client = http_client
        self._url = url

    async def resolve(self) -> ipaddress.IPv4Address:
        """
        Returns the current public IPv4 address of the host machine.

        Returns:
            The public address as an IPv4Address.

        Raises:
            NetworkError: If the echo service is unreachable or returns a
                          non-2xx response.
            ParseError: If the body is not JSON, lacks "ip", or the value is
                        not an IPv4 address.
        """
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"IP provider returned status {exc.response.status_code}."
            ) from exc
        except httpx.RequestError as exc:
            raise NetworkError(
                f"Could not reach IP provider ({self._url}): {exc}"
            ) from exc

        try:
            raw_ip = response.json()["ip"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ParseError(
                f"IP provider returned an unexpected body: {response.text!r}"
            ) from exc

        try:
            ip = ipaddress.IPv4Address(str(raw_ip).strip())
        except ipaddress.AddressValueError as exc:
            raise ParseError(f"Failed to parse IP address {raw_ip!r}: {exc}") from exc

        logger.debug("Current public IP: %s", ip)
        return ip
