"""
providers/cloudflare_client.py

Responsibility: Implements the DNSProvider protocol using the Cloudflare REST API.
All Cloudflare HTTP calls are concentrated here — no other file may call the
Cloudflare API directly.
Does NOT: read configuration, compare IPs, or contain scheduling logic.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from exceptions import ApiError, NetworkError, NotFoundError, ParseError
from providers.dns_provider import DnsRecord

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.cloudflare.com/client/v4"

# Cloudflare caps dns_records listing at this page size
_PER_PAGE = 100


class CloudflareClient:
    """
    Implements DNSProvider for the Cloudflare DNS REST API (v4).

    All outbound requests go through the injected httpx.AsyncClient, making
    this class fully testable without real network calls (use respx.mock).
    No state is retained between calls.

    Collaborators:
        - httpx.AsyncClient: injected HTTP client; must be kept alive externally
        - DNSProvider: this class satisfies the protocol contract
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_token: str,
        base_url: str = DEFAULT_API_BASE,
    ) -> None:
        """
        Initialises the client with an HTTP client and a Cloudflare API token.

        Args:
            http_client: A long-lived httpx.AsyncClient instance.
            api_token: A Cloudflare API token with DNS edit permissions.
            base_url: API root; overridden in tests to point at a stub.
        """
        self._client = http_client
        self._base = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }

    # ---------------------------------------------------------------------------
    # DNSProvider implementation
    # ---------------------------------------------------------------------------

    async def get_record(self, zone_id: str, domain_name: str) -> DnsRecord:
        """
        Returns the first record in the zone whose name equals domain_name.

        Walks every page of the zone's record listing until a match is found.

        Args:
            zone_id: The Cloudflare zone ID.
            domain_name: The record name to match exactly.

        Returns:
            The matching DnsRecord.

        Raises:
            NotFoundError: If no record in the zone has that name.
            NetworkError: On transport failure or a non-2xx status.
            ApiError: If the envelope reports success=false.
            ParseError: If the body or a record is malformed.
        """
        url = f"{self._base}/zones/{zone_id}/dns_records"
        page = 1

        while True:
            params = {"page": page, "per_page": _PER_PAGE}
            logger.debug("GET %s params=%s", url, params)
            body = await self._request("GET", url, params=params)

            result = body.get("result")
            if not isinstance(result, list):
                raise ParseError(f"Expected a list of records from GET {url}, got: {result!r}")

            for raw in result:
                if isinstance(raw, dict) and raw.get("name") == domain_name:
                    return self._parse_record(raw, zone_id)

            result_info = body.get("result_info") or {}
            if not isinstance(result_info, dict):
                raise ParseError(f"Malformed result_info from GET {url}: {result_info!r}")
            total_pages = result_info.get("total_pages") or 1
            if not isinstance(total_pages, int) or isinstance(total_pages, bool):
                raise ParseError(f"Malformed total_pages from GET {url}: {total_pages!r}")
            if page >= total_pages:
                break
            page += 1

        raise NotFoundError(f"DNS record not found for {domain_name} in zone {zone_id}")

    async def update_record(
        self, zone_id: str, record: DnsRecord, new_content: str, ttl: int
    ) -> DnsRecord:
        """
        Issues a PATCH replacing content and TTL of an existing record.

        Type, name and proxy flag are copied from the current record so the
        update never changes them.

        Args:
            zone_id: The Cloudflare zone ID.
            record: The DnsRecord as last read from the provider.
            new_content: The new IPv4 address string.
            ttl: TTL in seconds to set (1 = automatic).

        Returns:
            The updated DnsRecord as confirmed by Cloudflare.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
            ApiError: If the envelope reports success=false, even on HTTP 200.
            ParseError: If the body is malformed.
        """
        url = f"{self._base}/zones/{zone_id}/dns_records/{record.id}"
        payload: dict[str, Any] = {
            "type": record.type,
            "name": record.name,
            "content": new_content,
            "ttl": ttl,
            "proxied": record.proxied,
        }

        logger.debug("PATCH %s payload=%s", url, payload)
        body = await self._request("PATCH", url, json=payload)

        return self._parse_record(body.get("result"), zone_id)

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Sends an authenticated HTTP request and unwraps the Cloudflare envelope.

        Args:
            method: HTTP verb ("GET", "PATCH").
            url: Full URL of the Cloudflare API endpoint.
            params: Optional query-string parameters.
            json: Optional JSON request body.

        Returns:
            The parsed JSON envelope as a dict, guaranteed success=true.

        Raises:
            NetworkError: If the HTTP call fails or returns a non-2xx status.
            ParseError: If the body is not a JSON object.
            ApiError: If the body reports success=false.
        """
        try:
            response = await self._client.request(
                method, url, headers=self._headers, params=params, json=json
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Cloudflare API error {exc.response.status_code} for {method} {url}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.RequestError as exc:
            raise NetworkError(
                f"Network error calling Cloudflare API ({method} {url}): {exc}"
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ParseError(
                f"Cloudflare API returned a non-JSON body for {method} {url}: {response.text!r}"
            ) from exc

        if not isinstance(body, dict):
            raise ParseError(f"Cloudflare API returned an unexpected body for {method} {url}: {body!r}")

        # NOTE: Cloudflare wraps all responses in {"success": bool, "result": ...};
        # a 200 with success=false is still a failure.
        if body.get("success") is not True:
            errors = body.get("errors") or []
            raise ApiError(
                f"Cloudflare API returned success=false for {method} {url}. Errors: {errors}",
                errors=errors,
            )

        return body

    @staticmethod
    def _parse_record(raw: Any, zone_id: str) -> DnsRecord:
        """
        Converts a raw Cloudflare API record dict into a typed DnsRecord.

        Args:
            raw: A single record object from the Cloudflare API response.
            zone_id: Zone used for the request; fallback when the record omits it.

        Returns:
            A DnsRecord populated from the raw dict.

        Raises:
            ParseError: If raw is not a dict or lacks id, name or content.
        """
        if not isinstance(raw, dict):
            raise ParseError(f"Expected a DNS record object, got: {raw!r}")
        try:
            return DnsRecord(
                id=str(raw["id"]),
                name=str(raw["name"]),
                content=str(raw["content"]),
                type=raw.get("type", "A"),
                ttl=int(raw.get("ttl", 1)),
                proxied=bool(raw.get("proxied", False)),
                zone_id=raw.get("zone_id") or zone_id,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"Malformed DNS record {raw!r}: {exc}") from exc
