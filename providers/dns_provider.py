"""
providers/dns_provider.py

Responsibility: Defines the DNSProvider Protocol and the DnsRecord value object.
Does NOT: make HTTP calls, read configuration, or implement any provider logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Value object — stable shape returned by all DNSProvider implementations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DnsRecord:
    """
    Represents a single DNS record as returned by a DNSProvider.

    Built fresh from every provider response and never cached between
    reconciliation cycles, so it always reflects provider-side truth.
    """

    # Provider-assigned unique identifier for the record
    id: str

    # Record name exactly as the provider reports it
    name: str

    # Current content; an IPv4 address string for "A" records
    content: str

    # Record type, e.g. "A"
    type: str

    # TTL in seconds; 1 means "automatic" on Cloudflare
    ttl: int

    # Whether the record is proxied through the provider's edge network
    proxied: bool

    # The zone ID to which this record belongs
    zone_id: str = ""


# ---------------------------------------------------------------------------
# Abstract interface — the engine depends on this, never on a concrete client
# ---------------------------------------------------------------------------


@runtime_checkable
class DNSProvider(Protocol):
    """
    Capability interface for reading and writing a named DNS record.

    CloudflareClient is the production implementation; tests substitute a
    stub returning scripted records or errors.
    """

    async def get_record(self, zone_id: str, domain_name: str) -> DnsRecord:
        """
        Returns the first record in the zone whose name equals domain_name.

        Raises:
            NotFoundError: If no record in the zone has that name.
            NetworkError: On transport failure or a non-2xx status.
            ApiError: If the provider envelope reports success=false.
            ParseError: If the response body is malformed.
        """
        ...

    async def update_record(
        self, zone_id: str, record: DnsRecord, new_content: str, ttl: int
    ) -> DnsRecord:
        """
        Replaces content and TTL of an existing record, preserving its
        type, name and proxy flag.

        Returns:
            The updated DnsRecord as confirmed by the provider.

        Raises:
            NetworkError, ApiError, ParseError: As for get_record.
        """
        ...
