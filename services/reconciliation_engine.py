"""
services/reconciliation_engine.py

Responsibility: Runs one reconciliation cycle — resolves the public IP once,
then compares each configured domain's record against it and updates the
record only when they differ.
Does NOT: make HTTP calls directly, load configuration, or sleep between cycles.
"""

from __future__ import annotations

import enum
import ipaddress
import logging
import time
from dataclasses import dataclass, field

from config import AppConfig, DomainConfig
from exceptions import DdnsError, NotFoundError
from providers.dns_provider import DNSProvider
from services.ip_service import IpService

logger = logging.getLogger(__name__)


class OutcomeStatus(str, enum.Enum):
    """What happened to one domain's record during a cycle."""

    UNCHANGED = "unchanged"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class DomainOutcome:
    """Result of reconciling a single domain within one cycle."""

    domain: str
    record: str
    status: OutcomeStatus
    previous_content: str | None = None
    new_content: str | None = None
    error: Exception | None = None


@dataclass
class CycleReport:
    """
    Per-domain outcomes of one cycle, in configuration order.

    error is set when the cycle could not start (IP resolution failed); in
    that case outcomes is empty. aborted is set when the stop-on-error policy
    cut the cycle short.
    """

    ip: ipaddress.IPv4Address | None = None
    outcomes: list[DomainOutcome] = field(default_factory=list)
    error: DdnsError | None = None
    aborted: bool = False
    duration: float = 0.0

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def updated(self) -> int:
        """Number of records patched this cycle."""
        return self._count(OutcomeStatus.UPDATED)

    @property
    def unchanged(self) -> int:
        """Number of records that already held the current IP."""
        return self._count(OutcomeStatus.UNCHANGED)

    @property
    def failed(self) -> int:
        """Number of domains whose lookup or update failed."""
        return self._count(OutcomeStatus.FAILED)

    @property
    def ok(self) -> bool:
        """True when the cycle ran to completion with no failures."""
        return self.error is None and not self.aborted and self.failed == 0

    def summary(self) -> str:
        """
        Builds the one-line cycle summary written to the log.

        Returns:
            A human-readable line with the IP and per-status counts, or the
            cycle-level error when IP resolution failed.
        """
        if self.error is not None:
            return f"Cycle failed before checking records: {self.error}"
        parts = [f"{len(self.outcomes)} record(s) checked"]
        if self.unchanged:
            parts.append(f"{self.unchanged} unchanged")
        if self.updated:
            parts.append(f"{self.updated} updated")
        if self.failed:
            parts.append(f"{self.failed} failed")
        if self.aborted:
            parts.append("remaining skipped (stop on error)")
        return f"IP {self.ip}: " + ", ".join(parts) + f" in {self.duration:.2f}s."


class ReconciliationEngine:
    """
    Drives one full reconciliation cycle across all configured domains.

    Domains are processed sequentially. A failure on one domain is recorded
    in the report and, unless config.continue_on_error is False, the
    remaining domains are still processed. Domain-level errors never escape
    reconcile().

    Collaborators:
        - DNSProvider: satisfied by CloudflareClient, or a stub in tests
        - IpService: resolves the current public IP
    """

    def __init__(self, dns_provider: DNSProvider, ip_service: IpService) -> None:
        self._provider = dns_provider
        self._ip_service = ip_service

        # Informational only; never used to skip provider reads
        self.last_ip: ipaddress.IPv4Address | None = None

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    async def reconcile(self, config: AppConfig) -> CycleReport:
        """
        Runs a single cycle for every domain in config.

        Args:
            config: The static application configuration.

        Returns:
            A CycleReport with one outcome per processed domain.
        """
        started = time.monotonic()
        report = CycleReport()

        try:
            ip = await self._ip_service.resolve()
        except DdnsError as exc:
            logger.error("IP resolution failed; skipping this cycle: %s", exc)
            report.error = exc
            report.duration = time.monotonic() - started
            return report

        report.ip = ip
        if self.last_ip is None:
            logger.info("Current public IP: %s", ip)
        elif ip != self.last_ip:
            logger.info("Public IP changed: %s -> %s", self.last_ip, ip)
        else:
            logger.debug("Public IP unchanged: %s", ip)
        self.last_ip = ip

        for domain in config.domains:
            outcome = await self._reconcile_domain(config, domain, str(ip))
            report.outcomes.append(outcome)

            if outcome.status is OutcomeStatus.FAILED and not config.continue_on_error:
                logger.warning("Stopping cycle after failure on %s (continue_on_error is off).", domain.name)
                report.aborted = True
                break

        report.duration = time.monotonic() - started
        return report

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    async def _reconcile_domain(self, config: AppConfig, domain: DomainConfig, target_ip: str) -> DomainOutcome:
        """
        Checks a single domain's record and updates it if the IP has changed.

        Args:
            config: The static application configuration.
            domain: The domain entry to reconcile.
            target_ip: The freshly resolved public IP in string form.

        Returns:
            The DomainOutcome; failures of any kind are captured, never raised.
        """
        outcome = DomainOutcome(domain=domain.name, record=domain.record, status=OutcomeStatus.FAILED)

        try:
            zone_id = config.zone_for(domain)
            if zone_id is None:
                raise NotFoundError(f"No zone configured for {domain.name}")

            record = await self._provider.get_record(zone_id, domain.record)
            outcome.previous_content = record.content

            if record.content == target_ip:
                logger.info("%s is already up to date (%s).", domain.name, target_ip)
                outcome.status = OutcomeStatus.UNCHANGED
                return outcome

            logger.info("IP change detected for %s: %s -> %s. Updating...", domain.name, record.content, target_ip)
            updated = await self._provider.update_record(zone_id, record, target_ip, config.ttl)
            logger.info("Updated %s -> %s (ttl %d).", updated.name, updated.content, updated.ttl)
            outcome.new_content = target_ip
            outcome.status = OutcomeStatus.UPDATED

        except DdnsError as exc:
            # NOTE: ApiError messages already embed the provider's error payload.
            logger.error("Failed to update %s (%s): %s", domain.name, type(exc).__name__, exc)
            outcome.error = exc
        except Exception as exc:
            logger.exception("Unexpected error while reconciling %s.", domain.name)
            outcome.error = exc

        return outcome
