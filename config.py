"""
config.py

Responsibility: Defines the validated configuration models and loads them once
from a JSON file at startup.
Does NOT: make HTTP calls, compare IPs, or schedule anything.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import tldextract
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from exceptions import ConfigError
from providers.cloudflare_client import DEFAULT_API_BASE
from services.ip_service import DEFAULT_IP_SERVICE_URL

logger = logging.getLogger(__name__)

CONFIG_FILE = "config/config.json"

# NOTE: An empty suffix_list_urls makes tldextract use its bundled public
# suffix snapshot instead of fetching one over the network at startup.
_extract = tldextract.TLDExtract(suffix_list_urls=())


class DomainConfig(BaseModel):
    """One managed hostname and the provider-side record it maps to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Managed hostname, e.g. "home.example.com"; drives zone lookup and logs
    name: str = Field(min_length=1)

    # Record name matched against the provider's listing
    record: str = Field(min_length=1)

    # Optional explicit zone, bypassing the base-domain lookup
    zone_id: str | None = None


class AppConfig(BaseModel):
    """
    Static application configuration, populated once at startup.

    Zones are given either as a mapping of base domain to zone ID
    ({"example.com": "abc123"}) or as a single "zone_id" that applies to every
    domain. Both forms may be combined; the mapping wins.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_token: str = Field(min_length=1)
    zones: dict[str, str] = Field(default_factory=dict)
    zone_id: str | None = None
    domains: list[DomainConfig] = Field(min_length=1)

    # Minutes between the end of one cycle and the start of the next
    interval: int = Field(default=5, ge=1)

    # Seconds; 1 means "automatic" on Cloudflare
    ttl: int = 1

    # False stops a cycle at the first failed domain
    continue_on_error: bool = True

    ip_service_url: str = DEFAULT_IP_SERVICE_URL
    api_base_url: str = DEFAULT_API_BASE
    request_timeout: float = Field(default=10.0, gt=0)

    @field_validator("ttl")
    @classmethod
    def _check_ttl(cls, value: int) -> int:
        if value != 1 and not 30 <= value <= 86400:
            raise ValueError("ttl must be 1 (automatic) or between 30 and 86400 seconds")
        return value

    @model_validator(mode="after")
    def _check_zones(self) -> AppConfig:
        for domain in self.domains:
            if self.zone_for(domain) is None:
                raise ValueError(f"no zone configured for domain {domain.name!r}")
        return self

    @property
    def interval_seconds(self) -> int:
        return self.interval * 60

    def zone_for(self, domain: DomainConfig) -> str | None:
        """
        Returns the zone ID managing the given domain.

        Lookup order: the domain's own zone_id, the zones mapping keyed by the
        domain's registrable base domain, then the global zone_id. When only
        one zone is mapped and nothing else matches, that zone is used.

        Args:
            domain: A configured domain entry.

        Returns:
            The zone ID, or None if it cannot be determined.
        """
        if domain.zone_id:
            return domain.zone_id

        ext = _extract(domain.name)
        base_domain = f"{ext.domain}.{ext.suffix}" if ext.suffix else ext.domain
        zone_id = self.zones.get(base_domain)
        if zone_id:
            return zone_id

        if self.zone_id:
            return self.zone_id
        if len(self.zones) == 1:
            return next(iter(self.zones.values()))

        logger.warning("No zone ID found for base domain: %s", base_domain)
        return None


def load_config(path: str | None = None) -> AppConfig:
    """
    Reads and validates the JSON configuration file.

    The path defaults to $DDNS_CONFIG, then config/config.json. When the file
    leaves api_token empty, $CLOUDFLARE_API_TOKEN is used instead.

    Args:
        path: Optional explicit path to the configuration file.

    Returns:
        The validated, frozen AppConfig.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or fails
                     validation.
    """
    config_path = path or os.environ.get("DDNS_CONFIG") or CONFIG_FILE

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data: Any = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse {config_path} (corrupt?): {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read config file {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")

    if not data.get("api_token") and os.environ.get("CLOUDFLARE_API_TOKEN"):
        data["api_token"] = os.environ["CLOUDFLARE_API_TOKEN"]

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    logger.info(
        "Loaded config from %s: %d domain(s), interval %d min, ttl %d.",
        config_path,
        len(config.domains),
        config.interval,
        config.ttl,
    )
    return config
