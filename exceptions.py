"""
exceptions.py

Responsibility: Defines all custom exception classes used across the application.
Does NOT: contain business logic, logging, or HTTP handling.
"""

from __future__ import annotations

from typing import Any


class DdnsError(Exception):
    """
    Base class for every error raised by the DDNS updater.

    The reconciliation engine catches this type at the domain boundary so a
    single failing record never aborts the whole process.
    """


class ConfigError(DdnsError):
    """
    Raised by load_config() when the configuration file is missing, is not
    valid JSON, or fails validation. Fatal: the process exits non-zero.
    """


class NetworkError(DdnsError):
    """
    Raised when an upstream service (IP echo service or DNS provider) cannot
    be reached or answers with a non-2xx HTTP status.

    Transient by nature; the next scheduled cycle is the retry.
    """


class ApiError(DdnsError):
    """
    Raised when the DNS provider answers with success=false in its response
    envelope, even if the HTTP status itself was 2xx.

    Attributes:
        errors: The provider's "errors" list, kept verbatim for logging.
    """

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(DdnsError):
    """
    Raised by a DNSProvider when no record in the zone matches the requested
    name. Usually a configuration mismatch.
    """


class ParseError(DdnsError):
    """
    Raised when a response body is malformed: not JSON, missing fields, or an
    address that does not parse as IPv4.
    """
