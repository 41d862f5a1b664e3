"""Error types shared by the conversation client and the script interpreter."""

from __future__ import annotations


class AgencyError(Exception):
    """Base exception for agency failures."""


class TransportError(AgencyError):
    """Connection failure or non-success HTTP status from the completion endpoint."""


class ResourceUnavailable(AgencyError):
    """A script source could not be found or read."""


class ConfigError(AgencyError):
    """Configuration file exists but cannot be used."""
