"""Destination contract address resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from settlement_performer.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

AUCTION_SERVICE_ADDRESS = "AUCTION_SERVICE_ADDRESS"
SETTLEMENT_VAULT_ADDRESS = "SETTLEMENT_VAULT_ADDRESS"

DESTINATION_KEYS: tuple[str, ...] = (AUCTION_SERVICE_ADDRESS, SETTLEMENT_VAULT_ADDRESS)


@dataclass(frozen=True)
class DestinationConfig:
    """Process-wide default destination addresses, keyed by configuration name.

    Built once at startup and shared read-only by every task.
    """

    defaults: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        cleaned = {key: value for key, value in self.defaults.items() if value}
        object.__setattr__(self, "defaults", MappingProxyType(cleaned))

    def get(self, config_key: str) -> str:
        """Return the configured default, or an empty string when unset."""
        return self.defaults.get(config_key, "")

    @classmethod
    def from_sources(
        cls,
        file_defaults: Mapping[str, str | None],
        environ: Mapping[str, str],
    ) -> DestinationConfig:
        """Merge config-file defaults with environment variables of the same name.

        A non-empty environment value wins over the file value.
        """
        merged: dict[str, str] = {}
        for key in DESTINATION_KEYS:
            value = environ.get(key) or file_defaults.get(key) or ""
            if value:
                merged[key] = value
        return cls(defaults=merged)


def resolve_address(
    override: str,
    config_key: str,
    destinations: DestinationConfig,
    *,
    field_name: str,
) -> str:
    """Pick the per-task override, else the configured default.

    Raises:
        ConfigurationError: If neither is set.
    """
    if override:
        return override
    configured = destinations.get(config_key)
    if configured:
        return configured
    raise ConfigurationError(config_key, field_name)
