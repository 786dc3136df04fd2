"""Named contract addresses known to this performer."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

TASK_AVS_REGISTRAR = "TaskAVSRegistrar"


class ContractNotFoundError(LookupError):
    """No address is configured under the requested contract name."""


class ContractStore:
    """
    Read-only registry of deployed contract addresses.

    Loaded once from configuration. Used for auxiliary lookups and logging
    after a task is handled; never consulted by the validation logic.
    """

    def __init__(self, addresses: Mapping[str, str]) -> None:
        self._addresses = MappingProxyType(
            {name: address for name, address in addresses.items() if address}
        )

    def get_contract_address(self, name: str) -> str:
        """Return the address registered under name.

        Raises:
            ContractNotFoundError: If the name is unknown.
        """
        try:
            return self._addresses[name]
        except KeyError:
            msg = f"contract {name!r} not found in contract store"
            raise ContractNotFoundError(msg) from None

    def get_task_avs_registrar(self) -> str:
        return self.get_contract_address(TASK_AVS_REGISTRAR)

    def list_contracts(self) -> list[str]:
        return sorted(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)
