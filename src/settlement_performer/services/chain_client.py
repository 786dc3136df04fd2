"""Read-only Ethereum client for L1/L2 execution nodes."""

from __future__ import annotations

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception


class ChainRpcError(RuntimeError):
    """The node was unreachable or answered with an error or malformed response."""


class ChainRpcClient:
    """
    Async web3 client bound to one RPC endpoint.

    The performer never submits transactions; it uses the node to confirm
    which chain it is attached to.
    """

    def __init__(self, rpc_url: str, timeout_seconds: int) -> None:
        self._rpc_url = rpc_url
        provider = AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout_seconds)},
        )
        self._w3 = AsyncWeb3(provider)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def chain_id(self) -> int:
        """
        Return the node's chain id (``eth_chainId``).

        Raises:
            ChainRpcError: On transport failure, timeout or an RPC error.
        """
        try:
            return int(await self._w3.eth.chain_id)
        except (Web3Exception, aiohttp.ClientError, TimeoutError, ValueError) as exc:
            msg = f"eth_chainId: {exc}"
            raise ChainRpcError(msg) from exc

    async def close(self) -> None:
        """Close the provider's cached HTTP sessions."""
        await self._w3.provider.disconnect()
