"""Signer — the automation admin account bound to one chain's RPC.

Builds, signs, and submits transactions locally with ``eth_account`` and
``web3``. Nonces are allocated under a lock so that concurrent sends from
the same account never reuse a nonce.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from harvest_automation.chain.evm.models import PendingTransaction
from harvest_automation.errors.automation_errors import ChainNotConfiguredError, SignerError

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount
    from web3.contract.async_contract import AsyncContractFunction
    from web3.types import TxParams

    from harvest_automation.config.settings import ChainConfig, RPCConfig, SignerConfig

logger = logging.getLogger(__name__)


class Signer:
    """Admin identity capable of sending transactions and holding a nonce.

    Usage::

        signer = Signer.from_config(config.signer, chain, config.rpc)
        tx = await signer.send(contract.functions.cancelTask(task_id))
        await tx.wait()
    """

    def __init__(
        self,
        account: LocalAccount,
        w3: AsyncWeb3,
        *,
        confirmation_timeout: float = 120.0,
        poll_latency: float = 0.5,
    ) -> None:
        self._account = account
        self._w3 = w3
        self._confirmation_timeout = confirmation_timeout
        self._poll_latency = poll_latency
        self._nonce: int | None = None
        self._nonce_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        signer_config: SignerConfig,
        chain: ChainConfig,
        rpc_config: RPCConfig,
    ) -> Signer:
        """Build a signer for *chain* from the configured private key.

        Raises:
            SignerError: If the key is missing or malformed.
            ChainNotConfiguredError: If the chain has no RPC URL.
        """
        if not signer_config.private_key:
            msg = "no signer private key configured (HARVEST_SIGNER__PRIVATE_KEY)"
            raise SignerError(msg)
        if not chain.rpc_url:
            msg = f"chain {chain.id} has no rpc_url configured"
            raise ChainNotConfiguredError(msg)

        try:
            account = Account.from_key(signer_config.private_key)
        except Exception as exc:
            msg = "signer private key is not a valid secp256k1 key"
            raise SignerError(msg) from exc

        w3 = AsyncWeb3(AsyncHTTPProvider(chain.rpc_url))
        return cls(
            account,
            w3,
            confirmation_timeout=rpc_config.confirmation_timeout,
            poll_latency=rpc_config.poll_latency,
        )

    @property
    def address(self) -> str:
        """Checksummed account address."""
        return self._account.address

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    async def gas_price(self) -> int:
        """Current network gas price in wei."""
        return await self._w3.eth.gas_price

    def sign_message(self, message: str) -> str:
        """Sign *message* as an EIP-191 personal message; returns hex signature."""
        signed = self._account.sign_message(encode_defunct(text=message))
        return Web3.to_hex(signed.signature)

    async def send(
        self,
        function: AsyncContractFunction,
        *,
        gas_price: int | None = None,
    ) -> PendingTransaction:
        """Build, sign, and submit a contract call.

        Args:
            function: Bound contract function (``contract.functions.x(...)``).
            gas_price: Legacy gas price hint; ``None`` lets web3 choose fees.

        Returns:
            PendingTransaction for the submitted call.
        """
        async with self._nonce_lock:
            if self._nonce is None:
                self._nonce = await self._w3.eth.get_transaction_count(self.address, "pending")

            params: TxParams = {"from": self.address, "nonce": self._nonce}
            if gas_price is not None:
                params["gasPrice"] = gas_price

            try:
                tx = await function.build_transaction(params)
                signed = self._account.sign_transaction(tx)
                tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
            except Exception:
                # Re-read the nonce from the node on the next send
                self._nonce = None
                raise
            self._nonce += 1

        tx_hex = Web3.to_hex(tx_hash)
        logger.debug("Submitted transaction %s from %s", tx_hex, self.address)
        return PendingTransaction(
            self._w3,
            tx_hex,
            timeout=self._confirmation_timeout,
            poll_latency=self._poll_latency,
        )
