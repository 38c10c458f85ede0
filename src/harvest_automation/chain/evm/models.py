"""Transaction handles returned by mutating contract calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from web3.exceptions import TimeExhausted

from harvest_automation.errors.automation_errors import TransactionFailedError

if TYPE_CHECKING:
    from web3 import AsyncWeb3

# Receipt status for a successful transaction
_STATUS_SUCCESS = 1


@dataclass
class PendingTransaction:
    """A submitted transaction that has not been confirmed yet.

    Attributes:
        w3: Web3 handle used to poll for the receipt.
        tx_hash: Transaction hash (``0x``-prefixed hex).
        timeout: Seconds to wait for the receipt before giving up.
        poll_latency: Seconds between receipt polls.
    """

    w3: AsyncWeb3 = field(repr=False)
    tx_hash: str
    timeout: float = 120.0
    poll_latency: float = 0.5

    async def wait(self) -> Any:
        """Wait for the transaction to be mined.

        Returns:
            The transaction receipt.

        Raises:
            TransactionFailedError: If the receipt never arrives or the
                transaction reverted.
        """
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self.timeout,
                poll_latency=self.poll_latency,
            )
        except TimeExhausted as exc:
            msg = f"transaction {self.tx_hash} not confirmed within {self.timeout:g}s"
            raise TransactionFailedError(msg, tx_hash=self.tx_hash) from exc

        if receipt["status"] != _STATUS_SUCCESS:
            msg = f"transaction {self.tx_hash} reverted"
            raise TransactionFailedError(msg, tx_hash=self.tx_hash)
        return receipt
