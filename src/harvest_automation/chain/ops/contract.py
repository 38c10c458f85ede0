"""Ops contract client — task ids, resolver hashes, create and cancel.

Async wrapper over the automation network's Ops contract:
- getTaskIdsByUser(address) — ids of tasks created by an account
- getResolverHash(address,bytes) — hash of resolver target + call data
- getTaskId(address,address,bytes4,bool,address,bytes32) — deterministic id
- createTask(address,bytes4,address,bytes) — simulated or submitted
- cancelTask(bytes32) — submitted

Hex strings go in, ``0x``-prefixed hex strings come out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from eth_utils import to_bytes, to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from harvest_automation.chain.ops.abi import OPS_ABI
from harvest_automation.errors.automation_errors import OpsContractError

if TYPE_CHECKING:
    from web3.contract.async_contract import AsyncContractFunction
    from web3.types import TxParams

    from harvest_automation.chain.evm.models import PendingTransaction
    from harvest_automation.chain.evm.signer import Signer


class OpsContract:
    """Typed handle on a deployed Ops contract.

    Usage::

        ops = OpsContract(signer, chain.och_operations)
        ids = await ops.get_task_ids_by_user(signer.address)
    """

    def __init__(self, signer: Signer, address: str) -> None:
        """Bind the contract at *address* to *signer*'s web3 handle.

        Args:
            signer: Account used as ``from`` for calls and for submissions.
            address: Ops contract address (any case).
        """
        self._signer = signer
        self._address = to_checksum_address(address)
        self._contract = signer.w3.eth.contract(address=self._address, abi=OPS_ABI)

    @property
    def address(self) -> str:
        return self._address

    # ------------------------------------------------------------------
    # Read-only calls
    # ------------------------------------------------------------------

    async def get_task_ids_by_user(self, user: str) -> list[str]:
        """Return the ids of all tasks created by *user*, in contract order."""
        task_ids = await self._call("getTaskIdsByUser", to_checksum_address(user))
        return [Web3.to_hex(task_id) for task_id in task_ids]

    async def get_resolver_hash(self, resolver_address: str, resolver_data: str) -> str:
        """Hash a resolver target and its checker call data."""
        resolver_hash = await self._call(
            "getResolverHash",
            to_checksum_address(resolver_address),
            to_bytes(hexstr=resolver_data),
        )
        return Web3.to_hex(resolver_hash)

    async def get_task_id(
        self,
        task_creator: str,
        exec_address: str,
        selector: str,
        use_treasury_funds: bool,
        fee_token: str,
        resolver_hash: str,
    ) -> str:
        """Compute the deterministic id of a task without creating it."""
        task_id = await self._call(
            "getTaskId",
            to_checksum_address(task_creator),
            to_checksum_address(exec_address),
            to_bytes(hexstr=selector),
            use_treasury_funds,
            to_checksum_address(fee_token),
            to_bytes(hexstr=resolver_hash),
        )
        return Web3.to_hex(task_id)

    async def simulate_create_task(
        self,
        exec_address: str,
        exec_selector: str,
        resolver_address: str,
        resolver_data: str,
        *,
        gas_price: int | None = None,
    ) -> str:
        """Run ``createTask`` as a static call to learn the id it would return."""
        tx: TxParams = {"from": self._signer.address}
        if gas_price is not None:
            tx["gasPrice"] = gas_price
        task_id = await self._call(
            "createTask",
            *self._create_args(exec_address, exec_selector, resolver_address, resolver_data),
            tx=tx,
        )
        return Web3.to_hex(task_id)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def create_task(
        self,
        exec_address: str,
        exec_selector: str,
        resolver_address: str,
        resolver_data: str,
        *,
        gas_price: int | None = None,
    ) -> PendingTransaction:
        """Submit ``createTask``; the caller waits on the returned handle."""
        function = self._contract.functions.createTask(
            *self._create_args(exec_address, exec_selector, resolver_address, resolver_data)
        )
        return await self._send("createTask", function, gas_price)

    async def cancel_task(self, task_id: str, *, gas_price: int | None = None) -> PendingTransaction:
        """Submit ``cancelTask`` for *task_id*."""
        function = self._contract.functions.cancelTask(to_bytes(hexstr=task_id))
        return await self._send("cancelTask", function, gas_price)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _create_args(
        exec_address: str,
        exec_selector: str,
        resolver_address: str,
        resolver_data: str,
    ) -> tuple[str, bytes, str, bytes]:
        return (
            to_checksum_address(exec_address),
            to_bytes(hexstr=exec_selector),
            to_checksum_address(resolver_address),
            to_bytes(hexstr=resolver_data),
        )

    async def _call(self, method: str, *args: Any, tx: TxParams | None = None) -> Any:
        """Execute a read-only call, wrapping web3 failures."""
        function = getattr(self._contract.functions, method)
        try:
            return await function(*args).call(tx)
        except ContractLogicError as exc:
            msg = f"Ops {method} reverted: {exc}"
            raise OpsContractError(msg, method=method) from exc
        except (Web3Exception, ValueError) as exc:
            msg = f"Ops {method} failed: {exc}"
            raise OpsContractError(msg, method=method) from exc

    async def _send(
        self,
        method: str,
        function: AsyncContractFunction,
        gas_price: int | None,
    ) -> PendingTransaction:
        """Submit a transaction through the signer, wrapping web3 failures."""
        try:
            return await self._signer.send(function, gas_price=gas_price)
        except ContractLogicError as exc:
            msg = f"Ops {method} would revert: {exc}"
            raise OpsContractError(msg, method=method) from exc
        except (Web3Exception, ValueError) as exc:
            msg = f"Ops {method} submission failed: {exc}"
            raise OpsContractError(msg, method=method) from exc
