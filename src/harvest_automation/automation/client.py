"""AutomationTaskClient — list, identify, create and cancel harvest tasks.

A harvest task asks the automation network to call ``performUpkeep`` on the
chain's harvester whenever ``checker(vault)`` on the same harvester says so.
Tasks are funded from the shared treasury, so their fee token is the zero
address.

Batch operations run one coroutine per input item and settle all of them;
a failed item is logged and left out of the result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from harvest_automation.automation.encoding import (
    CHECKER_SIGNATURE,
    PERFORM_UPKEEP_SIGNATURE,
    ZERO_ADDRESS,
    encode_resolver_data,
    function_selector,
)
from harvest_automation.automation.sdk import OpsSDK
from harvest_automation.chain.ops.contract import OpsContract

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable
    from types import TracebackType

    from harvest_automation.chain.evm.signer import Signer
    from harvest_automation.config.settings import AutomationAPIConfig, ChainConfig

logger = logging.getLogger(__name__)

# Result keys for delete_tasks when no names are given
PLACEHOLDER_PREFIX = "unnamed_"


class AutomationTaskClient:
    """Manages the harvest tasks owned by one admin account on one chain.

    Usage::

        client = await AutomationTaskClient.create(signer, chain)
        try:
            created = await client.create_tasks({"vault-a": "0x..."})
            ids = await client.list_owned_task_ids()
        finally:
            await client.close()
    """

    def __init__(
        self,
        signer: Signer,
        chain: ChainConfig,
        *,
        should_log: bool = False,
        ops: OpsContract | None = None,
        sdk: OpsSDK | None = None,
        api_config: AutomationAPIConfig | None = None,
    ) -> None:
        """Bind the client to *chain* and cache the function selectors.

        Args:
            signer: Admin account that creates and owns the tasks.
            chain: Chain bundle; must carry harvester and operations addresses.
            should_log: Emit per-call debug traces of every contract argument.
            ops: Ops contract handle. Built from *chain* when omitted.
            sdk: Automation SDK. Built from *chain* and *api_config* when omitted.
            api_config: Automation API settings for the default SDK.

        Raises:
            ChainNotConfiguredError: If the chain lacks automation contracts.
        """
        chain.require_automation()
        self._signer = signer
        self._chain = chain
        self._should_log = should_log

        self._selector_checker = function_selector(CHECKER_SIGNATURE)
        self._selector_perform = function_selector(PERFORM_UPKEEP_SIGNATURE)
        self._gas_price: int | None = None

        self._ops = ops or OpsContract(signer, chain.och_operations)
        self._sdk = sdk or OpsSDK(chain.chain_id, signer, ops=self._ops, config=api_config)
        self._initialized = False

    @classmethod
    async def create(
        cls,
        signer: Signer,
        chain: ChainConfig,
        *,
        should_log: bool = False,
        **kwargs: Any,
    ) -> Self:
        """Construct and initialize a client in one step."""
        client = cls(signer, chain, should_log=should_log, **kwargs)
        await client.initialize()
        return client

    async def initialize(self) -> None:
        """Connect the SDK and sample the network gas price once.

        A failed gas price sample is logged and leaves the hint unset, so
        the transaction layer picks fees itself.
        """
        if self._initialized:
            return
        await self._sdk.connect()
        try:
            self._gas_price = await self._signer.gas_price()
        except Exception:
            logger.warning(
                "Could not sample gas price on %s; using network defaults",
                self._chain.label,
                exc_info=True,
            )
            self._gas_price = None
        else:
            self._trace("Gas price on %s: %d wei", self._chain.label, self._gas_price)
        self._initialized = True

    async def close(self) -> None:
        """Release the SDK's HTTP client."""
        await self._sdk.close()
        self._initialized = False

    async def __aenter__(self) -> Self:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def chain(self) -> ChainConfig:
        return self._chain

    @property
    def gas_price(self) -> int | None:
        """Gas price hint sampled by ``initialize()``, or None."""
        return self._gas_price

    @property
    def selector_checker(self) -> str:
        return self._selector_checker

    @property
    def selector_perform(self) -> str:
        return self._selector_perform

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_owned_task_ids(self) -> list[str]:
        """Return the ids of every task created by the admin account."""
        task_ids = await self._ops.get_task_ids_by_user(self._signer.address)
        logger.info("Retrieved %d task ids on %s", len(task_ids), self._chain.label)
        return list(task_ids)

    async def compute_task_id(self, vault_address: str) -> str:
        """Compute the id the harvest task for *vault_address* has or would have.

        Read-only: only static contract calls are made.
        """
        harvester = self._chain.och_harvester
        resolver_data = encode_resolver_data(self._selector_checker, vault_address)

        self._trace("Getting resolver hash for %s", vault_address)
        self._trace("  resolver: %s", harvester)
        self._trace("  resolverData: %s", resolver_data)

        resolver_hash = await self._ops.get_resolver_hash(harvester, resolver_data)

        self._trace("Getting taskId for vault: %s", vault_address)
        self._trace("  taskCreator: %s", self._signer.address)
        self._trace("  execAddress: %s", harvester)
        self._trace("  selector: %s", self._selector_perform)
        self._trace("  useTaskTreasuryFunds: %s", True)
        self._trace("  feeToken: %s", ZERO_ADDRESS)
        self._trace("  resolverHash: %s", resolver_hash)

        task_id = await self._ops.get_task_id(
            self._signer.address,
            harvester,
            self._selector_perform,
            True,
            ZERO_ADDRESS,
            resolver_hash,
        )
        self._trace("Task id: %s", task_id)
        return task_id

    # ------------------------------------------------------------------
    # Batch mutations
    # ------------------------------------------------------------------

    async def create_tasks(self, vaults: Mapping[str, str]) -> dict[str, str] | None:
        """Create and label one harvest task per vault.

        Args:
            vaults: Task label → vault address.

        Returns:
            Label → task id for the tasks that were fully formed, or None
            if none were.
        """
        keyed = [(name, self._create_named_task(name, vault)) for name, vault in vaults.items()]
        created = await self._settle(keyed, "create")
        logger.debug("All createTask attempts settled on %s", self._chain.label)
        return created

    async def delete_tasks(self, task_ids: Iterable[str] | Mapping[str, str]) -> dict[str, str] | None:
        """Cancel each task and wait for the cancellations to confirm.

        Args:
            task_ids: Task ids to cancel, or a label → task id mapping.

        Returns:
            Key → cancelled task id, or None if nothing was cancelled. Keys
            are the mapping's labels, or ``unnamed_<n>`` placeholders when
            bare ids are given.
        """
        if isinstance(task_ids, Mapping):
            pairs = list(task_ids.items())
        else:
            pairs = [(f"{PLACEHOLDER_PREFIX}{i}", task_id) for i, task_id in enumerate(task_ids)]

        keyed = [(key, self._delete_task(task_id)) for key, task_id in pairs]
        deleted = await self._settle(keyed, "delete")
        logger.debug("All cancelTask attempts settled on %s", self._chain.label)
        return deleted

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _create_named_task(self, name: str, vault: str) -> str:
        self._trace("Creating task for %s", name)
        task_id = await self._create_task(vault)
        logger.info(
            "Automation task created for %s on %s: taskId = %s",
            name,
            self._chain.label,
            task_id,
        )
        await self._sdk.rename_task(task_id, name)
        return task_id

    async def _create_task(self, vault: str) -> str:
        """Create the task for *vault* and return its id once mined."""
        harvester = self._chain.och_harvester
        resolver_data = encode_resolver_data(self._selector_checker, vault)

        self._trace("Create task data:")
        self._trace("  execAddress: %s", harvester)
        self._trace("  execSelector: %s", self._selector_perform)
        self._trace("  resolverAddress: %s", harvester)
        self._trace("  resolverData: %s", resolver_data)

        # The static call reveals the id before the transaction is mined
        task_id = await self._ops.simulate_create_task(
            harvester,
            self._selector_perform,
            harvester,
            resolver_data,
            gas_price=self._gas_price,
        )
        logger.debug("About to createTask for %s --> taskId %s", vault, task_id)
        tx = await self._ops.create_task(
            harvester,
            self._selector_perform,
            harvester,
            resolver_data,
            gas_price=self._gas_price,
        )
        logger.debug("About to wait on createTask for %s (tx %s)", vault, tx.tx_hash)
        await tx.wait()
        return task_id

    async def _delete_task(self, task_id: str) -> str:
        logger.debug("Deleting taskId %s", task_id)
        tx_options = {"gasPrice": self._gas_price} if self._gas_price is not None else {}
        result = await self._sdk.cancel_task(task_id, tx_options)
        logger.debug("About to wait on cancelTask for %s", task_id)
        await result.tx.wait()
        logger.info("Automation task deleted on %s: taskId = %s", self._chain.label, task_id)
        return task_id

    async def _settle(
        self,
        keyed: list[tuple[str, Awaitable[str]]],
        action: str,
    ) -> dict[str, str] | None:
        """Await every item, keep the successes, log the failures."""
        if not keyed:
            return None
        results = await asyncio.gather(*(aw for _, aw in keyed), return_exceptions=True)

        settled: dict[str, str] = {}
        for (key, _), result in zip(keyed, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Failed to %s automation task %s on %s: %s",
                    action,
                    key,
                    self._chain.label,
                    result,
                    exc_info=result,
                )
                continue
            settled[key] = result
        return settled or None

    def _trace(self, msg: str, *args: Any) -> None:
        if self._should_log:
            logger.debug(msg, *args)
