"""Automation network SDK — task labels and cancellation.

Covers the two SDK calls the task client needs:
- POST /tasks/{chainId}/{taskId}/name — attach a human-readable label
- cancelTask(bytes32) on the Ops contract — stop a task

Label requests are authenticated with an EIP-191 signature from the task
creator's key.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import httpx

from harvest_automation.automation.models import CancelTaskResult
from harvest_automation.config.settings import AutomationAPIConfig
from harvest_automation.errors.automation_errors import AutomationAPIError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from harvest_automation.chain.evm.signer import Signer
    from harvest_automation.chain.ops.contract import OpsContract


def rename_message(chain_id: int, task_id: str, name: str, timestamp: int) -> str:
    """The text the task creator signs to authorise a rename."""
    return f"Rename task {task_id} on chain {chain_id} to {name!r} at {timestamp}"


class OpsSDK:
    """Client for the automation network's task management surface.

    Usage::

        sdk = OpsSDK(chain.chain_id, signer, ops=ops)
        await sdk.connect()
        try:
            await sdk.rename_task(task_id, "vault-a")
            result = await sdk.cancel_task(task_id, {"gasPrice": 30_000_000_000})
            await result.tx.wait()
        finally:
            await sdk.close()
    """

    def __init__(
        self,
        chain_id: int,
        signer: Signer,
        *,
        ops: OpsContract,
        config: AutomationAPIConfig | None = None,
    ) -> None:
        """Initialize the SDK.

        Args:
            chain_id: EVM chain id the tasks live on.
            signer: Task creator; signs rename requests.
            ops: Ops contract used for cancellation.
            config: API url and timeout. Defaults to ``AutomationAPIConfig()``.
        """
        self._chain_id = chain_id
        self._signer = signer
        self._ops = ops
        self._config = config or AutomationAPIConfig()
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def rename_task(self, task_id: str, name: str) -> None:
        """Attach *name* as the label of *task_id*.

        Raises:
            AutomationAPIError: On HTTP or API errors.
        """
        client = self._ensure_connected()
        message = rename_message(self._chain_id, task_id, name, int(time.time()))
        payload = {
            "name": name,
            "address": self._signer.address,
            "message": message,
            "signature": self._signer.sign_message(message),
        }

        try:
            response = await client.post(f"/tasks/{self._chain_id}/{task_id}/name", json=payload)
        except httpx.HTTPError as exc:
            msg = f"Task rename failed: {exc}"
            raise AutomationAPIError(msg) from exc

        if response.status_code not in (200, 201, 204):
            self._raise_for_status(response, "rename_task")

    async def cancel_task(
        self,
        task_id: str,
        tx_options: Mapping[str, Any] | None = None,
    ) -> CancelTaskResult:
        """Submit a cancellation for *task_id*.

        Args:
            task_id: Task to cancel.
            tx_options: Transaction overrides; only ``gasPrice`` is honoured.

        Returns:
            CancelTaskResult whose ``tx`` the caller waits on.
        """
        gas_price = (tx_options or {}).get("gasPrice")
        tx = await self._ops.cancel_task(task_id, gas_price=gas_price)
        return CancelTaskResult(tx=tx)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Automation SDK not connected. Call connect() first."
            raise AutomationAPIError(msg, status_code=500)
        return self._client

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        """Raise an AutomationAPIError from a non-2xx response."""
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("message", body.get("error", response.text))
        else:
            detail = response.text

        error_map = {
            401: "Automation API rejected the signature",
            403: "Signer is not the task creator",
            404: "Task not found",
        }

        message = error_map.get(status, f"Automation API {operation} failed ({status}): {detail}")
        raise AutomationAPIError(message, status_code=status)
