#!/usr/bin/env python3
"""Harvest Task Tool — list, compute, create and delete automation tasks.

Reads configuration from ``HARVEST_*`` environment variables and the YAML
file named by ``HARVEST_CONFIG_PATH``:

    # List the ids of all tasks owned by the admin account
    python -m harvest_automation.tools.task_tool list <chain>

    # Compute a vault's task id without sending a transaction
    python -m harvest_automation.tools.task_tool compute <chain> <vault_address>

    # Create and label one task per vault
    python -m harvest_automation.tools.task_tool create <chain> <name>=<vault_address> ...

    # Cancel tasks by id
    python -m harvest_automation.tools.task_tool delete <chain> <task_id> ...
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from harvest_automation.automation.client import AutomationTaskClient
from harvest_automation.chain.evm.signer import Signer
from harvest_automation.config.settings import AppConfig
from harvest_automation.errors.automation_errors import AutomationError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_USAGE = {
    "list": "Usage: task_tool list <chain>",
    "compute": "Usage: task_tool compute <chain> <vault_address>",
    "create": "Usage: task_tool create <chain> <name>=<vault_address> ...",
    "delete": "Usage: task_tool delete <chain> <task_id> ...",
}


def parse_assignments(args: Sequence[str]) -> dict[str, str]:
    """Parse ``name=address`` arguments into a mapping.

    Raises:
        ValueError: On a malformed or repeated name.
    """
    vaults: dict[str, str] = {}
    for arg in args:
        name, sep, address = arg.partition("=")
        if not sep or not name or not address:
            msg = f"expected <name>=<vault_address>, got {arg!r}"
            raise ValueError(msg)
        if name in vaults:
            msg = f"duplicate task name: {name}"
            raise ValueError(msg)
        vaults[name] = address
    return vaults


async def _build_client(config: AppConfig, chain_label: str) -> AutomationTaskClient:
    chain = config.get_chain(chain_label)
    signer = Signer.from_config(config.signer, chain, config.rpc)
    return await AutomationTaskClient.create(
        signer,
        chain,
        should_log=config.should_log,
        api_config=config.automation,
    )


async def _run(config: AppConfig, cmd: str, chain_label: str, args: Sequence[str]) -> int:
    """Execute one command; returns the process exit code."""
    if cmd == "create":
        vaults = parse_assignments(args)

    client = await _build_client(config, chain_label)
    try:
        if cmd == "list":
            task_ids = await client.list_owned_task_ids()
            print(f"{len(task_ids)} task(s) on {client.chain.label}:")
            for task_id in task_ids:
                print(f"  {task_id}")
            return 0

        if cmd == "compute":
            task_id = await client.compute_task_id(args[0])
            print(f"{args[0]}  {task_id}")
            return 0

        if cmd == "create":
            created = await client.create_tasks(vaults)
            if created is None:
                print("No tasks were created")
                return 1
            for name, task_id in created.items():
                print(f"  {name:<24} {task_id}")
            return 0 if len(created) == len(vaults) else 1

        deleted = await client.delete_tasks(list(dict.fromkeys(args)))
        if deleted is None:
            print("No tasks were deleted")
            return 1
        for task_id in deleted.values():
            print(f"  deleted {task_id}")
        return 0 if len(deleted) == len(set(args)) else 1
    finally:
        await client.close()


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    cmd = sys.argv[1].lower()
    chain_label = sys.argv[2]
    args = sys.argv[3:]

    if cmd not in _USAGE:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)
    if (cmd == "compute" and len(args) != 1) or (cmd in ("create", "delete") and not args):
        print(_USAGE[cmd])
        sys.exit(1)

    config = AppConfig()
    logging.basicConfig(
        level=logging.DEBUG if config.debug or config.should_log else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        code = asyncio.run(_run(config, cmd, chain_label, args))
    except (AutomationError, ValueError) as exc:
        logger.error("%s failed: %s", cmd, exc)
        sys.exit(2)
    sys.exit(code)


if __name__ == "__main__":
    main()
