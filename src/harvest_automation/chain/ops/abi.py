"""ABI subset of the automation network's Ops contract."""

from __future__ import annotations

from typing import Any


def _inputs(*pairs: tuple[str, str]) -> list[dict[str, str]]:
    return [{"internalType": t, "name": n, "type": t} for n, t in pairs]


OPS_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getTaskIdsByUser",
        "stateMutability": "view",
        "inputs": _inputs(("_taskCreator", "address")),
        "outputs": _inputs(("", "bytes32[]")),
    },
    {
        "type": "function",
        "name": "getResolverHash",
        "stateMutability": "pure",
        "inputs": _inputs(("_resolverAddress", "address"), ("_resolverData", "bytes")),
        "outputs": _inputs(("", "bytes32")),
    },
    {
        "type": "function",
        "name": "getTaskId",
        "stateMutability": "pure",
        "inputs": _inputs(
            ("_taskCreator", "address"),
            ("_execAddress", "address"),
            ("_selector", "bytes4"),
            ("_useTaskTreasuryFunds", "bool"),
            ("_feeToken", "address"),
            ("_resolverHash", "bytes32"),
        ),
        "outputs": _inputs(("", "bytes32")),
    },
    {
        "type": "function",
        "name": "createTask",
        "stateMutability": "nonpayable",
        "inputs": _inputs(
            ("_execAddress", "address"),
            ("_execSelector", "bytes4"),
            ("_resolverAddress", "address"),
            ("_resolverData", "bytes"),
        ),
        "outputs": _inputs(("task", "bytes32")),
    },
    {
        "type": "function",
        "name": "cancelTask",
        "stateMutability": "nonpayable",
        "inputs": _inputs(("_taskId", "bytes32")),
        "outputs": [],
    },
]
