"""
ABI fragment of GrievanceContract: only the write functions the worker calls.
"""

from __future__ import annotations

from typing import Any


def _inputs(*pairs: tuple[str, str]) -> list[dict[str, str]]:
    return [{"name": name, "type": typ, "internalType": typ} for name, typ in pairs]


def _write_fn(name: str, *pairs: tuple[str, str]) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "nonpayable",
        "inputs": _inputs(*pairs),
        "outputs": [],
    }


GRIEVANCE_CONTRACT_ABI: list[dict[str, Any]] = [
    _write_fn(
        "registerUser",
        ("id", "string"),
        ("name", "string"),
        ("role", "string"),
        ("emailHash", "bytes32"),
        ("aadhaarHash", "bytes32"),
        ("locationHash", "bytes32"),
        ("pin", "string"),
        ("district", "string"),
        ("city", "string"),
        ("state", "string"),
        ("municipal", "string"),
    ),
    _write_fn(
        "registerComplaint",
        ("id", "string"),
        ("userId", "string"),
        ("categoryId", "string"),
        ("subCategory", "string"),
        ("department", "string"),
        ("urgency", "uint8"),
        ("descriptionHash", "bytes32"),
        ("attachmentHash", "bytes32"),
        ("locationHash", "bytes32"),
        ("isPublic", "bool"),
        ("pin", "string"),
        ("district", "string"),
        ("city", "string"),
        ("locality", "string"),
        ("state", "string"),
    ),
    _write_fn("updateComplaintStatus", ("id", "string"), ("status", "uint8")),
    _write_fn("assignComplaint", ("id", "string"), ("departmentId", "string")),
    _write_fn("resolveComplaint", ("id", "string"), ("resolutionDate", "string")),
]
