"""Grievance ledger worker: Redis task queues -> IPFS pinning -> EVM ledger."""

__version__ = "0.1.0"
