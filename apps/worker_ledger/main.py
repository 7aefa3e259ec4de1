"""
Worker Ledger.

Algorithm:
- BLPOP over the category queues (priority from WORKER_QUEUE_PRIORITY)
- user / complaint registration: pin the record to IPFS, digest the
  sensitive fields, register on the ledger contract
- status update / assignment / resolution: ledger call only
- terminal outcome goes to the result store (task_result:<id>)
- transient failures are re-queued at the tail up to RETRY_LIMIT times

Important:
- one in-flight task at a time, so ledger nonces never race within a process
- SIGTERM/SIGINT stop the loop after the current task completes
"""

from __future__ import annotations

from grievance_ledger.common.logging import get_project_logger, setup_logging
from grievance_ledger.services.readiness_service import enforce_startup_readiness
from grievance_ledger.worker import LedgerWorker, WorkerContext

log = get_project_logger()


def main() -> None:
    setup_logging()
    enforce_startup_readiness(service_name="worker-ledger")

    ctx = WorkerContext.from_settings()
    worker = LedgerWorker(ctx)
    worker.install_signal_handlers()
    worker.run_forever()


if __name__ == "__main__":
    main()
