from .context import WorkerContext
from .loop import LedgerWorker

__all__ = ["LedgerWorker", "WorkerContext"]
