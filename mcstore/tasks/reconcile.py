# mcstore/tasks/reconcile.py
from typing import Dict

from mcstore.celery_worker import celery_app
from mcstore.services.rest_gateway import BackendConfig, RestGateway
from mcstore.services.stock_service import StockAdjustmentQueue, StockService
from mcstore.utils.logging import get_logger
from mcstore.utils.settings import STOCK_ADJUST_MAX_ATTEMPTS, STOCK_RECONCILE_BATCH

logger = get_logger(__name__)


def reconcile_stock(
    stock_service: StockService,
    queue: StockAdjustmentQueue,
    batch_size: int = STOCK_RECONCILE_BATCH,
    max_attempts: int = STOCK_ADJUST_MAX_ATTEMPTS,
) -> Dict[str, int]:
    """
    Zdejmuje z kolejki zalegle korekty stanow i probuje je zapisac.
    Nieudane wracaja na koniec kolejki z attempts + 1, po max_attempts sa porzucane.
    Juz zastosowane (ten sam order_number i product_id) sa pomijane.
    """
    stats = {"applied": 0, "skipped": 0, "requeued": 0, "dropped": 0}

    for adjustment in queue.pop_batch(batch_size):
        try:
            applied = stock_service.apply_once(
                adjustment["product_id"],
                int(adjustment["quantity"]),
                adjustment.get("order_number") or "",
            )
            stats["applied" if applied else "skipped"] += 1
            continue
        except Exception as e:
            logger.warning(f"Stock adjustment {adjustment} failed again: {e}")

        attempts = int(adjustment.get("attempts") or 1) + 1
        if attempts > max_attempts:
            logger.error(f"Dropping stock adjustment after {max_attempts} attempts: {adjustment}")
            stats["dropped"] += 1
            continue

        if stock_service.defer({**adjustment, "attempts": attempts}):
            stats["requeued"] += 1
        else:
            stats["dropped"] += 1

    return stats


@celery_app.task(name="mcstore.tasks.reconcile.reconcile_stock_task")
def reconcile_stock_task():
    logger.info("Reconcile stock task started")

    queue = StockAdjustmentQueue()
    stock_service = StockService(RestGateway(BackendConfig.from_settings()), queue)
    stats = reconcile_stock(stock_service, queue)

    logger.info(f"Reconcile stock task finished: {stats}")
    return stats
