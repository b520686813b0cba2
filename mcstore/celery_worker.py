# mcstore/celery_worker.py
from celery import Celery

from mcstore.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, STOCK_RECONCILE_INTERVAL

celery_app = Celery(
    "mcstore",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicite import taskow, zeby celery je zarejestrowal
celery_app.conf.imports = ("mcstore.tasks.reconcile",)

celery_app.conf.beat_schedule = {
    "reconcile-stock": {
        "task": "mcstore.tasks.reconcile.reconcile_stock_task",
        "schedule": STOCK_RECONCILE_INTERVAL,
    },
}

celery_app.conf.timezone = "UTC"
