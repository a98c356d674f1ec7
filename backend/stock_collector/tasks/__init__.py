"""
Celery application factory.
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from stock_collector.core.config import settings
from stock_collector.core.logging import setup_logging

celery_app = Celery("stock_collector")
celery_app.config_from_object("celeryconfig")

celery_app.autodiscover_tasks([
    "stock_collector.tasks.collection_tasks",
])


@celery_setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    """Replace Celery's root-logger setup with the collector's structlog config."""
    setup_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
