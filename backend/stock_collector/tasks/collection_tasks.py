"""
Celery tasks — scheduled SFTP stock collection.

Each beat tick runs exactly one collection batch.  The batch builds and
disposes its own engine and clients inside asyncio.run(), so nothing
bound to an event loop outlives the task.
"""

import asyncio

import structlog

from stock_collector.core.config import settings
from stock_collector.ingestion.orchestrator import build_orchestrator
from stock_collector.tasks import celery_app

logger = structlog.get_logger("tasks.collection")


async def _collect() -> dict:
    orchestrator = build_orchestrator(settings)
    report = await orchestrator.run()
    return report.to_dict()


@celery_app.task(bind=True, name="stock_collector.tasks.collection_tasks.collect_from_sftp")
def collect_from_sftp(self) -> dict:
    """Poll every supplier folder once and ingest the accepted files."""
    task_log = logger.bind(task_id=self.request.id, environment=settings.ENVIRONMENT)
    task_log.info("Collection task started")

    try:
        report = asyncio.run(_collect())
    except Exception as exc:
        task_log.exception("Collection task failed", error=str(exc))
        raise

    task_log.info("Collection task finished", **report)
    return report
