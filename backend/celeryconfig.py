"""
Celery configuration for the stock collector worker.

Loaded by `celery_app.config_from_object("celeryconfig")` in
stock_collector/tasks/__init__.py.  Broker/result-backend URLs come from
environment variables, defaulting to localhost for local dev.
"""

import os

from stock_collector.core.config import settings

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

# ═══════════════════════════════════════════════════════════
#  Serialization
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# A batch shares one SFTP session; never run two on one worker process
worker_prefetch_multiplier = 1
worker_concurrency = 1

# Collection must finish well before the next beat tick matters
task_soft_time_limit = 540    # 9 min: raises SoftTimeLimitExceeded
task_time_limit = 600         # 10 min: hard kill

# A missed tick is picked up by the next one; no broker-side retries
task_acks_late = False
task_max_retries = 0

result_expires = 86400

worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
#   celery -A stock_collector.tasks worker -Q collection
#   celery -A stock_collector.tasks beat

task_routes = {
    "stock_collector.tasks.collection_tasks.*": {"queue": "collection"},
}

task_default_queue = "collection"

# ═══════════════════════════════════════════════════════════
#  Beat Schedule (periodic tasks)
# ═══════════════════════════════════════════════════════════

beat_schedule = {
    "collect-from-sftp": {
        "task": "stock_collector.tasks.collection_tasks.collect_from_sftp",
        "schedule": settings.COLLECT_SCHEDULE_SECONDS,
        # A tick that waits longer than one interval is superseded by the next
        "options": {"expires": settings.COLLECT_SCHEDULE_SECONDS},
    },
}
