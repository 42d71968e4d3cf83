"""
Celery job execution.

Jobs are sent by registered name to the shared tasks in
apps.organizations.tasks; the web process never imports worker code.
"""
import logging
import uuid
from typing import Any, Dict

from celery import current_app

from apps.core.task_service import GENERATE_REPORTING_ENTRIES, REFETCH_ANAF_DATA, TaskServiceInterface

logger = logging.getLogger(__name__)

CELERY_TASKS = {
    REFETCH_ANAF_DATA: 'apps.organizations.tasks.refetch_anaf_data_task',
    GENERATE_REPORTING_ENTRIES: 'apps.organizations.tasks.generate_reporting_entries_task',
}


class CeleryTaskService(TaskServiceInterface):

    def send_task(self, task_name: str, payload: Dict[str, Any], delay_seconds: int = 0) -> str:
        if task_name not in CELERY_TASKS:
            raise ValueError(f"No Celery task mapped for: {task_name}")

        job_id = str(uuid.uuid4())
        current_app.send_task(
            CELERY_TASKS[task_name],
            kwargs=payload,
            countdown=delay_seconds or None,
            task_id=job_id,
        )
        logger.info(f"[CELERY] Queued {task_name} as {job_id}")
        return job_id
