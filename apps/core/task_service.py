"""
Dispatch of background jobs.

Jobs are named; TASK_BACKEND picks what runs them:

    local   run the handler inline (development, tests)
    lambda  queue an SQS message for lambda_handlers.sqs_task_handler
    celery  hand the job to a celery worker

    from apps.core.task_service import TaskService
    TaskService.generate_reporting_entries(year=2025)
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

REFETCH_ANAF_DATA = 'refetch_anaf_data'
GENERATE_REPORTING_ENTRIES = 'generate_reporting_entries'

BACKENDS = {
    'local': 'apps.core.backends.local_backend.LocalTaskService',
    'lambda': 'apps.core.backends.lambda_backend.LambdaTaskService',
    'celery': 'apps.core.backends.celery_backend.CeleryTaskService',
}


class TaskServiceInterface(ABC):

    @abstractmethod
    def send_task(self, task_name: str, payload: Dict[str, Any], delay_seconds: int = 0) -> str:
        """Run or queue `task_name(**payload)` and return the job id."""


def get_backend() -> TaskServiceInterface:
    name = os.getenv('TASK_BACKEND', 'local')
    if name not in BACKENDS:
        raise ValueError(f"Unknown TASK_BACKEND: {name}")
    return import_string(BACKENDS[name])()


class TaskService:
    """One static method per job, so callers never spell task names."""

    @staticmethod
    def refetch_anaf_data() -> str:
        logger.info("Dispatching ANAF refetch")
        return get_backend().send_task(REFETCH_ANAF_DATA, {})

    @staticmethod
    def generate_reporting_entries(year: Optional[int] = None) -> str:
        """
        Open the reporting cycle for every ACTIVE organization.

        `year` defaults to the previous calendar year.
        """
        logger.info(f"Dispatching reporting cycle (year={year})")
        return get_backend().send_task(GENERATE_REPORTING_ENTRIES, {'year': year})
